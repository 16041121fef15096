"""Static response shapes for every report kind."""

from __future__ import annotations

from .shapes import BOOLEAN, NUMBER, STRING, STRING_LIST, ShapeDescriptor, arr, obj, requiring

AI_ENHANCEMENT = obj(
    the10xIdea=STRING,
    competitiveAdvantage=STRING,
    godTierPrompt=STRING,
)

# Reused fragments
_RATIONALE_PAIR = obj(protocol=STRING, rationale=STRING)
_NAME_VALUE = obj(name=STRING, value=STRING)
_TITLE_URI = obj(title=STRING, uri=STRING)
_TRIGGER = obj(trigger=STRING, implication=STRING)
_QUANT_MODEL = obj(
    decisionScoreFormula=STRING,
    variableDefinitions=arr(obj(variable=STRING, definition=STRING)),
)
_SALES_PITCH_ASSET = obj(pitchPersona=STRING, pitchScript=STRING, videoScenePrompt=STRING)
_CLIENT_ACQUISITION_ENGINE = obj(
    tractionChannelAnalysis=arr(obj(channel=STRING, rationale=STRING)),
    dream100Protocol=arr(obj(targetDescription=STRING, rationale=STRING)),
    strategicPartnershipProtocol=obj(
        idealPartnerProfile=STRING,
        irresistibleOffer=STRING,
        outreachAngle=STRING,
    ),
)
_MARKET_MIND = obj(
    dominantEmotionalDrivers=arr(obj(emotion=STRING, weight=NUMBER, rationale=STRING)),
    hotButtonKeywords=arr(obj(keyword=STRING, context=STRING)),
    psycholinguisticRoutingEngine=obj(
        routingLogic=STRING,
        heroVariants=arr(obj(angle=STRING, headline=STRING, adHook=STRING)),
    ),
)
_STAGE = obj(
    title=STRING,
    stageSummary=STRING,
    tasks=arr(obj(taskName=STRING, description=STRING)),
    output=STRING,
)


ANALYSIS_RESULT = obj(
    sharedProfile=obj(
        summary=STRING,
        demographics=obj(ageRange=STRING, incomeLevel=STRING, commonLocations=STRING_LIST),
        commonIndustries=STRING_LIST,
        commonJobFunctions=STRING_LIST,
        commonCompanySizes=STRING_LIST,
        psychographics=obj(
            motivations=arr(obj(driver=STRING, description=STRING, purchasingImplication=STRING)),
            dataSignals=STRING_LIST,
            buyingTriggers=arr(_TRIGGER),
        ),
        quantitativeModel=obj(decisionScoreFormula=STRING),
    ),
    lookalikeProspects=arr(
        obj(
            fullName=STRING,
            jobTitle=STRING,
            companyName=STRING,
            linkedinSearchQuery=STRING,
            googleDorkQuery=STRING,
            rationale=STRING,
        )
    ),
)

SCORED_PROSPECTS = arr(
    requiring(obj(prospectInfo=STRING, fitScore=NUMBER, rationale=STRING), "prospectInfo", "fitScore")
)

OPPORTUNITY_BRIEF = obj(
    starvingCrowd=obj(name=STRING, description=STRING),
    aspirinProblem=obj(problem=STRING),
    gauntletVerdict=obj(
        passes=BOOLEAN,
        summary=STRING,
        checklist=obj(
            isAspirin=BOOLEAN,
            isStarvingCrowd=BOOLEAN,
            isBigEnough=BOOLEAN,
            isReachable=BOOLEAN,
            isUrgent=BOOLEAN,
            canSellHighPrice=BOOLEAN,
            hasBackEnd=BOOLEAN,
            isTollbooth=BOOLEAN,
            isUnique=BOOLEAN,
            isGrowing=BOOLEAN,
        ),
    ),
    marketSizeEstimate=STRING,
    urgencyLevel=STRING,
    quantitativeModel=_QUANT_MODEL,
    aiPoweredSolution=obj(
        solutionName=STRING,
        description=STRING,
        irresistibleOffer=STRING,
        resultsInAdvanceMechanism=obj(name=STRING, description=STRING),
        aiAutomationProtocol=_RATIONALE_PAIR,
        salesPitchAsset=_SALES_PITCH_ASSET,
    ),
    fastestPathToCash=obj(channel=STRING, rationale=STRING),
    mentalModelApplicable=obj(model=STRING, rationale=STRING),
    asymmetricJVProtocol=obj(idealPartnerProfile=STRING, valueProposition=STRING, outreachAngle=STRING),
    businessInABoxAngle=obj(opportunityName=STRING, targetBuyer=STRING, salesPitch=STRING),
    methodology=STRING_LIST,
)

AI_VENTURE_BLUEPRINT = obj(
    dataFeasibilityAnalysis=obj(
        feasibilityScore=STRING,
        rationale=STRING,
        recommendation=STRING,
        potentialSources=arr(obj(name=STRING, type=STRING, notes=STRING)),
    ),
    validatedOpportunity=obj(starvingCrowd=STRING, aspirinProblem=STRING),
    resultsInAdvanceTool=obj(toolName=STRING, description=STRING, dataAssetFilename=STRING, dataAsset=STRING),
    leadCaptureMechanism=obj(strategy=STRING),
    aiSalesAgent=obj(persona=STRING, triggerLogic=STRING, openingScript=STRING),
    backendInstructions=obj(filePath=STRING, code=STRING, deploymentSteps=STRING_LIST),
    ultimatePrompt=STRING,
    methodology=STRING_LIST,
)

DOMINANCE_BLUEPRINT = obj(
    executiveSummary=STRING,
    clientAcquisitionEngine=_CLIENT_ACQUISITION_ENGINE,
    unfairAdvantageSalesProtocol=obj(
        agoraAngle=obj(marketSophisticationLevel=STRING, headlineAndHook=STRING, coreBodyCopyAngle=STRING),
        belfortStraightLine=obj(openingScript=STRING, intelligenceGatheringQuestions=STRING_LIST),
        fladlienOfferStack=obj(
            coreOffer=STRING,
            premiumBonuses=arr(_NAME_VALUE),
            riskReversal=STRING,
            urgencyDriver=STRING,
        ),
        bleedingNeckQualification=obj(rationale=STRING, filterQuestions=STRING_LIST),
    ),
    methodology=STRING_LIST,
)

GATEKEEPER_BYPASS = obj(
    jvAssetMap=obj(
        upstreamPartners=arr(obj(businessType=STRING, whyTheyHaveTheBuyers=STRING, estimatedListSize=STRING)),
        downstreamPartners=arr(obj(businessType=STRING, monetizationGap=STRING)),
    ),
    distressRadar=obj(signals=arr(obj(signal=STRING, interpretation=STRING, findingMethod=STRING))),
    godfatherProposal=obj(
        angle=STRING,
        theAsk=STRING,
        theGive=STRING,
        riskReversal=STRING,
        emailScript=STRING,
    ),
    productBridgeIdeas=arr(obj(conceptName=STRING, description=STRING, whyItFitsPartner=STRING)),
    methodology=STRING_LIST,
)

LONE_WOLF = obj(
    executiveSummary=STRING,
    loneWolfPlays=arr(
        obj(
            playName=STRING,
            incomePotential=STRING,
            timeToFirstCash=STRING,
            gatekeeperBypassTactic=obj(tactic=STRING, rationale=STRING),
            requiredAssets=STRING_LIST,
            executionSteps=STRING_LIST,
            aiAgentProtocol=_RATIONALE_PAIR,
        )
    ),
    methodology=STRING_LIST,
)

CHIMERIC_AGENT = obj(
    subjectSynthesis=STRING,
    highStakesSolutions=arr(
        obj(
            solutionName=STRING,
            problemDomain=STRING,
            aiLeveragePoint=STRING,
            monetizationModel=STRING,
            firstTouchProtocol=obj(wedge=STRING, rationale=STRING),
        )
    ),
    methodology=STRING_LIST,
)

SOVEREIGN_TASK = obj(id=STRING, brief=STRING, status=STRING)

SOVEREIGN_AGENTS = arr(
    requiring(
        obj(
            id=STRING,
            agentType=STRING,
            status=STRING,
            overallBrief=STRING,
            tasks=arr(SOVEREIGN_TASK),
        ),
        "agentType",
        "overallBrief",
    )
)

AGENT_TASK_RESULT = obj(
    insight=STRING,
    suggestedNextTask=STRING,
    actionableOutput=arr(obj(title=STRING, content=STRING, type=STRING, url=STRING)),
)

CASHFLOW_PROTOCOL = obj(
    mindsetCalibration=obj(corePrinciple=STRING, affirmation=STRING),
    highTicketOffer=obj(
        offerName=STRING,
        pricePoint=STRING,
        coreComponents=STRING_LIST,
        irresistibleBonuses=arr(_NAME_VALUE),
    ),
    prospectingDirective=obj(idealClientProfile=STRING, killListQuery=STRING),
    closingScript=obj(
        opening=STRING,
        painFindingQuestions=STRING_LIST,
        solutionPresentation=STRING,
        close=STRING,
    ),
    battlePlan48Hours=obj(hours0_6=STRING, hours7_24=STRING, hours25_48=STRING),
)

REAL_ESTATE_ALPHA = obj(
    esotericAlpha=obj(
        title=STRING,
        description=STRING,
        strategies=arr(
            obj(
                name=STRING,
                source=STRING,
                strategy=STRING,
                outreachScripts=obj(sms=STRING, rvm=STRING, directMail=STRING),
            )
        ),
    ),
    dealFlowEngine=obj(
        harvester=_STAGE,
        validator=_STAGE.with_field("leverageScoringAlgorithm", obj(formula=STRING)),
        dossier=_STAGE,
    ),
    uploadedDataAnalysis=obj(summary=STRING, insights=STRING_LIST),
    investorPlaybook=obj(title=STRING, steps=arr(obj(stepName=STRING, description=STRING))),
    aiAgentProtocol=obj(protocol=STRING),
    dataVisualizationSuite=obj(
        marketOpportunityChart=obj(
            title=STRING,
            data=arr(obj(county=STRING, medianPrice=NUMBER, leverageScore=NUMBER, foreclosureRate=NUMBER)),
        ),
        samplePropertyDossier=obj(
            address=STRING,
            imageUrl=STRING,
            stats=arr(obj(label=STRING, value=STRING)),
            investmentThesis=STRING,
        ),
    ),
)

ALPHA_SIGNAL = obj(
    executiveSummary=STRING,
    revenuePlays=arr(
        obj(
            playName=STRING,
            probabilityOfSuccess=obj(score=NUMBER, rationale=STRING),
            potentialRevenue=STRING,
            psychologicalEdge=obj(principle=STRING, application=STRING),
            requiredAssets=STRING_LIST,
            executionSteps=STRING_LIST,
            aiAgentProtocol=_RATIONALE_PAIR,
        )
    ),
    methodology=STRING_LIST,
)

COMPETITIVE_DISPLACEMENT = obj(
    trafficAnalysis=obj(marketPosition=STRING, supportingSignals=STRING_LIST),
    marketSizeEstimate=STRING,
    quantitativeModel=_QUANT_MODEL,
    dataVisualizationSuite=obj(
        decisionDecomposition=arr(obj(label=STRING, value=NUMBER)),
        angleUplift=arr(obj(segment=STRING, angle=STRING, uplift=NUMBER)),
    ),
    marketMindAnalysis=_MARKET_MIND,
    aiPoweredWedge=obj(blindSpot=STRING, wedgeIdea=STRING, wedgeDescription=STRING),
    outreachCopy=obj(subjectLine=STRING, body=STRING, rvmScript=STRING, textMessage=STRING),
    methodology=STRING_LIST,
)

B2C_DECONSTRUCTION = obj(
    definingInterests=STRING_LIST,
    influentialBrands=STRING_LIST,
    competitorBrands=STRING_LIST,
    customerPersonas=arr(obj(name=STRING, description=STRING)),
    b2cBuyingTriggers=arr(_TRIGGER),
    marketMindAnalysis=_MARKET_MIND,
    methodology=STRING_LIST,
)

LIVE_MARKET_INTEL = obj(
    topic=STRING,
    executiveSummary=STRING,
    latestDevelopments=arr(
        obj(headline=STRING, date=STRING, source=STRING, summary=STRING, impactAnalysis=STRING)
    ),
    marketSentiment=obj(sentiment=STRING, rationale=STRING, keyQuotes=STRING_LIST),
    competitorMoves=arr(obj(company=STRING, action=STRING, implication=STRING)),
    sources=arr(_TITLE_URI),
    methodology=STRING_LIST,
)

DEMAND_SIGNAL = obj(
    targetAudience=STRING,
    buyingProbabilityScore=NUMBER,
    scoreRationale=STRING,
    leadingIndicators=arr(obj(signal=STRING, predictiveWeight=STRING, rationale=STRING)),
    signalSources=arr(
        obj(name=STRING, type=STRING, reachEstimate=STRING, engineeringAsMarketingPlay=STRING)
    ),
    intentDecayTimeline=arr(obj(phase=STRING, action=STRING, probabilityDrop=STRING)),
    methodology=STRING_LIST,
)

OPPORTUNITY_RADAR = obj(
    sector=STRING,
    executiveSummary=STRING,
    realTimeTrends=arr(obj(trendName=STRING, growthSignal=STRING, whyItMatters=STRING, sourceUrl=STRING)),
    bestOpportunity=obj(name=STRING, starvingCrowd=STRING, painPoint=STRING, marketSize=STRING),
    aiMultiplierStrategy=obj(coreSolution=STRING, the10xMechanism=STRING, automationWorkflow=STRING),
    formulaicBreakdown=obj(acquisitionFormula=STRING, retentionFormula=STRING, monetizationFormula=STRING),
    methodology=STRING_LIST,
)

EDGAR_ANOMALY = obj(
    companyIdentifier=STRING,
    analysisDate=STRING,
    executiveSummary=STRING,
    anomalies=arr(obj(type=STRING, description=STRING, severity=STRING, sourceLocation=STRING)),
    redFlags=arr(obj(flag=STRING, implication=STRING)),
    sourceFilings=arr(_TITLE_URI),
    methodology=STRING_LIST,
)

AI_VIDEO_FOUNDRY = obj(
    title=STRING,
    directorsCut=arr(
        obj(
            scene=STRING,
            script=STRING,
            visualPrompts=arr(obj(type=STRING, prompt=STRING)),
            voiceoverScript=STRING,
            musicCue=STRING,
            overlayText=STRING,
        )
    ),
    technicalImplementation=obj(
        techStack=arr(obj(name=STRING, rationale=STRING)),
        architecture=STRING_LIST,
    ),
    saasMonetizationModel=obj(
        pricingTiers=arr(obj(name=STRING, price=STRING, description=STRING)),
        go_to_market_strategy=STRING_LIST,
    ),
)

HIGH_LEVERAGE_PLAYBOOK = obj(
    brandingPersona=STRING,
    positioningStatement=STRING,
    idealClientProfile=STRING_LIST,
    irresistibleOffer=obj(
        offerName=STRING,
        pricePoint=STRING,
        components=STRING_LIST,
        salesPitchAsset=_SALES_PITCH_ASSET,
    ),
    marketingFunnel=STRING_LIST,
    finalWisdom=STRING,
    searchAndAcquisitionProtocol=obj(alphaSignal=STRING, leveragePoint=STRING, protocolSteps=STRING_LIST),
    clientAcquisitionEngine=_CLIENT_ACQUISITION_ENGINE,
    asymmetricWedgeStrategy=obj(
        targetMicroTribe=STRING,
        asymmetricWedge=obj(idea=STRING, rationale=STRING, wedgeType=STRING),
        infiltrationPlan=STRING_LIST,
    ),
)

ALPHA_ACQUISITION_PLAYBOOK = obj(
    channelPartnershipProtocol=obj(
        idealPartnerProfile=STRING,
        aiPoweredSearchQueries=STRING_LIST,
        irresistiblePartnershipOffer=STRING,
    ),
    buyingTriggerProtocol=arr(obj(triggerEvent=STRING, signalIntelligence=STRING, strategicApproach=STRING)),
)

MONETIZATION_STRATEGY = obj(
    coreOpportunity=STRING,
    productIdeas=arr(
        obj(
            ideaName=STRING,
            description=STRING,
            profitPotential=STRING,
            aiLeveragePoint=STRING,
            pricingModel=obj(
                tiers=arr(obj(name=STRING, description=STRING, pricePerMonth=STRING, features=STRING_LIST))
            ),
        )
    ),
    leadSourceProtocol=arr(obj(sourcePlatform=STRING, filteringCriteria=STRING_LIST, rationale=STRING)),
)

AI_CODE = requiring(obj(generatedCode=STRING), "generatedCode")

LANDING_PAGE_BLUEPRINT = obj(
    pageTitle=STRING,
    sections=arr(
        obj(sectionType=STRING, headline=STRING, subheadline=STRING, body=STRING, ctaButtonText=STRING)
    ),
)

_ARSENAL_PROTOCOL = obj(
    title=STRING,
    description=STRING,
    tooling=obj(primary=STRING, alternatives=STRING_LIST),
    serverlessFunctionCode=STRING,
    requiredEnvVars=arr(obj(key=STRING, description=STRING)),
    agentApiCallProtocol=STRING,
)

ARCHIMEDES_PROTOCOL = obj(
    theMandate=obj(title=STRING, corePrinciple=STRING, affirmation=STRING),
    theSovereignFoundry=obj(title=STRING, description=STRING, workflow=STRING_LIST),
    theAgentCSuite=obj(title=STRING, description=STRING, aiAgentProtocol=_RATIONALE_PAIR),
    theOperatorsCockpit=obj(title=STRING, description=STRING, yourRole=STRING_LIST),
    theSovereignArsenal=obj(
        title=STRING,
        description=STRING,
        communicationsProtocol=_ARSENAL_PROTOCOL,
        visionProtocol=_ARSENAL_PROTOCOL,
        dataAcquisitionProtocol=_ARSENAL_PROTOCOL,
        voiceIntelligenceProtocol=_ARSENAL_PROTOCOL,
        unconventionalToolsAndApis=obj(
            title=STRING,
            description=STRING,
            tools=arr(obj(name=STRING, useCase=STRING, agentInteractionProtocol=STRING)),
        ),
    ),
)


def with_enhancement(shape: ShapeDescriptor) -> ShapeDescriptor:
    """Adds the optional aiEnhancement block to object-shaped reports."""
    if shape.kind != "object":
        return shape
    return shape.with_field("aiEnhancement", AI_ENHANCEMENT)
