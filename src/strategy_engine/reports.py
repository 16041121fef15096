"""
Report catalog.

Every report the assistant can produce is one ReportSpec: a prompt template
with named inputs, the response shape, whether web-search grounding is on,
and how the decoded value is post-processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from . import report_shapes as rs
from .llm.types import QualityMode
from .logger import get_logger
from .prompts import build_report_prompt, template_fields
from .shapes import ShapeDescriptor

logger = get_logger(__name__)


class ReportKind(str, Enum):
    OPPORTUNITY_BRIEF = "opportunityBrief"
    B2B_ANALYSIS = "b2bAnalysis"
    LONE_WOLF = "loneWolf"
    REAL_ESTATE_ALPHA = "realEstateAlpha"
    CHIMERIC_AGENT = "chimericAgent"
    GATEKEEPER_BYPASS = "gatekeeperBypass"
    AI_VENTURE_BLUEPRINT = "aiVentureBlueprint"
    DOMINANCE_BLUEPRINT = "dominanceBlueprint"
    CASHFLOW_PROTOCOL = "cashflowProtocol"
    ALPHA_SIGNAL = "alphaSignal"
    COMPETITIVE_DISPLACEMENT = "competitiveDisplacement"
    B2C_DECONSTRUCTION = "b2cDeconstruction"
    LIVE_MARKET_INTEL = "liveMarketIntel"
    DEMAND_SIGNAL = "demandSignal"
    OPPORTUNITY_RADAR = "opportunityRadar"
    EDGAR_ANOMALY = "edgarAnomaly"
    AI_VIDEO_FOUNDRY = "aiVideoFoundry"
    HIGH_LEVERAGE_PLAYBOOK = "highLeveragePlaybook"
    ALPHA_ACQUISITION_PLAYBOOK = "alphaAcquisitionPlaybook"
    AI_CODE = "aiCode"
    LANDING_PAGE_BLUEPRINT = "landingPageBlueprint"
    LANDING_PAGE_CODE = "landingPageCode"
    SCORED_PROSPECTS = "scoredProspects"
    ARCHIMEDES_PROTOCOL = "archimedesProtocol"
    MONETIZATION_STRATEGY = "monetizationStrategy"
    SOVEREIGN_AGENTS = "sovereignAgents"
    AGENT_TASK = "agentTask"


@dataclass(frozen=True)
class ReportSpec:
    kind: ReportKind
    template: str
    shape: ShapeDescriptor
    use_search: bool = False
    unwrap: str | None = None
    merge_sources: bool = False

    @property
    def inputs(self) -> List[str]:
        return template_fields(self.template)


def _spec(kind: ReportKind, template: str, shape: ShapeDescriptor, **kwargs: Any) -> ReportSpec:
    return ReportSpec(kind=kind, template=template, shape=rs.with_enhancement(shape), **kwargs)


_CATALOG = [
    _spec(
        ReportKind.OPPORTUNITY_BRIEF,
        "Market Detective: Find a 'Starving Crowd' opportunity in: {brief}.",
        rs.OPPORTUNITY_BRIEF,
    ),
    _spec(
        ReportKind.B2B_ANALYSIS,
        "B2B Intelligence: Create ICP for: {brief}. "
        "Focus on identifying 'High-Intent' signals rather than just job titles.",
        rs.ANALYSIS_RESULT,
    ),
    _spec(
        ReportKind.LONE_WOLF,
        "Lone Wolf Deal Architect: Revenue Plays for: {brief}. "
        "Ensure every play uses AI to eliminate 100% of human overhead.",
        rs.LONE_WOLF,
    ),
    _spec(
        ReportKind.REAL_ESTATE_ALPHA,
        "RE Hedge Fund Analyst: Esoteric Alpha for: {brief}. "
        "Use AI to find correlations between public records and private distress signals.",
        rs.REAL_ESTATE_ALPHA,
    ),
    _spec(
        ReportKind.CHIMERIC_AGENT,
        "Persona Synthesis: Create a Chimeric Agent report for: {brief}.",
        rs.CHIMERIC_AGENT,
    ),
    _spec(
        ReportKind.GATEKEEPER_BYPASS,
        "JV Protocol: Gatekeeper Bypass strategy for: {brief}.",
        rs.GATEKEEPER_BYPASS,
    ),
    _spec(
        ReportKind.AI_VENTURE_BLUEPRINT,
        "Architect: AI Venture Blueprint for: {brief}.",
        rs.AI_VENTURE_BLUEPRINT,
    ),
    _spec(
        ReportKind.DOMINANCE_BLUEPRINT,
        "Kingmaker: Dominance Blueprint for: {brief}. "
        "Focus on building a Moat via proprietary AI logic.",
        rs.DOMINANCE_BLUEPRINT,
    ),
    _spec(
        ReportKind.CASHFLOW_PROTOCOL,
        "Closer: 48-Hour Cashflow Protocol for: {brief}.",
        rs.CASHFLOW_PROTOCOL,
    ),
    _spec(
        ReportKind.ALPHA_SIGNAL,
        "Quant: Alpha Signal Report for: {brief}. Find the asymmetric revenue triggers.",
        rs.ALPHA_SIGNAL,
    ),
    _spec(
        ReportKind.COMPETITIVE_DISPLACEMENT,
        "Wedge Strategy: Competitive Displacement for: {brief}. "
        "Use AI to identify the exact technical weakness of the incumbent.",
        rs.COMPETITIVE_DISPLACEMENT,
    ),
    _spec(
        ReportKind.B2C_DECONSTRUCTION,
        "Consumer Analyst: B2C Deconstruction for: {brief}.",
        rs.B2C_DECONSTRUCTION,
    ),
    _spec(
        ReportKind.LIVE_MARKET_INTEL,
        "Intel System: Live Market Intelligence for: {brief}. "
        "Browsing the live web for current trends, competitor moves, and news.",
        rs.LIVE_MARKET_INTEL,
        use_search=True,
        merge_sources=True,
    ),
    _spec(
        ReportKind.DEMAND_SIGNAL,
        "Forecaster: Demand Signal Report for: {brief}. "
        "Use live search data to predict buying probability and intent decay.",
        rs.DEMAND_SIGNAL,
        use_search=True,
    ),
    _spec(
        ReportKind.OPPORTUNITY_RADAR,
        "Radar: Opportunity Radar for: {brief}. "
        "Use live market data to find real trends and growth signals.",
        rs.OPPORTUNITY_RADAR,
        use_search=True,
    ),
    _spec(
        ReportKind.EDGAR_ANOMALY,
        "Forensic: Edgar Anomaly Scan for: {brief}. "
        "Browse actual SEC filings and financial reports via Google Search.",
        rs.EDGAR_ANOMALY,
        use_search=True,
    ),
    _spec(
        ReportKind.AI_VIDEO_FOUNDRY,
        "Video Factory: AI Video Foundry Report for: {brief}.",
        rs.AI_VIDEO_FOUNDRY,
    ),
    _spec(
        ReportKind.HIGH_LEVERAGE_PLAYBOOK,
        "Strategist: High Leverage Playbook based on: {strategy}.",
        rs.HIGH_LEVERAGE_PLAYBOOK,
    ),
    _spec(
        ReportKind.ALPHA_ACQUISITION_PLAYBOOK,
        "Acquisition Expert: Alpha Acquisition Protocol based on: {playbook}.",
        rs.ALPHA_ACQUISITION_PLAYBOOK,
    ),
    _spec(
        ReportKind.AI_CODE,
        "Engineer: Write functional frontend code for: {request}.",
        rs.AI_CODE,
    ),
    _spec(
        ReportKind.LANDING_PAGE_BLUEPRINT,
        "Copywriter: Create a Landing Page Blueprint for: {request}.",
        rs.LANDING_PAGE_BLUEPRINT,
    ),
    _spec(
        ReportKind.LANDING_PAGE_CODE,
        "Engineer: Write the full HTML/Tailwind code for this blueprint: {blueprint}.",
        rs.AI_CODE,
    ),
    _spec(
        ReportKind.SCORED_PROSPECTS,
        "Rank these prospects based on the ICP: {prospects}. ICP: {icp}.",
        rs.SCORED_PROSPECTS,
        unwrap="prospects",
    ),
    _spec(
        ReportKind.ARCHIMEDES_PROTOCOL,
        "Architect: Generate the Archimedes Protocol Master Plan for: {context}.",
        rs.ARCHIMEDES_PROTOCOL,
    ),
    _spec(
        ReportKind.MONETIZATION_STRATEGY,
        "Monetization Expert: Strategy for: {audience}.",
        rs.MONETIZATION_STRATEGY,
    ),
    _spec(
        ReportKind.SOVEREIGN_AGENTS,
        "Manager: Instantiate 3 Sovereign Agents to execute: {play} from {source_report_type}.",
        rs.SOVEREIGN_AGENTS,
        unwrap="agents",
    ),
    _spec(
        ReportKind.AGENT_TASK,
        "Agent ({agent_type}): Execute task: {task_brief}. Context: {overall_brief}. "
        "Use live search grounding if current info is needed.",
        rs.AGENT_TASK_RESULT,
        use_search=True,
    ),
]

REPORT_SPECS: Dict[ReportKind, ReportSpec] = {spec.kind: spec for spec in _CATALOG}


def get_report_spec(kind: ReportKind | str) -> ReportSpec:
    try:
        return REPORT_SPECS[ReportKind(kind)]
    except ValueError as exc:
        available = ", ".join(k.value for k in ReportKind)
        raise ValueError(f"Unknown report kind '{kind}'. Available: {available}") from exc


def build_prompt(kind: ReportKind | str, **inputs: Any) -> str:
    return build_report_prompt(get_report_spec(kind).template, **inputs)


def generate_report(client, kind: ReportKind | str, quality_mode: QualityMode, **inputs: Any) -> Any:
    """Renders the prompt for kind and returns the post-processed report value.

    Raises ValueError for unknown kinds or missing inputs before any call is
    made, and lets GenerationError from the client propagate.
    """
    spec = get_report_spec(kind)
    prompt = build_report_prompt(spec.template, **inputs)
    result = client.generate_detailed(
        prompt,
        spec.shape,
        quality_mode,
        use_search=spec.use_search,
        meta={"report_kind": spec.kind.value},
    )
    data = result.data
    if spec.unwrap:
        data = _unwrap(data, spec.unwrap)
    if spec.merge_sources and isinstance(data, dict):
        data = _merge_sources(data, result.sources)
    return data


def _unwrap(data: Any, key: str) -> Any:
    if isinstance(data, dict):
        inner = data.get(key)
        if isinstance(inner, list):
            return inner
        logger.warning(
            "report.unwrap.missing",
            extra={"event": "report.unwrap.missing", "unwrap_key": key, "keys": sorted(data)},
        )
        return []
    return data


def _merge_sources(data: Dict[str, Any], grounding: List[Dict[str, str]]) -> Dict[str, Any]:
    if not grounding:
        return data
    merged = dict(data)
    existing = merged.get("sources")
    merged["sources"] = (existing if isinstance(existing, list) else []) + [dict(s) for s in grounding]
    return merged
