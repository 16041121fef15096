"""Pure orchestration functions for brief -> reports -> project, and the agent workforce."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict

from .llm.types import GenerationError, QualityMode
from .logger import get_logger
from .reports import ReportKind, generate_report
from .utils import new_id, now_millis

logger = get_logger(__name__)

ANALYSIS_PLAN: Dict[str, tuple[ReportKind, ...]] = {
    "b2b": (ReportKind.B2B_ANALYSIS,),
    "b2c": (ReportKind.B2C_DECONSTRUCTION,),
    "starvingCrowd": (ReportKind.OPPORTUNITY_BRIEF,),
    "competitiveDisplacement": (ReportKind.COMPETITIVE_DISPLACEMENT,),
    "aiVentureArchitect": (ReportKind.AI_VENTURE_BLUEPRINT,),
    "dominanceBlueprint": (ReportKind.DOMINANCE_BLUEPRINT,),
    "gatekeeperBypass": (ReportKind.GATEKEEPER_BYPASS,),
    "chimericAgent": (ReportKind.CHIMERIC_AGENT,),
    "loneWolf": (ReportKind.LONE_WOLF,),
    "cashflowProtocol": (ReportKind.CASHFLOW_PROTOCOL,),
    "realEstateAlpha": (ReportKind.REAL_ESTATE_ALPHA,),
    "alphaSignal": (ReportKind.ALPHA_SIGNAL,),
    "liveMarketIntel": (ReportKind.LIVE_MARKET_INTEL,),
    "demandSignal": (ReportKind.DEMAND_SIGNAL,),
    "opportunityRadar": (ReportKind.OPPORTUNITY_RADAR,),
    "edgarAnomaly": (ReportKind.EDGAR_ANOMALY,),
    "aiVideoFoundry": (ReportKind.AI_VIDEO_FOUNDRY,),
}

AGENT_STATUSES = ("Idle", "Active", "Error")
TASK_STATUSES = ("Pending", "Waiting", "Executing", "Completed", "Failed")


@dataclass
class StrategicBrief:
    market_topic: str
    opportunity_description: str
    analysis_type: str
    data_points: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "marketTopic": self.market_topic,
            "opportunityDescription": self.opportunity_description,
            "analysisType": self.analysis_type,
        }
        if self.data_points:
            payload["dataPoints"] = self.data_points
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "StrategicBrief":
        return cls(
            market_topic=str(payload.get("marketTopic") or ""),
            opportunity_description=str(payload.get("opportunityDescription") or ""),
            analysis_type=str(payload.get("analysisType") or ""),
            data_points=payload.get("dataPoints") or None,
        )


def _failure(exc: GenerationError, **extra: Any) -> Dict[str, Any]:
    return {"ok": False, "reason": exc.kind.value, "error": str(exc), **extra}


def build_project(
    brief: StrategicBrief,
    results: Dict[str, Any],
    name: str | None = None,
) -> Dict[str, Any]:
    return {
        "id": new_id(),
        "name": name or f"{brief.market_topic} ({brief.analysis_type})",
        "timestamp": now_millis(),
        "brief": brief.to_payload(),
        "results": dict(results),
    }


def run_analysis(
    client,
    brief: StrategicBrief,
    quality_mode: QualityMode,
    store=None,
    user_id: str | None = None,
    name: str | None = None,
) -> Dict[str, Any]:
    kinds = ANALYSIS_PLAN.get(brief.analysis_type)
    if kinds is None:
        return {
            "ok": False,
            "reason": "unknown_analysis_type",
            "error": f"Unknown analysis type: {brief.analysis_type}",
        }

    payload = brief.to_payload()
    results: Dict[str, Any] = {}
    for kind in kinds:
        try:
            results[kind.value] = generate_report(client, kind, quality_mode, brief=payload)
        except GenerationError as exc:
            logger.error(
                "analysis.failed",
                extra={
                    "event": "analysis.failed",
                    "analysis_type": brief.analysis_type,
                    "report_kind": kind.value,
                    "error_kind": exc.kind.value,
                },
            )
            return _failure(exc, report_kind=kind.value)

    project = build_project(brief, results, name=name)
    saved_to = store.save_project(user_id, project) if store is not None else None
    return {"ok": True, "reason": None, "project": project, "saved_to": saved_to}


def score_prospects(
    client,
    prospect_list: str,
    icp: Dict[str, Any] | None,
    quality_mode: QualityMode,
) -> Dict[str, Any]:
    if not icp:
        return {"ok": False, "reason": "missing_icp", "error": "Generate a B2B ICP analysis first."}
    if not (prospect_list or "").strip():
        return {"ok": False, "reason": "empty", "error": "No prospects to score."}
    try:
        scored = generate_report(
            client,
            ReportKind.SCORED_PROSPECTS,
            quality_mode,
            prospects=prospect_list.strip(),
            icp=icp,
        )
    except GenerationError as exc:
        return _failure(exc)
    if not isinstance(scored, list):
        return {"ok": False, "reason": "malformed", "error": "AI returned prospect scores in an unexpected format."}
    ranked = sorted(
        (item for item in scored if isinstance(item, dict)),
        key=lambda item: _as_float(item.get("fitScore")),
        reverse=True,
    )
    return {"ok": True, "reason": None, "prospects": ranked}


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _normalize_task(task: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(task)
    normalized["id"] = str(task.get("id") or new_id())
    normalized["brief"] = str(task.get("brief") or "")
    if normalized.get("status") not in TASK_STATUSES:
        normalized["status"] = "Pending"
    return normalized


def normalize_agent(agent: Dict[str, Any]) -> Dict[str, Any]:
    tasks = agent.get("tasks") if isinstance(agent.get("tasks"), list) else []
    return {
        "id": str(agent.get("id") or new_id()),
        "agentType": str(agent.get("agentType") or "Generalist"),
        "overallBrief": str(agent.get("overallBrief") or ""),
        "status": agent.get("status") if agent.get("status") in AGENT_STATUSES else "Idle",
        "tasks": [_normalize_task(t) for t in tasks if isinstance(t, dict)],
    }


def deploy_agents(
    client,
    play: Any,
    source_report_type: str,
    quality_mode: QualityMode,
    store=None,
    user_id: str | None = None,
) -> Dict[str, Any]:
    try:
        raw_agents = generate_report(
            client,
            ReportKind.SOVEREIGN_AGENTS,
            quality_mode,
            play=play,
            source_report_type=source_report_type,
        )
    except GenerationError as exc:
        return _failure(exc)
    if not isinstance(raw_agents, list):
        raw_agents = []

    # Ids from the model are not trusted to be unique across deployments.
    agents = [dict(normalize_agent(a), id=new_id()) for a in raw_agents if isinstance(a, dict)]
    if not agents:
        return {"ok": False, "reason": "no_agents", "error": "AI did not return any agents."}

    workforce = agents
    if store is not None:
        workforce = store.load_workforce(user_id) + agents
        store.save_workforce(user_id, workforce)
    logger.info(
        "agents.deployed",
        extra={"event": "agents.deployed", "count": len(agents), "source_report_type": source_report_type},
    )
    return {"ok": True, "reason": None, "agents": agents, "workforce": workforce}


def assign_task(agent: Dict[str, Any], brief: str) -> Dict[str, Any]:
    cleaned = (brief or "").strip()
    if not cleaned:
        raise ValueError("Task brief must not be empty")
    updated = deepcopy(agent)
    updated.setdefault("tasks", []).append({"id": new_id(), "brief": cleaned, "status": "Pending"})
    return updated


def execute_agent_task(
    client,
    agent: Dict[str, Any],
    task_id: str,
    quality_mode: QualityMode,
) -> Dict[str, Any]:
    """Runs one task and returns a copy of the agent with the task settled.

    The task ends Completed with the model's insight, or Failed with the error
    message kept on it (and the agent marked Error).
    """
    updated = deepcopy(agent)
    task = next((t for t in updated.get("tasks", []) if t.get("id") == task_id), None)
    if task is None:
        return {"ok": False, "reason": "task_not_found", "error": f"Task not found: {task_id}", "agent": agent}

    try:
        output = generate_report(
            client,
            ReportKind.AGENT_TASK,
            quality_mode,
            agent_type=updated.get("agentType") or "Generalist",
            task_brief=task.get("brief") or "",
            overall_brief=updated.get("overallBrief") or "",
        )
    except GenerationError as exc:
        task["status"] = "Failed"
        task["error"] = str(exc)
        updated["status"] = "Error"
        return _failure(exc, agent=updated)

    output = output if isinstance(output, dict) else {}
    task["status"] = "Completed"
    task["insight"] = output.get("insight")
    task["suggestedNextTask"] = output.get("suggestedNextTask")
    task["actionableOutput"] = output.get("actionableOutput") or []
    updated["status"] = "Idle"
    return {"ok": True, "reason": None, "agent": updated}
