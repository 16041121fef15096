import pytest

from strategy_engine.llm.types import ErrorKind, GenerationError, LLMResult, QualityMode, StructuredResult
from strategy_engine.models import apply_migrations, get_connection
from strategy_engine.orchestrator import (
    StrategicBrief,
    assign_task,
    deploy_agents,
    execute_agent_task,
    run_analysis,
    score_prospects,
)
from strategy_engine.storage import HybridStore


class ScriptedClient:
    """Answers by report kind; an exception value is raised instead."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def generate_detailed(self, prompt, shape, quality_mode, *, use_search=False, validate=None, meta=None):
        kind = meta["report_kind"]
        self.calls.append({"kind": kind, "prompt": prompt})
        value = self.responses[kind]
        if isinstance(value, Exception):
            raise value
        return StructuredResult(data=value, result=LLMResult(text="{}", provider="stub", model="m"))


def _brief(analysis_type):
    return StrategicBrief(
        market_topic="Commercial HVAC",
        opportunity_description="Maintenance contracts",
        analysis_type=analysis_type,
    )


def _store(tmp_path):
    db_path = str(tmp_path / "app.db")
    apply_migrations(db_path)
    return HybridStore(get_connection(db_path))


def test_brief_payload_is_camel_case():
    brief = StrategicBrief("HVAC", "contracts", "b2b", data_points="100 techs")
    assert brief.to_payload() == {
        "marketTopic": "HVAC",
        "opportunityDescription": "contracts",
        "analysisType": "b2b",
        "dataPoints": "100 techs",
    }
    assert StrategicBrief.from_payload(brief.to_payload()) == brief


def test_run_analysis_builds_and_saves_project(tmp_path):
    store = _store(tmp_path)
    client = ScriptedClient({"b2bAnalysis": {"sharedProfile": {"summary": "Ops leads"}}})

    result = run_analysis(client, _brief("b2b"), QualityMode.FAST, store=store)

    assert result["ok"] is True
    assert result["saved_to"] == "local"
    project = result["project"]
    assert project["results"] == {"b2bAnalysis": {"sharedProfile": {"summary": "Ops leads"}}}
    assert project["brief"]["analysisType"] == "b2b"
    assert "Commercial HVAC" in client.calls[0]["prompt"]
    assert [p["id"] for p in store.list_projects(None)] == [project["id"]]


def test_venture_architect_runs_only_the_blueprint(tmp_path):
    store = _store(tmp_path)
    client = ScriptedClient(
        {
            "aiVentureBlueprint": {"ultimatePrompt": "p"},
            "aiVideoFoundry": GenerationError(ErrorKind.TIMEOUT),
        }
    )

    result = run_analysis(client, _brief("aiVentureArchitect"), QualityMode.THOROUGH, store=store)

    assert result["ok"] is True
    assert result["project"]["results"] == {"aiVentureBlueprint": {"ultimatePrompt": "p"}}
    assert [c["kind"] for c in client.calls] == ["aiVentureBlueprint"]
    assert len(store.list_projects(None)) == 1


def test_failed_analysis_saves_nothing(tmp_path):
    store = _store(tmp_path)
    client = ScriptedClient({"aiVentureBlueprint": GenerationError(ErrorKind.TIMEOUT)})

    result = run_analysis(client, _brief("aiVentureArchitect"), QualityMode.THOROUGH, store=store)

    assert result == {
        "ok": False,
        "reason": "timeout",
        "error": "Request Timed Out",
        "report_kind": "aiVentureBlueprint",
    }
    assert store.list_projects(None) == []


def test_unknown_analysis_type():
    result = run_analysis(ScriptedClient({}), _brief("veoVideo"), QualityMode.FAST)
    assert result["ok"] is False
    assert result["reason"] == "unknown_analysis_type"


def test_score_prospects_requires_icp():
    result = score_prospects(ScriptedClient({}), "Ann, CTO", None, QualityMode.FAST)
    assert result["reason"] == "missing_icp"


def test_score_prospects_ranks_by_fit():
    client = ScriptedClient(
        {
            "scoredProspects": {
                "prospects": [
                    {"prospectInfo": "Bob", "fitScore": 4},
                    {"prospectInfo": "Ann", "fitScore": 9},
                    {"prospectInfo": "Cy", "fitScore": "n/a"},
                ]
            }
        }
    )
    result = score_prospects(client, "Bob\nAnn\nCy", {"sharedProfile": {}}, QualityMode.FAST)

    assert result["ok"] is True
    assert [p["prospectInfo"] for p in result["prospects"]] == ["Ann", "Bob", "Cy"]


def test_score_prospects_rejects_non_list_output():
    client = ScriptedClient({"scoredProspects": 42})
    result = score_prospects(client, "Ann, CTO", {"sharedProfile": {}}, QualityMode.FAST)

    assert result["ok"] is False
    assert result["reason"] == "malformed"


def test_deploy_agents_normalizes_and_appends_workforce(tmp_path):
    store = _store(tmp_path)
    store.save_workforce("u1", [{"id": "existing", "agentType": "Scout", "overallBrief": "", "status": "Idle", "tasks": []}])
    client = ScriptedClient(
        {
            "sovereignAgents": [
                {"id": "1", "agentType": "Hunter", "overallBrief": "Find buyers", "status": "busy",
                 "tasks": [{"brief": "List 20 firms"}]},
                {"agentType": "Closer", "overallBrief": "Book calls"},
            ]
        }
    )

    result = deploy_agents(client, {"playName": "JV"}, "loneWolf", QualityMode.FAST, store=store, user_id="u1")

    assert result["ok"] is True
    hunter, closer = result["agents"]
    assert hunter["status"] == "Idle"
    assert hunter["tasks"][0]["status"] == "Pending"
    assert hunter["tasks"][0]["id"]
    assert hunter["id"] != closer["id"]
    workforce = store.load_workforce("u1")
    assert [a["agentType"] for a in workforce] == ["Scout", "Hunter", "Closer"]


def test_deploy_agents_with_non_list_output_reports_no_agents():
    client = ScriptedClient({"sovereignAgents": "one agent"})
    result = deploy_agents(client, {"title": "Play"}, "loneWolf", QualityMode.FAST)

    assert result["ok"] is False
    assert result["reason"] == "no_agents"


def test_agent_task_completes_with_insight():
    agent = assign_task({"id": "a1", "agentType": "Hunter", "overallBrief": "Find buyers", "status": "Idle", "tasks": []},
                        "Find 5 distressed HVAC firms")
    task_id = agent["tasks"][0]["id"]
    client = ScriptedClient(
        {
            "agentTask": {
                "insight": "Three firms lost contracts",
                "suggestedNextTask": "Draft outreach",
                "actionableOutput": [{"title": "Lead list", "content": "...", "type": "list"}],
            }
        }
    )

    result = execute_agent_task(client, agent, task_id, QualityMode.FAST)

    assert result["ok"] is True
    task = result["agent"]["tasks"][0]
    assert task["status"] == "Completed"
    assert task["insight"] == "Three firms lost contracts"
    assert task["actionableOutput"][0]["title"] == "Lead list"
    assert agent["tasks"][0]["status"] == "Pending"
    assert "Agent (Hunter): Execute task: Find 5 distressed HVAC firms" in client.calls[0]["prompt"]


def test_agent_task_failure_marks_agent_error():
    agent = assign_task({"id": "a1", "agentType": "Hunter", "overallBrief": "b", "tasks": []}, "do it")
    client = ScriptedClient({"agentTask": GenerationError(ErrorKind.EMPTY_RESPONSE)})

    result = execute_agent_task(client, agent, agent["tasks"][0]["id"], QualityMode.FAST)

    assert result["ok"] is False
    assert result["agent"]["status"] == "Error"
    assert result["agent"]["tasks"][0]["status"] == "Failed"
    assert result["agent"]["tasks"][0]["error"] == "AI returned an empty response."


def test_unknown_task_and_blank_brief():
    agent = {"id": "a1", "agentType": "Hunter", "overallBrief": "b", "tasks": []}
    assert execute_agent_task(ScriptedClient({}), agent, "nope", QualityMode.FAST)["reason"] == "task_not_found"
    with pytest.raises(ValueError):
        assign_task(agent, "   ")
