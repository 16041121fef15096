"""Entrypoint: generate strategy reports and manage saved projects from the command line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from strategy_engine.config import load_settings
from strategy_engine.llm.client import StructuredGenerationClient
from strategy_engine.llm.types import GenerationError, QualityMode
from strategy_engine.logger import configure_logging
from strategy_engine.models import apply_migrations, get_connection, get_cost_by_kind, get_cost_summary
from strategy_engine.orchestrator import ANALYSIS_PLAN, StrategicBrief, run_analysis, score_prospects
from strategy_engine.reports import REPORT_SPECS, generate_report
from strategy_engine.storage import HybridStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Business strategy report generator")
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings.yaml")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("init-db", help="Apply SQLite migrations only")
    subparsers.add_parser("kinds", help="List report kinds and analysis types")

    analyze = subparsers.add_parser("analyze", help="Run an analysis for a strategic brief and save it")
    analyze.add_argument("--topic", required=True, help="Market topic")
    analyze.add_argument("--description", default="", help="Opportunity description")
    analyze.add_argument("--type", dest="analysis_type", default="b2b", choices=sorted(ANALYSIS_PLAN))
    analyze.add_argument("--data-points", default=None, help="Extra data points for the brief")
    analyze.add_argument("--name", default=None, help="Project name")
    _add_common(analyze)

    report = subparsers.add_parser("report", help="Generate a single report kind")
    report.add_argument("kind", choices=sorted(k.value for k in REPORT_SPECS))
    report.add_argument(
        "--input",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Prompt input; VALUE is parsed as JSON when possible",
    )
    _add_common(report)

    score = subparsers.add_parser("score", help="Score prospects against a saved B2B analysis")
    score.add_argument("project_id", help="Project holding a b2bAnalysis result")
    score.add_argument("prospects_file", help="Text file with one prospect per line")
    _add_common(score)

    projects = subparsers.add_parser("projects", help="List saved projects")
    projects.add_argument("--user", default=None)

    delete = subparsers.add_parser("delete-project", help="Delete a saved project")
    delete.add_argument("project_id")
    delete.add_argument("--user", default=None)

    agents = subparsers.add_parser("agents", help="Show the deployed agent workforce")
    agents.add_argument("--user", default=None)

    subparsers.add_parser("costs", help="Show LLM usage and estimated cost")
    return parser


def _add_common(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--turbo", action="store_true", help="Use the thorough (slower) model")
    sub.add_argument("--user", default=None, help="User id; defaults to the guest user")


def _parse_inputs(pairs: list[str]) -> dict:
    inputs = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got: {pair}")
        try:
            inputs[name] = json.loads(value)
        except json.JSONDecodeError:
            inputs[name] = value
    return inputs


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main() -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return 0

    config = load_settings(args.settings)
    configure_logging(config["logging"]["level"], bool(config["logging"]["json"]))
    db_path = config["database"]["path"]
    apply_migrations(db_path)

    if args.command == "init-db":
        print(f"Database initialized at {db_path}")
        return 0

    if args.command == "kinds":
        for spec in REPORT_SPECS.values():
            flag = " [search]" if spec.use_search else ""
            print(f"{spec.kind.value}{flag}: {', '.join(spec.inputs)}")
        print("Analysis types: " + ", ".join(sorted(ANALYSIS_PLAN)))
        return 0

    with get_connection(db_path) as conn:
        store = HybridStore(conn, guest_user=config["storage"]["guest_user"])

        if args.command == "projects":
            for project in store.list_projects(args.user):
                print(f"- {project['id']} {project['name']} ts={project['timestamp']}")
            return 0

        if args.command == "delete-project":
            removed = store.delete_project(args.user, args.project_id)
            print("Deleted" if removed else "Project not found")
            return 0 if removed else 1

        if args.command == "agents":
            _print_json(store.load_workforce(args.user))
            return 0

        if args.command == "costs":
            summary = get_cost_summary(conn)
            print(
                f"calls={summary['calls']} tokens_in={summary['tokens_in']} "
                f"tokens_out={summary['tokens_out']} cost_usd={summary['cost_usd']:.4f}"
            )
            for row in get_cost_by_kind(conn):
                print(f"- {row['report_kind']}: calls={row['calls']} cost_usd={row['cost_usd']:.4f}")
            return 0

        quality_mode = QualityMode.from_turbo(args.turbo)
        with StructuredGenerationClient.from_settings(config, conn=conn) as client:
            if args.command == "analyze":
                brief = StrategicBrief(
                    market_topic=args.topic,
                    opportunity_description=args.description,
                    analysis_type=args.analysis_type,
                    data_points=args.data_points,
                )
                result = run_analysis(client, brief, quality_mode, store=store, user_id=args.user, name=args.name)
                if not result["ok"]:
                    print(f"Error: {result['error']}", file=sys.stderr)
                    return 1
                project = result["project"]
                print(f"Saved project {project['id']} ({result['saved_to']})")
                _print_json(project["results"])
                return 0

            if args.command == "report":
                try:
                    data = generate_report(client, args.kind, quality_mode, **_parse_inputs(args.input))
                except (GenerationError, ValueError) as exc:
                    print(f"Error: {exc}", file=sys.stderr)
                    return 1
                _print_json(data)
                return 0

            if args.command == "score":
                project = next((p for p in store.list_projects(args.user) if p["id"] == args.project_id), None)
                if project is None:
                    print(f"Error: project not found: {args.project_id}", file=sys.stderr)
                    return 1
                prospects = Path(args.prospects_file).read_text(encoding="utf-8")
                icp = project["results"].get("b2bAnalysis")
                result = score_prospects(client, prospects, icp, quality_mode)
                if not result["ok"]:
                    print(f"Error: {result['error']}", file=sys.stderr)
                    return 1
                for item in result["prospects"]:
                    print(f"- {item.get('fitScore')}: {item.get('prospectInfo')} | {item.get('rationale', '')}")
                return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
