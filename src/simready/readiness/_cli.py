"""CLI entry point for readiness checks.

Usage examples::

    simready checklist project.json
    simready checklist project.json --diagnostics diagnostics.json --json
    simready checklist project.json --no-runner
    simready preflight --idf model.idf --epw weather.epw --exe /usr/local/EnergyPlus-24-1-0/energyplus
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ..config import ProjectConfiguration, read_json
from ..diagnostics import DiagnosticReport
from ..exceptions import ConfigurationError
from ..simulation.request import ANNUAL_RECIPE, build_run_request
from ..simulation.validation import Issue, IssueSeverity, validate_run_request
from ._evaluator import evaluate
from ._models import ChecklistStep, StepStatus, worst_status


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    top = argparse.ArgumentParser(
        prog="simready",
        description="EnergyPlus simulation readiness tools",
    )
    sub = top.add_subparsers(dest="command")

    checklist = sub.add_parser(
        "checklist",
        help="Evaluate the simulation readiness checklist for a project",
        description=(
            "Read a project settings file and report the 7-step readiness "
            "checklist: geometry, constructions, schedules, thermostats, "
            "weather, IDF generation and run readiness."
        ),
    )
    checklist.add_argument("project", metavar="PROJECT", help="Project settings JSON file")
    checklist.add_argument(
        "--diagnostics",
        metavar="FILE",
        help="Diagnostic report JSON file (optional)",
    )
    checklist.add_argument(
        "--no-runner",
        dest="runner_available",
        action="store_false",
        default=True,
        help="Evaluate as if EnergyPlus cannot be run from this host",
    )
    checklist.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        default=False,
        help="Output the checklist as JSON",
    )

    preflight = sub.add_parser(
        "preflight",
        help="Check a run request for blocking configuration errors",
    )
    preflight.add_argument("--idf", dest="idf_path", help="Input IDF (default: model.idf)")
    preflight.add_argument("--epw", dest="epw_path", help="Weather file")
    preflight.add_argument("--exe", dest="executable_path", help="EnergyPlus executable")
    preflight.add_argument("--recipe", dest="recipe_id", default=ANNUAL_RECIPE, help="Recipe id")
    preflight.add_argument(
        "--project",
        metavar="PROJECT",
        help="Project settings JSON file used to resolve the EPW",
    )
    preflight.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        default=False,
        help="Output issues as JSON",
    )

    return top


def _load_diagnostics(path_str: str | None) -> DiagnosticReport | None:
    if path_str is None:
        return None
    path = Path(path_str)
    data = read_json(path)
    if not isinstance(data, dict):
        msg = "diagnostic report must be a JSON object"
        raise ConfigurationError(msg, str(path))
    return DiagnosticReport.from_dict(data)  # pyright: ignore[reportUnknownArgumentType]


def _format_text(steps: list[ChecklistStep]) -> str:
    """Format the checklist as human-readable text."""
    lines: list[str] = []
    for step in steps:
        lines.append(str(step))
        if step.actions:
            lines.append("    actions: " + ", ".join(a.action_id for a in step.actions))
    return "\n".join(lines)


def _format_json(steps: list[ChecklistStep]) -> str:
    """Format the checklist as a JSON string."""
    payload = {
        "steps": [s.to_dict() for s in steps],
        "summary": {
            "status": worst_status(steps).value,
            "errors": sum(1 for s in steps if s.status is StepStatus.ERROR),
            "warnings": sum(1 for s in steps if s.status is StepStatus.WARNING),
        },
    }
    return json.dumps(payload, indent=2)


def _format_issues_json(issues: list[Issue]) -> str:
    payload = {
        "ok": not any(i.severity is IssueSeverity.ERROR for i in issues),
        "issues": [
            {"severity": i.severity.value, "code": i.code, "message": i.message, "hint": i.hint} for i in issues
        ],
    }
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "checklist":
            _run_checklist(args)
        elif args.command == "preflight":
            _run_preflight(args)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)


def _run_checklist(args: argparse.Namespace) -> None:
    """Execute the ``checklist`` subcommand."""
    config = ProjectConfiguration.from_file(args.project)
    diagnostics = _load_diagnostics(args.diagnostics)
    steps = evaluate(config, diagnostics, runner_available=args.runner_available)

    if args.json_output:
        print(_format_json(steps))
    else:
        print(_format_text(steps))

    # Exit code: 1 if any step is blocking, 0 otherwise
    sys.exit(1 if worst_status(steps) is StepStatus.ERROR else 0)


def _run_preflight(args: argparse.Namespace) -> None:
    """Execute the ``preflight`` subcommand."""
    config = ProjectConfiguration.from_file(args.project) if args.project else ProjectConfiguration()
    request = build_run_request(
        config,
        args.recipe_id,
        idf_path=args.idf_path,
        epw_path=args.epw_path,
        executable_path=args.executable_path,
    )
    result = validate_run_request(request)

    if args.json_output:
        print(_format_issues_json(result.issues))
    elif result.issues:
        print("\n".join(str(i) for i in result.issues))
    else:
        print("No blocking issues found.")

    sys.exit(0 if result.ok else 1)
