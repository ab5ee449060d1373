"""EnergyPlus run submission and result handling.

Provides run request construction, pre-flight validation, the run
orchestrator that follows a run through an execution boundary, and the
registry that parses terminal results.

Example:
    >>> from simready import ProjectConfiguration
    >>> from simready.simulation import RunOrchestrator, build_run_request
    >>>
    >>> config = ProjectConfiguration.from_dict({})
    >>> orchestrator = RunOrchestrator(None)
    >>> outcome = orchestrator.submit(build_run_request(config, "annual-energy-simulation"))
    >>> outcome.kind.value
    'environment_unavailable'
"""

from __future__ import annotations

from .boundary import EventHandler, ExecutionBoundary
from .events import ExitEvent, OutputEvent, RunEvent, normalize_exit, normalize_output
from .orchestrator import (
    EntryKind,
    OutcomeKind,
    RunOrchestrator,
    RunState,
    SubmitOutcome,
    Transcript,
    TranscriptEntry,
)
from .parsers.err import ErrorMessage, ErrorReport
from .registry import ResultRegistry, RunErrors, RunRecord, RunRegistry, RunStatus
from .request import RunRequest, build_run_request, new_run_id, run_name_for_recipe
from .validation import (
    DefaultPreflightValidator,
    Issue,
    IssueSeverity,
    PreflightValidator,
    ValidationResult,
    format_issues_summary,
    validate_config,
    validate_run_request,
)

__all__ = [
    "DefaultPreflightValidator",
    "EntryKind",
    "ErrorMessage",
    "ErrorReport",
    "EventHandler",
    "ExecutionBoundary",
    "ExitEvent",
    "Issue",
    "IssueSeverity",
    "OutcomeKind",
    "OutputEvent",
    "PreflightValidator",
    "ResultRegistry",
    "RunErrors",
    "RunEvent",
    "RunOrchestrator",
    "RunRecord",
    "RunRegistry",
    "RunRequest",
    "RunState",
    "RunStatus",
    "SubmitOutcome",
    "Transcript",
    "TranscriptEntry",
    "build_run_request",
    "format_issues_summary",
    "new_run_id",
    "normalize_exit",
    "normalize_output",
    "run_name_for_recipe",
    "validate_config",
    "validate_run_request",
]
