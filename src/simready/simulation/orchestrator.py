"""Submission and event tracking for a single EnergyPlus run.

A :class:`RunOrchestrator` owns one run slot and one :class:`Transcript`.
Each call to :meth:`RunOrchestrator.submit` walks the run through::

    idle -> validated -> submitted -> streaming -> terminated -> detached

Output and exit events from the execution boundary are normalized, events
tagged with another run's id are discarded, and the first accepted exit
event hands the results to the registry and detaches both listeners.
Anything arriving after that is ignored.

Example::

    from simready.simulation import RunOrchestrator, RunRegistry, build_run_request

    orchestrator = RunOrchestrator(boundary, registry=RunRegistry())
    request = build_run_request(config, "annual-energy-simulation", executable_path=exe)
    outcome = orchestrator.submit(request)
    if not outcome.ok:
        print(outcome.message)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .boundary import ExecutionBoundary
from .events import normalize_exit, normalize_output
from .registry import ResultRegistry, RunRecord, RunRegistry
from .request import RunRequest
from .validation import DefaultPreflightValidator, Issue, PreflightValidator, format_issues_summary

logger = logging.getLogger(__name__)

#: Number of validation issues shown when a submission is refused.
MAX_SUMMARY_ISSUES = 4


class RunState(Enum):
    """Position of the orchestrator's run slot in the run lifecycle."""

    IDLE = "idle"
    VALIDATED = "validated"
    SUBMITTED = "submitted"
    STREAMING = "streaming"
    TERMINATED = "terminated"
    DETACHED = "detached"


_LIVE_STATES = frozenset({RunState.SUBMITTED, RunState.STREAMING})


class EntryKind(Enum):
    """Origin of a transcript entry."""

    OUTPUT = "output"
    """Text streamed by the simulation."""

    SYSTEM = "system"
    """Run header and exit summary."""

    VALIDATION = "validation"
    """Pre-flight refusal."""

    ENVIRONMENT = "environment"
    """Runner unavailable or failed to start."""


@dataclass(frozen=True, slots=True)
class TranscriptEntry:
    kind: EntryKind
    text: str


class Transcript:
    """Append-only log of one run surface.

    Entries keep their origin so a UI can style simulation output apart
    from simready's own messages. :meth:`clear` is called when a new run
    starts.
    """

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    def append(self, text: str, kind: EntryKind = EntryKind.OUTPUT) -> None:
        self._entries.append(TranscriptEntry(kind, text))

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> list[TranscriptEntry]:
        return list(self._entries)

    @property
    def text(self) -> str:
        """All entries concatenated in arrival order."""
        return "".join(e.text for e in self._entries)

    def text_of(self, kind: EntryKind) -> str:
        """Concatenation of the entries of one *kind*."""
        return "".join(e.text for e in self._entries if e.kind is kind)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(self._entries)

    def __str__(self) -> str:
        return self.text


class OutcomeKind(Enum):
    """Result of a :meth:`RunOrchestrator.submit` call."""

    SUBMITTED = "submitted"
    VALIDATION_FAILED = "validation_failed"
    ENVIRONMENT_UNAVAILABLE = "environment_unavailable"
    LAUNCH_FAILED = "launch_failed"


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    """What happened to a submission.

    Attributes:
        kind: Outcome category.
        run_id: Identifier of the submitted request.
        message: Human-readable summary for the UI.
        issues: Validation issues, for ``VALIDATION_FAILED``.
    """

    kind: OutcomeKind
    run_id: str
    message: str
    issues: tuple[Issue, ...] = ()

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUBMITTED


class RunOrchestrator:
    """Submits runs to an execution boundary and follows them to completion.

    One run is tracked at a time. Submitting again detaches the listeners
    of the previous run, whether or not it has finished.

    Args:
        boundary: The execution boundary, or ``None`` when the host cannot
            run EnergyPlus directly. Submissions are then refused.
        validator: Pre-flight gate (default: :class:`DefaultPreflightValidator`).
        registry: Run registry and result parser (default: a new
            :class:`RunRegistry`).
        transcript: Transcript to write to (default: a new one).
    """

    def __init__(
        self,
        boundary: ExecutionBoundary | None,
        *,
        validator: PreflightValidator | None = None,
        registry: ResultRegistry | None = None,
        transcript: Transcript | None = None,
    ) -> None:
        self._boundary = boundary
        self._validator: PreflightValidator = validator if validator is not None else DefaultPreflightValidator()
        self._registry: ResultRegistry = registry if registry is not None else RunRegistry()
        self.transcript = transcript if transcript is not None else Transcript()
        self._state = RunState.IDLE
        self._request: RunRequest | None = None
        self._record: RunRecord | None = None
        self._output_handle: Any = None
        self._exit_handle: Any = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def active_run_id(self) -> str | None:
        """Id of the most recently submitted run, if any."""
        return self._request.run_id if self._request is not None else None

    @property
    def record(self) -> RunRecord | None:
        """Terminal record of the most recent run, once it has exited."""
        return self._record

    @property
    def attached(self) -> bool:
        """Whether output or exit listeners are currently registered."""
        return self._output_handle is not None or self._exit_handle is not None

    def submit(self, request: RunRequest) -> SubmitOutcome:
        """Validate *request* and hand it to the execution boundary.

        Refusals are written to the transcript and returned as a
        :class:`SubmitOutcome`; nothing is registered or attached for a
        refused request.

        Raises:
            Exception: Whatever the registry raises while registering the run.
                The orchestrator is left as it was before the call.
        """
        if self._boundary is None:
            message = (
                "EnergyPlus runner not available in this environment. "
                "Generate the IDF and run it with EnergyPlus manually."
            )
            self.transcript.append(message + "\n", EntryKind.ENVIRONMENT)
            logger.warning("Refusing run %s: no execution boundary", request.run_id)
            return SubmitOutcome(OutcomeKind.ENVIRONMENT_UNAVAILABLE, request.run_id, message)

        result = self._validator.validate(request)
        if not result.ok:
            summary = format_issues_summary(result.issues, MAX_SUMMARY_ISSUES)
            summary = summary or "Blocking configuration issues detected."
            self.transcript.append(f"Pre-run validation failed:\n{summary}\n\n", EntryKind.VALIDATION)
            logger.info("Pre-run validation failed for %s (%d issue(s))", request.run_id, len(result.issues))
            return SubmitOutcome(OutcomeKind.VALIDATION_FAILED, request.run_id, summary, tuple(result.issues))

        self._registry.register(request.run_id, label=request.label, recipe_id=request.recipe_id)

        # A previous run may still be attached; its events must not reach this run.
        self.detach()
        self._state = RunState.VALIDATED
        self._request = request
        self._record = None

        self.transcript.clear()
        self.transcript.append(
            f"Running EnergyPlus [{request.run_name}]...\n"
            f"IDF: {request.idf_path}\n"
            f"EPW: {request.epw_path}\n"
            f"Exe: {request.executable_path}\n"
            f"Outputs: runs/{request.run_name}/\n\n",
            EntryKind.SYSTEM,
        )

        # Listeners go in before run() so early events are not lost.
        self._output_handle = self._boundary.on_output(self.handle_output)
        self._exit_handle = self._boundary.on_exit(self.handle_exit)
        self._state = RunState.SUBMITTED
        logger.info("Submitting run %s (%s)", request.run_id, request.recipe_id)

        try:
            self._boundary.run(request.to_dict())
        except Exception as exc:
            logger.exception("Execution boundary failed to start run %s", request.run_id)
            message = f"Failed to start EnergyPlus: {exc}"
            self.transcript.append(message + "\n", EntryKind.ENVIRONMENT)
            self.detach()
            return SubmitOutcome(OutcomeKind.LAUNCH_FAILED, request.run_id, message)

        return SubmitOutcome(OutcomeKind.SUBMITTED, request.run_id, f"Submitted {request.label}")

    def handle_output(self, payload: Any) -> bool:
        """Listener for output events. Returns whether the chunk was appended."""
        event = normalize_output(payload)
        if self._state not in _LIVE_STATES:
            logger.debug("Ignoring output outside a live run (state=%s)", self._state.value)
            return False
        if event.run_id is not None and event.run_id != self.active_run_id:
            logger.debug("Discarding output for run %s (active: %s)", event.run_id, self.active_run_id)
            return False
        self._state = RunState.STREAMING
        if not event.chunk:
            return False
        self.transcript.append(event.chunk, EntryKind.OUTPUT)
        return True

    def handle_exit(self, payload: Any) -> RunRecord | None:
        """Listener for exit events.

        The first exit event accepted for the active run is parsed and
        summarized, then both listeners are detached. Returns the resulting
        record, or ``None`` if the event was ignored.
        """
        event = normalize_exit(payload)
        if self._state not in _LIVE_STATES or self._request is None:
            logger.debug("Ignoring exit outside a live run (state=%s)", self._state.value)
            return None
        run_id = self._request.run_id
        if event.run_id is not None and event.run_id != run_id:
            logger.debug("Discarding exit for run %s (active: %s)", event.run_id, run_id)
            return None

        self._state = RunState.TERMINATED
        code = event.exit_code
        record: RunRecord | None = None
        try:
            record = self._registry.parse_results(
                run_id,
                exit_status=code,
                output_dir=event.output_dir,
                error_log=event.error_log,
                artifacts=event.artifacts,
            )
        except Exception:
            logger.exception("Result parsing failed for run %s", run_id)

        self.transcript.append(f"\n--- EnergyPlus exited with code: {code} ---\n", EntryKind.SYSTEM)
        if record is None:
            self.transcript.append("Results could not be parsed.\n", EntryKind.SYSTEM)
        else:
            lines = _error_summary(record)
            if lines:
                self.transcript.append("\n".join(lines) + "\n", EntryKind.SYSTEM)

        self._record = record
        self.detach()
        return record

    def detach(self) -> None:
        """Unregister both listeners. Safe to call any number of times."""
        output_handle, exit_handle = self._output_handle, self._exit_handle
        self._output_handle = None
        self._exit_handle = None
        if self._boundary is not None:
            if output_handle is not None:
                self._boundary.off_output(output_handle)
            if exit_handle is not None:
                self._boundary.off_exit(exit_handle)
        if self._state not in (RunState.IDLE, RunState.DETACHED):
            logger.debug("Detached listeners for run %s", self.active_run_id)
            self._state = RunState.DETACHED


def _error_summary(record: RunRecord) -> list[str]:
    """Build the fatal/severe/warning lines of the exit summary."""
    if record.errors is None:
        return []
    fatal, severe, warning = record.errors.fatal, record.errors.severe, record.errors.warning
    lines: list[str] = []
    if fatal:
        lines.append(f"Fatal errors: {len(fatal)}")
        lines.append(fatal[0])
    if severe:
        lines.append(f"Severe errors: {len(severe)}")
        if not fatal:
            lines.append(severe[0])
    if warning:
        lines.append(f"Warnings: {len(warning)}")
    return lines
