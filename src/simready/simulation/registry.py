"""Run records and the registry that parses terminal results.

The orchestrator registers each run as ``pending`` when it is submitted and
asks the registry to parse results once the run exits. :class:`RunRegistry`
is the in-process implementation: it keeps records in memory and reads the
EnergyPlus ``.err`` output to classify fatal, severe and warning messages.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from .fs import FileSystem, LocalFileSystem
from .parsers.err import ErrorReport

logger = logging.getLogger(__name__)

#: Name of the error log EnergyPlus writes into the output directory.
ERR_FILENAME = "eplusout.err"


class RunStatus(Enum):
    """Lifecycle state of a run record."""

    PENDING = "pending"
    EXITED = "exited"


@dataclass(frozen=True, slots=True)
class RunErrors:
    """Error-log messages grouped by severity."""

    fatal: tuple[str, ...] = ()
    severe: tuple[str, ...] = ()
    warning: tuple[str, ...] = ()

    @classmethod
    def from_report(cls, report: ErrorReport) -> RunErrors:
        return cls(
            fatal=tuple(m.message for m in report.fatal),
            severe=tuple(m.message for m in report.severe),
            warning=tuple(m.message for m in report.warnings),
        )


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Lifecycle snapshot of one run.

    Attributes:
        run_id: Unique run identifier.
        label: Display label (e.g. ``"EnergyPlus annual"``).
        recipe_id: Recipe that launched the run.
        status: ``PENDING`` until the run exits, then ``EXITED``.
        exit_code: Process exit status, set on exit.
        errors: Parsed error-log messages, set on exit.
        output_dir: Directory the run wrote to, when known.
        artifacts: Output files keyed by name.
    """

    run_id: str
    label: str
    recipe_id: str | None = None
    status: RunStatus = RunStatus.PENDING
    exit_code: int | None = None
    errors: RunErrors | None = None
    output_dir: str | None = None
    artifacts: dict[str, str] = field(default_factory=lambda: {})

    @property
    def succeeded(self) -> bool:
        """True when the run exited with code 0 and no fatal or severe errors."""
        if self.status is not RunStatus.EXITED or self.exit_code != 0:
            return False
        return self.errors is None or not (self.errors.fatal or self.errors.severe)


@runtime_checkable
class ResultRegistry(Protocol):
    """Records runs and turns their raw outputs into :class:`RunRecord` values."""

    def register(self, run_id: str, *, label: str, recipe_id: str | None = None) -> RunRecord: ...

    def parse_results(
        self,
        run_id: str,
        *,
        exit_status: int,
        output_dir: str | None = None,
        error_log: str | None = None,
        artifacts: Mapping[str, str] | None = None,
    ) -> RunRecord: ...


class RunRegistry:
    """In-memory :class:`ResultRegistry`.

    Args:
        fs: File system used to read outputs from a run's output directory
            when the exit event did not carry them inline.
    """

    def __init__(self, fs: FileSystem | None = None) -> None:
        self._fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self._records: dict[str, RunRecord] = {}

    def register(self, run_id: str, *, label: str, recipe_id: str | None = None) -> RunRecord:
        """Create a ``pending`` record for *run_id*, replacing any previous one."""
        record = RunRecord(run_id=run_id, label=label, recipe_id=recipe_id)
        self._records[run_id] = record
        logger.info("Registered run %s (%s)", run_id, label)
        return record

    def get(self, run_id: str) -> RunRecord | None:
        return self._records.get(run_id)

    def records(self) -> list[RunRecord]:
        """All records, in registration order."""
        return list(self._records.values())

    def parse_results(
        self,
        run_id: str,
        *,
        exit_status: int,
        output_dir: str | None = None,
        error_log: str | None = None,
        artifacts: Mapping[str, str] | None = None,
    ) -> RunRecord:
        """Move *run_id* to ``EXITED`` with its parsed results.

        The error log is taken from *error_log* if given, else read from
        ``<output_dir>/eplusout.err``. CSV artifacts are likewise read from
        *output_dir* when none are passed. A record that has already exited
        is returned unchanged. Unknown run ids get a record on the fly.

        Args:
            run_id: Run identifier.
            exit_status: Process exit status.
            output_dir: Directory holding the run outputs.
            error_log: Contents of the ``.err`` file.
            artifacts: Output files keyed by name.
        """
        record = self._records.get(run_id)
        if record is None:
            logger.warning("Parsing results for unregistered run %s", run_id)
            record = RunRecord(run_id=run_id, label=f"EnergyPlus {run_id}")
        elif record.status is RunStatus.EXITED:
            logger.warning("Ignoring repeated results for run %s", run_id)
            return record

        log_text = error_log if error_log is not None else self._read_err(output_dir)
        errors = RunErrors.from_report(ErrorReport.from_string(log_text)) if log_text else RunErrors()
        collected = dict(artifacts) if artifacts else self._read_artifacts(output_dir)

        record = replace(
            record,
            status=RunStatus.EXITED,
            exit_code=exit_status,
            errors=errors,
            output_dir=output_dir,
            artifacts=collected,
        )
        self._records[run_id] = record
        logger.info(
            "Run %s exited with code %d (%d fatal, %d severe, %d warning)",
            run_id,
            exit_status,
            len(errors.fatal),
            len(errors.severe),
            len(errors.warning),
        )
        return record

    def _read_err(self, output_dir: str | None) -> str | None:
        if not output_dir:
            return None
        path = Path(output_dir) / ERR_FILENAME
        try:
            if not self._fs.exists(path):
                return None
            return self._fs.read_text(path, encoding="latin-1")
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None

    def _read_artifacts(self, output_dir: str | None) -> dict[str, str]:
        if not output_dir:
            return {}
        artifacts: dict[str, str] = {}
        try:
            for name in self._fs.glob(output_dir, "*.csv"):
                artifacts[Path(name).name] = self._fs.read_text(name)
        except OSError as exc:
            logger.warning("Could not read artifacts in %s: %s", output_dir, exc)
        return artifacts
