"""Normalization of execution-boundary events.

Boundaries deliver output and exit notifications in two shapes: a legacy
bare value (a text chunk, or an integer exit code) or a structured mapping
that also carries the run identifier and result locations. Everything is
converted here into :class:`OutputEvent` / :class:`ExitEvent` so the
orchestrator deals with exactly one shape. Normalization never raises; a
payload that cannot be interpreted becomes an empty chunk or exit code 0.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class OutputEvent:
    """A chunk of simulation output.

    Attributes:
        chunk: Output text (may be empty).
        run_id: Run the chunk belongs to, or ``None`` if unscoped.
        stream: ``"stdout"`` or ``"stderr"`` when the boundary says so.
    """

    chunk: str
    run_id: str | None = None
    stream: str | None = None


@dataclass(frozen=True, slots=True)
class ExitEvent:
    """Termination of a run.

    Attributes:
        exit_code: Process exit status (``0`` when absent or non-numeric).
        run_id: Run that exited, or ``None`` if unscoped.
        output_dir: Directory holding the run's output files.
        error_log: Contents of the EnergyPlus ``.err`` file.
        artifacts: Additional output files keyed by name (e.g. CSV tables).
    """

    exit_code: int = 0
    run_id: str | None = None
    output_dir: str | None = None
    error_log: str | None = None
    artifacts: dict[str, str] = field(default_factory=lambda: {})


RunEvent = OutputEvent | ExitEvent


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_run_id(value: Any) -> str | None:
    """Empty or missing ids mean unscoped; anything else is compared as text."""
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _as_exit_code(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def _as_artifacts(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): _as_text(v) for k, v in value.items()}  # pyright: ignore[reportUnknownVariableType]


def normalize_output(payload: Any) -> OutputEvent:
    """Convert an output notification into an :class:`OutputEvent`.

    Examples:
        >>> normalize_output("Warming up\\n")
        OutputEvent(chunk='Warming up\\n', run_id=None, stream=None)
        >>> normalize_output({"chunk": "x", "runId": "annual-1"}).run_id
        'annual-1'
        >>> normalize_output(None).chunk
        ''
    """
    if isinstance(payload, OutputEvent):
        return payload
    if isinstance(payload, Mapping):
        return OutputEvent(
            chunk=_as_text(_pick(payload, "chunk", "data")),  # pyright: ignore[reportUnknownArgumentType]
            run_id=_as_run_id(_pick(payload, "runId", "run_id")),  # pyright: ignore[reportUnknownArgumentType]
            stream=_optional_text(payload.get("stream")),  # pyright: ignore[reportUnknownMemberType]
        )
    return OutputEvent(chunk=_as_text(payload))


def normalize_exit(payload: Any) -> ExitEvent:
    """Convert an exit notification into an :class:`ExitEvent`.

    Examples:
        >>> normalize_exit(3).exit_code
        3
        >>> normalize_exit({"exitCode": "oops", "runId": "r1"})
        ExitEvent(exit_code=0, run_id='r1', output_dir=None, error_log=None, artifacts={})
    """
    if isinstance(payload, ExitEvent):
        return payload
    if isinstance(payload, Mapping):
        return ExitEvent(
            exit_code=_as_exit_code(_pick(payload, "exitCode", "exit_code")),  # pyright: ignore[reportUnknownArgumentType]
            run_id=_as_run_id(_pick(payload, "runId", "run_id")),  # pyright: ignore[reportUnknownArgumentType]
            output_dir=_optional_text(_pick(payload, "outputDir", "output_dir", "baseDir")),  # pyright: ignore[reportUnknownArgumentType]
            error_log=_optional_text(_pick(payload, "errorLog", "error_log", "errContent")),  # pyright: ignore[reportUnknownArgumentType]
            artifacts=_as_artifacts(_pick(payload, "artifacts", "csvContents")),  # pyright: ignore[reportUnknownArgumentType]
        )
    return ExitEvent(exit_code=_as_exit_code(payload))
