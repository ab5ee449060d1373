"""Diagnostic report model and the source that produces it.

A diagnostic report is computed elsewhere (by analysing the project's
geometry, constructions and loads) and consumed here as a read-only
snapshot. It may be unavailable: :func:`fetch_diagnostics` turns every
failure into ``None`` so that callers can degrade instead of failing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

#: Seconds to wait for a diagnostic report before giving up.
DEFAULT_TIMEOUT = 10.0

_SEVERITIES = frozenset({"error", "warning", "info"})


def _names(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value if v is not None)  # pyright: ignore[reportUnknownVariableType]


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return value  # pyright: ignore[reportUnknownVariableType]
    return {}


@dataclass(frozen=True, slots=True)
class DiagnosticIssue:
    """A single entry of the report's flat issue list."""

    severity: str
    message: str
    code: str | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class LoadIssue:
    """A zone load entry that is incomplete or inconsistent."""

    zone: str
    issue: str


@dataclass(frozen=True, slots=True)
class DiagnosticReport:
    """Snapshot of project health.

    Attributes:
        zone_total: Number of zones found by geometry analysis, or ``None``
            when the report carries no geometry totals.
        zones: Per-zone geometry entries, as reported.
        missing_constructions: Construction names referenced but undefined.
        unused_constructions: Construction names defined but unreferenced.
        missing_materials: Material names referenced but undefined.
        unused_materials: Material names defined but unreferenced.
        missing_schedules: Schedule names referenced but undefined.
        inconsistent_loads: Zone load entries with problems.
        issues: Flat issue list with severities.
    """

    zone_total: int | None = None
    zones: tuple[Any, ...] = ()
    missing_constructions: tuple[str, ...] = ()
    unused_constructions: tuple[str, ...] = ()
    missing_materials: tuple[str, ...] = ()
    unused_materials: tuple[str, ...] = ()
    missing_schedules: tuple[str, ...] = ()
    inconsistent_loads: tuple[LoadIssue, ...] = ()
    issues: tuple[DiagnosticIssue, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DiagnosticReport:
        """Build a report from its mapping form, tolerating absent sections."""
        geometry = _section(data, "geometry")
        totals = _section(geometry, "totals")
        raw_total = totals.get("zones")
        zone_total = raw_total if isinstance(raw_total, int) and not isinstance(raw_total, bool) else None
        raw_zones = geometry.get("zones")

        constructions = _section(data, "constructions")
        materials = _section(data, "materials")
        sched_loads = _section(data, "schedulesAndLoads")

        loads: list[LoadIssue] = []
        raw_loads = sched_loads.get("inconsistentLoads")
        if isinstance(raw_loads, (list, tuple)):
            for entry in raw_loads:  # pyright: ignore[reportUnknownVariableType]
                if isinstance(entry, Mapping):
                    loads.append(LoadIssue(zone=str(entry.get("zone", "")), issue=str(entry.get("issue", ""))))  # pyright: ignore[reportUnknownArgumentType]

        issues: list[DiagnosticIssue] = []
        raw_issues = data.get("issues")
        if isinstance(raw_issues, (list, tuple)):
            for entry in raw_issues:  # pyright: ignore[reportUnknownVariableType]
                if not isinstance(entry, Mapping):
                    continue
                severity = entry.get("severity")  # pyright: ignore[reportUnknownMemberType]
                message = entry.get("message")  # pyright: ignore[reportUnknownMemberType]
                if severity not in _SEVERITIES or not message:
                    continue
                issues.append(
                    DiagnosticIssue(
                        severity=str(severity),
                        message=str(message),
                        code=entry.get("code"),  # pyright: ignore[reportUnknownArgumentType, reportUnknownMemberType]
                        hint=entry.get("hint"),  # pyright: ignore[reportUnknownArgumentType, reportUnknownMemberType]
                    )
                )

        return cls(
            zone_total=zone_total,
            zones=tuple(raw_zones) if isinstance(raw_zones, (list, tuple)) else (),  # pyright: ignore[reportUnknownArgumentType]
            missing_constructions=_names(constructions.get("missingConstructions")),
            unused_constructions=_names(constructions.get("unusedConstructions")),
            missing_materials=_names(materials.get("missingMaterials")),
            unused_materials=_names(materials.get("unusedMaterials")),
            missing_schedules=_names(sched_loads.get("missingSchedules")),
            inconsistent_loads=tuple(loads),
            issues=tuple(issues),
        )

    @property
    def has_errors(self) -> bool:
        """True if any issue has ``error`` severity."""
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        """True if any issue has ``warning`` severity."""
        return any(i.severity == "warning" for i in self.issues)

    @property
    def has_missing_references(self) -> bool:
        """True if constructions or materials are referenced but undefined."""
        return bool(self.missing_constructions or self.missing_materials)

    @property
    def has_schedule_load_issues(self) -> bool:
        return bool(self.missing_schedules or self.inconsistent_loads)


@runtime_checkable
class DiagnosticSource(Protocol):
    """Produces a diagnostic report on demand."""

    async def generate_report(self) -> DiagnosticReport | Mapping[str, Any] | None:
        """Analyse the project and return its report.

        May raise or time out; callers treat that as "no diagnostics".
        """
        ...


async def fetch_diagnostics(
    source: DiagnosticSource | None,
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> DiagnosticReport | None:
    """Await a report from *source*, returning ``None`` if it is unavailable.

    A mapping result is converted with :meth:`DiagnosticReport.from_dict`.
    Failures and timeouts are logged and produce ``None``.

    Args:
        source: The report source, or ``None`` when there is none.
        timeout: Seconds to wait, or ``None`` to wait indefinitely.
    """
    if source is None:
        return None
    try:
        raw = await asyncio.wait_for(source.generate_report(), timeout)
    except asyncio.TimeoutError:
        logger.warning("Diagnostic report timed out after %ss", timeout)
        return None
    except Exception as exc:
        logger.warning("Diagnostic report unavailable: %s", exc)
        return None

    if raw is None or isinstance(raw, DiagnosticReport):
        return raw
    if isinstance(raw, Mapping):
        return DiagnosticReport.from_dict(raw)
    logger.warning("Ignoring diagnostic report of unexpected type %s", type(raw).__name__)
    return None
