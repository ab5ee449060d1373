"""Pre-flight validation of run requests and project configuration.

:func:`validate_run_request` is the gate the orchestrator consults before
handing a request to the execution boundary. :func:`validate_config` is the
broader configuration check used before generating an IDF. Both are side
effect free and report problems as :class:`Issue` values rather than
raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from ..config import ProjectConfiguration
from ..diagnostics import DiagnosticReport
from .request import RunRequest

logger = logging.getLogger(__name__)


class IssueSeverity(Enum):
    """Severity of a validation issue. ``ERROR`` blocks the run."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Issue:
    """A single validation finding.

    Attributes:
        severity: Whether the issue blocks the run.
        code: Machine-readable code (e.g. ``"EP_RUN_MISSING_EPW"``).
        message: Human-readable description.
        hint: Suggested fix, if any.
    """

    severity: IssueSeverity
    code: str
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        prefix = "[ERROR]" if self.severity is IssueSeverity.ERROR else "[WARN]"
        return f"{prefix} {self.message}"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation pass.

    Attributes:
        issues: All findings, in the order they were detected.
    """

    issues: list[Issue] = field(default_factory=lambda: [])

    @property
    def ok(self) -> bool:
        """True when no issue is an error."""
        return not any(i.severity is IssueSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity is IssueSeverity.WARNING]

    def __bool__(self) -> bool:
        return self.ok


@runtime_checkable
class PreflightValidator(Protocol):
    """Checks a run request for blocking configuration errors."""

    def validate(self, request: RunRequest) -> ValidationResult: ...


def validate_run_request(request: RunRequest) -> ValidationResult:
    """Check that *request* names a weather file, an executable and an IDF."""
    issues: list[Issue] = []

    if not request.epw_path:
        issues.append(
            Issue(
                IssueSeverity.ERROR,
                "EP_RUN_MISSING_EPW",
                "No EPW specified for EnergyPlus run.",
                "Select an EPW in the recipe panel or configure a project-level EPW in Weather & Location.",
            )
        )
    if not request.executable_path:
        issues.append(
            Issue(
                IssueSeverity.ERROR,
                "EP_RUN_MISSING_EXE",
                "EnergyPlus executable path is required.",
                "Specify the EnergyPlus binary (e.g., /usr/local/EnergyPlus-24-1-0/energyplus).",
            )
        )
    if not request.idf_path:
        issues.append(
            Issue(
                IssueSeverity.ERROR,
                "EP_RUN_MISSING_IDF",
                "No IDF file specified for EnergyPlus run.",
                "Generate an IDF (model.idf) from the current project or select an existing IDF file.",
            )
        )

    result = ValidationResult(issues)
    logger.debug("Pre-flight for %s: %d issue(s), ok=%s", request.run_id, len(issues), result.ok)
    return result


class DefaultPreflightValidator:
    """:class:`PreflightValidator` backed by :func:`validate_run_request`."""

    def validate(self, request: RunRequest) -> ValidationResult:
        return validate_run_request(request)


def validate_config(
    config: ProjectConfiguration,
    diagnostics: DiagnosticReport | None = None,
) -> ValidationResult:
    """Validate the configuration that feeds IDF generation.

    Errors: missing EPW while weather run periods are enabled, and
    constructions or materials referenced but undefined. Warnings: missing
    schedules, inconsistent zone loads, no zones, and missing ideal loads or
    thermostats when weather run periods are enabled. Issues in the
    diagnostic report are passed through (``info`` issues become warnings).

    Args:
        config: Project configuration snapshot.
        diagnostics: Optional diagnostic report for reference checks.
    """
    issues: list[Issue] = []
    weather_periods = config.runs_weather_periods

    if weather_periods and not config.epw_path:
        issues.append(
            Issue(
                IssueSeverity.ERROR,
                "EP_WEATHER_MISSING",
                "No EPW weather file is configured while weather run periods are enabled.",
                "Set a project EPW in Weather & Location, or disable Run Weather Periods in Simulation Control.",
            )
        )

    if diagnostics is not None:
        if diagnostics.missing_constructions:
            names = ", ".join(diagnostics.missing_constructions)
            issues.append(
                Issue(
                    IssueSeverity.ERROR,
                    "EP_CONSTRUCTION_MISSING",
                    f"Missing constructions referenced by geometry or defaults: {names}.",
                    "Use the Constructions panel to define these constructions or update references.",
                )
            )
        if diagnostics.missing_materials:
            names = ", ".join(diagnostics.missing_materials)
            issues.append(
                Issue(
                    IssueSeverity.ERROR,
                    "EP_MATERIAL_MISSING",
                    f"Missing materials referenced by constructions: {names}.",
                    "Use the Materials panel to define these materials or adjust construction layers.",
                )
            )
        if diagnostics.missing_schedules:
            names = ", ".join(diagnostics.missing_schedules)
            issues.append(
                Issue(
                    IssueSeverity.WARNING,
                    "EP_SCHEDULE_MISSING",
                    f"Some schedules referenced by loads or controls are missing: {names}.",
                    "Use the Schedules and Zone Loads panels to resolve missing schedule references.",
                )
            )
        if diagnostics.inconsistent_loads:
            issues.append(
                Issue(
                    IssueSeverity.WARNING,
                    "EP_ZONELOADS_INCONSISTENT",
                    "One or more zone load definitions are incomplete or inconsistent.",
                    "Open Zone Loads and Diagnostics to review detailed issues.",
                )
            )
        if diagnostics.zone_total == 0:
            issues.append(
                Issue(
                    IssueSeverity.WARNING,
                    "EP_NO_ZONES",
                    "No explicit zones detected. IDF generation will fall back to a single generic Zone_1.",
                    "Define zones in the project to obtain meaningful multi-zone simulation results.",
                )
            )

    if weather_periods and not config.ideal_loads.configured:
        issues.append(
            Issue(
                IssueSeverity.WARNING,
                "EP_NO_IDEALLOADS",
                "No IdealLoads configuration detected. Zones may be simulated without HVAC capacity constraints.",
                "Use the Thermostats & IdealLoads panel to define at least a global IdealLoads configuration.",
            )
        )
    if weather_periods and not config.thermostats:
        issues.append(
            Issue(
                IssueSeverity.WARNING,
                "EP_NO_THERMOSTATS",
                "No thermostats configured. Zones may free-float without temperature setpoints.",
                "Configure thermostats (global or per-zone) for more realistic comfort and load results.",
            )
        )

    if diagnostics is not None:
        for diag in diagnostics.issues:
            severity = IssueSeverity.ERROR if diag.severity == "error" else IssueSeverity.WARNING
            default_code = "EP_DIAG_ERROR" if severity is IssueSeverity.ERROR else "EP_DIAG_WARNING"
            issues.append(Issue(severity, diag.code or default_code, diag.message, diag.hint))

    result = ValidationResult(issues)
    logger.info(
        "Configuration validation complete: %d error(s), %d warning(s)", len(result.errors), len(result.warnings)
    )
    return result


def format_issues_summary(issues: list[Issue], max_lines: int = 4) -> str:
    """Format the first *max_lines* issues as a multi-line summary.

    Examples:
        >>> format_issues_summary([])
        ''
        >>> print(format_issues_summary([Issue(IssueSeverity.ERROR, "X", "Boom")]))
        [ERROR] Boom
    """
    if not issues:
        return ""
    lines = [str(i) for i in issues[:max_lines]]
    if len(issues) > max_lines:
        lines.append(f"…and {len(issues) - max_lines} more issue(s).")
    return "\n".join(lines)
