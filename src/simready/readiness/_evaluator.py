"""Readiness evaluation engine.

Derives the 7-step simulation checklist from a :class:`ProjectConfiguration`
and an optional :class:`DiagnosticReport`. Evaluation itself is pure: the
same inputs always give the same steps, and a missing report only makes the
diagnostic-dependent checks fall back to configuration signals.
"""

from __future__ import annotations

import logging

from ..config import ProjectConfiguration
from ..diagnostics import DEFAULT_TIMEOUT, DiagnosticReport, DiagnosticSource, fetch_diagnostics
from ._models import ChecklistAction, ChecklistStep, StepStatus

logger = logging.getLogger(__name__)

# Action identifiers understood by the UI layer.
OPEN_DIAGNOSTICS = "open-diagnostics"
OPEN_CONSTRUCTIONS = "open-constructions"
OPEN_MATERIALS = "open-materials"
OPEN_SCHEDULES = "open-schedules"
OPEN_ZONE_LOADS = "open-zone-loads"
OPEN_IDEAL_LOADS = "open-ideal-loads"
OPEN_WEATHER_LOCATION = "open-weather-location"
GENERATE_IDF = "generate-idf"
OPEN_ANNUAL = "open-annual"
OPEN_HEATING_DD = "open-heating-dd"
OPEN_COOLING_DD = "open-cooling-dd"

_DIAGNOSTICS = ChecklistAction("Open Diagnostics", OPEN_DIAGNOSTICS)
_DIAGNOSTICS_SHORT = ChecklistAction("Diagnostics", OPEN_DIAGNOSTICS)
_CONSTRUCTIONS = ChecklistAction("Open Constructions", OPEN_CONSTRUCTIONS)
_MATERIALS = ChecklistAction("Open Materials", OPEN_MATERIALS)
_SCHEDULES = ChecklistAction("Open Schedules", OPEN_SCHEDULES)
_ZONE_LOADS = ChecklistAction("Open Zone Loads", OPEN_ZONE_LOADS)
_IDEAL_LOADS = ChecklistAction("Thermostats & IdealLoads", OPEN_IDEAL_LOADS)
_WEATHER = ChecklistAction("Weather & Location", OPEN_WEATHER_LOCATION)
_GENERATE = ChecklistAction("Generate IDF", GENERATE_IDF)
_RECIPES = (
    ChecklistAction("Annual", OPEN_ANNUAL),
    ChecklistAction("Heating DD", OPEN_HEATING_DD),
    ChecklistAction("Cooling DD", OPEN_COOLING_DD),
)


class _Signals:
    """Facts shared between steps, computed once per evaluation."""

    __slots__ = (
        "blocking",
        "epw_path",
        "has_warnings",
        "has_zones",
        "missing_refs",
        "sched_load_issues",
    )

    def __init__(self, config: ProjectConfiguration, diagnostics: DiagnosticReport | None) -> None:
        if diagnostics is not None and diagnostics.zone_total is not None and diagnostics.zone_total > 0:
            self.has_zones = True
        else:
            self.has_zones = config.zone_count > 0
        self.missing_refs = diagnostics is not None and diagnostics.has_missing_references
        self.sched_load_issues = diagnostics is not None and diagnostics.has_schedule_load_issues
        self.has_warnings = diagnostics is not None and diagnostics.has_warnings
        self.blocking = self.missing_refs or (diagnostics is not None and diagnostics.has_errors)
        self.epw_path = config.epw_path


def _geometry(s: _Signals) -> ChecklistStep:
    if s.has_zones:
        return ChecklistStep(
            "geometry", "1. Geometry", StepStatus.OK, "Project zones detected.", (_DIAGNOSTICS,)
        )
    return ChecklistStep(
        "geometry",
        "1. Geometry",
        StepStatus.WARNING,
        "No explicit zones found. IDF will fall back to a default Zone_1.",
        (_DIAGNOSTICS,),
    )


def _constructions(config: ProjectConfiguration, s: _Signals) -> ChecklistStep:
    label = "2. Constructions & Materials"
    if s.missing_refs:
        return ChecklistStep(
            "constructions",
            label,
            StepStatus.ERROR,
            "Missing constructions or materials referenced by the model.",
            (_CONSTRUCTIONS, _MATERIALS, _DIAGNOSTICS_SHORT),
        )
    if config.constructions or config.materials:
        return ChecklistStep(
            "constructions",
            label,
            StepStatus.OK,
            "Constructions and materials configured or using built-ins.",
            (_CONSTRUCTIONS, _MATERIALS),
        )
    return ChecklistStep(
        "constructions",
        label,
        StepStatus.WARNING,
        "Using built-in defaults only. Review for project-specific envelopes.",
        (_CONSTRUCTIONS, _MATERIALS),
    )


def _schedules_loads(config: ProjectConfiguration, s: _Signals) -> ChecklistStep:
    label = "3. Schedules & Zone Loads"
    if s.sched_load_issues:
        return ChecklistStep(
            "schedules-loads",
            label,
            StepStatus.WARNING,
            "Some schedules or zone loads may be missing or inconsistent.",
            (_SCHEDULES, _ZONE_LOADS, _DIAGNOSTICS_SHORT),
        )
    if config.zone_loads:
        return ChecklistStep(
            "schedules-loads",
            label,
            StepStatus.OK,
            "Zone loads and schedules configured.",
            (_SCHEDULES, _ZONE_LOADS),
        )
    return ChecklistStep(
        "schedules-loads",
        label,
        StepStatus.WARNING,
        "No explicit zone loads defined. Results may under-estimate internal gains.",
        (_SCHEDULES, _ZONE_LOADS),
    )


def _thermostats(config: ProjectConfiguration) -> ChecklistStep:
    label = "4. Thermostats & Ideal Loads"
    if config.thermostats and config.ideal_loads.configured:
        return ChecklistStep(
            "thermostats-ideal-loads",
            label,
            StepStatus.OK,
            "Thermostats and IdealLoads configured. HVAC modeled via IdealLoads.",
            (_IDEAL_LOADS,),
        )
    return ChecklistStep(
        "thermostats-ideal-loads",
        label,
        StepStatus.WARNING,
        "No complete thermostat/IdealLoads configuration detected. Zones may free-float or be unconstrained.",
        (_IDEAL_LOADS,),
    )


def _weather(config: ProjectConfiguration, s: _Signals) -> ChecklistStep:
    label = "5. Weather & Location"
    if not s.epw_path:
        return ChecklistStep(
            "weather-location",
            label,
            StepStatus.ERROR,
            "No EPW selected. Annual/design-day simulations cannot run reliably without a project EPW.",
            (_WEATHER,),
        )
    weather = config.weather
    if weather.uses_custom_location:
        if weather.custom_location is None or not weather.custom_location.is_valid():
            return ChecklistStep(
                "weather-location",
                label,
                StepStatus.ERROR,
                "Custom location selected but fields are incomplete or invalid.",
                (_WEATHER,),
            )
        description = "EPW set and custom location defined."
    else:
        description = "EPW set. Location derived from EPW."
    return ChecklistStep("weather-location", label, StepStatus.OK, description, (_WEATHER,))


def _generation(s: _Signals) -> ChecklistStep:
    label = "6. IDF Generation"
    if s.blocking:
        return ChecklistStep(
            "idf-generation",
            label,
            StepStatus.ERROR,
            "Diagnostics report blocking issues (e.g., missing constructions/materials). Fix before generating IDF.",
            (_DIAGNOSTICS_SHORT, _GENERATE),
        )
    if s.has_warnings or s.sched_load_issues:
        return ChecklistStep(
            "idf-generation",
            label,
            StepStatus.WARNING,
            "IDF can be generated, but diagnostics report warnings (e.g., schedules/loads). Review before final runs.",
            (_DIAGNOSTICS_SHORT, _GENERATE),
        )
    return ChecklistStep(
        "idf-generation",
        label,
        StepStatus.OK,
        "Configuration is consistent. Generate IDF from the current project.",
        (_GENERATE,),
    )


def _run(s: _Signals, runner_available: bool) -> ChecklistStep:
    label = "7. Run EnergyPlus"
    if not s.epw_path:
        return ChecklistStep(
            "run-energyplus",
            label,
            StepStatus.ERROR,
            "Cannot run: EPW is missing. Configure in Weather & Location.",
            (_WEATHER,),
        )
    if s.blocking:
        return ChecklistStep(
            "run-energyplus",
            label,
            StepStatus.ERROR,
            "Cannot run safely: diagnostics report blocking IDF issues.",
            (
                _DIAGNOSTICS_SHORT,
                ChecklistAction("Constructions", OPEN_CONSTRUCTIONS),
                ChecklistAction("Materials", OPEN_MATERIALS),
            ),
        )
    if not runner_available:
        return ChecklistStep(
            "run-energyplus",
            label,
            StepStatus.WARNING,
            "EnergyPlus runner not available. You can generate IDF/scripts but cannot run EnergyPlus directly here.",
            _RECIPES,
        )
    if s.has_warnings:
        return ChecklistStep(
            "run-energyplus",
            label,
            StepStatus.WARNING,
            "Ready to run; diagnostics report warnings to review.",
            _RECIPES,
        )
    return ChecklistStep("run-energyplus", label, StepStatus.OK, "Ready to run EnergyPlus recipes.", _RECIPES)


def evaluate(
    config: ProjectConfiguration,
    diagnostics: DiagnosticReport | None = None,
    *,
    runner_available: bool = True,
) -> list[ChecklistStep]:
    """Compute the readiness checklist.

    Always returns seven steps in a fixed order: geometry, constructions &
    materials, schedules & zone loads, thermostats & ideal loads, weather &
    location, IDF generation, and run readiness. The function has no side
    effects, so repeated calls with the same inputs give equal results.

    Args:
        config: Project configuration snapshot.
        diagnostics: Diagnostic report, or ``None`` when analysis is
            unavailable. Checks that need it fall back to configuration.
        runner_available: Whether an execution boundary can run EnergyPlus
            from the current host. When ``False`` the run step is at best a
            warning.

    Returns:
        The list of :class:`ChecklistStep`, in display order.
    """
    signals = _Signals(config, diagnostics)
    steps = [
        _geometry(signals),
        _constructions(config, signals),
        _schedules_loads(config, signals),
        _thermostats(config),
        _weather(config, signals),
        _generation(signals),
        _run(signals, runner_available),
    ]
    logger.debug(
        "Evaluated checklist (%s diagnostics): %s",
        "with" if diagnostics is not None else "without",
        ", ".join(f"{s.id}={s.status.value}" for s in steps),
    )
    return steps


async def evaluate_async(
    config: ProjectConfiguration,
    source: DiagnosticSource | None,
    *,
    runner_available: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> list[ChecklistStep]:
    """Fetch a fresh diagnostic report from *source*, then :func:`evaluate`.

    The report is not cached between calls. If the source fails or times
    out, the checklist is computed without diagnostics.
    """
    diagnostics = await fetch_diagnostics(source, timeout=timeout)
    return evaluate(config, diagnostics, runner_available=runner_available)
