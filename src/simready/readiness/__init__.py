"""Simulation readiness checklist.

Derives a fixed 7-step go/no-go checklist from the project configuration
and, when available, a diagnostic report.

Quick start -- library API::

    from simready import ProjectConfiguration
    from simready.readiness import evaluate, worst_status

    config = ProjectConfiguration.from_file("project.json")
    steps = evaluate(config)
    for step in steps:
        print(step)
    print(worst_status(steps).value)

Quick start -- CLI::

    simready checklist project.json
    simready checklist project.json --diagnostics diagnostics.json --json
"""

from __future__ import annotations

from ._evaluator import (
    GENERATE_IDF,
    OPEN_ANNUAL,
    OPEN_CONSTRUCTIONS,
    OPEN_COOLING_DD,
    OPEN_DIAGNOSTICS,
    OPEN_HEATING_DD,
    OPEN_IDEAL_LOADS,
    OPEN_MATERIALS,
    OPEN_SCHEDULES,
    OPEN_WEATHER_LOCATION,
    OPEN_ZONE_LOADS,
    evaluate,
    evaluate_async,
)
from ._models import ChecklistAction, ChecklistStep, StepStatus, worst_status

__all__ = [
    "GENERATE_IDF",
    "OPEN_ANNUAL",
    "OPEN_CONSTRUCTIONS",
    "OPEN_COOLING_DD",
    "OPEN_DIAGNOSTICS",
    "OPEN_HEATING_DD",
    "OPEN_IDEAL_LOADS",
    "OPEN_MATERIALS",
    "OPEN_SCHEDULES",
    "OPEN_WEATHER_LOCATION",
    "OPEN_ZONE_LOADS",
    "ChecklistAction",
    "ChecklistStep",
    "StepStatus",
    "evaluate",
    "evaluate_async",
    "worst_status",
]
