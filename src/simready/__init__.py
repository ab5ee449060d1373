"""simready: readiness checks and run orchestration for EnergyPlus.

Evaluate whether a project is ready to simulate, then submit a run to an
execution boundary and follow it to completion.

Example:
    >>> from simready import ProjectConfiguration, evaluate
    >>> config = ProjectConfiguration.from_dict({"energyPlusConfig": {}})
    >>> steps = evaluate(config)
    >>> len(steps)
    7
"""

from __future__ import annotations

import logging

from .config import CustomLocation, IdealLoadsSettings, ProjectConfiguration, WeatherSettings
from .diagnostics import DiagnosticReport, DiagnosticSource, fetch_diagnostics
from .exceptions import ConfigurationError, SimreadyError
from .readiness import ChecklistAction, ChecklistStep, StepStatus, evaluate, evaluate_async, worst_status

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ChecklistAction",
    "ChecklistStep",
    "ConfigurationError",
    "CustomLocation",
    "DiagnosticReport",
    "DiagnosticSource",
    "IdealLoadsSettings",
    "ProjectConfiguration",
    "SimreadyError",
    "StepStatus",
    "WeatherSettings",
    "evaluate",
    "evaluate_async",
    "fetch_diagnostics",
    "worst_status",
]
