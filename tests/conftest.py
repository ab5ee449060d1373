"""Shared fixtures for simready tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from simready import DiagnosticReport, ProjectConfiguration
from simready.simulation import RunRegistry, RunRequest


class FakeBoundary:
    """In-memory execution boundary that lets tests emit events by hand."""

    def __init__(self, on_run: Callable[[FakeBoundary, Mapping[str, Any]], None] | None = None) -> None:
        self.runs: list[Mapping[str, Any]] = []
        self.output_handlers: dict[int, Callable[[Any], None]] = {}
        self.exit_handlers: dict[int, Callable[[Any], None]] = {}
        self.off_output_calls: list[int] = []
        self.off_exit_calls: list[int] = []
        self._ids = itertools.count(1)
        self._on_run = on_run

    def run(self, request: Mapping[str, Any]) -> None:
        self.runs.append(request)
        if self._on_run is not None:
            self._on_run(self, request)

    def on_output(self, handler: Callable[[Any], None]) -> int:
        handle = next(self._ids)
        self.output_handlers[handle] = handler
        return handle

    def on_exit(self, handler: Callable[[Any], None]) -> int:
        handle = next(self._ids)
        self.exit_handlers[handle] = handler
        return handle

    def off_output(self, handle: int) -> None:
        self.off_output_calls.append(handle)
        self.output_handlers.pop(handle, None)

    def off_exit(self, handle: int) -> None:
        self.off_exit_calls.append(handle)
        self.exit_handlers.pop(handle, None)

    def emit_output(self, payload: Any) -> None:
        for handler in list(self.output_handlers.values()):
            handler(payload)

    def emit_exit(self, payload: Any) -> None:
        for handler in list(self.exit_handlers.values()):
            handler(payload)


@pytest.fixture
def boundary() -> FakeBoundary:
    return FakeBoundary()


@pytest.fixture
def boundary_factory() -> type[FakeBoundary]:
    """The boundary class, for tests that need an `on_run` hook or several boundaries."""
    return FakeBoundary


@pytest.fixture
def registry() -> RunRegistry:
    return RunRegistry()


@pytest.fixture
def empty_config() -> ProjectConfiguration:
    """No zones, no weather, nothing configured."""
    return ProjectConfiguration.from_dict({})


@pytest.fixture
def complete_metadata() -> dict[str, Any]:
    """Project metadata with every checklist input filled in."""
    return {
        "zones": [{"name": "Office"}, {"name": "Corridor"}],
        "energyPlusConfig": {
            "weather": {"epwPath": "weather/chicago.epw", "locationSource": "FromEPW"},
            "constructions": [{"name": "ExtWall", "layers": ["Brick", "Insulation"]}],
            "materials": [{"name": "Brick"}, {"name": "Insulation"}],
            "schedules": [{"name": "Office_Occ"}],
            "zoneLoads": [{"zoneName": "Office", "people": 10}],
            "thermostats": [{"scope": "global", "heatingSetpoint": 20, "coolingSetpoint": 24}],
            "idealLoads": {"global": {"heatingLimit": "NoLimit"}, "perZone": []},
            "simulationControl": {"simulationControlFlags": {"runWeatherRunPeriods": True}},
        },
    }


@pytest.fixture
def complete_config(complete_metadata: dict[str, Any]) -> ProjectConfiguration:
    return ProjectConfiguration.from_dict(complete_metadata)


@pytest.fixture
def clean_diagnostics() -> DiagnosticReport:
    return DiagnosticReport.from_dict({"geometry": {"totals": {"zones": 2}}, "issues": []})


@pytest.fixture
def missing_construction_diagnostics() -> DiagnosticReport:
    return DiagnosticReport.from_dict(
        {
            "geometry": {"totals": {"zones": 2}},
            "constructions": {"missingConstructions": ["RoofX"], "unusedConstructions": []},
            "materials": {"missingMaterials": [], "unusedMaterials": []},
            "issues": [],
        }
    )


@pytest.fixture
def run_request() -> RunRequest:
    return RunRequest(
        idf_path="model.idf",
        epw_path="weather/chicago.epw",
        executable_path="/usr/local/EnergyPlus-24-1-0/energyplus",
        recipe_id="annual-energy-simulation",
        run_name="annual",
        run_id="r1",
    )


SAMPLE_ERR = """\
Program Version,EnergyPlus, Version 24.1.0-9d7789a3ac, YMD=2024.05.01 10:00,
   ** Warning ** Weather file location will be used rather than entered Location object.
   **   ~~~   ** ..Location object=CHICAGO
   ** Warning ** GetHTSurfaceData: Surfaces with interface to Ground found but no "Ground Temperatures" were input.
   ** Severe  ** GetSurfaceData: Construction WALL1 not found.
   **  Fatal  ** GetSurfaceData: Errors discovered, program terminates.
   ...Summary of Errors that led to program termination:
   ..... Reference severe error count=1
   ************* EnergyPlus Terminated--Fatal Error Detected. 2 Warning; 1 Severe Errors; Elapsed Time=00hr 00min  0.52sec
"""


@pytest.fixture
def sample_err() -> str:
    return SAMPLE_ERR
