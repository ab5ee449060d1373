"""Project configuration snapshot consumed by the evaluator and orchestrator.

The project settings are owned and edited elsewhere. This module turns the
raw metadata mapping into an immutable :class:`ProjectConfiguration` that is
passed explicitly into every evaluation and run, so nothing in the library
reads ambient global state.

Example::

    from simready.config import ProjectConfiguration

    config = ProjectConfiguration.from_dict(
        {
            "zones": [{"name": "Office"}],
            "energyPlusConfig": {"weather": {"epwPath": "weather/chicago.epw"}},
        }
    )
    assert config.epw_path == "weather/chicago.epw"
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

#: Location source that takes site data from the EPW header.
LOCATION_FROM_EPW = "FromEPW"

#: Location source that uses the user-entered :class:`CustomLocation`.
LOCATION_CUSTOM = "Custom"


def read_json(path: str | Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        ConfigurationError: If the file is missing or not valid JSON.
    """
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        msg = "file not found"
        raise ConfigurationError(msg, str(path)) from None
    except json.JSONDecodeError as exc:
        msg = f"invalid JSON ({exc.msg} at line {exc.lineno})"
        raise ConfigurationError(msg, str(path)) from None


def _as_number(value: Any) -> float | None:
    """Return *value* as a finite float, or ``None`` for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def _as_items(value: Any) -> tuple[Any, ...]:
    """Return *value* as a tuple when it is a list-like sequence, else ``()``."""
    if isinstance(value, (list, tuple)):
        return tuple(value)  # pyright: ignore[reportUnknownArgumentType]
    return ()


def _as_mapping(value: Any) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)  # pyright: ignore[reportUnknownArgumentType]
    return {}


def _as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(frozen=True, slots=True)
class CustomLocation:
    """Site data entered by hand instead of read from the EPW header.

    Attributes:
        name: Location name.
        latitude: Degrees north, in ``[-90, 90]``.
        longitude: Degrees east, in ``[-180, 180]``.
        time_zone: Hours from GMT, in ``[-12, 14]``.
        elevation: Metres above sea level.
    """

    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    time_zone: float | None = None
    elevation: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CustomLocation:
        return cls(
            name=_as_text(data.get("name")),
            latitude=_as_number(data.get("latitude")),
            longitude=_as_number(data.get("longitude")),
            time_zone=_as_number(data.get("timeZone", data.get("time_zone"))),
            elevation=_as_number(data.get("elevation")),
        )

    def is_valid(self) -> bool:
        """Return whether every field is present and within range."""
        if not self.name:
            return False
        if self.latitude is None or not -90 <= self.latitude <= 90:
            return False
        if self.longitude is None or not -180 <= self.longitude <= 180:
            return False
        if self.time_zone is None or not -12 <= self.time_zone <= 14:
            return False
        return self.elevation is not None


@dataclass(frozen=True, slots=True)
class WeatherSettings:
    """Weather file and site location settings.

    Attributes:
        epw_path: Path to the project EPW file, if one was selected.
        location_source: :data:`LOCATION_FROM_EPW` or :data:`LOCATION_CUSTOM`.
        custom_location: Hand-entered site data, used when
            *location_source* is :data:`LOCATION_CUSTOM`.
    """

    epw_path: str | None = None
    location_source: str = LOCATION_FROM_EPW
    custom_location: CustomLocation | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WeatherSettings:
        raw_location = data.get("customLocation", data.get("custom_location"))
        return cls(
            epw_path=_as_text(data.get("epwPath", data.get("epw_path"))),
            location_source=_as_text(data.get("locationSource", data.get("location_source"))) or LOCATION_FROM_EPW,
            custom_location=CustomLocation.from_dict(raw_location) if isinstance(raw_location, Mapping) else None,
        )

    @property
    def uses_custom_location(self) -> bool:
        return self.location_source == LOCATION_CUSTOM


@dataclass(frozen=True, slots=True)
class IdealLoadsSettings:
    """Ideal-loads air system settings, global and per zone.

    Attributes:
        global_settings: Settings applied to every zone, or ``None`` when no
            global configuration exists.
        per_zone: Zone-specific overrides.
    """

    global_settings: dict[str, Any] | None = None
    per_zone: tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IdealLoadsSettings:
        raw_global = data.get("global")
        if isinstance(raw_global, Mapping):
            global_settings: dict[str, Any] | None = _as_mapping(raw_global)
        elif raw_global:
            global_settings = {}
        else:
            global_settings = None
        return cls(
            global_settings=global_settings,
            per_zone=_as_items(data.get("perZone", data.get("per_zone"))),
        )

    @property
    def configured(self) -> bool:
        """True when a global configuration or at least one zone override exists."""
        return self.global_settings is not None or len(self.per_zone) > 0


@dataclass(frozen=True, slots=True)
class ProjectConfiguration:
    """Immutable snapshot of the project settings relevant to a simulation.

    Attributes:
        weather: Weather and location settings.
        weather_file_path: Legacy top-level EPW path, used when
            ``weather.epw_path`` is unset.
        constructions: User-defined constructions.
        materials: User-defined materials.
        schedules: User-defined schedules.
        zone_loads: Explicit per-zone internal load entries.
        thermostats: Thermostat definitions.
        ideal_loads: Ideal-loads settings.
        simulation_control: Raw simulation-control settings.
        zones: The project's zone listing, used when no diagnostic report
            is available to count zones.
    """

    weather: WeatherSettings = field(default_factory=WeatherSettings)
    weather_file_path: str | None = None
    constructions: tuple[Any, ...] = ()
    materials: tuple[Any, ...] = ()
    schedules: tuple[Any, ...] = ()
    zone_loads: tuple[Any, ...] = ()
    thermostats: tuple[Any, ...] = ()
    ideal_loads: IdealLoadsSettings = field(default_factory=IdealLoadsSettings)
    simulation_control: dict[str, Any] = field(default_factory=lambda: {})
    zones: tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: str = "<mapping>") -> ProjectConfiguration:
        """Build a configuration from project metadata.

        The EnergyPlus settings are read from the ``energyPlusConfig`` key
        (or the older ``energyplus`` key). Sub-structures with an unexpected
        shape are treated as empty.

        Args:
            data: Project metadata mapping.
            source: Label used in error messages.

        Raises:
            ConfigurationError: If *data* is not a mapping.
        """
        if not isinstance(data, Mapping):
            msg = f"project metadata must be a mapping, got {type(data).__name__}"
            raise ConfigurationError(msg, source)

        ep = _as_mapping(data.get("energyPlusConfig", data.get("energyplus")))
        config = cls(
            weather=WeatherSettings.from_dict(_as_mapping(ep.get("weather"))),
            weather_file_path=_as_text(ep.get("weatherFilePath")),
            constructions=_as_items(ep.get("constructions")),
            materials=_as_items(ep.get("materials")),
            schedules=_as_items(ep.get("schedules")),
            zone_loads=_as_items(ep.get("zoneLoads", ep.get("zone_loads"))),
            thermostats=_as_items(ep.get("thermostats")),
            ideal_loads=IdealLoadsSettings.from_dict(_as_mapping(ep.get("idealLoads", ep.get("ideal_loads")))),
            simulation_control=_as_mapping(ep.get("simulationControl", ep.get("simulation_control"))),
            zones=_as_items(data.get("zones")),
        )
        logger.debug("Loaded project configuration from %s (%d zones)", source, len(config.zones))
        return config

    @classmethod
    def from_file(cls, path: str | Path) -> ProjectConfiguration:
        """Load a configuration from a JSON project file.

        Raises:
            ConfigurationError: If the file is missing or not valid JSON.
        """
        return cls.from_dict(read_json(path), source=str(path))

    @property
    def epw_path(self) -> str | None:
        """The effective EPW path: ``weather.epw_path``, else the legacy path."""
        return self.weather.epw_path or self.weather_file_path

    @property
    def zone_count(self) -> int:
        return len(self.zones)

    @property
    def runs_weather_periods(self) -> bool:
        """Whether simulation control enables weather-file run periods."""
        flags = _as_mapping(self.simulation_control.get("simulationControlFlags"))
        return bool(flags.get("runWeatherRunPeriods"))
