"""Run requests and run identifiers."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any

from ..config import ProjectConfiguration

#: IDF used when no explicit file is selected (the generated project model).
DEFAULT_IDF = "model.idf"

ANNUAL_RECIPE = "annual-energy-simulation"
HEATING_DESIGN_RECIPE = "heating-design-day"
COOLING_DESIGN_RECIPE = "cooling-design-day"

_RUN_NAMES: dict[str, str] = {
    ANNUAL_RECIPE: "annual",
    HEATING_DESIGN_RECIPE: "heating-design",
    COOLING_DESIGN_RECIPE: "cooling-design",
}


class _RunIdClock:
    """Millisecond clock that never repeats a value within the process."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = time.time_ns() // 1_000_000
            self._last = now if now > self._last else self._last + 1
            return self._last


_clock = _RunIdClock()


def new_run_id(run_name: str) -> str:
    """Return a unique run identifier of the form ``"<run_name>-<millis>"``.

    Examples:
        >>> new_run_id("annual").startswith("annual-")
        True
        >>> new_run_id("annual") != new_run_id("annual")
        True
    """
    return f"{run_name}-{_clock.next()}"


def run_name_for_recipe(recipe_id: str | None) -> str:
    """Map a recipe to the run name used for its output directory.

    Examples:
        >>> run_name_for_recipe("annual-energy-simulation")
        'annual'
        >>> run_name_for_recipe("my-recipe")
        'my-recipe'
        >>> run_name_for_recipe(None)
        'custom'
    """
    if not recipe_id:
        return "custom"
    return _RUN_NAMES.get(recipe_id, recipe_id)


@dataclass(frozen=True, slots=True)
class RunRequest:
    """Parameters for one EnergyPlus run attempt.

    The paths are passed through untouched to the execution boundary.
    ``run_id`` is the only key used to correlate later events with this
    request.

    Attributes:
        idf_path: Input model file.
        epw_path: Weather file, or ``None`` if none could be resolved.
        executable_path: EnergyPlus executable, or ``None`` if unset.
        recipe_id: Recipe that produced the request.
        run_name: Short name used for the output directory (``runs/<name>``).
        run_id: Unique identifier for this submission.
    """

    idf_path: str | None
    epw_path: str | None
    executable_path: str | None
    recipe_id: str
    run_name: str
    run_id: str

    @property
    def label(self) -> str:
        return f"EnergyPlus {self.run_name}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the mapping handed to the execution boundary."""
        return {
            "idfPath": self.idf_path,
            "epwPath": self.epw_path,
            "energyPlusPath": self.executable_path,
            "recipeId": self.recipe_id,
            "runName": self.run_name,
            "runId": self.run_id,
        }


def build_run_request(
    config: ProjectConfiguration,
    recipe_id: str,
    *,
    idf_path: str | None = None,
    epw_path: str | None = None,
    executable_path: str | None = None,
    run_id: str | None = None,
) -> RunRequest:
    """Assemble a :class:`RunRequest` for *recipe_id*.

    The EPW is the explicitly selected file if given, else the project's
    weather file. The IDF defaults to :data:`DEFAULT_IDF`. A fresh run id is
    generated unless one is supplied.
    """
    run_name = run_name_for_recipe(recipe_id)
    exe = executable_path.strip() if executable_path else None
    return RunRequest(
        idf_path=idf_path or DEFAULT_IDF,
        epw_path=epw_path or config.epw_path,
        executable_path=exe or None,
        recipe_id=recipe_id,
        run_name=run_name,
        run_id=run_id or new_run_id(run_name),
    )
