"""Protocol for the host facility that actually runs EnergyPlus.

The execution boundary spawns the process, streams its output and reports
its exit. simready never spawns processes itself; it only talks to an
object implementing :class:`ExecutionBoundary`. Handlers may be called with
either payload shape understood by :mod:`simready.simulation.events`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

#: Signature of the callbacks registered with a boundary.
EventHandler = Callable[[Any], None]


@runtime_checkable
class ExecutionBoundary(Protocol):
    """Host-provided facility that spawns and streams EnergyPlus runs."""

    def run(self, request: Mapping[str, Any]) -> None:
        """Start a run described by *request* (see ``RunRequest.to_dict``).

        Returns immediately; progress is reported through the handlers.
        """
        ...

    def on_output(self, handler: EventHandler) -> Any:
        """Subscribe *handler* to output events and return a handle."""
        ...

    def on_exit(self, handler: EventHandler) -> Any:
        """Subscribe *handler* to exit events and return a handle."""
        ...

    def off_output(self, handle: Any) -> None:
        """Cancel an output subscription."""
        ...

    def off_exit(self, handle: Any) -> None:
        """Cancel an exit subscription."""
        ...
