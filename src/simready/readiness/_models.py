"""Data models for the simulation readiness checklist."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StepStatus(Enum):
    """Outcome of a single checklist step."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Severity rank: ``error`` > ``warning`` > ``ok``."""
        return _RANKS[self]


_RANKS: dict[StepStatus, int] = {
    StepStatus.OK: 0,
    StepStatus.WARNING: 1,
    StepStatus.ERROR: 2,
}


@dataclass(frozen=True, slots=True)
class ChecklistAction:
    """A navigation hint attached to a step.

    Attributes:
        label: Button text.
        action_id: Opaque identifier the UI maps to a panel or command
            (e.g. ``"open-constructions"``).
    """

    label: str
    action_id: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "actionId": self.action_id}


@dataclass(frozen=True, slots=True)
class ChecklistStep:
    """One ordinal item of the readiness checklist.

    Attributes:
        id: Stable step identifier (e.g. ``"weather-location"``).
        label: Ordinal-prefixed title (e.g. ``"5. Weather & Location"``).
        status: Step outcome.
        description: Explanation shown under the title.
        actions: Suggested follow-up actions, in display order.
    """

    id: str
    label: str
    status: StepStatus
    description: str
    actions: tuple[ChecklistAction, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary for JSON output."""
        return {
            "id": self.id,
            "label": self.label,
            "status": self.status.value,
            "description": self.description,
            "actions": [a.to_dict() for a in self.actions],
        }

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.label}: {self.description}"


def worst_status(steps: Iterable[ChecklistStep]) -> StepStatus:
    """Return the highest-ranked status among *steps* (``OK`` if empty)."""
    worst = StepStatus.OK
    for step in steps:
        if step.status.rank > worst.rank:
            worst = step.status
    return worst
