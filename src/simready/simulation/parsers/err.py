"""Parser for EnergyPlus ``.err`` files.

Each message in an ``.err`` file starts with a severity marker::

       ** Warning ** Weather file location will be used rather than entered Location object.
       **   ~~~   ** ..Location object=CHICAGO
       ** Severe  ** GetSurfaceData: Construction WALL1 not found.
       **  Fatal  ** GetSurfaceData: Errors discovered, program terminates.
       ************* EnergyPlus Terminated--Fatal Error Detected. 1 Warning; 1 Severe Errors; ...

Lines marked ``~~~`` continue the previous message.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_MESSAGE_RE = re.compile(r"^\s*\*\*\s*(warning|severe|fatal)\s*\*\*\s?(.*)$", re.IGNORECASE)
_CONTINUATION_RE = re.compile(r"^\s*\*\*\s*~~~\s*\*\*\s?(.*)$")
_COMPLETED_RE = re.compile(r"EnergyPlus Completed Successfully", re.IGNORECASE)
_TERMINATED_RE = re.compile(r"EnergyPlus Terminated", re.IGNORECASE)


@dataclass(slots=True)
class ErrorMessage:
    """A single message from the ``.err`` file.

    Attributes:
        severity: ``"Warning"``, ``"Severe"`` or ``"Fatal"``.
        message: First line of the message.
        details: Continuation lines, in order.
    """

    severity: str
    message: str
    details: list[str] = field(default_factory=lambda: [])

    def __str__(self) -> str:
        return f"[{self.severity}] {self.message}"


@dataclass(slots=True)
class ErrorReport:
    """All messages of an ``.err`` file plus the run's completion state.

    Attributes:
        messages: Messages in file order.
        completed: ``True`` if the run reported successful completion,
            ``False`` if it reported termination, ``None`` if neither line
            was found (e.g. a truncated log).
    """

    messages: list[ErrorMessage] = field(default_factory=lambda: [])
    completed: bool | None = None

    @classmethod
    def from_string(cls, text: str) -> ErrorReport:
        """Parse the contents of an ``.err`` file."""
        report = cls()
        current: ErrorMessage | None = None
        for line in text.splitlines():
            match = _MESSAGE_RE.match(line)
            if match:
                current = ErrorMessage(match.group(1).capitalize(), match.group(2).strip())
                report.messages.append(current)
                continue
            match = _CONTINUATION_RE.match(line)
            if match:
                if current is not None:
                    current.details.append(match.group(1).strip())
                continue
            if _COMPLETED_RE.search(line):
                report.completed = True
            elif _TERMINATED_RE.search(line):
                report.completed = False

        logger.info(
            "Parsed .err output: %d fatal, %d severe, %d warning",
            len(report.fatal),
            len(report.severe),
            len(report.warnings),
        )
        return report

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = "latin-1") -> ErrorReport:
        """Parse an ``.err`` file from disk."""
        with open(path, encoding=encoding, errors="replace") as f:
            return cls.from_string(f.read())

    def _by_severity(self, severity: str) -> list[ErrorMessage]:
        return [m for m in self.messages if m.severity == severity]

    @property
    def fatal(self) -> list[ErrorMessage]:
        return self._by_severity("Fatal")

    @property
    def severe(self) -> list[ErrorMessage]:
        return self._by_severity("Severe")

    @property
    def warnings(self) -> list[ErrorMessage]:
        return self._by_severity("Warning")

    @property
    def has_fatal(self) -> bool:
        return any(m.severity == "Fatal" for m in self.messages)

    def summary(self) -> str:
        """One-line count summary, e.g. ``"0 fatal, 1 severe, 3 warnings"``."""
        return f"{len(self.fatal)} fatal, {len(self.severe)} severe, {len(self.warnings)} warnings"
