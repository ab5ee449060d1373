"""Exception hierarchy for simready.

Expected conditions (incomplete configuration, refused submissions, failed
simulations) are reported through return values. These exceptions cover
inputs the library cannot interpret at all.
"""

from __future__ import annotations


class SimreadyError(Exception):
    """Base class for all simready errors."""


class ConfigurationError(SimreadyError):
    """Raised when project settings cannot be interpreted.

    Attributes:
        source: Where the settings came from (a file path or ``"<mapping>"``).
    """

    def __init__(self, message: str, source: str = "<mapping>") -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        return f"{self.source}: {self.args[0]}"
