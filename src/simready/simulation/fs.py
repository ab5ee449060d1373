"""File system abstraction for reading run outputs.

EnergyPlus writes its results into the run's output directory. When the
exit event does not carry the ``.err`` contents or the CSV tables inline,
the registry reads them from that directory through a :class:`FileSystem`,
so that hosts which keep outputs somewhere other than the local disk can
supply their own implementation.

Example::

    from simready.simulation.fs import LocalFileSystem
    from simready.simulation.registry import RunRegistry

    registry = RunRegistry(fs=LocalFileSystem())
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for the read-only file operations used on run outputs.

    All methods accept ``str | Path`` for path arguments.
    """

    def read_text(self, path: str | Path, encoding: str = "utf-8") -> str:
        """Read a file as text.

        Args:
            path: Path to the file.
            encoding: Text encoding (default ``"utf-8"``).

        Returns:
            The file contents as a string.
        """
        ...

    def exists(self, path: str | Path) -> bool:
        """Check whether a file exists.

        Args:
            path: Path to check.

        Returns:
            True if the file exists.
        """
        ...

    def glob(self, path: str | Path, pattern: str) -> list[str]:
        """List files matching a glob pattern under *path*.

        Args:
            path: Base directory.
            pattern: Glob pattern (e.g. ``"*.csv"``).

        Returns:
            List of matching file paths as strings.
        """
        ...


class LocalFileSystem:
    """File system implementation backed by :mod:`pathlib`."""

    def read_text(self, path: str | Path, encoding: str = "utf-8") -> str:
        """Read a file as text, replacing undecodable bytes."""
        return Path(path).read_text(encoding=encoding, errors="replace")

    def exists(self, path: str | Path) -> bool:
        """Check whether a file exists."""
        return Path(path).exists()

    def glob(self, path: str | Path, pattern: str) -> list[str]:
        """List files matching a glob pattern under *path*, sorted by name."""
        return sorted(str(p) for p in Path(path).glob(pattern))
