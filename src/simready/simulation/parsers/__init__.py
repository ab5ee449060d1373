"""Parsers for EnergyPlus output files."""

from __future__ import annotations

from .err import ErrorMessage, ErrorReport

__all__ = ["ErrorMessage", "ErrorReport"]
