"""Exceptions raised while loading definition files."""
from __future__ import annotations

from pathlib import Path


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a definition file is missing, unreadable or not valid JSON."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DataValidationError(DataError):
    """Raised when JSON content does not describe a usable definition."""
