"""Exceptions raised by the quiz data seeding pipeline."""

from __future__ import annotations

from pathlib import Path


class SeedError(Exception):
    """Base exception for seeding operations."""


class SourceLoadError(SeedError):
    """Source file is missing, unreadable, or not a JSON object."""

    def __init__(self, message: str, source_path: Path | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path


class EmptyTransformError(SeedError):
    """No subject in the source produced a quiz record."""
