"""Error kinds raised by planner operations."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional


class PlannerError(Exception):
    """Base class for recoverable planner failures."""


class ValidationError(PlannerError, ValueError):
    """Raised when a required field is missing or malformed."""


class NotFoundError(PlannerError, LookupError):
    """Raised when an operation targets an id that does not exist."""


class UnavailableDateError(PlannerError):
    """Raised when selecting or confirming a date the admin blocked out."""

    def __init__(self, dates: Iterable[str]) -> None:
        self.dates = tuple(sorted(dates))
        joined = ", ".join(self.dates)
        super().__init__(f"Date not available: {joined}")


class PersistenceError(PlannerError, RuntimeError):
    """Raised when the durable store is unreachable or rejects a write."""

    def __init__(self, message: str, *, fallback_path: Optional[Path] = None) -> None:
        self.fallback_path = fallback_path
        super().__init__(message)


__all__ = [
    "NotFoundError",
    "PersistenceError",
    "PlannerError",
    "UnavailableDateError",
    "ValidationError",
]
