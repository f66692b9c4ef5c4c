from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, Set

from .date_keys import iter_date_keys, key_to_date

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
DEFAULT_HORIZON_DAYS = 365


class WeeklyRule(Protocol):
    weekday: int


def weekday_of(value: date | str) -> int:
    """Weekday with Sunday as 0, matching the stored pattern convention."""
    day = key_to_date(value) if isinstance(value, str) else value
    return day.isoweekday() % 7


def expand_patterns(
    patterns: Iterable[WeeklyRule],
    from_date: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> Set[str]:
    """Project weekly rules onto the ``horizon_days`` days starting at ``from_date``."""

    weekdays = {pattern.weekday for pattern in patterns}
    if not weekdays or horizon_days <= 0:
        return set()
    return {key for key in iter_date_keys(from_date, horizon_days) if weekday_of(key) in weekdays}


__all__ = ["DEFAULT_HORIZON_DAYS", "WEEKDAY_NAMES", "WeeklyRule", "expand_patterns", "weekday_of"]
