"""Canonical ``YYYY-MM-DD`` keys for calendar days.

Keys are plain strings. Because every component is zero-padded, comparing two
keys lexicographically gives the same answer as comparing the dates they name,
and the rest of the package relies on that.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Callable, Iterator, Tuple

from ..errors import ValidationError

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

Clock = Callable[[], date]


def encode_date_key(year: int, month_index: int, day: int) -> str:
    """Encode a day using a zero-based month index, like ``(2025, 5, 10) -> "2025-06-10"``."""
    try:
        value = date(year, month_index + 1, day)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid calendar day: {year}-{month_index + 1}-{day}") from exc
    return date_to_key(value)


def decode_date_key(key: str) -> Tuple[int, int, int]:
    """Inverse of :func:`encode_date_key`; returns ``(year, month_index, day)``."""
    value = key_to_date(key)
    return value.year, value.month - 1, value.day


def date_to_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def key_to_date(key: str) -> date:
    if not isinstance(key, str) or not DATE_KEY_PATTERN.match(key):
        raise ValidationError(f"Date must be formatted YYYY-MM-DD: {key!r}")
    try:
        return date(int(key[0:4]), int(key[5:7]), int(key[8:10]))
    except ValueError as exc:
        raise ValidationError(f"Not a calendar day: {key!r}") from exc


def parse_date_key(value: str) -> str:
    """Validate ``value`` and return it in canonical form."""
    return date_to_key(key_to_date(value))


def today_key(clock: Clock = date.today) -> str:
    return date_to_key(clock())


def iter_date_keys(start: date, days: int) -> Iterator[str]:
    for offset in range(days):
        yield date_to_key(start + timedelta(days=offset))


__all__ = [
    "Clock",
    "DATE_KEY_PATTERN",
    "date_to_key",
    "decode_date_key",
    "encode_date_key",
    "iter_date_keys",
    "key_to_date",
    "parse_date_key",
    "today_key",
]
