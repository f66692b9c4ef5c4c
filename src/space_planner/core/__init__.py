"""Date-availability reconciliation primitives."""

from .availability import AvailabilitySet
from .calendar_export import encode_plan, ics_filename, parse_clock, plan_window
from .date_keys import (
    date_to_key,
    decode_date_key,
    encode_date_key,
    iter_date_keys,
    key_to_date,
    parse_date_key,
    today_key,
)
from .recurrence import DEFAULT_HORIZON_DAYS, WEEKDAY_NAMES, expand_patterns, weekday_of
from .resolver import resolve_mutual_dates

__all__ = [
    "AvailabilitySet",
    "DEFAULT_HORIZON_DAYS",
    "WEEKDAY_NAMES",
    "date_to_key",
    "decode_date_key",
    "encode_date_key",
    "encode_plan",
    "expand_patterns",
    "ics_filename",
    "iter_date_keys",
    "key_to_date",
    "parse_clock",
    "parse_date_key",
    "plan_window",
    "resolve_mutual_dates",
    "today_key",
    "weekday_of",
]
