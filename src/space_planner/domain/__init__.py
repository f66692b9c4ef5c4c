"""Domain models for shared date planning."""

from __future__ import annotations

from .models import ConfirmedPlan, PlannerState, RecurringPattern, describe_pattern, utc_now, utc_timestamp

__all__ = ["ConfirmedPlan", "PlannerState", "RecurringPattern", "describe_pattern", "utc_now", "utc_timestamp"]
