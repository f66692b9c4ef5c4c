"""Request and response payloads for the HTTP surface."""

from __future__ import annotations

from .models import (
    ActivityRequest,
    CalendarConnectionRequest,
    PatternPayload,
    PatternRequest,
    PlanPayload,
    PlanRequest,
    SelectedDatesRequest,
    UnavailableDatesRequest,
)
from .serializers import serialize_pattern, serialize_plan

__all__ = [
    "ActivityRequest",
    "CalendarConnectionRequest",
    "PatternPayload",
    "PatternRequest",
    "PlanPayload",
    "PlanRequest",
    "SelectedDatesRequest",
    "UnavailableDatesRequest",
    "serialize_pattern",
    "serialize_plan",
]
