from __future__ import annotations

from typing import Any, Dict

from ..domain import ConfirmedPlan, RecurringPattern
from .models import PatternPayload, PlanPayload


def serialize_plan(plan: ConfirmedPlan) -> Dict[str, Any]:
    return PlanPayload.from_domain(plan).model_dump(by_alias=True)


def serialize_pattern(pattern: RecurringPattern) -> Dict[str, Any]:
    return PatternPayload.from_domain(pattern).model_dump(by_alias=True)
