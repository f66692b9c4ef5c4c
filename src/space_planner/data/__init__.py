"""Data access layer."""

from __future__ import annotations

from .store import DEFAULT_PLANNER_DATA, LEGACY_KEYS, JsonPlannerStore, PlannerGateway

__all__ = ["DEFAULT_PLANNER_DATA", "LEGACY_KEYS", "JsonPlannerStore", "PlannerGateway"]
