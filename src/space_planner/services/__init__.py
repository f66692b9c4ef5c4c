"""Application services orchestrating persistence and planning logic."""

from __future__ import annotations

from .context import ServiceContext
from .planner import PlannerService

__all__ = ["PlannerService", "ServiceContext"]
