from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import AppSettings, get_settings
from ..data import JsonPlannerStore, PlannerGateway


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, the gateway, and the local cache."""

    settings: AppSettings = field(default_factory=get_settings)
    gateway: Optional[PlannerGateway] = None
    fallback: Optional[JsonPlannerStore] = None
    clock: Callable[[], date] = date.today

    def __post_init__(self) -> None:
        if self.gateway is None:
            self.gateway = JsonPlannerStore(self.settings.storage.data_file)
        if self.fallback is None:
            self.fallback = JsonPlannerStore(self.settings.storage.fallback_file)

    @property
    def tz(self) -> tzinfo:
        try:
            return ZoneInfo(self.settings.planner.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return timezone.utc
