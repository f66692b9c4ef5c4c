from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.availability import AvailabilitySet

STATE_VERSION = "1.0"
DEFAULT_PLAN_TIME = "TBD"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def utc_timestamp() -> str:
    return _iso(utc_now())


def describe_pattern(day_name: str, label: str) -> str:
    return f"Every {day_name} ({label})"


@dataclass(slots=True)
class RecurringPattern:
    id: str
    weekday: int
    label: str
    day_name: str
    description: str
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "RecurringPattern":
        day_name = str(record.get("dayName") or "")
        label = str(record.get("type") or "")
        return cls(
            id=str(record["id"]),
            weekday=int(record["day"]),
            label=label,
            day_name=day_name,
            description=record.get("description") or describe_pattern(day_name, label),
            created_at=_parse_datetime(record["createdAt"]) if record.get("createdAt") else utc_now(),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.label,
            "day": self.weekday,
            "dayName": self.day_name,
            "description": self.description,
            "createdAt": _iso(self.created_at),
        }


@dataclass(slots=True)
class ConfirmedPlan:
    id: str
    date: str
    activity: str
    time: str = DEFAULT_PLAN_TIME
    location: str = ""
    start_time: str = "19:00"
    end_time: str = "21:00"
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ConfirmedPlan":
        return cls(
            id=str(record["id"]),
            date=str(record["date"]),
            activity=str(record["activity"]),
            time=record.get("time") or DEFAULT_PLAN_TIME,
            location=record.get("location") or "",
            start_time=record.get("startTime") or "19:00",
            end_time=record.get("endTime") or "21:00",
            created_at=_parse_datetime(record["createdAt"]) if record.get("createdAt") else utc_now(),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "activity": self.activity,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "confirmed": True,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class PlannerState:
    """The whole shared planner blob as held in memory."""

    availability: AvailabilitySet = field(default_factory=AvailabilitySet)
    confirmed_plans: List[ConfirmedPlan] = field(default_factory=list)
    recurring_patterns: List[RecurringPattern] = field(default_factory=list)
    custom_activities: List[str] = field(default_factory=list)
    calendar_connected: bool = False
    last_updated: Optional[str] = None
    version: str = STATE_VERSION

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PlannerState":
        selected = record.get("selectedDates")
        if selected is None:
            selected = record.get("gioSelectedDates") or []
        connected = record.get("calendarConnected")
        if connected is None:
            connected = record.get("appleCalendarConnected", False)
        activities: List[str] = []
        for name in record.get("customActivities") or []:
            if name not in activities:
                activities.append(name)
        return cls(
            availability=AvailabilitySet.from_iterables(record.get("unavailableDates") or [], selected),
            confirmed_plans=[ConfirmedPlan.from_record(item) for item in record.get("confirmedPlans") or []],
            recurring_patterns=[RecurringPattern.from_record(item) for item in record.get("recurringPatterns") or []],
            custom_activities=activities,
            calendar_connected=bool(connected),
            last_updated=record.get("lastUpdated"),
            version=str(record.get("version") or STATE_VERSION),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "unavailableDates": sorted(self.availability.unavailable),
            "selectedDates": sorted(self.availability.selected),
            "confirmedPlans": [plan.to_record() for plan in self.confirmed_plans],
            "recurringPatterns": [pattern.to_record() for pattern in self.recurring_patterns],
            "customActivities": list(self.custom_activities),
            "calendarConnected": self.calendar_connected,
            "lastUpdated": self.last_updated,
            "version": self.version,
        }

    def copy(self) -> "PlannerState":
        return PlannerState(
            availability=self.availability.copy(),
            confirmed_plans=list(self.confirmed_plans),
            recurring_patterns=list(self.recurring_patterns),
            custom_activities=list(self.custom_activities),
            calendar_connected=self.calendar_connected,
            last_updated=self.last_updated,
            version=self.version,
        )

    def find_plan(self, plan_id: str) -> Optional[ConfirmedPlan]:
        for plan in self.confirmed_plans:
            if plan.id == plan_id:
                return plan
        return None
