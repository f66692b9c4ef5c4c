"""Serialize a confirmed plan as a single-event iCalendar document."""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING, Optional

from icalendar import Alarm, Calendar, Event

from ..errors import ValidationError
from .date_keys import key_to_date

if TYPE_CHECKING:
    from ..domain.models import ConfirmedPlan

DEFAULT_START_TIME = "19:00"
DEFAULT_END_TIME = "21:00"
DEFAULT_PRODID = "-//Space Planner//EN"
REMINDER_OFFSET = timedelta(minutes=15)

_CLOCK_PATTERN = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})$")


def parse_clock(value: str) -> time:
    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Time must be formatted HH:MM: {value!r}")
    hour, minute = int(match.group("hour")), int(match.group("minute"))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Time out of range: {value!r}")
    return time(hour=hour, minute=minute)


def plan_window(plan: "ConfirmedPlan", tz: tzinfo = timezone.utc) -> tuple[datetime, datetime]:
    """Start and end of ``plan`` in UTC. An end at or before the start falls on the next day."""

    day = key_to_date(plan.date)
    starts_at = datetime.combine(day, parse_clock(plan.start_time or DEFAULT_START_TIME), tzinfo=tz)
    ends_at = datetime.combine(day, parse_clock(plan.end_time or DEFAULT_END_TIME), tzinfo=tz)
    if ends_at <= starts_at:
        ends_at += timedelta(days=1)
    return starts_at.astimezone(timezone.utc), ends_at.astimezone(timezone.utc)


def encode_plan(
    plan: "ConfirmedPlan",
    *,
    tz: tzinfo = timezone.utc,
    prodid: str = DEFAULT_PRODID,
    summary_prefix: str = "Plans",
    description: Optional[str] = None,
) -> bytes:
    starts_at, ends_at = plan_window(plan, tz)

    calendar = Calendar()
    calendar.add("prodid", prodid)
    calendar.add("version", "2.0")

    event = Event()
    event.add("uid", f"{plan.id}@space-planner")
    event.add("dtstamp", plan.created_at.astimezone(timezone.utc))
    event.add("dtstart", starts_at)
    event.add("dtend", ends_at)
    event.add("summary", f"{summary_prefix}: {plan.activity}" if summary_prefix else plan.activity)
    event.add("description", description or "Planned through Space Planner")
    if plan.location:
        event.add("location", plan.location)

    alarm = Alarm()
    alarm.add("action", "DISPLAY")
    alarm.add("description", "Reminder")
    alarm.add("trigger", -REMINDER_OFFSET)
    event.add_component(alarm)

    calendar.add_component(event)
    return calendar.to_ical()


def ics_filename(plan: "ConfirmedPlan") -> str:
    slug = re.sub(r"\s+", "-", plan.activity.strip()).lower() or "plan"
    return f"space-planner-{slug}.ics"


__all__ = ["encode_plan", "ics_filename", "parse_clock", "plan_window"]
