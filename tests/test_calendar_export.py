from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from icalendar import Calendar

from space_planner.core import encode_plan, ics_filename, plan_window
from space_planner.domain import ConfirmedPlan
from space_planner.errors import ValidationError


def _plan(**overrides) -> ConfirmedPlan:
    values = dict(
        id="abc123",
        date="2025-06-10",
        activity="Hike",
        location="",
        start_time="19:00",
        end_time="21:00",
        created_at=datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return ConfirmedPlan(**values)


def _event(payload: bytes):
    return next(iter(Calendar.from_ical(payload).walk("VEVENT")))


def test_event_spans_start_to_end_in_utc():
    payload = encode_plan(_plan())
    assert b"DTSTART:20250610T190000Z" in payload
    assert b"DTEND:20250610T210000Z" in payload
    event = _event(payload)
    assert event["dtend"].dt - event["dtstart"].dt == timedelta(hours=2)


def test_exactly_one_reminder_fifteen_minutes_before():
    payload = encode_plan(_plan())
    assert payload.count(b"BEGIN:VALARM") == 1
    assert b"TRIGGER:-PT15M" in payload
    alarms = list(Calendar.from_ical(payload).walk("VALARM"))
    assert alarms[0]["trigger"].dt == timedelta(minutes=-15)


def test_summary_and_description():
    payload = encode_plan(_plan(), summary_prefix="Plans", description="See you there")
    event = _event(payload)
    assert str(event["summary"]) == "Plans: Hike"
    assert str(event["description"]) == "See you there"
    assert str(event["uid"]) == "abc123@space-planner"


def test_location_is_optional():
    assert b"LOCATION" not in encode_plan(_plan())
    event = _event(encode_plan(_plan(location="Trailhead")))
    assert str(event["location"]) == "Trailhead"


def test_local_times_are_converted_to_utc():
    payload = encode_plan(_plan(), tz=ZoneInfo("America/New_York"))
    assert b"DTSTART:20250610T230000Z" in payload
    assert b"DTEND:20250611T010000Z" in payload


def test_end_before_start_rolls_to_next_day():
    starts_at, ends_at = plan_window(_plan(start_time="22:00", end_time="01:00"))
    assert ends_at - starts_at == timedelta(hours=3)


def test_missing_times_use_defaults():
    starts_at, ends_at = plan_window(_plan(start_time="", end_time=""))
    assert (starts_at.hour, ends_at.hour) == (19, 21)


def test_malformed_time_is_rejected():
    with pytest.raises(ValidationError):
        encode_plan(_plan(start_time="7pm"))


def test_filename_slugs_activity():
    assert ics_filename(_plan(activity="Star Gazing  Night")) == "space-planner-star-gazing-night.ics"
