from datetime import date

from space_planner.core import expand_patterns, weekday_of
from space_planner.domain import RecurringPattern


def _pattern(weekday: int) -> RecurringPattern:
    return RecurringPattern(id=f"p{weekday}", weekday=weekday, label="busy", day_name="", description="")


def test_weekday_uses_sunday_as_zero():
    assert weekday_of("2025-06-01") == 0
    assert weekday_of("2025-06-07") == 6
    assert weekday_of(date(2025, 6, 5)) == 4


def test_sunday_pattern_over_one_week():
    assert expand_patterns([_pattern(0)], date(2025, 6, 1), 7) == {"2025-06-01"}


def test_default_horizon_covers_closed_year_window():
    days = expand_patterns([_pattern(4)], date(2025, 6, 5))
    assert len(days) == 53
    assert "2025-06-05" in days
    assert "2026-06-04" in days
    assert "2026-06-11" not in days


def test_overlapping_patterns_union_once():
    once = expand_patterns([_pattern(1)], date(2025, 6, 1), 14)
    twice = expand_patterns([_pattern(1), _pattern(1)], date(2025, 6, 1), 14)
    assert once == twice == {"2025-06-02", "2025-06-09"}


def test_multiple_weekdays_are_merged():
    days = expand_patterns([_pattern(0), _pattern(6)], date(2025, 6, 1), 7)
    assert days == {"2025-06-01", "2025-06-07"}


def test_no_patterns_or_empty_window():
    assert expand_patterns([], date(2025, 6, 1)) == set()
    assert expand_patterns([_pattern(0)], date(2025, 6, 1), 0) == set()
