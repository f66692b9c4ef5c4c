from datetime import date

import pytest

from space_planner.core import (
    decode_date_key,
    encode_date_key,
    iter_date_keys,
    parse_date_key,
    today_key,
)
from space_planner.errors import ValidationError


@pytest.mark.parametrize(
    "year, month_index, day",
    [(2025, 0, 1), (2025, 5, 10), (2024, 1, 29), (999, 11, 31)],
)
def test_decode_inverts_encode(year, month_index, day):
    assert decode_date_key(encode_date_key(year, month_index, day)) == (year, month_index, day)


def test_encode_zero_pads_every_component():
    assert encode_date_key(2025, 5, 1) == "2025-06-01"
    assert encode_date_key(999, 0, 9) == "0999-01-09"


def test_lexicographic_order_matches_calendar_order():
    days = [date(2025, 6, 1), date(2025, 10, 1), date(2025, 6, 10), date(2026, 1, 2)]
    keys = [encode_date_key(d.year, d.month - 1, d.day) for d in days]
    assert sorted(keys) == [encode_date_key(d.year, d.month - 1, d.day) for d in sorted(days)]


def test_encode_rejects_impossible_day():
    with pytest.raises(ValidationError):
        encode_date_key(2025, 1, 30)


@pytest.mark.parametrize("value", ["2025-6-1", "2025/06/01", "2025-02-30", "", "20250601"])
def test_parse_rejects_non_canonical_keys(value):
    with pytest.raises(ValidationError):
        parse_date_key(value)


def test_today_key_uses_clock():
    assert today_key(lambda: date(2025, 6, 5)) == "2025-06-05"


def test_iter_date_keys_crosses_month_boundary():
    assert list(iter_date_keys(date(2025, 1, 30), 3)) == ["2025-01-30", "2025-01-31", "2025-02-01"]
