"""Unit tests for month keys"""

import pytest
from datetime import date
from zero_budget.domain.exceptions import InvalidDate
from zero_budget.domain.months import MonthKey, shift, to_month_key


def test_canonical_string_form():
    """Test zero-padded YYYY-MM rendering"""
    assert str(MonthKey.of(2025, 3)) == "2025-03"
    assert str(MonthKey.of(987, 11)) == "0987-11"


def test_parse_round_trips_canonical_form():
    assert MonthKey.parse("2025-10") == MonthKey(2025, 10)
    assert str(MonthKey.parse("2025-10")) == "2025-10"


@pytest.mark.parametrize("text", ["2025-13", "2025-00", "2025-1", "25-01", "2025/01", "", "october"])
def test_parse_rejects_malformed_text(text):
    with pytest.raises(InvalidDate):
        MonthKey.parse(text)


@pytest.mark.parametrize("month", [0, 13, -1])
def test_of_rejects_month_out_of_range(month):
    with pytest.raises(InvalidDate):
        MonthKey.of(2025, month)


def test_shift_across_year_boundary():
    """Test January minus one is December of the previous year"""
    assert MonthKey.of(2025, 1).shift(-1) == MonthKey.of(2024, 12)
    assert MonthKey.of(2024, 12).shift(1) == MonthKey.of(2025, 1)
    assert MonthKey.of(2025, 6).shift(-18) == MonthKey.of(2023, 12)
    assert shift(MonthKey.of(2025, 10), 27) == MonthKey.of(2028, 1)


def test_shift_out_of_supported_years_fails():
    with pytest.raises(InvalidDate):
        MonthKey.of(9999, 12).shift(1)


def test_shift_is_reversible_and_ordered():
    """Test shift(shift(k, n), -n) == k and ordering follows the calendar"""
    start = MonthKey.of(2025, 10)
    for n in range(-40, 41):
        moved = start.shift(n)
        assert moved.shift(-n) == start
        if n > 0:
            assert moved > start
        elif n < 0:
            assert moved < start


def test_string_order_matches_key_order():
    keys = [MonthKey.of(2024, 12), MonthKey.of(2025, 1), MonthKey.of(2025, 10), MonthKey.of(2025, 2)]
    assert [str(k) for k in sorted(keys)] == sorted(str(k) for k in keys)


def test_from_date_and_coercion():
    assert MonthKey.from_date(date(2025, 10, 31)) == MonthKey.of(2025, 10)
    assert to_month_key("2025-10") == MonthKey.of(2025, 10)
    key = MonthKey.of(2025, 10)
    assert to_month_key(key) is key
