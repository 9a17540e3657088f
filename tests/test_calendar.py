"""
Tests for day/month key arithmetic.
"""
import pytest
from datetime import date
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.calendar import (
    InvalidDate,
    day_key,
    days_in_month,
    is_weekday,
    iterate_days,
    month_bounds,
    month_key,
    month_keys_between,
    parse_day_key,
    parse_month_key,
    shift_day,
    year_bounds,
)


class TestKeyParsing:
    """Tests for strict key parsing."""

    def test_valid_day_key(self):
        assert parse_day_key("2026-03-05") == date(2026, 3, 5)

    def test_impossible_date_rejected(self):
        """Feb 30 is well-formed but not a calendar date."""
        with pytest.raises(InvalidDate):
            parse_day_key("2026-02-30")

    def test_unpadded_day_key_rejected(self):
        with pytest.raises(InvalidDate):
            parse_day_key("2026-3-5")

    def test_month_key(self):
        assert parse_month_key("2026-11") == (2026, 11)

    def test_bad_month_rejected(self):
        with pytest.raises(InvalidDate):
            parse_month_key("2026-13")

    def test_keys_from_dates(self):
        assert day_key(date(2026, 1, 9)) == "2026-01-09"
        assert month_key("2026-01-09") == "2026-01"


class TestMonthArithmetic:
    """Tests for month lengths and bounds."""

    def test_leap_february(self):
        assert days_in_month("2024-02") == 29
        assert days_in_month("2026-02") == 28

    def test_month_bounds(self):
        bounds = month_bounds("2026-04")
        assert bounds.start == "2026-04-01"
        assert bounds.end == "2026-04-30"

    def test_year_bounds(self):
        bounds = year_bounds("2026-07-04")
        assert (bounds.start, bounds.end) == ("2026-01-01", "2026-12-31")

    def test_month_keys_cross_year(self):
        assert month_keys_between("2025-11", "2026-02") == ["2025-11", "2025-12", "2026-01", "2026-02"]

    def test_month_keys_reversed_is_empty(self):
        assert month_keys_between("2026-05", "2026-04") == []


class TestDayIteration:
    """Tests for inclusive day ranges."""

    def test_inclusive_range(self):
        days = list(iterate_days("2026-02-27", "2026-03-02"))
        assert days == ["2026-02-27", "2026-02-28", "2026-03-01", "2026-03-02"]

    def test_range_is_restartable(self):
        """Iterating twice yields the same days."""
        days = iterate_days("2026-03-01", "2026-03-03")
        assert list(days) == list(days)
        assert len(days) == 3

    def test_reversed_range_is_empty(self):
        days = iterate_days("2026-03-05", "2026-03-01")
        assert list(days) == []
        assert len(days) == 0

    def test_weekday(self):
        # 2026-03-02 is a Monday, 2026-03-07 a Saturday
        assert is_weekday("2026-03-02") is True
        assert is_weekday("2026-03-07") is False

    def test_shift_day_crosses_month(self):
        assert shift_day("2026-03-01", -1) == "2026-02-28"
