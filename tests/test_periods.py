"""Tests for calendar period keys."""

from datetime import date, datetime

import pytest

from rhythm_engine.services.periods import (
    is_consecutive_day,
    is_consecutive_month,
    is_consecutive_week,
    month_key,
    parse_month_key,
    previous_month_key,
    week_end,
    week_start,
)


class TestWeekStart:
    """Tests for Monday-based week keys."""

    def test_midweek_day(self):
        """Test a Wednesday maps to the Monday before it."""
        assert week_start(date(2026, 1, 7)) == date(2026, 1, 5)

    def test_monday_is_its_own_week_start(self):
        assert week_start(date(2026, 1, 5)) == date(2026, 1, 5)

    def test_sunday_belongs_to_previous_monday(self):
        """Test Sunday closes the week rather than opening one."""
        assert week_start(date(2026, 1, 11)) == date(2026, 1, 5)

    def test_week_crossing_year_boundary(self):
        assert week_start(date(2026, 1, 1)) == date(2025, 12, 29)

    def test_datetime_is_normalized_to_date(self):
        assert week_start(datetime(2026, 1, 7, 23, 59)) == date(2026, 1, 5)

    def test_iso_string(self):
        assert week_start("2026-01-04T23:00:00") == date(2025, 12, 29)

    def test_week_end_is_sunday(self):
        assert week_end(date(2026, 1, 7)) == date(2026, 1, 11)

    def test_malformed_string_fails_fast(self):
        with pytest.raises(ValueError):
            week_start("not-a-date")

    def test_wrong_type_fails_fast(self):
        with pytest.raises(TypeError):
            week_start(20260107)


class TestMonthKeys:
    """Tests for YYYY-MM month keys."""

    def test_month_key(self):
        assert month_key(date(2026, 1, 31)) == "2026-01"
        assert month_key(datetime(2025, 12, 1, 0, 0)) == "2025-12"

    def test_parse_month_key(self):
        assert parse_month_key("2026-02") == (2026, 2)

    @pytest.mark.parametrize("key", ["2026-13", "2026-00", "2026/01", "26-01", ""])
    def test_parse_malformed_month_key(self, key):
        with pytest.raises(ValueError):
            parse_month_key(key)

    def test_previous_month_key_rolls_back_a_year(self):
        assert previous_month_key("2026-01") == "2025-12"
        assert previous_month_key("2026-07") == "2026-06"


class TestConsecutivity:
    """Tests for the period-after-period predicates."""

    def test_consecutive_days(self):
        assert is_consecutive_day(date(2025, 12, 31), date(2026, 1, 1))
        assert not is_consecutive_day(date(2026, 1, 1), date(2026, 1, 3))
        assert not is_consecutive_day(date(2026, 1, 2), date(2026, 1, 1))

    def test_consecutive_weeks(self):
        assert is_consecutive_week(date(2025, 12, 29), date(2026, 1, 5))
        assert is_consecutive_week("2025-12-29", "2026-01-05")

    def test_non_consecutive_weeks(self):
        assert not is_consecutive_week(date(2025, 12, 22), date(2026, 1, 5))
        assert not is_consecutive_week(date(2026, 1, 5), date(2026, 1, 5))
        assert not is_consecutive_week(date(2026, 1, 5), date(2025, 12, 29))

    def test_consecutive_months_across_year_rollover(self):
        """Test December to January counts as consecutive."""
        assert is_consecutive_month("2025-12", "2026-01")
        assert is_consecutive_month("2026-01", "2026-02")

    def test_non_consecutive_months(self):
        assert not is_consecutive_month("2025-11", "2026-01")
        assert not is_consecutive_month("2026-01", "2025-12")
        assert not is_consecutive_month("2025-01", "2026-01")

    def test_malformed_month_fails_fast(self):
        with pytest.raises(ValueError):
            is_consecutive_month("2025-12", "January")
