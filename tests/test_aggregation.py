"""Tests for day aggregation and lifetime totals."""

import random
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from rhythm_engine.schemas.entry import DayStatus, EntryRecord
from rhythm_engine.services.aggregation import (
    calculate_totals,
    entries_to_day_statuses,
    entry_count,
    entry_date,
)


def record(timestamp: datetime, duration_seconds: int | None = 600, data=None) -> EntryRecord:
    return EntryRecord(timestamp=timestamp, duration_seconds=duration_seconds, data=data)


def at(day: int, hour: int = 8, month: int = 1, year: int = 2026) -> datetime:
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


class TestEntriesToDayStatuses:
    """Tests for folding entries into per-day statuses."""

    def test_empty(self):
        assert entries_to_day_statuses([], 360) == []

    def test_sums_durations_per_day(self):
        """Test two short sessions on one day add up to a complete day."""
        entries = [
            record(at(5, 7), 200),
            record(at(5, 19), 200),
            record(at(6, 9), 100),
        ]

        days = entries_to_day_statuses(entries, 360)

        assert [d.date for d in days] == [date(2026, 1, 5), date(2026, 1, 6)]
        assert days[0].total_seconds == 400
        assert days[0].entry_count == 2
        assert days[0].is_complete is True
        assert days[1].total_seconds == 100
        assert days[1].is_complete is False

    def test_threshold_is_inclusive(self):
        days = entries_to_day_statuses([record(at(5), 360)], 360)
        assert days[0].is_complete is True

        days = entries_to_day_statuses([record(at(5), 359)], 360)
        assert days[0].is_complete is False

    def test_zero_threshold_completes_any_day_with_an_entry(self):
        days = entries_to_day_statuses([record(at(5), None)], 0)
        assert days[0].total_seconds == 0
        assert days[0].is_complete is True

    def test_sorted_and_order_independent(self):
        """Test input order never changes the result."""
        entries = [record(at(day, hour), 60 * day) for day in range(1, 20) for hour in (6, 18)]
        expected = entries_to_day_statuses(entries, 360)

        rng = random.Random(42)
        for _ in range(5):
            shuffled = list(entries)
            rng.shuffle(shuffled)
            assert entries_to_day_statuses(shuffled, 360) == expected

        dates = [d.date for d in expected]
        assert dates == sorted(dates)

    def test_counts_from_payload(self):
        entries = [
            record(at(5), 0, {"count": 20}),
            record(at(5), 0, {"count": 2.5}),
            record(at(5), 0, {"count": True}),
            record(at(5), 0, {"count": "ten"}),
            record(at(5), 0, None),
        ]

        days = entries_to_day_statuses(entries, 360)

        assert days[0].total_count == 22.5
        assert days[0].entry_count == 5

    def test_skips_unreadable_timestamps(self):
        """Test one bad row does not break the whole rhythm."""
        entries = [
            SimpleNamespace(timestamp=None, duration_seconds=600, data=None),
            SimpleNamespace(timestamp="garbage", duration_seconds=600, data=None),
            SimpleNamespace(timestamp="2026-01-05T08:00:00", duration_seconds=600, data=None),
            record(at(6), 600),
        ]

        days = entries_to_day_statuses(entries, 360)

        assert [d.date for d in days] == [date(2026, 1, 5), date(2026, 1, 6)]

    def test_uses_date_portion_of_localized_timestamp(self):
        """Test the day is taken from the timestamp as given, not converted to UTC."""
        pacific = timezone(timedelta(hours=-8))
        late_evening = datetime(2026, 1, 6, 23, 30, tzinfo=pacific)

        days = entries_to_day_statuses([record(late_evening, 600)], 360)

        assert days[0].date == date(2026, 1, 6)


class TestEntryHelpers:
    """Tests for the per-entry readers."""

    def test_entry_date(self):
        assert entry_date(at(5)) == date(2026, 1, 5)
        assert entry_date(date(2026, 1, 5)) == date(2026, 1, 5)
        assert entry_date("2026-01-05 10:00:00") == date(2026, 1, 5)
        assert entry_date("nope") is None
        assert entry_date(12345) is None

    def test_entry_count(self):
        assert entry_count({"count": 3}) == 3
        assert entry_count({"count": False}) == 0
        assert entry_count({"reps": 3}) == 0
        assert entry_count(None) == 0
        assert entry_count(["count"]) == 0


class TestCalculateTotals:
    """Tests for lifetime totals."""

    def test_empty_totals(self):
        """Test a rhythm with no entries has all-zero totals."""
        totals = calculate_totals([], [])

        assert totals.total_sessions == 0
        assert totals.total_seconds == 0
        assert totals.total_hours == 0
        assert totals.total_count == 0
        assert totals.first_entry_date is None
        assert totals.weeks_active == 0
        assert totals.months_active == 0

    def test_totals(self):
        entries = [
            record(at(30, month=12, year=2025), 1800, {"count": 5}),
            record(at(5), 1800),
            record(at(6), 100),
            record(at(7), 1800, {"count": 1}),
        ]
        days = entries_to_day_statuses(entries, 360)

        totals = calculate_totals(entries, days)

        assert totals.total_sessions == 4
        assert totals.total_seconds == 5500
        assert totals.total_hours == 1.5
        assert totals.total_count == 6
        assert totals.first_entry_date == date(2025, 12, 30)
        # Dec 30 is in the week of Dec 29, Jan 5 and 7 share a week
        assert totals.weeks_active == 2
        assert totals.months_active == 2

    def test_hours_rounded_to_one_decimal(self):
        entries = [record(at(5), 3700)]
        totals = calculate_totals(entries, entries_to_day_statuses(entries, 360))
        assert totals.total_hours == 1.0

    def test_active_periods_only_count_complete_days(self):
        """Test a week with only incomplete days is not active."""
        entries = [record(at(5), 100), record(at(14), 600)]
        days = entries_to_day_statuses(entries, 360)

        totals = calculate_totals(entries, days)

        assert totals.total_sessions == 2
        assert totals.weeks_active == 1
        assert totals.months_active == 1

    def test_accepts_precomputed_day_statuses(self):
        days = [DayStatus(date=date(2026, 2, 2), total_seconds=600, entry_count=1, is_complete=True)]
        totals = calculate_totals([record(at(2, month=2), 600)], days)
        assert totals.months_active == 1
