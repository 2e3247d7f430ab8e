"""Day aggregation and lifetime totals.

Both functions are pure: they only read the entries and day statuses they are
given. Entries are read by attribute (``timestamp``, ``duration_seconds``,
``data``) so ORM rows and :class:`EntryRecord` instances both work, but
timestamps must already be localized to the user's timezone.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from rhythm_engine.schemas.chain import RhythmTotals
from rhythm_engine.schemas.entry import DayStatus
from rhythm_engine.services.periods import month_key, week_start

logger = logging.getLogger(__name__)


def entry_date(timestamp: Any) -> date | None:
    """Calendar day of a timestamp, or None if it cannot be read."""
    if isinstance(timestamp, datetime):
        return timestamp.date()
    if isinstance(timestamp, date):
        return timestamp
    if isinstance(timestamp, str):
        try:
            return date.fromisoformat(timestamp.split("T")[0].split(" ")[0])
        except ValueError:
            return None
    return None


def entry_count(data: Any) -> int | float:
    """Numeric ``count`` field of an entry payload (reps, pages, ...)."""
    if not isinstance(data, dict):
        return 0
    value = data.get("count")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def entries_to_day_statuses(
    entries: Iterable[Any], duration_threshold_seconds: int
) -> list[DayStatus]:
    """Fold entries into one status per calendar day, sorted by date.

    Entries without a readable date are skipped so one bad row cannot break
    the calculation for the whole rhythm.
    """
    days: dict[date, dict[str, int | float]] = {}
    skipped = 0

    for entry in entries:
        day = entry_date(getattr(entry, "timestamp", None))
        if day is None:
            skipped += 1
            continue

        bucket = days.setdefault(day, {"total_seconds": 0, "total_count": 0, "entry_count": 0})
        bucket["total_seconds"] += getattr(entry, "duration_seconds", None) or 0
        bucket["total_count"] += entry_count(getattr(entry, "data", None))
        bucket["entry_count"] += 1

    if skipped:
        logger.warning(f"Skipped {skipped} entries with unreadable timestamps")

    return [
        DayStatus(
            date=day,
            total_seconds=int(bucket["total_seconds"]),
            total_count=bucket["total_count"],
            entry_count=int(bucket["entry_count"]),
            is_complete=bucket["total_seconds"] >= duration_threshold_seconds,
        )
        for day, bucket in sorted(days.items())
    ]


def calculate_totals(entries: Sequence[Any], day_statuses: Sequence[DayStatus]) -> RhythmTotals:
    """Lifetime totals over every matching entry.

    Active weeks and months only count periods containing at least one
    complete day.
    """
    total_seconds = sum(getattr(e, "duration_seconds", None) or 0 for e in entries)
    total_count = sum(entry_count(getattr(e, "data", None)) for e in entries)

    entry_dates = [d for d in (entry_date(getattr(e, "timestamp", None)) for e in entries) if d]
    first_entry_date = min(entry_dates) if entry_dates else None

    complete_days = [day.date for day in day_statuses if day.is_complete]

    return RhythmTotals(
        total_sessions=len(entries),
        total_seconds=total_seconds,
        total_hours=round(total_seconds / 3600, 1),
        total_count=total_count,
        first_entry_date=first_entry_date,
        weeks_active=len({week_start(d) for d in complete_days}),
        months_active=len({month_key(d) for d in complete_days}),
    )
