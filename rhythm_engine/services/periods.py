"""Calendar period keys used to bucket day statuses.

Dates are taken as already expressed in the user's calendar; no timezone
conversion happens here.
"""

import re
from datetime import date, datetime, timedelta

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")


def as_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ISO date string to a date.

    Raises:
        ValueError: if a string is not an ISO date
        TypeError: for any other type
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Expected date, datetime or ISO string, got {type(value).__name__}")


def week_start(value: date | datetime | str) -> date:
    """Return the Monday on or before the given day."""
    day = as_date(value)
    return day - timedelta(days=day.weekday())


def week_end(value: date | datetime | str) -> date:
    """Return the Sunday on or after the given day."""
    return week_start(value) + timedelta(days=6)


def month_key(value: date | datetime | str) -> str:
    """Return the ``YYYY-MM`` key of the month containing the given day."""
    day = as_date(value)
    return f"{day.year:04d}-{day.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` key into (year, month)."""
    match = _MONTH_KEY.match(key) if isinstance(key, str) else None
    if not match:
        raise ValueError(f"Invalid month key: {key!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in key: {key!r}")
    return year, month


def previous_month_key(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def is_consecutive_day(a: date | str, b: date | str) -> bool:
    """True if ``b`` is the calendar day right after ``a``."""
    return as_date(b) - as_date(a) == timedelta(days=1)


def is_consecutive_week(a: date | str, b: date | str) -> bool:
    """True if week start ``b`` is exactly seven days after week start ``a``."""
    return as_date(b) - as_date(a) == timedelta(days=7)


def is_consecutive_month(a: str, b: str) -> bool:
    """True if month key ``b`` is the calendar month right after ``a``."""
    year_a, month_a = parse_month_key(a)
    year_b, month_b = parse_month_key(b)
    return (year_b * 12 + month_b) - (year_a * 12 + month_a) == 1
