"""Cache snapshot building, loading and staleness checks.

A snapshot is only trusted when it carries the current ``SNAPSHOT_VERSION``
and was calculated against the newest matching entry. Anything else is
treated as absent and triggers a full recalculation.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

from pydantic import ValidationError

from rhythm_engine.models.rhythm import ChainUnit
from rhythm_engine.schemas.chain import (
    SNAPSHOT_VERSION,
    CachedChainData,
    ChainStat,
    CurrentChainState,
    RhythmTotals,
)
from rhythm_engine.schemas.entry import DayStatus
from rhythm_engine.services.periods import month_key, week_start

logger = logging.getLogger(__name__)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_cache_data(
    chains: list[ChainStat],
    totals: RhythmTotals,
    day_statuses: list[DayStatus],
    last_entry_timestamp: datetime | None,
    now: datetime,
) -> CachedChainData:
    """Package chain results into a persistable snapshot.

    Args:
        chains: Chain statistics, the rhythm's configured type first
        totals: Lifetime totals
        day_statuses: Day statuses the chains were calculated from
        last_entry_timestamp: Timestamp of the newest matching entry
        now: Calculation time in the user's timezone; its date decides
            which week is "this week"
    """
    this_week = week_start(now.date())
    by_month = bool(chains) and chains[0].unit == ChainUnit.MONTHS

    last_complete_date: date | None = None
    latest_day: date | None = None
    this_period_days = 0
    this_period_seconds = 0

    for day in day_statuses:
        if latest_day is None or day.date > latest_day:
            latest_day = day.date
        if day.is_complete and (last_complete_date is None or day.date > last_complete_date):
            last_complete_date = day.date
        if week_start(day.date) == this_week:
            this_period_seconds += day.total_seconds
            if day.is_complete:
                this_period_days += 1

    last_period_key = None
    if latest_day is not None:
        last_period_key = month_key(latest_day) if by_month else week_start(latest_day).isoformat()

    return CachedChainData(
        version=SNAPSHOT_VERSION,
        chains=chains,
        current_chain=CurrentChainState(
            last_complete_date=last_complete_date,
            last_period_key=last_period_key,
            this_period_days=this_period_days,
            this_period_seconds=this_period_seconds,
        ),
        totals=totals,
        last_calculated_at=to_utc(now),
        last_entry_timestamp=to_utc(last_entry_timestamp) if last_entry_timestamp else None,
    )


def load_cached_chain_data(raw: Any) -> CachedChainData | None:
    """Read a stored snapshot, or None if it cannot be trusted.

    Unversioned blobs from older engines are never interpreted structurally.
    """
    if not isinstance(raw, dict):
        return None

    version = raw.get("version")
    if version != SNAPSHOT_VERSION:
        logger.debug(f"Ignoring cached chain stats with version {version!r}")
        return None

    try:
        return CachedChainData.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Discarding invalid cached chain stats: {e}")
        return None


def is_cache_stale(cache: CachedChainData | None, latest_entry_timestamp: datetime | None) -> bool:
    """True if the snapshot must be recalculated.

    Any difference from the recorded newest entry counts: a newer entry was
    logged, or the newest one was deleted.
    """
    if cache is None:
        return True
    if cache.last_entry_timestamp is None or latest_entry_timestamp is None:
        return cache.last_entry_timestamp != latest_entry_timestamp
    return to_utc(cache.last_entry_timestamp) != to_utc(latest_entry_timestamp)
