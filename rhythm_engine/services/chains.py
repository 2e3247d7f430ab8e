"""Chain calculation for the five rhythm chain types.

Chains bend rather than break: a missed day lowers what a week achieves, it
does not wipe out the rhythm. Each chain type buckets day statuses into its
own period, judges every period against its threshold, then answers two
separate questions with two linear scans:

- longest: the best run of consecutive qualifying periods ever seen
- current: the run ending now (today/yesterday for days, this or last
  period for weeks and months). For weeks and months the newest period with
  data must already qualify, so a week still short of its threshold reads 0.

Periods with no activity at all are absent from the buckets, so a missing
period always breaks consecutivity.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from rhythm_engine.models.rhythm import ChainType, ChainUnit
from rhythm_engine.schemas.chain import ChainStat
from rhythm_engine.schemas.entry import DayStatus
from rhythm_engine.services.periods import (
    is_consecutive_day,
    is_consecutive_month,
    is_consecutive_week,
    month_key,
    previous_month_key,
    week_start,
)


@dataclass(frozen=True)
class ChainConfig:
    type: ChainType
    label: str
    short_label: str
    description: str
    unit: ChainUnit
    min_days_per_period: int | None = None  # day-count chain types only


CHAIN_CONFIGS: dict[ChainType, ChainConfig] = {
    ChainType.DAILY: ChainConfig(
        type=ChainType.DAILY,
        label="Daily Chain",
        short_label="Daily",
        description="Every day",
        unit=ChainUnit.DAYS,
        min_days_per_period=1,
    ),
    ChainType.WEEKLY_HIGH: ChainConfig(
        type=ChainType.WEEKLY_HIGH,
        label="Weekly (High)",
        short_label="5×/wk",
        description="5+ days per week",
        unit=ChainUnit.WEEKS,
        min_days_per_period=5,
    ),
    ChainType.WEEKLY_LOW: ChainConfig(
        type=ChainType.WEEKLY_LOW,
        label="Weekly (Regular)",
        short_label="3×/wk",
        description="3+ days per week",
        unit=ChainUnit.WEEKS,
        min_days_per_period=3,
    ),
    ChainType.WEEKLY_TARGET: ChainConfig(
        type=ChainType.WEEKLY_TARGET,
        label="Weekly Target",
        short_label="Wk Goal",
        description="Minutes per week",
        unit=ChainUnit.WEEKS,
    ),
    ChainType.MONTHLY_TARGET: ChainConfig(
        type=ChainType.MONTHLY_TARGET,
        label="Monthly Target",
        short_label="Mo Goal",
        description="Minutes per month",
        unit=ChainUnit.MONTHS,
    ),
}

# Most demanding first
CHAIN_TYPE_ORDER: list[ChainType] = list(ChainType)

TARGET_CHAIN_TYPES = frozenset({ChainType.WEEKLY_TARGET, ChainType.MONTHLY_TARGET})


def get_chain_config(chain_type: ChainType | str) -> ChainConfig:
    """Get the configuration for a chain type.

    Raises:
        ValueError: if ``chain_type`` is not a known chain type
    """
    return CHAIN_CONFIGS[ChainType(chain_type)]


def format_chain_value(value: int, unit: ChainUnit | str) -> str:
    """Format a chain length with its unit, e.g. "1 week" or "5 days"."""
    if value == 0:
        return "—"
    unit = ChainUnit(unit).value
    return f"1 {unit[:-1]}" if value == 1 else f"{value} {unit}"


def _target_seconds(chain_type: ChainType, target_minutes: int | None) -> int:
    if target_minutes is None or target_minutes <= 0:
        raise ValueError(f"Chain type '{chain_type.value}' requires a positive target_minutes")
    return target_minutes * 60


# ----------------------------------------------------------------------------
# Days
# ----------------------------------------------------------------------------


def _daily_runs(day_statuses: list[DayStatus], today: date) -> tuple[int, int]:
    complete = sorted({day.date for day in day_statuses if day.is_complete})

    longest = 0
    run = 0
    previous: date | None = None
    for day in complete:
        run = run + 1 if previous is not None and is_consecutive_day(previous, day) else 1
        longest = max(longest, run)
        previous = day

    if not complete:
        return 0, longest

    # Today may still be in progress, so yesterday also keeps the chain alive
    anchor = complete[-1]
    if anchor < today - timedelta(days=1):
        return 0, longest

    current = 0
    expected = anchor
    for day in reversed(complete):
        if day != expected:
            break
        current += 1
        expected = day - timedelta(days=1)

    return current, longest


# ----------------------------------------------------------------------------
# Weeks
# ----------------------------------------------------------------------------


def _weekly_runs(weeks: dict[date, bool], today: date) -> tuple[int, int]:
    """Runs over week buckets keyed by week start (Monday)."""
    ordered = sorted(weeks.items())

    longest = 0
    run = 0
    previous: date | None = None
    for key, meets in ordered:
        if not meets:
            run = 0
        elif previous is not None and run > 0 and is_consecutive_week(previous, key):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = key

    if not ordered:
        return 0, longest

    this_week = week_start(today)
    last_week = this_week - timedelta(days=7)

    index = len(ordered) - 1
    # The newest week with data must have qualified, even while still in progress
    if ordered[index][0] < last_week or not ordered[index][1]:
        return 0, longest

    current = 0
    following: date | None = None
    while index >= 0:
        key, meets = ordered[index]
        if not meets or (following is not None and not is_consecutive_week(key, following)):
            break
        current += 1
        following = key
        index -= 1

    return current, longest


# ----------------------------------------------------------------------------
# Months
# ----------------------------------------------------------------------------


def _monthly_runs(months: dict[str, bool], today: date) -> tuple[int, int]:
    """Runs over month buckets keyed by ``YYYY-MM``."""
    ordered = sorted(months.items())

    longest = 0
    run = 0
    previous: str | None = None
    for key, meets in ordered:
        if not meets:
            run = 0
        elif previous is not None and run > 0 and is_consecutive_month(previous, key):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = key

    if not ordered:
        return 0, longest

    this_month = month_key(today)
    last_month = previous_month_key(this_month)

    index = len(ordered) - 1
    if ordered[index][0] < last_month or not ordered[index][1]:
        return 0, longest

    current = 0
    following: str | None = None
    while index >= 0:
        key, meets = ordered[index]
        if not meets or (following is not None and not is_consecutive_month(key, following)):
            break
        current += 1
        following = key
        index -= 1

    return current, longest


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------


def calculate_chain_stats(
    day_statuses: list[DayStatus],
    chain_type: ChainType | str,
    today: date,
    target_minutes: int | None = None,
) -> ChainStat:
    """Calculate the current and longest chain for one chain type.

    Args:
        day_statuses: Output of ``entries_to_day_statuses``
        chain_type: Which chain to compute
        today: The user's local calendar date
        target_minutes: Minutes per period for the target chain types

    Returns:
        ChainStat with lengths counted in the chain type's unit

    Raises:
        ValueError: for an unknown chain type, or a target chain type
            without a positive ``target_minutes``
    """
    chain_type = ChainType(chain_type)
    config = CHAIN_CONFIGS[chain_type]

    if chain_type is ChainType.DAILY:
        current, longest = _daily_runs(day_statuses, today)

    elif chain_type in (ChainType.WEEKLY_HIGH, ChainType.WEEKLY_LOW):
        complete_days: dict[date, int] = {}
        for day in day_statuses:
            key = week_start(day.date)
            complete_days[key] = complete_days.get(key, 0) + (1 if day.is_complete else 0)
        current, longest = _weekly_runs(
            {key: count >= config.min_days_per_period for key, count in complete_days.items()},
            today,
        )

    elif chain_type is ChainType.WEEKLY_TARGET:
        target = _target_seconds(chain_type, target_minutes)
        week_seconds: dict[date, int] = {}
        for day in day_statuses:
            key = week_start(day.date)
            week_seconds[key] = week_seconds.get(key, 0) + day.total_seconds
        current, longest = _weekly_runs(
            {key: seconds >= target for key, seconds in week_seconds.items()}, today
        )

    elif chain_type is ChainType.MONTHLY_TARGET:
        target = _target_seconds(chain_type, target_minutes)
        month_seconds: dict[str, int] = {}
        for day in day_statuses:
            key = month_key(day.date)
            month_seconds[key] = month_seconds.get(key, 0) + day.total_seconds
        current, longest = _monthly_runs(
            {key: seconds >= target for key, seconds in month_seconds.items()}, today
        )

    else:
        raise ValueError(f"Unsupported chain type: {chain_type}")

    return ChainStat(type=chain_type, current=current, longest=longest, unit=config.unit)


def calculate_all_chain_stats(
    day_statuses: list[DayStatus],
    today: date,
    primary: ChainType | str = ChainType.WEEKLY_LOW,
    target_minutes: int | None = None,
) -> list[ChainStat]:
    """Calculate every chain type, the rhythm's configured type first.

    Target chain types are left out when no target is known.
    """
    primary = ChainType(primary)
    ordered = [primary] + [t for t in CHAIN_TYPE_ORDER if t is not primary]

    chains = []
    for chain_type in ordered:
        if chain_type in TARGET_CHAIN_TYPES and not target_minutes:
            continue
        chains.append(calculate_chain_stats(day_statuses, chain_type, today, target_minutes))
    return chains
