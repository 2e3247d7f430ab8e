"""Weekly frequency tiers and mid-week nudges.

A week's tier depends only on how many complete days it holds:

- daily: 7 days
- most_days: 5-6 days
- few_times: 3-4 days
- weekly: 1-2 days
- starting: none yet
"""

from dataclasses import dataclass
from datetime import date

from rhythm_engine.models.encouragement import TierName
from rhythm_engine.schemas.entry import DayStatus
from rhythm_engine.schemas.rhythm import WeeklyProgress
from rhythm_engine.services.periods import week_end, week_start


@dataclass(frozen=True)
class FrequencyTier:
    name: TierName
    label: str
    short_label: str
    description: str
    min_days: int
    max_days: int


TIERS: dict[TierName, FrequencyTier] = {
    TierName.DAILY: FrequencyTier(TierName.DAILY, "Every Day", "Daily", "7 days per week", 7, 7),
    TierName.MOST_DAYS: FrequencyTier(
        TierName.MOST_DAYS, "Most Days", "5-6×", "5-6 days per week", 5, 6
    ),
    TierName.FEW_TIMES: FrequencyTier(
        TierName.FEW_TIMES, "Several Times", "3-4×", "3-4 days per week", 3, 4
    ),
    TierName.WEEKLY: FrequencyTier(
        TierName.WEEKLY, "At Least Once", "1-2×", "1-2 days per week", 1, 2
    ),
    TierName.STARTING: FrequencyTier(TierName.STARTING, "Starting", "—", "No activity yet", 0, 0),
}

TIER_ORDER: list[TierName] = list(TierName)


def get_tier_info(tier: TierName | str) -> FrequencyTier:
    return TIERS[TierName(tier)]


def get_tier_for_days_completed(days_completed: int) -> TierName:
    """Get the tier reached by a number of complete days in one week."""
    if days_completed >= 7:
        return TierName.DAILY
    if days_completed >= 5:
        return TierName.MOST_DAYS
    if days_completed >= 3:
        return TierName.FEW_TIMES
    if days_completed >= 1:
        return TierName.WEEKLY
    return TierName.STARTING


def get_best_possible_tier(days_completed: int, days_remaining: int) -> TierName:
    """Best tier still reachable this week."""
    return get_tier_for_days_completed(days_completed + days_remaining)


def get_days_remaining_in_week(today: date, completed_today: bool) -> int:
    """Days left before Sunday ends the week, counting today unless already complete."""
    days_until_sunday = 6 - today.weekday()
    return days_until_sunday if completed_today else days_until_sunday + 1


def calculate_weekly_progress(day_statuses: list[DayStatus], today: date) -> WeeklyProgress:
    """Summarize progress through the week containing ``today``."""
    start = week_start(today)
    end = week_end(today)

    days_completed = 0
    completed_today = False
    for day in day_statuses:
        if start <= day.date <= end and day.is_complete:
            days_completed += 1
            if day.date == today:
                completed_today = True

    days_remaining = get_days_remaining_in_week(today, completed_today)

    return WeeklyProgress(
        start_date=start,
        end_date=end,
        days_completed=days_completed,
        achieved_tier=get_tier_for_days_completed(days_completed),
        best_possible_tier=get_best_possible_tier(days_completed, days_remaining),
        days_remaining=days_remaining,
    )


def _times(count: int) -> str:
    return "time" if count == 1 else "times"


def generate_nudge_message(progress: WeeklyProgress, target_tier: TierName | str) -> str | None:
    """Suggest how many more days reach the target tier.

    Falls back to the best tier still reachable when the target is out of
    reach. Returns None when the target is already met or nothing is
    reachable.
    """
    target = get_tier_info(target_tier)
    days_needed = target.min_days - progress.days_completed

    if days_needed <= 0:
        return None

    if days_needed <= progress.days_remaining:
        return f"{days_needed} more {_times(days_needed)} to hit '{target.label}'"

    if progress.best_possible_tier != TierName.STARTING:
        best = get_tier_info(progress.best_possible_tier)
        best_needed = best.min_days - progress.days_completed
        if 0 < best_needed <= progress.days_remaining:
            return f"{best_needed} more {_times(best_needed)} to hit '{best.label}'"

    return None
