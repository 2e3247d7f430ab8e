"""Rhythm presentation schemas."""

from datetime import date

from pydantic import BaseModel

from rhythm_engine.models.encouragement import JourneyStage, TierName
from rhythm_engine.models.rhythm import ChainType
from rhythm_engine.schemas.chain import ChainSummary, RhythmTotals
from rhythm_engine.schemas.entry import DayStatus


class PeriodStats(BaseModel):
    """Session statistics for a time window."""

    sessions: int = 0
    total_minutes: float = 0.0
    average_duration: float = 0.0


class RhythmPeriodStats(BaseModel):
    today: PeriodStats
    this_week: PeriodStats
    this_month: PeriodStats
    all_time: PeriodStats


class RhythmStreak(BaseModel):
    current: int = 0
    longest: int = 0
    last_completed: date | None = None
    started_at: date | None = None


class RhythmWithStats(BaseModel):
    """A rhythm with its period statistics and streak."""

    id: int
    name: str
    description: str | None = None
    goal_type: str
    goal_value: int
    frequency: str
    chain_type: ChainType
    streak: RhythmStreak
    stats: RhythmPeriodStats


class WeeklyProgress(BaseModel):
    """Progress through the current Monday-Sunday week."""

    start_date: date
    end_date: date
    days_completed: int
    achieved_tier: TierName
    best_possible_tier: TierName
    days_remaining: int
    nudge_message: str | None = None


class RhythmProgress(BaseModel):
    """Everything a progress panel needs for one rhythm."""

    rhythm_id: int
    chain_type: ChainType
    chain_target_minutes: int | None = None
    duration_threshold_seconds: int
    current_week: WeeklyProgress
    chain: ChainSummary
    chains: list[ChainSummary]
    days: list[DayStatus]
    totals: RhythmTotals
    journey_stage: JourneyStage
    encouragement: str
