"""Pydantic schemas for engine values and presentation output."""

from rhythm_engine.schemas.chain import (
    SNAPSHOT_VERSION,
    CachedChainData,
    ChainStat,
    ChainSummary,
    CurrentChainState,
    RhythmTotals,
)
from rhythm_engine.schemas.entry import DayStatus, EntryRecord
from rhythm_engine.schemas.rhythm import (
    PeriodStats,
    RhythmPeriodStats,
    RhythmProgress,
    RhythmStreak,
    RhythmWithStats,
    WeeklyProgress,
)

__all__ = [
    "SNAPSHOT_VERSION",
    "CachedChainData",
    "ChainStat",
    "ChainSummary",
    "CurrentChainState",
    "DayStatus",
    "EntryRecord",
    "PeriodStats",
    "RhythmPeriodStats",
    "RhythmProgress",
    "RhythmStreak",
    "RhythmTotals",
    "RhythmWithStats",
    "WeeklyProgress",
]
