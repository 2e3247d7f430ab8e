"""SQLAlchemy ORM models."""

from rhythm_engine.models.encouragement import (
    Encouragement,
    EncouragementContext,
    JourneyStage,
    TierName,
)
from rhythm_engine.models.entry import ActivityEntry
from rhythm_engine.models.rhythm import ChainType, ChainUnit, Rhythm
from rhythm_engine.models.user import User

__all__ = [
    "ActivityEntry",
    "ChainType",
    "ChainUnit",
    "Encouragement",
    "EncouragementContext",
    "JourneyStage",
    "Rhythm",
    "TierName",
    "User",
]
