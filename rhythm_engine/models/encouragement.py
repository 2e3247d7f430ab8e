"""Encouragement message model."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rhythm_engine.database import Base


class JourneyStage(str, Enum):
    """Qualitative stage of a practice, ordered from newest to most established."""

    STARTING = "starting"
    BUILDING = "building"
    BECOMING = "becoming"
    BEING = "being"


class TierName(str, Enum):
    """Weekly frequency tier, ordered from most to least demanding."""

    DAILY = "daily"  # 7 days
    MOST_DAYS = "most_days"  # 5-6 days
    FEW_TIMES = "few_times"  # 3-4 days
    WEEKLY = "weekly"  # 1-2 days
    STARTING = "starting"  # no complete days yet


class EncouragementContext(str, Enum):
    """Situation an encouragement message is written for."""

    GENERAL = "general"
    TIER_ACHIEVED = "tier_achieved"
    STREAK_MILESTONE = "streak_milestone"
    MID_WEEK_NUDGE = "mid_week_nudge"


class Encouragement(Base):
    """Library entry of identity-based messages shown alongside progress."""

    __tablename__ = "encouragements"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    stage: Mapped[str] = mapped_column(String(50), nullable=False)
    context: Mapped[str] = mapped_column(String(50), nullable=False)
    activity_type: Mapped[str] = mapped_column(String(100), default="general", nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    tier_name: Mapped[str | None] = mapped_column(String(50), nullable=True)  # null = any tier
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (Index("idx_encouragements_stage_context", "stage", "context"),)

    def __repr__(self) -> str:
        return f"<Encouragement(id={self.id}, stage='{self.stage}', context='{self.context}')>"
