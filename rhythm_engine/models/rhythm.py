"""Rhythm model and chain enums."""

from datetime import date
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhythm_engine.database import Base
from rhythm_engine.models.mixins import TimestampMixin
from rhythm_engine.models.types import JSONType


class ChainType(str, Enum):
    """How a rhythm's chain is periodized and judged."""

    DAILY = "daily"  # consecutive complete days
    WEEKLY_HIGH = "weekly_high"  # 5+ complete days per week
    WEEKLY_LOW = "weekly_low"  # 3+ complete days per week
    WEEKLY_TARGET = "weekly_target"  # cumulative minutes per week
    MONTHLY_TARGET = "monthly_target"  # cumulative minutes per month


class ChainUnit(str, Enum):
    """Unit a chain length is counted in."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class Rhythm(Base, TimestampMixin):
    """A user-defined recurring activity pattern.

    Entries match a rhythm when every non-null ``match_*`` column equals the
    entry's field. Deleting a rhythm leaves its entries untouched.
    """

    __tablename__ = "rhythms"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Matching criteria (AND-combined)
    match_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    match_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    match_subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    match_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Goal
    goal_type: Mapped[str] = mapped_column(String(50), default="duration")  # boolean, duration, count
    goal_value: Mapped[int] = mapped_column(Integer, default=6)
    goal_unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    frequency: Mapped[str] = mapped_column(String(50), default="daily")  # daily, weekly, monthly
    frequency_target: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Denormalized streak scalars for simple consumers
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Chains
    duration_threshold_seconds: Mapped[int] = mapped_column(Integer, default=360)
    chain_type: Mapped[str] = mapped_column(String(50), default=ChainType.WEEKLY_LOW.value)
    chain_target_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cached_chain_stats: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="rhythms")  # noqa: F821

    __table_args__ = (Index("idx_rhythms_user_id", "user_id"),)

    def __repr__(self) -> str:
        return f"<Rhythm(id={self.id}, name='{self.name}', chain_type='{self.chain_type}')>"
