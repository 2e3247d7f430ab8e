"""Activity log entry model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from rhythm_engine.database import Base
from rhythm_engine.models.mixins import SoftDeleteMixin, TimestampMixin
from rhythm_engine.models.types import JSONType


class ActivityEntry(Base, TimestampMixin, SoftDeleteMixin):
    """A single logged activity.

    ``timestamp`` is the canonical timeline position: when a timed session
    started, or when an instant event happened. ``created_at`` is audit data
    only and must never be used for ordering.
    """

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)  # timed, tally, moment
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    timezone: Mapped[str] = mapped_column(String(50), default="UTC")
    data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(String(50), default="manual")

    # Relationships
    user: Mapped["User"] = relationship(back_populates="entries")  # noqa: F821

    __table_args__ = (
        Index("idx_entries_user_timestamp", "user_id", "timestamp"),
        Index("idx_entries_category", "category"),
        Index("idx_entries_type", "type"),
    )

    @validates("timestamp")
    def _normalize_timestamp(self, key: str, value: datetime) -> datetime:
        # Stored as UTC so range filters agree on backends without timezone support
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value

    def __repr__(self) -> str:
        return f"<ActivityEntry(id={self.id}, name='{self.name}', timestamp={self.timestamp})>"
