"""User model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rhythm_engine.database import Base


class User(Base):
    """User model. The timezone defines the user's calendar day boundaries."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    timezone: Mapped[str] = mapped_column(String(50), default="UTC")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    entries: Mapped[list["ActivityEntry"]] = relationship(back_populates="user")  # noqa: F821
    rhythms: Mapped[list["Rhythm"]] = relationship(back_populates="user")  # noqa: F821

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}')>"
