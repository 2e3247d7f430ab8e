"""Entry and day status schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class EntryRecord(BaseModel):
    """Entry as seen by the chain engine.

    ``timestamp`` is already localized to the owner's timezone, so its date
    portion is the user's calendar day.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    timestamp: datetime
    duration_seconds: int | None = None
    data: dict[str, Any] | None = None


class DayStatus(BaseModel):
    """Aggregate of matching entries for one calendar day."""

    date: date
    total_seconds: int = 0
    total_count: int | float = 0
    entry_count: int = 0
    is_complete: bool = False
