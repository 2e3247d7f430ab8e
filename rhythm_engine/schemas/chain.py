"""Chain statistics and cache snapshot schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from rhythm_engine.models.rhythm import ChainType, ChainUnit

# Bump whenever the snapshot shape changes; older blobs are recalculated.
SNAPSHOT_VERSION = 2


class ChainStat(BaseModel):
    """Current and longest chain for one chain type."""

    type: ChainType
    current: int = Field(default=0, ge=0)
    longest: int = Field(default=0, ge=0)
    unit: ChainUnit


class ChainSummary(ChainStat):
    """Chain statistic with display labels."""

    label: str
    description: str


class RhythmTotals(BaseModel):
    """Lifetime aggregates for a rhythm."""

    total_sessions: int = 0
    total_seconds: int = 0
    total_hours: float = 0.0
    total_count: int | float = 0
    first_entry_date: date | None = None
    weeks_active: int = 0
    months_active: int = 0


class CurrentChainState(BaseModel):
    """State of the open period at calculation time."""

    last_complete_date: date | None = None
    last_period_key: str | None = None  # week start (YYYY-MM-DD) or month (YYYY-MM)
    this_period_days: int = 0
    this_period_seconds: int = 0


class CachedChainData(BaseModel):
    """Persisted snapshot of a rhythm's chain calculation."""

    version: int = SNAPSHOT_VERSION
    chains: list[ChainStat]
    current_chain: CurrentChainState
    totals: RhythmTotals
    last_calculated_at: datetime
    last_entry_timestamp: datetime | None = None

    def get_chain(self, chain_type: ChainType | str) -> ChainStat | None:
        """Return the stored statistic for a chain type, if present."""
        for chain in self.chains:
            if chain.type == ChainType(chain_type):
                return chain
        return None
