"""Rhythm statistics service.

Reads a rhythm's matching entries, localizes them to the owner's calendar,
runs the chain engine and keeps the cached snapshot on the rhythm row in
step with new activity.
"""

import logging
import random
from datetime import date, datetime, time, timedelta, timezone

import pytz
from sqlalchemy.orm import Query, Session

from rhythm_engine.config import AppConfig, Settings, get_app_config, get_settings
from rhythm_engine.models.encouragement import EncouragementContext, TierName
from rhythm_engine.models.entry import ActivityEntry as EntryModel
from rhythm_engine.models.rhythm import ChainType, Rhythm as RhythmModel
from rhythm_engine.models.user import User as UserModel
from rhythm_engine.schemas.chain import CachedChainData, ChainStat, ChainSummary
from rhythm_engine.schemas.entry import EntryRecord
from rhythm_engine.schemas.rhythm import (
    PeriodStats,
    RhythmPeriodStats,
    RhythmProgress,
    RhythmStreak,
    RhythmWithStats,
)
from rhythm_engine.services.aggregation import (
    calculate_totals,
    entries_to_day_statuses,
    entry_date,
)
from rhythm_engine.services.chains import calculate_all_chain_stats, get_chain_config
from rhythm_engine.services.encouragement import EncouragementService
from rhythm_engine.services.journey import get_journey_stage, journey_measure
from rhythm_engine.services.periods import month_key, week_start
from rhythm_engine.services.snapshot import (
    build_cache_data,
    is_cache_stale,
    load_cached_chain_data,
    to_utc,
)
from rhythm_engine.services.tiers import calculate_weekly_progress, generate_nudge_message

logger = logging.getLogger(__name__)


def _period_stats(durations: list[int]) -> PeriodStats:
    sessions = len(durations)
    total_minutes = sum(durations) / 60
    return PeriodStats(
        sessions=sessions,
        total_minutes=total_minutes,
        average_duration=total_minutes / sessions if sessions else 0.0,
    )


class RhythmService:
    """Service for rhythm chain statistics."""

    def __init__(self, app_config: AppConfig | None = None, settings: Settings | None = None):
        self.app_config = app_config or get_app_config()
        self.settings = settings or get_settings()
        self.defaults = self.app_config.rhythm_defaults

    # ------------------------------------------------------------------
    # Entry reader
    # ------------------------------------------------------------------

    def _matching_query(self, rhythm: RhythmModel, user_id: int, db: Session) -> Query:
        query = db.query(EntryModel).filter(
            EntryModel.user_id == user_id,
            EntryModel.deleted_at.is_(None),
        )
        if rhythm.match_type:
            query = query.filter(EntryModel.type == rhythm.match_type)
        if rhythm.match_category:
            query = query.filter(EntryModel.category == rhythm.match_category)
        if rhythm.match_subcategory:
            query = query.filter(EntryModel.subcategory == rhythm.match_subcategory)
        if rhythm.match_name:
            query = query.filter(EntryModel.name == rhythm.match_name)
        return query

    def get_matching_entries(
        self,
        rhythm: RhythmModel,
        user_id: int,
        db: Session,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[EntryModel]:
        """Get non-deleted entries matching a rhythm, oldest first.

        Args:
            rhythm: Rhythm whose criteria to match
            user_id: Owner of the entries
            db: Database session
            start: Inclusive lower bound on the entry timestamp
            end: Inclusive upper bound on the entry timestamp
        """
        query = self._matching_query(rhythm, user_id, db)
        if start is not None:
            query = query.filter(EntryModel.timestamp >= to_utc(start))
        if end is not None:
            query = query.filter(EntryModel.timestamp <= to_utc(end))
        return query.order_by(EntryModel.timestamp.asc(), EntryModel.id.asc()).all()

    def get_latest_entry_timestamp(
        self, rhythm: RhythmModel, user_id: int, db: Session
    ) -> datetime | None:
        """Timestamp of the newest matching entry, in UTC."""
        latest = (
            self._matching_query(rhythm, user_id, db)
            .order_by(EntryModel.timestamp.desc())
            .first()
        )
        return to_utc(latest.timestamp) if latest else None

    def get_user_timezone(self, user_id: int, db: Session) -> pytz.BaseTzInfo:
        """Timezone that defines the user's calendar days."""
        user = db.query(UserModel).filter(UserModel.id == user_id).first()
        if not user or not user.timezone:
            return pytz.UTC
        try:
            return pytz.timezone(user.timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{user.timezone}' for user {user_id}, using UTC")
            return pytz.UTC

    @staticmethod
    def to_entry_records(entries: list[EntryModel], tz: pytz.BaseTzInfo) -> list[EntryRecord]:
        """Localize entries so their date portion is the user's calendar day."""
        return [
            EntryRecord(
                id=entry.id,
                timestamp=to_utc(entry.timestamp).astimezone(tz),
                duration_seconds=entry.duration_seconds,
                data=entry.data,
            )
            for entry in entries
        ]

    # ------------------------------------------------------------------
    # Rhythm settings with defaults
    # ------------------------------------------------------------------

    def chain_type_for(self, rhythm: RhythmModel) -> ChainType:
        try:
            return ChainType(rhythm.chain_type or self.defaults["chain_type"])
        except ValueError:
            logger.warning(
                f"Rhythm {rhythm.id} has unknown chain type '{rhythm.chain_type}', using default"
            )
            return ChainType(self.defaults["chain_type"])

    def target_minutes_for(self, rhythm: RhythmModel) -> int:
        return rhythm.chain_target_minutes or self.defaults["chain_target_minutes"]

    def threshold_for(self, rhythm: RhythmModel) -> int:
        if rhythm.duration_threshold_seconds is None:
            return self.defaults["duration_threshold_seconds"]
        return rhythm.duration_threshold_seconds

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(
        self,
        rhythm: RhythmModel,
        records: list[EntryRecord],
        now_local: datetime,
        last_entry_timestamp: datetime | None,
    ) -> CachedChainData:
        """Run the chain engine over already-localized entries. No I/O."""
        day_statuses = entries_to_day_statuses(records, self.threshold_for(rhythm))
        chains = calculate_all_chain_stats(
            day_statuses,
            now_local.date(),
            primary=self.chain_type_for(rhythm),
            target_minutes=self.target_minutes_for(rhythm),
        )
        totals = calculate_totals(records, day_statuses)
        return build_cache_data(chains, totals, day_statuses, last_entry_timestamp, now_local)

    def recalculate(
        self,
        rhythm: RhythmModel,
        user_id: int,
        db: Session,
        now: datetime | None = None,
        entries: list[EntryModel] | None = None,
    ) -> CachedChainData:
        """Recalculate a rhythm from all of its entries and store the snapshot.

        Also refreshes the denormalized streak columns from the rhythm's
        configured chain. ``entries`` may be passed when the caller already
        holds every matching entry, oldest first.
        """
        now = now or datetime.now(timezone.utc)
        tz = self.get_user_timezone(user_id, db)

        if entries is None:
            entries = self.get_matching_entries(rhythm, user_id, db)
        last_entry_timestamp = to_utc(entries[-1].timestamp) if entries else None
        cache = self.calculate(
            rhythm,
            self.to_entry_records(entries, tz),
            to_utc(now).astimezone(tz),
            last_entry_timestamp,
        )

        primary = cache.chains[0] if cache.chains else None
        rhythm.cached_chain_stats = cache.model_dump(mode="json")
        rhythm.current_streak = primary.current if primary else 0
        rhythm.longest_streak = primary.longest if primary else 0
        rhythm.last_completed_date = cache.current_chain.last_complete_date
        db.commit()

        logger.info(
            f"Recalculated rhythm {rhythm.id} for user {user_id}: "
            f"{len(entries)} entries, current={rhythm.current_streak}, "
            f"longest={rhythm.longest_streak}"
        )
        return cache

    def needs_recalculation(
        self,
        rhythm: RhythmModel,
        user_id: int,
        db: Session,
        now: datetime | None = None,
        entries: list[EntryModel] | None = None,
    ) -> bool:
        """True if the stored snapshot cannot be served as-is.

        A snapshot is stale when matching entries changed since it was taken,
        when it lacks the rhythm's chain type, or when it was taken on an
        earlier calendar day (current chains depend on today).
        """
        cache = load_cached_chain_data(rhythm.cached_chain_stats)
        if entries is None:
            latest = self.get_latest_entry_timestamp(rhythm, user_id, db)
        else:
            latest = to_utc(entries[-1].timestamp) if entries else None
        if is_cache_stale(cache, latest):
            return True
        if cache.get_chain(self.chain_type_for(rhythm)) is None:
            return True

        now = now or datetime.now(timezone.utc)
        tz = self.get_user_timezone(user_id, db)
        calculated_on = to_utc(cache.last_calculated_at).astimezone(tz).date()
        return calculated_on != to_utc(now).astimezone(tz).date()

    def get_chain_data(
        self,
        rhythm: RhythmModel,
        user_id: int,
        db: Session,
        now: datetime | None = None,
        entries: list[EntryModel] | None = None,
    ) -> CachedChainData:
        """Return the stored snapshot when fresh, otherwise recalculate."""
        if not self.needs_recalculation(rhythm, user_id, db, now, entries):
            logger.debug(f"Using cached chain stats for rhythm {rhythm.id}")
            return load_cached_chain_data(rhythm.cached_chain_stats)
        return self.recalculate(rhythm, user_id, db, now, entries)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @staticmethod
    def get_streak(rhythm: RhythmModel, cache: CachedChainData | None) -> RhythmStreak:
        """Streak for list views, preferring the snapshot's first chain.

        Pass a snapshot from ``get_chain_data`` so a stale one is never shown;
        the stored streak columns are used only when there is none.
        """
        streak = RhythmStreak(
            current=rhythm.current_streak or 0,
            longest=rhythm.longest_streak or 0,
            last_completed=rhythm.last_completed_date,
        )

        if cache is None:
            return streak

        if cache.chains:
            streak.current = cache.chains[0].current
            streak.longest = cache.chains[0].longest
        if cache.current_chain.last_complete_date:
            streak.last_completed = cache.current_chain.last_complete_date
        streak.started_at = cache.totals.first_entry_date
        return streak

    def get_rhythms_with_stats(
        self, user_id: int, db: Session, now: datetime | None = None
    ) -> list[RhythmWithStats]:
        """Get every rhythm of a user with period statistics and streak.

        Periods are the user's today, this Monday-Sunday week, this calendar
        month and all time, each up to ``now``. Stale snapshots are
        recalculated first, so streaks always reflect the latest entries.
        """
        now = now or datetime.now(timezone.utc)
        tz = self.get_user_timezone(user_id, db)
        today = to_utc(now).astimezone(tz).date()
        this_week = week_start(today)
        this_month = month_key(today)

        rhythms = (
            db.query(RhythmModel)
            .filter(RhythmModel.user_id == user_id)
            .order_by(RhythmModel.created_at.desc(), RhythmModel.id.desc())
            .all()
        )

        results = []
        for rhythm in rhythms:
            # One read per rhythm serves both the period stats and the snapshot check
            entries = self.get_matching_entries(rhythm, user_id, db)
            until_now = [e for e in entries if to_utc(e.timestamp) <= to_utc(now)]
            sessions: list[tuple[date, int]] = [
                (entry_date(record.timestamp), record.duration_seconds or 0)
                for record in self.to_entry_records(until_now, tz)
            ]
            cache = self.get_chain_data(rhythm, user_id, db, now, entries)

            results.append(
                RhythmWithStats(
                    id=rhythm.id,
                    name=rhythm.name,
                    description=rhythm.description,
                    goal_type=rhythm.goal_type,
                    goal_value=rhythm.goal_value,
                    frequency=rhythm.frequency,
                    chain_type=self.chain_type_for(rhythm),
                    streak=self.get_streak(rhythm, cache),
                    stats=RhythmPeriodStats(
                        today=_period_stats([s for d, s in sessions if d == today]),
                        this_week=_period_stats(
                            [s for d, s in sessions if this_week <= d <= today]
                        ),
                        this_month=_period_stats(
                            [s for d, s in sessions if month_key(d) == this_month]
                        ),
                        all_time=_period_stats([s for _, s in sessions]),
                    ),
                )
            )

        logger.info(f"Calculated stats for {len(results)} rhythms for user {user_id}")
        return results

    @staticmethod
    def summarize_chain(chain: ChainStat) -> ChainSummary:
        config = get_chain_config(chain.type)
        return ChainSummary(
            **chain.model_dump(), label=config.label, description=config.description
        )

    def get_progress(
        self,
        rhythm_id: int,
        user_id: int,
        db: Session,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> RhythmProgress | None:
        """Build the full progress view of one rhythm.

        Returns:
            RhythmProgress, or None if the user has no such rhythm
        """
        rhythm = (
            db.query(RhythmModel)
            .filter(RhythmModel.id == rhythm_id, RhythmModel.user_id == user_id)
            .first()
        )
        if not rhythm:
            return None

        now = now or datetime.now(timezone.utc)
        tz = self.get_user_timezone(user_id, db)
        today = to_utc(now).astimezone(tz).date()

        cache = self.get_chain_data(rhythm, user_id, db, now)
        chain_type = self.chain_type_for(rhythm)
        primary = cache.get_chain(chain_type) or ChainStat(
            type=chain_type, unit=get_chain_config(chain_type).unit
        )

        # Day-by-day data only covers the trailing visualization window
        window_start = tz.localize(
            datetime.combine(today - timedelta(days=self.defaults["visualization_days"]), time.min)
        )
        recent = self.to_entry_records(
            self.get_matching_entries(rhythm, user_id, db, start=window_start), tz
        )
        days = entries_to_day_statuses(recent, self.threshold_for(rhythm))

        week = calculate_weekly_progress(days, today)
        target_tier = TierName.DAILY if rhythm.frequency == "daily" else TierName.WEEKLY
        week.nudge_message = generate_nudge_message(week, target_tier)

        basis = self.settings.journey_stage_basis
        stage = get_journey_stage(journey_measure(cache.totals, basis), basis)

        encouragement = EncouragementService(
            db, rng=rng, fallbacks=self.app_config.encouragement.get("fallbacks")
        ).select(
            stage,
            EncouragementContext.TIER_ACHIEVED
            if week.days_completed > 0
            else EncouragementContext.GENERAL,
            activity_type=rhythm.match_category or "general",
            tier_name=week.achieved_tier if week.achieved_tier != TierName.STARTING else None,
        )

        return RhythmProgress(
            rhythm_id=rhythm.id,
            chain_type=chain_type,
            chain_target_minutes=rhythm.chain_target_minutes,
            duration_threshold_seconds=self.threshold_for(rhythm),
            current_week=week,
            chain=self.summarize_chain(primary),
            chains=[self.summarize_chain(chain) for chain in cache.chains],
            days=days,
            totals=cache.totals,
            journey_stage=stage,
            encouragement=encouragement,
        )
