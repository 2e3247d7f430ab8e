"""Celery tasks that keep cached rhythm chain stats up to date.

``recalculate_rhythms_for_user`` is meant to be queued right after a user's
entries change (eager invalidation); ``refresh_stale_rhythms`` runs on the
beat schedule and only touches snapshots that went stale.
"""

import logging
from typing import Any

from rhythm_engine.celery_app import app as celery_app
from rhythm_engine.database import SessionLocal
from rhythm_engine.models.rhythm import Rhythm as RhythmModel
from rhythm_engine.services.rhythms import RhythmService

logger = logging.getLogger(__name__)


@celery_app.task(name="rhythm_tasks.recalculate_rhythm")
def recalculate_rhythm(rhythm_id: int) -> dict[str, Any] | None:
    """Recalculate one rhythm's chain stats.

    Args:
        rhythm_id: Rhythm to recalculate

    Returns:
        Summary of the primary chain, or None if the rhythm does not exist
    """
    db = SessionLocal()
    try:
        rhythm = db.query(RhythmModel).filter(RhythmModel.id == rhythm_id).first()
        if not rhythm:
            logger.error(f"Rhythm {rhythm_id} not found")
            return None

        cache = RhythmService().recalculate(rhythm, rhythm.user_id, db)
        primary = cache.chains[0] if cache.chains else None
        return {
            "rhythm_id": rhythm_id,
            "chain_type": primary.type.value if primary else None,
            "current": primary.current if primary else 0,
            "longest": primary.longest if primary else 0,
        }

    except Exception as e:
        logger.error(f"Failed to recalculate rhythm {rhythm_id}: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@celery_app.task(name="rhythm_tasks.recalculate_rhythms_for_user")
def recalculate_rhythms_for_user(user_id: int) -> int:
    """Recalculate every rhythm owned by a user.

    Returns:
        Number of rhythms recalculated
    """
    logger.info(f"Recalculating rhythms for user {user_id}")
    db = SessionLocal()
    try:
        service = RhythmService()
        rhythms = db.query(RhythmModel).filter(RhythmModel.user_id == user_id).all()

        recalculated = 0
        for rhythm in rhythms:
            try:
                service.recalculate(rhythm, user_id, db)
                recalculated += 1
            except Exception as e:
                logger.error(f"Failed to recalculate rhythm {rhythm.id}: {e}")
                db.rollback()
                continue

        logger.info(f"Recalculated {recalculated}/{len(rhythms)} rhythms for user {user_id}")
        return recalculated

    finally:
        db.close()


@celery_app.task(name="rhythm_tasks.refresh_stale_rhythms")
def refresh_stale_rhythms() -> int:
    """Recalculate rhythms whose cached snapshot is stale.

    Returns:
        Number of rhythms recalculated
    """
    logger.info("Checking all rhythms for stale chain stats")
    db = SessionLocal()
    try:
        service = RhythmService()
        rhythms = db.query(RhythmModel).all()

        refreshed = 0
        for rhythm in rhythms:
            try:
                if not service.needs_recalculation(rhythm, rhythm.user_id, db):
                    continue
                service.recalculate(rhythm, rhythm.user_id, db)
                refreshed += 1
            except Exception as e:
                logger.error(f"Failed to refresh rhythm {rhythm.id}: {e}")
                db.rollback()
                continue

        logger.info(f"Refreshed {refreshed} of {len(rhythms)} rhythms")
        return refreshed

    finally:
        db.close()
