"""Celery tasks for the rhythm engine."""

from rhythm_engine.tasks.rhythm_tasks import (
    recalculate_rhythm,
    recalculate_rhythms_for_user,
    refresh_stale_rhythms,
)

__all__ = [
    "recalculate_rhythm",
    "recalculate_rhythms_for_user",
    "refresh_stale_rhythms",
]
