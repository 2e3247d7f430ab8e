"""Celery application configuration."""

from celery import Celery

from rhythm_engine.config import get_settings

settings = get_settings()

app = Celery(
    "rhythm_engine",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["rhythm_engine.tasks.rhythm_tasks"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Result expiration
    result_expires=3600,  # 1 hour
    # Beat schedule for periodic tasks
    beat_schedule={
        "refresh-stale-rhythms-every-hour": {
            "task": "rhythm_tasks.refresh_stale_rhythms",
            "schedule": 3600.0,  # Every hour; current chains roll over at midnight
        },
    },
)
