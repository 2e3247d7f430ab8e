"""Tests for Celery tasks."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from rhythm_engine.tasks.rhythm_tasks import (
    recalculate_rhythm,
    recalculate_rhythms_for_user,
    refresh_stale_rhythms,
)

TASKS = "rhythm_engine.tasks.rhythm_tasks"


@pytest.fixture
def task_session(db_session):
    """Hand the test session to tasks and keep it open afterwards."""
    with patch(f"{TASKS}.SessionLocal", return_value=db_session), patch.object(
        db_session, "close"
    ) as close:
        yield close


def add_history(make_entry) -> None:
    # Three consecutive days long before today
    for day in (3, 4, 5):
        make_entry(datetime(2025, 3, day, 8, 0, tzinfo=timezone.utc))


class TestRecalculateRhythm:
    """Tests for recalculating a single rhythm."""

    def test_recalculates_and_summarizes(self, task_session, db_session, make_entry, make_rhythm):
        rhythm = make_rhythm()
        add_history(make_entry)

        result = recalculate_rhythm(rhythm.id)

        assert result == {
            "rhythm_id": rhythm.id,
            "chain_type": "daily",
            "current": 0,
            "longest": 3,
        }
        db_session.refresh(rhythm)
        assert rhythm.longest_streak == 3
        assert rhythm.cached_chain_stats is not None
        task_session.assert_called_once()

    def test_missing_rhythm(self, task_session):
        assert recalculate_rhythm(999999) is None
        task_session.assert_called_once()

    def test_failure_rolls_back_and_reraises(self):
        db = MagicMock()
        with patch(f"{TASKS}.SessionLocal", return_value=db), patch(
            f"{TASKS}.RhythmService"
        ) as service_class:
            service_class.return_value.recalculate.side_effect = RuntimeError("boom")

            with pytest.raises(RuntimeError):
                recalculate_rhythm(1)

        db.rollback.assert_called_once()
        db.close.assert_called_once()


class TestRecalculateRhythmsForUser:
    """Tests for recalculating every rhythm of a user."""

    def test_recalculates_all(self, task_session, user, make_entry, make_rhythm):
        make_rhythm()
        make_rhythm(name="Weekly Meditation", chain_type="weekly_low")
        add_history(make_entry)

        assert recalculate_rhythms_for_user(user.id) == 2

    def test_one_failure_does_not_stop_the_rest(self):
        db = MagicMock()
        db.query.return_value.filter.return_value.all.return_value = [MagicMock(), MagicMock()]
        with patch(f"{TASKS}.SessionLocal", return_value=db), patch(
            f"{TASKS}.RhythmService"
        ) as service_class:
            service_class.return_value.recalculate.side_effect = [RuntimeError("boom"), None]

            assert recalculate_rhythms_for_user(1) == 1

        db.rollback.assert_called_once()
        db.close.assert_called_once()


class TestRefreshStaleRhythms:
    """Tests for the periodic refresh."""

    def test_refreshes_only_stale(self, task_session, make_entry, make_rhythm):
        make_rhythm()
        add_history(make_entry)

        assert refresh_stale_rhythms() == 1
        assert refresh_stale_rhythms() == 0


class TestCeleryConfiguration:
    """Tests for task registration."""

    def test_tasks_registered(self):
        from rhythm_engine.celery_app import app

        assert "rhythm_tasks.recalculate_rhythm" in app.tasks
        assert "rhythm_tasks.recalculate_rhythms_for_user" in app.tasks
        assert "rhythm_tasks.refresh_stale_rhythms" in app.tasks

    def test_beat_schedule(self):
        from rhythm_engine.celery_app import app

        schedule = app.conf.beat_schedule["refresh-stale-rhythms-every-hour"]
        assert schedule["task"] == "rhythm_tasks.refresh_stale_rhythms"
