"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator
from datetime import datetime
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JOURNEY_STAGE_BASIS"] = "weeks"

from rhythm_engine.database import Base
from rhythm_engine.models import ActivityEntry, Rhythm, User


@pytest.fixture(scope="session")
def engine():
    """Create test database engine (one shared in-memory SQLite connection)."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="session")
def tables(engine):
    """Create all tables for tests."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine, tables) -> Generator[Session, None, None]:
    """Create a new database session for a test."""
    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def user(db_session: Session) -> User:
    """A user on UTC calendar days."""
    user = User(name="Rhythm Test User", timezone="UTC")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def make_entry(db_session: Session, user: User) -> Callable[..., ActivityEntry]:
    """Factory for activity entries owned by ``user`` unless overridden."""

    def _make_entry(timestamp: datetime, duration_seconds: int | None = 600, **overrides: Any):
        values = {
            "user_id": user.id,
            "type": "timed",
            "name": "meditation",
            "category": "mindfulness",
            "subcategory": "sitting",
            "timestamp": timestamp,
            "duration_seconds": duration_seconds,
        }
        values.update(overrides)
        entry = ActivityEntry(**values)
        db_session.add(entry)
        db_session.commit()
        return entry

    return _make_entry


@pytest.fixture
def make_rhythm(db_session: Session, user: User) -> Callable[..., Rhythm]:
    """Factory for rhythms matching mindfulness entries by default."""

    def _make_rhythm(**overrides: Any) -> Rhythm:
        values = {
            "user_id": user.id,
            "name": "Daily Meditation",
            "match_category": "mindfulness",
            "goal_type": "duration",
            "goal_value": 6,
            "goal_unit": "minutes",
            "frequency": "daily",
            "duration_threshold_seconds": 360,
            "chain_type": "daily",
        }
        values.update(overrides)
        rhythm = Rhythm(**values)
        db_session.add(rhythm)
        db_session.commit()
        return rhythm

    return _make_rhythm
