"""Pytest configuration and shared fixtures for HabitPulse tests.

This module provides database fixtures, test data factories, and an app
fixture for exercising services, repositories and routes without touching the
real application database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

# Import all models to ensure they're registered with SQLModel metadata
from habitpulse.infra.database import create_session_factory
from habitpulse.models import Category, Habit, HabitLog, HabitReminder, Notification, User

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory with the same transactional scope the app uses."""
    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Create a default user for scoping data."""

    existing = db_session.exec(select(User).where(User.username == "tester")).first()
    if existing:
        return existing
    u = User(username="tester", email="tester@example.com")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def other_user(db_session) -> User:
    """A second user to check ownership boundaries."""

    u = User(username="someone-else")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        frequency: str = "DAILY",
        active_days: str | None = None,
        created_at: datetime = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc),
        start_date: date | None = None,
        end_date: date | None = None,
        notifications_enabled: bool = True,
        reminder: tuple[str, str | None] | None = None,
        owner: User | None = None,
        category: Category | None = None,
    ) -> Habit:
        """Create a test habit with sensible defaults.

        Args:
            name: Habit name
            frequency: DAILY, WEEKLY or CUSTOM
            active_days: JSON weekday list for custom habits
            reminder: Optional (at_time, timezone) pair
            category: Optional category to file the habit under

        Returns:
            Habit: Persisted habit instance
        """
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            frequency=frequency,
            active_days=active_days,
            created_at=created_at,
            start_date=start_date,
            end_date=end_date,
            notifications_enabled=notifications_enabled,
            category_id=category.id if category else None,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        if reminder is not None:
            at_time, tz_name = reminder
            db_session.add(HabitReminder(habit_id=habit.id, at_time=at_time, timezone=tz_name))
            db_session.commit()
        return habit

    return _create_habit


@pytest.fixture
def category_factory(db_session, user):
    """Factory for habit categories."""

    def _create_category(
        name: str = "Health", color: str = "green", owner: User | None = None
    ) -> Category:
        owner = owner or user
        category = Category(user_id=owner.id, name=name, color=color)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _create_category


@pytest.fixture
def log_factory(db_session):
    """Factory for completion logs."""

    def _create_log(habit: Habit, occurred_on: date, done: bool = True) -> HabitLog:
        log = HabitLog(habit_id=habit.id, occurred_on=occurred_on, done=done)
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _create_log


@pytest.fixture
def notification_factory(db_session, user):
    """Factory for notification rows."""

    def _create_notification(
        habit_id: int | None = None,
        created_at: datetime = datetime(2024, 1, 3, 6, 0, tzinfo=timezone.utc),
        read: bool = False,
        owner: User | None = None,
    ) -> Notification:
        owner = owner or user
        row = Notification(
            user_id=owner.id,
            habit_id=habit_id,
            payload='{"habitName": "Test Habit"}',
            read=read,
            created_at=created_at,
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _create_notification


# =============================================================================
# Flask app
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Application wired to a throwaway data directory and database."""

    monkeypatch.setenv("HABITPULSE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITPULSE_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.delenv("HABITPULSE_CRON_SECRET", raising=False)

    from habitpulse import create_app

    flask_app = create_app("testing")
    yield flask_app
    flask_app.extensions["habitpulse"]["engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_user(app) -> User:
    """User row inside the app database."""

    from habitpulse.extensions import get_session_factory

    with get_session_factory(app)() as session:
        u = User(username="api-user")
        session.add(u)
        session.commit()
        session.refresh(u)
        return u


@pytest.fixture
def auth_headers(app_user) -> dict[str, str]:
    return {"X-User-Id": str(app_user.id)}
