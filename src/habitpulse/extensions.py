"""Database and repository wiring for the Flask app."""

from __future__ import annotations

from typing import Any

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelHabitRepository,
    SQLModelNotificationRepository,
)
from .services.reminders import ReminderPolicy

EXTENSION_KEY = "habitpulse"


def init_db(app: Flask) -> None:
    """Create the engine, schema and session factory for ``app``."""

    config: BaseConfig = app.config["HABITPULSE_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)
    # TODO: replace create_all with Alembic migrations once the schema settles.

    state = app.extensions.setdefault(EXTENSION_KEY, {})
    state["engine"] = engine
    state["session_factory"] = create_session_factory(engine)
    state["reminder_policy"] = ReminderPolicy.from_config(config)


def _state(app: Flask | None = None) -> dict[str, Any]:
    app = app or current_app
    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:  # pragma: no cover - exercised only on misconfigured apps
        raise RuntimeError("Database not initialized; call init_db(app) first") from None


def get_session_factory(app: Flask | None = None) -> SessionFactory:
    """Return the session factory bound to the app."""

    return _state(app)["session_factory"]


def get_reminder_policy(app: Flask | None = None) -> ReminderPolicy:
    """Return the reminder window policy built from configuration."""

    return _state(app)["reminder_policy"]


def habit_repository(app: Flask | None = None) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(get_session_factory(app))


def notification_repository(app: Flask | None = None) -> SQLModelNotificationRepository:
    return SQLModelNotificationRepository(get_session_factory(app))


def category_repository(app: Flask | None = None) -> SQLModelCategoryRepository:
    return SQLModelCategoryRepository(get_session_factory(app))
