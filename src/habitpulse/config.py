"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, rejecting garbage loudly."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitPulse"
    DB_FILENAME = "habitpulse.db"

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITPULSE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITPULSE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITPULSE_DATABASE_URL", self._build_sqlite_url())
        self.CRON_SECRET = os.getenv("HABITPULSE_CRON_SECRET") or None

        self.DEFAULT_TIMEZONE = os.getenv("HABITPULSE_DEFAULT_TIMEZONE", "Europe/Paris")
        self.DEFAULT_REMINDER_TIME = os.getenv("HABITPULSE_DEFAULT_REMINDER_TIME", "08:00")
        self.REMINDER_LEAD_MINUTES = _env_int("HABITPULSE_REMINDER_LEAD_MINUTES", 20)
        self.REMINDER_GRACE_MINUTES = _env_int("HABITPULSE_REMINDER_GRACE_MINUTES", 120)
        self.STREAK_LOOKBACK_DAYS = _env_int("HABITPULSE_STREAK_LOOKBACK_DAYS", 365)

        self.SCHEDULER_ENABLED = _env_bool("HABITPULSE_SCHEDULER_ENABLED", default=False)
        self.SCHEDULER_INTERVAL_MINUTES = _env_int("HABITPULSE_SCHEDULER_INTERVAL_MINUTES", 5)

        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITPULSE_SECRET_KEY must be set in non-dev mode.")
        if self.REMINDER_LEAD_MINUTES < 0 or self.REMINDER_GRACE_MINUTES < 0:
            raise ValueError("Reminder lead and grace minutes must not be negative.")
        if self.SCHEDULER_INTERVAL_MINUTES < 1:
            raise ValueError("HABITPULSE_SCHEDULER_INTERVAL_MINUTES must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITPULSE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never starts background jobs."""

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.SCHEDULER_ENABLED = False
