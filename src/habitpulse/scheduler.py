"""Background reminder scheduler for long-running deployments."""

from __future__ import annotations

from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from flask import Flask

from .extensions import get_reminder_policy, habit_repository, notification_repository
from .logging_config import get_logger
from .services.notifications import run_reminder_pass

logger = get_logger("scheduler")

REMINDER_JOB_ID = "reminder_pass"


class ReminderBackgroundScheduler:
    """Runs the global reminder pass on a fixed interval."""

    def __init__(self, app: Flask, *, interval_minutes: int = 5):
        """Bind the scheduler to an app.

        Args:
            app: Flask app whose database and reminder policy the job uses
            interval_minutes: Minutes between two passes
        """
        self.app = app
        self.interval_minutes = interval_minutes
        self.scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler(timezone=timezone.utc)
        self.scheduler.add_job(
            func=self.run_once,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=REMINDER_JOB_ID,
            name="Habit reminder pass",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Scheduled reminder pass every %s minutes", self.interval_minutes)

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.running:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_once(self, now: datetime | None = None) -> list[int]:
        """Execute one global reminder pass; failures are logged, never raised."""
        now = now or datetime.now(timezone.utc)
        try:
            return run_reminder_pass(
                habit_repository(self.app),
                notification_repository(self.app),
                now=now,
                policy=get_reminder_policy(self.app),
            )
        except Exception:
            logger.exception("Scheduled reminder pass failed")
            return []


def create_scheduler(app: Flask, *, auto_start: bool = False) -> ReminderBackgroundScheduler:
    """Create and optionally start the reminder scheduler for ``app``."""
    config = app.config["HABITPULSE_CONFIG"]
    scheduler = ReminderBackgroundScheduler(
        app, interval_minutes=config.SCHEDULER_INTERVAL_MINUTES
    )
    if auto_start:
        scheduler.start()
    return scheduler
