"""Reminder scheduling: emit at most one reminder per habit per day.

A pass is cheap and idempotent, so callers (cron route, client poll, the
background job, the CLI) just run it again on the next tick. A failure on one
habit is logged and skipped; the rest of the batch still goes through.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from ..domain.repositories import HabitRepository, NotificationRepository
from ..models.habit import Habit, HabitReminder
from ..models.notification import REMINDER_TYPE, Notification
from .activity import is_active_on, week_start
from .reminders import DEFAULT_POLICY, ReminderPolicy, should_fire_now
from .timezones import ensure_utc

logger = logging.getLogger("habitpulse.notifications")


@dataclass(slots=True)
class ReminderCandidate:
    """A habit with its reminder and this week's done days."""

    habit: Habit
    reminder: HabitReminder | None = None
    completed_dates: set[date] = field(default_factory=set)

    @classmethod
    def from_habit(cls, habit: Habit, completed_dates: Iterable[date] = ()) -> "ReminderCandidate":
        reminder = habit.reminders[0] if habit.reminders else None
        return cls(habit=habit, reminder=reminder, completed_dates=set(completed_dates))


def build_reminder_notification(
    habit: Habit, reminder: HabitReminder | None, *, user_id: int, now: datetime
) -> Notification:
    """Notification row for a fired reminder."""

    payload = {
        "habitId": habit.id,
        "habitName": habit.name,
        "reminderTime": reminder.at_time if reminder else None,
        "timezone": reminder.timezone if reminder else None,
    }
    return Notification(
        user_id=user_id,
        habit_id=habit.id,
        type=REMINDER_TYPE,
        payload=json.dumps(payload),
        read=False,
        created_at=now,
    )


class ReminderScheduler:
    """Runs the per-habit pipeline and writes notifications."""

    def __init__(
        self, notifications: NotificationRepository, *, policy: ReminderPolicy = DEFAULT_POLICY
    ):
        self.notifications = notifications
        self.policy = policy

    def tick(
        self,
        candidates: Iterable[ReminderCandidate],
        *,
        now: datetime,
        user_id: int | None = None,
    ) -> list[int]:
        """Evaluate every candidate once; return the ids of habits that fired.

        ``user_id`` overrides the habit owner as the notification recipient.
        """

        now = ensure_utc(now)
        today = now.date()
        fired: list[int] = []
        evaluated = 0

        for candidate in candidates:
            evaluated += 1
            try:
                if self._fire_if_due(candidate, now=now, today=today, user_id=user_id):
                    fired.append(candidate.habit.id)
            except Exception:
                logger.exception(
                    "Reminder evaluation failed for habit %s", candidate.habit.id
                )

        logger.info(
            "Reminder pass finished",
            extra={"evaluated": evaluated, "fired": len(fired), "at": now.isoformat()},
        )
        return fired

    def _fire_if_due(
        self,
        candidate: ReminderCandidate,
        *,
        now: datetime,
        today: date,
        user_id: int | None,
    ) -> bool:
        habit = candidate.habit

        if not is_active_on(habit, today, completed_dates=candidate.completed_dates):
            return False
        if today in candidate.completed_dates:
            return False

        recipient = user_id if user_id is not None else habit.user_id
        if self.notifications.exists_for_day(
            user_id=recipient, habit_id=habit.id, day=today, type=REMINDER_TYPE
        ):
            return False

        if not should_fire_now(now, candidate.reminder, policy=self.policy):
            return False

        self.notifications.create(
            build_reminder_notification(habit, candidate.reminder, user_id=recipient, now=now)
        )
        logger.info("Reminder created for habit %s (user %s)", habit.id, recipient)
        return True


def load_candidates(
    habits_repo: HabitRepository, *, today: date, user_id: int | None = None
) -> list[ReminderCandidate]:
    """Habits wanting reminders, each with its done days since Monday."""

    habits = habits_repo.list_for_reminders(user_id=user_id)
    completions = habits_repo.completion_dates(
        [habit.id for habit in habits if habit.id is not None],
        start=week_start(today),
        end=today,
    )
    return [
        ReminderCandidate.from_habit(habit, completions.get(habit.id, set()))
        for habit in habits
        if habit.id is not None
    ]


def run_reminder_pass(
    habits_repo: HabitRepository,
    notifications_repo: NotificationRepository,
    *,
    now: datetime,
    user_id: int | None = None,
    policy: ReminderPolicy = DEFAULT_POLICY,
) -> list[int]:
    """Load today's candidates and run one scheduler tick."""

    now = ensure_utc(now)
    candidates = load_candidates(habits_repo, today=now.date(), user_id=user_id)
    scheduler = ReminderScheduler(notifications_repo, policy=policy)
    return scheduler.tick(candidates, now=now, user_id=user_id)


__all__ = [
    "ReminderCandidate",
    "ReminderScheduler",
    "build_reminder_notification",
    "load_candidates",
    "run_reminder_pass",
]
