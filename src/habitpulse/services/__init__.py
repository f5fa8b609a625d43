"""Domain services: recurrence, streaks, reminder windows and scheduling."""

from .activity import completed_earlier_in_week, is_active_on, week_start
from .habits import compute_streaks, longest_streak, streak
from .notifications import ReminderScheduler, run_reminder_pass
from .reminders import ReminderPolicy, compute_reminder_window, should_fire_now
from .timezones import timezone_offset_minutes

__all__ = [
    "ReminderPolicy",
    "ReminderScheduler",
    "completed_earlier_in_week",
    "compute_reminder_window",
    "compute_streaks",
    "is_active_on",
    "longest_streak",
    "run_reminder_pass",
    "should_fire_now",
    "streak",
    "timezone_offset_minutes",
    "week_start",
]
