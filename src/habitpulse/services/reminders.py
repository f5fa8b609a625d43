"""Reminder firing window: decide whether a reminder should go out right now."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Protocol

from .timezones import DEFAULT_TIMEZONE, ensure_utc, timezone_offset_minutes

_AT_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")


class InvalidReminderTime(ValueError):
    """Raised when a reminder's ``at_time`` is not a valid ``HH:MM`` string."""


class ReminderLike(Protocol):
    at_time: str
    timezone: str | None


def parse_at_time(value: str) -> time:
    """Parse ``"HH:MM"`` (24h) into a :class:`datetime.time`."""

    match = _AT_TIME_RE.fullmatch((value or "").strip())
    if not match:
        raise InvalidReminderTime(f"Reminder time must look like HH:MM, got {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidReminderTime(f"Reminder time out of range: {value!r}")
    return time(hours, minutes)


@dataclass(frozen=True, slots=True)
class ReminderPolicy:
    """Constants of the firing window, overridable through configuration."""

    default_time: time = time(8, 0)
    default_timezone: str = DEFAULT_TIMEZONE
    lead: timedelta = timedelta(minutes=20)
    grace: timedelta = timedelta(hours=2)

    @classmethod
    def from_config(cls, config) -> "ReminderPolicy":
        """Build a policy from a :class:`habitpulse.config.BaseConfig`."""

        return cls(
            default_time=parse_at_time(config.DEFAULT_REMINDER_TIME),
            default_timezone=config.DEFAULT_TIMEZONE,
            lead=timedelta(minutes=config.REMINDER_LEAD_MINUTES),
            grace=timedelta(minutes=config.REMINDER_GRACE_MINUTES),
        )


DEFAULT_POLICY = ReminderPolicy()


@dataclass(frozen=True, slots=True)
class ReminderWindow:
    """UTC instants bounding when a reminder may fire for one day.

    ``due_at`` is the habit's own time and only exists for explicit reminders.
    """

    notify_at: datetime
    closes_at: datetime
    due_at: datetime | None = None

    def contains(self, now: datetime) -> bool:
        now = ensure_utc(now)
        return self.notify_at <= now <= self.closes_at and self.notify_at.date() == now.date()


def compute_reminder_window(
    now: datetime,
    reminder: ReminderLike | None = None,
    *,
    policy: ReminderPolicy = DEFAULT_POLICY,
) -> ReminderWindow:
    """Compute today's firing window for ``reminder`` (or the default reminder).

    The wall-clock time is placed on ``now``'s UTC day, then shifted by the
    timezone's offset at ``now`` to get the real UTC instant. Explicit
    reminders fire ``policy.lead`` early and close at the habit's own time or
    ``policy.grace`` after opening, whichever comes first.
    """

    now = ensure_utc(now)
    if reminder is not None:
        at = parse_at_time(reminder.at_time)
        tz_name = reminder.timezone or policy.default_timezone
    else:
        at = policy.default_time
        tz_name = policy.default_timezone

    offset = timezone_offset_minutes(now, tz_name, default=policy.default_timezone)
    wall = datetime.combine(now.date(), at, tzinfo=timezone.utc) - timedelta(minutes=offset)

    if reminder is None:
        return ReminderWindow(notify_at=wall, closes_at=wall + policy.grace)

    notify_at = wall - policy.lead
    return ReminderWindow(
        notify_at=notify_at,
        closes_at=min(wall, notify_at + policy.grace),
        due_at=wall,
    )


def should_fire_now(
    now: datetime,
    reminder: ReminderLike | None = None,
    *,
    policy: ReminderPolicy = DEFAULT_POLICY,
) -> bool:
    """True when ``now`` falls inside today's firing window."""

    return compute_reminder_window(now, reminder, policy=policy).contains(now)


__all__ = [
    "DEFAULT_POLICY",
    "InvalidReminderTime",
    "ReminderPolicy",
    "ReminderWindow",
    "compute_reminder_window",
    "parse_at_time",
    "should_fire_now",
]
