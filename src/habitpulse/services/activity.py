"""Recurrence rules: decide whether a habit is due on a calendar day.

Every view (dashboard, calendar, stats) and the reminder scheduler go through
:func:`is_active_on`, so the rule lives in exactly one place. Nothing here reads
the clock; callers pass the day they care about.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Protocol

from .timezones import utc_day

logger = logging.getLogger("habitpulse.activity")


class Frequency(str, Enum):
    """Recurrence kinds stored on ``Habit.frequency``."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"


class ScheduledHabit(Protocol):
    """Shape the predicate needs; ``models.Habit`` satisfies it."""

    id: int | None
    frequency: str
    active_days: str | None
    start_date: date | None
    end_date: date | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Recurrence:
    """Parsed recurrence descriptor. ``kind`` is None for unknown frequencies."""

    kind: Frequency | None
    active_weekdays: frozenset[int] = frozenset()


def parse_active_days(raw: Any) -> frozenset[int]:
    """Decode the stored weekday set (JSON text or an iterable of ints).

    Malformed input yields an empty set, which makes a custom habit never due.
    """

    if raw is None or raw == "":
        return frozenset()
    values = raw
    if isinstance(raw, (str, bytes)):
        try:
            values = json.loads(raw)
        except ValueError:
            logger.warning("Unparsable active_days %r, treating as empty", raw)
            return frozenset()
    if not isinstance(values, (list, tuple, set, frozenset)):
        logger.warning("active_days is not a list: %r", raw)
        return frozenset()

    days: set[int] = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning("Ignoring non-integer weekday %r", value)
            continue
        if 0 <= value <= 6:
            days.add(value)
    return frozenset(days)


def parse_recurrence(frequency: str | None, active_days: Any = None) -> Recurrence:
    """Build a :class:`Recurrence` from stored habit columns."""

    try:
        kind = Frequency((frequency or "").upper())
    except ValueError:
        return Recurrence(kind=None)
    if kind is Frequency.CUSTOM:
        return Recurrence(kind=kind, active_weekdays=parse_active_days(active_days))
    return Recurrence(kind=kind)


def week_start(day: date | datetime) -> date:
    """Monday of the ISO week containing ``day`` (UTC)."""

    day = utc_day(day)
    return day - timedelta(days=day.weekday())


def completed_earlier_in_week(
    completion_dates: Iterable[date], week_start: date, before: date
) -> bool:
    """True when some completion falls in ``[week_start, before)``."""

    return any(week_start <= utc_day(done) < before for done in completion_dates)


def habit_start(habit: ScheduledHabit) -> date:
    """Explicit start date, else the creation day."""

    return utc_day(habit.start_date or habit.created_at)


def is_active_on(
    habit: ScheduledHabit,
    day: date | datetime,
    *,
    completed_dates: Iterable[date] = (),
) -> bool:
    """Return whether ``habit`` is due on ``day``.

    ``completed_dates`` holds the habit's done days; only the weekly rule looks
    at it. Checks run in order and the first veto wins:

    1. before the start (or creation) day
    2. after the inclusive end day
    3. daily: always due
    4. weekly: due until completed once in the Monday-based week
    5. custom: weekday membership
    6. unknown frequency: due
    """

    day = utc_day(day)

    if day < habit_start(habit):
        return False
    if habit.end_date is not None and day > utc_day(habit.end_date):
        return False

    recurrence = parse_recurrence(habit.frequency, habit.active_days)
    if recurrence.kind is Frequency.DAILY:
        return True
    if recurrence.kind is Frequency.WEEKLY:
        return not completed_earlier_in_week(completed_dates, week_start(day), day)
    if recurrence.kind is Frequency.CUSTOM:
        return day.weekday() in recurrence.active_weekdays

    # TODO: confirm whether unknown frequencies should fail closed.
    logger.debug("Habit %s has unknown frequency %r", habit.id, habit.frequency)
    return True


__all__ = [
    "Frequency",
    "Recurrence",
    "ScheduledHabit",
    "completed_earlier_in_week",
    "habit_start",
    "is_active_on",
    "parse_active_days",
    "parse_recurrence",
    "week_start",
]
