"""Habit service helpers for streaks and the dashboard/stats/calendar views."""

from __future__ import annotations

import calendar
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..models.category import UNCATEGORISED
from ..models.habit import Habit
from .activity import is_active_on, parse_active_days

DEFAULT_STREAK_LOOKBACK = 365


def streak(
    completion_dates: Iterable[date],
    reference_date: date,
    max_lookback: int = DEFAULT_STREAK_LOOKBACK,
) -> int:
    """Count consecutive completed days ending at ``reference_date``.

    Zero when ``reference_date`` itself is not completed. Weekly habits are
    counted the same way (raw calendar days, not weeks).
    """

    completed = set(completion_dates)
    count = 0
    cursor = reference_date
    for _ in range(max_lookback):
        if cursor not in completed:
            break
        count += 1
        cursor -= timedelta(days=1)
    return count


def longest_streak(completion_dates: Iterable[date]) -> int:
    """Longest run of consecutive completed days anywhere in history."""

    longest = 0
    run = 0
    last_day: date | None = None
    for day in sorted(set(completion_dates)):
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


def compute_streaks(
    completion_dates: Iterable[date],
    *,
    today: date,
    max_lookback: int = DEFAULT_STREAK_LOOKBACK,
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) for a set of completion days."""

    dates = set(completion_dates)
    return streak(dates, today, max_lookback), longest_streak(dates)


def _percentage(part: int, whole: int) -> int:
    """Whole percent, halves rounded up."""

    return (part * 200 + whole) // (whole * 2) if whole else 0


@dataclass(slots=True)
class HabitCard:
    """Per-habit values the dashboard renders."""

    id: int
    name: str
    description: str
    color: str
    frequency: str
    active_days: list[int]
    streak: int
    active_today: bool
    completed_today: bool
    category: str = UNCATEGORISED
    category_color: str = "purple"
    completed_dates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "category": self.category,
            "categoryColor": self.category_color,
            "frequency": self.frequency.lower(),
            "activeDays": self.active_days,
            "streak": self.streak,
            "activeToday": self.active_today,
            "completedToday": self.completed_today,
            "completedDates": self.completed_dates,
        }


def build_dashboard(
    habits: Sequence[Habit],
    completions: Mapping[int, set[date]],
    *,
    today: date,
    max_lookback: int = DEFAULT_STREAK_LOOKBACK,
) -> dict:
    """Habit cards plus today's completion ratio over habits due today."""

    cards: list[HabitCard] = []
    for habit in habits:
        if habit.id is None:
            continue
        dates = completions.get(habit.id, set())
        cards.append(
            HabitCard(
                id=habit.id,
                name=habit.name,
                description=habit.description,
                color=habit.color,
                frequency=habit.frequency,
                active_days=sorted(parse_active_days(habit.active_days)),
                streak=streak(dates, today, max_lookback),
                active_today=is_active_on(habit, today, completed_dates=dates),
                completed_today=today in dates,
                completed_dates=sorted(d.isoformat() for d in dates),
                category=habit.category.name if habit.category else UNCATEGORISED,
                category_color=habit.category.color if habit.category else "purple",
            )
        )

    # A weekly habit completed today is no longer "active" for the rest of the
    # week but still counts towards today's progress.
    due_today = [card for card in cards if card.active_today or card.completed_today]
    completed = sum(1 for card in due_today if card.completed_today)
    return {
        "date": today.isoformat(),
        "habits": [card.to_dict() for card in cards],
        "today": {
            "completed": completed,
            "total": len(due_today),
            "percentage": _percentage(completed, len(due_today)),
        },
    }


def build_stats(
    habits: Sequence[Habit],
    completions: Mapping[int, set[date]],
    *,
    today: date,
    days: int = 7,
    max_lookback: int = DEFAULT_STREAK_LOOKBACK,
) -> dict:
    """Aggregate statistics plus a trailing ``days`` completion series."""

    tracked = [habit for habit in habits if habit.id is not None]
    completed_today = sum(1 for habit in tracked if today in completions.get(habit.id, set()))
    streaks = [
        compute_streaks(completions.get(h.id, set()), today=today, max_lookback=max_lookback)
        for h in tracked
    ]

    series = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        due = [h for h in tracked if _due_or_done(h, day, completions.get(h.id, set()))]
        series.append(
            {
                "date": day.isoformat(),
                "weekday": day.strftime("%a"),
                "completed": sum(1 for h in due if day in completions.get(h.id, set())),
                "total": len(due),
            }
        )

    return {
        "totalHabits": len(tracked),
        "completedToday": completed_today,
        "completionRate": _percentage(completed_today, len(tracked)),
        "currentStreak": max((current for current, _ in streaks), default=0),
        "longestStreak": max((longest for _, longest in streaks), default=0),
        "totalCompleted": sum(len(completions.get(h.id, set())) for h in tracked),
        "series": series,
        "categories": category_breakdown(tracked),
    }


def category_breakdown(habits: Sequence[Habit]) -> list[dict]:
    """Habit count per category name, in first-seen order."""

    counts: dict[str, dict] = {}
    for habit in habits:
        name = habit.category.name if habit.category else UNCATEGORISED
        color = habit.category.color if habit.category else "purple"
        entry = counts.setdefault(name, {"name": name, "color": color, "count": 0})
        entry["count"] += 1
    return list(counts.values())


def _due_or_done(habit: Habit, day: date, dates: set[date]) -> bool:
    return day in dates or is_active_on(habit, day, completed_dates=dates)


def month_grid(year: int, month: int) -> list[tuple[date, bool]]:
    """Monday-anchored month grid padded to whole weeks.

    Returns (day, is_current_month) pairs.
    """

    weeks = calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month)
    return [(day, day.month == month) for week in weeks for day in week]


def build_calendar(
    habits: Sequence[Habit],
    completions: Mapping[int, set[date]],
    *,
    year: int,
    month: int,
    habit_id: int | None = None,
) -> dict:
    """Per-day active/completed habit ids for one month view."""

    selected = [h for h in habits if h.id is not None and (habit_id is None or h.id == habit_id)]
    cells = []
    for day, in_month in month_grid(year, month):
        active = [h.id for h in selected if _due_or_done(h, day, completions.get(h.id, set()))]
        done = [hid for hid in active if day in completions.get(hid, set())]
        cells.append(
            {
                "date": day.isoformat(),
                "isCurrentMonth": in_month,
                "active": active,
                "completed": done,
                "total": len(active),
            }
        )
    return {"year": year, "month": month, "habitId": habit_id, "days": cells}


__all__ = [
    "DEFAULT_STREAK_LOOKBACK",
    "HabitCard",
    "build_calendar",
    "build_dashboard",
    "build_stats",
    "category_breakdown",
    "compute_streaks",
    "longest_streak",
    "month_grid",
    "streak",
]
