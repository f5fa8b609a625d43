"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional, Protocol

from ...models.habit import Habit, HabitReminder


class HabitRepository(Protocol):
    """Repository for habits, their reminder and their completion logs."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID (reminders loaded)."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List a user's habits, newest first."""
        ...

    def list_for_reminders(self, *, user_id: int | None = None) -> list[Habit]:
        """Habits with notifications enabled, reminders loaded; all users when user_id is None."""
        ...

    def create(
        self, habit: Habit, *, user_id: int, reminder: HabitReminder | None = None
    ) -> Habit:
        """Create a new habit with an optional reminder."""
        ...

    def update(self, habit_id: int, changes: dict[str, Any], *, user_id: int) -> Optional[Habit]:
        """Apply column changes to a habit."""
        ...

    def save_reminder(
        self, habit_id: int, at_time: str | None, timezone: str | None, *, user_id: int
    ) -> Optional[HabitReminder]:
        """Create, replace or (with at_time=None) remove the habit's reminder."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit by ID."""
        ...

    # Completion log operations
    def completion_dates(
        self, habit_ids: Iterable[int], *, start: date | None = None, end: date | None = None
    ) -> dict[int, set[date]]:
        """Done days per habit, optionally bounded to [start, end]."""
        ...

    def toggle_log(self, habit_id: int, occurred_on: date, *, user_id: int) -> Optional[bool]:
        """Flip completion for a day; returns the new done state or None if the habit is unknown."""
        ...
