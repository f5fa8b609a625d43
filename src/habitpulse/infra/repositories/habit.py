"""SQLModel implementation of Habit repository."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...models.habit import Habit, HabitLog, HabitReminder

logger = logging.getLogger("habitpulse.repositories.habit")

# Columns callers may change through ``update``
_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "category_id",
        "description",
        "color",
        "frequency",
        "active_days",
        "start_date",
        "end_date",
        "notifications_enabled",
    }
)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _owned(self, session: Session, habit_id: int, user_id: int) -> Optional[Habit]:
        return session.exec(
            select(Habit)
            .where(Habit.id == habit_id, Habit.user_id == user_id)
            .options(
                selectinload(Habit.reminders),  # type: ignore[arg-type]
                selectinload(Habit.category),  # type: ignore[arg-type]
            )
            .execution_options(populate_existing=True)
        ).first()

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = self._owned(session, habit_id, user_id)
            if obj:
                session.expunge_all()
            return obj

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List all habits of a user, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .options(
                    selectinload(Habit.reminders),  # type: ignore[arg-type]
                    selectinload(Habit.category),  # type: ignore[arg-type]
                )
                .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore[attr-defined]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_reminders(self, *, user_id: int | None = None) -> list[Habit]:
        """Habits that want reminders, with their reminder rows loaded."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.notifications_enabled == True)  # noqa: E712
                .options(selectinload(Habit.reminders))  # type: ignore[arg-type]
                .order_by(Habit.id)  # type: ignore[arg-type]
            )
            if user_id is not None:
                statement = statement.where(Habit.user_id == user_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(
        self, habit: Habit, *, user_id: int, reminder: HabitReminder | None = None
    ) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.flush()
            if reminder is not None:
                reminder.habit_id = habit.id
                session.add(reminder)
            session.commit()
            created = self._owned(session, habit.id, user_id)
            session.expunge_all()
            return created

    def update(self, habit_id: int, changes: dict[str, Any], *, user_id: int) -> Optional[Habit]:
        """Update columns of an existing habit."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update habit fields: {sorted(unknown)}")
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return None
            for key, value in changes.items():
                setattr(habit, key, value)
            session.add(habit)
            session.commit()
            updated = self._owned(session, habit_id, user_id)
            session.expunge_all()
            return updated

    def save_reminder(
        self, habit_id: int, at_time: str | None, timezone: str | None, *, user_id: int
    ) -> Optional[HabitReminder]:
        """Create, replace or remove the habit's single reminder."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return None
            existing = session.exec(
                select(HabitReminder).where(HabitReminder.habit_id == habit_id)
            ).first()

            if at_time is None:
                if existing:
                    session.delete(existing)
                    session.commit()
                return None

            reminder = existing or HabitReminder(habit_id=habit_id, at_time=at_time)
            reminder.at_time = at_time
            reminder.timezone = timezone
            session.add(reminder)
            session.commit()
            session.refresh(reminder)
            session.expunge(reminder)
            return reminder

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit by ID, with its logs and reminder."""
        with self.session_factory() as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True

    # Completion log operations
    def completion_dates(
        self, habit_ids: Iterable[int], *, start: date | None = None, end: date | None = None
    ) -> dict[int, set[date]]:
        """Done days per habit within an optional inclusive range."""
        ids = list(habit_ids)
        result: dict[int, set[date]] = {habit_id: set() for habit_id in ids}
        if not ids:
            return result
        with self.session_factory() as session:
            statement = (
                select(HabitLog.habit_id, HabitLog.occurred_on)
                .where(HabitLog.habit_id.in_(ids))  # type: ignore[attr-defined]
                .where(HabitLog.done == True)  # noqa: E712
            )
            if start is not None:
                statement = statement.where(HabitLog.occurred_on >= start)
            if end is not None:
                statement = statement.where(HabitLog.occurred_on <= end)
            for habit_id, occurred_on in session.exec(statement).all():
                result.setdefault(habit_id, set()).add(occurred_on)
        return result

    def toggle_log(self, habit_id: int, occurred_on: date, *, user_id: int) -> Optional[bool]:
        """Flip completion for a day.

        done -> log removed, not done -> marked done, missing -> created done.
        """
        with self.session_factory() as session:
            if self._owned(session, habit_id, user_id) is None:
                return None
            existing = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.occurred_on == occurred_on)
            ).first()

            if existing and existing.done:
                session.delete(existing)
                done = False
            elif existing:
                existing.done = True
                session.add(existing)
                done = True
            else:
                session.add(HabitLog(habit_id=habit_id, occurred_on=occurred_on, done=True))
                done = True
            session.commit()
            logger.debug("Habit %s on %s toggled to done=%s", habit_id, occurred_on, done)
            return done
