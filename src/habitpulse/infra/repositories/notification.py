"""SQLModel implementation of Notification repository."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from ...models.notification import REMINDER_TYPE, Notification


def _utc_day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class SQLModelNotificationRepository:
    """SQLModel-based notification repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def create(self, notification: Notification) -> Notification:
        """Persist a new notification."""
        with self.session_factory() as session:
            session.add(notification)
            session.commit()
            session.refresh(notification)
            session.expunge(notification)
            return notification

    def exists_for_day(
        self, *, user_id: int, habit_id: int, day: date, type: str = REMINDER_TYPE
    ) -> bool:
        """Equality lookup on (user, habit, type) within the UTC day."""
        start, end = _utc_day_bounds(day)
        with self.session_factory() as session:
            found = session.exec(
                select(Notification.id)
                .where(Notification.user_id == user_id)
                .where(Notification.habit_id == habit_id)
                .where(Notification.type == type)
                .where(Notification.created_at >= start)
                .where(Notification.created_at < end)
                .limit(1)
            ).first()
            return found is not None

    def get_by_id(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        """Retrieve a notification owned by the user."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Notification).where(
                    Notification.id == notification_id, Notification.user_id == user_id
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_recent(self, *, user_id: int, limit: int = 50) -> list[Notification]:
        """Newest notifications first."""
        with self.session_factory() as session:
            statement = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())  # type: ignore[attr-defined]
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def mark_read(self, notification_id: int, *, user_id: int) -> bool:
        """Mark one notification as read."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Notification).where(
                    Notification.id == notification_id, Notification.user_id == user_id
                )
            ).first()
            if obj is None:
                return False
            obj.read = True
            session.add(obj)
            session.commit()
            return True

    def mark_all_read(self, *, user_id: int) -> int:
        """Mark every unread notification of the user as read."""
        with self.session_factory() as session:
            result = session.execute(
                update(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.read == False)  # noqa: E712
                .values(read=True)
            )
            session.commit()
            return result.rowcount or 0

    def unread_count(self, *, user_id: int) -> int:
        """Count unread notifications."""
        with self.session_factory() as session:
            count = session.exec(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.read == False)  # noqa: E712
            ).one()
            return int(count)

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        """Delete one notification."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Notification).where(
                    Notification.id == notification_id, Notification.user_id == user_id
                )
            ).first()
            if obj is None:
                return False
            session.delete(obj)
            session.commit()
            return True
