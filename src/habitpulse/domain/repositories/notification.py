"""Notification repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.notification import Notification


class NotificationRepository(Protocol):
    """Repository for in-app notifications."""

    def create(self, notification: Notification) -> Notification:
        """Persist a new notification."""
        ...

    def exists_for_day(
        self, *, user_id: int, habit_id: int, day: date, type: str = "reminder"
    ) -> bool:
        """Whether a notification of ``type`` exists for the user/habit on a UTC day."""
        ...

    def get_by_id(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        """Retrieve a notification owned by the user."""
        ...

    def list_recent(self, *, user_id: int, limit: int = 50) -> list[Notification]:
        """Newest notifications first."""
        ...

    def mark_read(self, notification_id: int, *, user_id: int) -> bool:
        """Mark one notification read; False when missing or not owned."""
        ...

    def mark_all_read(self, *, user_id: int) -> int:
        """Mark every unread notification read; returns how many changed."""
        ...

    def unread_count(self, *, user_id: int) -> int:
        """Number of unread notifications."""
        ...

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        """Delete one notification; False when missing or not owned."""
        ...
