"""In-app notifications produced by the reminder scheduler."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User

REMINDER_TYPE = "reminder"


class Notification(SQLModel, table=True):
    """A user-facing notification row; only the scheduler creates reminders."""

    __tablename__: ClassVar[str] = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    # Structured key for the once-per-day check; payload stays display-only.
    habit_id: Optional[int] = Field(default=None, index=True)
    type: str = Field(default=REMINDER_TYPE, max_length=32, index=True)
    payload: str = Field(default="{}")
    read: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    user: "User" = Relationship(
        sa_relationship=relationship("User", back_populates="notifications")
    )

    def payload_data(self) -> dict[str, Any]:
        """Decode the JSON payload, tolerating legacy/garbled rows."""

        try:
            data = json.loads(self.payload or "{}")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "habitId": self.habit_id,
            "type": self.type,
            "payload": self.payload_data(),
            "read": self.read,
            "createdAt": self.created_at.isoformat(),
        }
