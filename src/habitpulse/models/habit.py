"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category
    from .user import User


class Habit(SQLModel, table=True):
    """A user-defined habit with a recurrence rule and an optional validity window."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    description: str = Field(default="", max_length=400)
    color: str = Field(default="purple", max_length=32)
    frequency: str = Field(default="DAILY", max_length=16)
    # JSON array of weekday numbers, Monday=0
    active_days: Optional[str] = Field(default=None, max_length=64)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    notifications_enabled: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    logs: list["HabitLog"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitLog", back_populates="habit", cascade="all, delete-orphan"
        ),
    )
    reminders: list["HabitReminder"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitReminder", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))
    category: Optional["Category"] = Relationship(
        sa_relationship=relationship("Category", back_populates="habits")
    )


class HabitReminder(SQLModel, table=True):
    """Local wall-clock reminder time for a habit (zero or one per habit)."""

    __tablename__: ClassVar[str] = "habit_reminder"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True, unique=True)
    at_time: str = Field(nullable=False, max_length=5)
    timezone: Optional[str] = Field(default=None, max_length=64)

    habit: "Habit" = Relationship(
        back_populates="reminders",
        sa_relationship=relationship("Habit", back_populates="reminders"),
    )


class HabitLog(SQLModel, table=True):
    """Completion record for a habit on a UTC calendar day."""

    __tablename__: ClassVar[str] = "habit_log"
    __table_args__ = (UniqueConstraint("habit_id", "occurred_on", name="uq_habit_log_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    done: bool = Field(default=True, nullable=False)

    habit: "Habit" = Relationship(
        back_populates="logs",
        sa_relationship=relationship("Habit", back_populates="logs"),
    )
