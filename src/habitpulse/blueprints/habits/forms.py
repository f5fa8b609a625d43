"""Habit form definitions."""

from __future__ import annotations

import json
from datetime import date
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ...services.reminders import InvalidReminderTime, parse_at_time
from ...services.timezones import is_known_timezone


class HabitFrequency(str, Enum):
    """Supported recurrence options for habits."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"


class HabitForm(BaseModel):
    """Payload for creating or editing a habit."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", validate_default=True)

    name: str = Field(default="", description="Short label for the habit", max_length=100)
    description: str = Field(default="", description="Optional details about the habit", max_length=400)
    color: str = Field(default="purple", max_length=32)
    frequency: HabitFrequency = Field(default=HabitFrequency.DAILY, description="Habit recurrence")
    active_days: list[int] | None = Field(
        default=None, description="Weekdays for custom recurrence, Monday=0"
    )
    start_date: date | None = None
    end_date: date | None = None
    category_id: int | None = Field(default=None, description="Owning category, if any")
    notifications_enabled: bool = True
    reminder_time: str | None = Field(default=None, description="Local HH:MM reminder time")
    reminder_timezone: str | None = Field(default=None, description="IANA timezone name")

    @field_validator("category_id", mode="before")
    @classmethod
    def blank_category(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the habit name is present."""

        if not value:
            raise ValueError("Please provide a habit name.")
        return value

    @field_validator("frequency", mode="before")
    @classmethod
    def normalise_frequency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("active_days", mode="before")
    @classmethod
    def decode_active_days(cls, value: Any) -> Any:
        """Accept a JSON array string as well as a list."""

        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                return json.loads(value)
            except ValueError as exc:
                raise ValueError("Active days must be a JSON array of weekday numbers.") from exc
        return value

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("Weekdays must be between 0 (Monday) and 6 (Sunday).")
        return sorted(set(value))

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            return parse_at_time(value).strftime("%H:%M")
        except InvalidReminderTime as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("reminder_timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not is_known_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def check_schedule(self) -> "HabitForm":
        """Custom recurrence needs weekdays; the window must not be inverted."""

        if self.frequency is HabitFrequency.CUSTOM and not self.active_days:
            raise ValueError("Pick at least one weekday for a custom recurrence.")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("The start date must be on or before the end date.")
        return self

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> tuple["HabitForm | None", dict[str, list[str]]]:
        """Validate a request payload; return (form, {}) or (None, errors by field)."""

        try:
            return cls.model_validate(dict(payload)), {}
        except ValidationError as exc:
            structured: dict[str, list[str]] = {}
            for error in exc.errors(include_url=False):
                loc = error.get("loc", ())
                key = str(loc[0]) if loc else "__root__"
                structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
            return None, structured

    def habit_columns(self) -> dict[str, Any]:
        """Column values for ``models.Habit``."""

        keeps_days = self.frequency is HabitFrequency.CUSTOM and self.active_days
        return {
            "name": self.name,
            "category_id": self.category_id,
            "description": self.description,
            "color": self.color,
            "frequency": self.frequency.value,
            "active_days": json.dumps(self.active_days) if keeps_days else None,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "notifications_enabled": self.notifications_enabled,
        }


__all__ = ["HabitForm", "HabitFrequency"]
