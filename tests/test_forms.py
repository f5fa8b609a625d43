"""Tests for the habit payload form."""

from __future__ import annotations

import json
from datetime import date

from habitpulse.blueprints.categories.forms import CategoryForm
from habitpulse.blueprints.habits.forms import HabitForm, HabitFrequency


def test_minimal_payload_uses_defaults():
    form, errors = HabitForm.from_payload({"name": "  Drink water  "})

    assert errors == {}
    assert form.name == "Drink water"
    assert form.frequency is HabitFrequency.DAILY
    assert form.reminder_time is None
    assert form.notifications_enabled is True


def test_missing_name_is_reported_per_field():
    form, errors = HabitForm.from_payload({})

    assert form is None
    assert list(errors) == ["name"]


def test_custom_requires_weekdays():
    form, errors = HabitForm.from_payload({"name": "Gym", "frequency": "CUSTOM"})

    assert form is None
    assert errors


def test_active_days_accepts_json_string_and_dedupes():
    form, _ = HabitForm.from_payload({"name": "Gym", "frequency": "custom", "active_days": "[4, 0, 4]"})

    assert form.active_days == [0, 4]
    assert json.loads(form.habit_columns()["active_days"]) == [0, 4]


def test_out_of_range_weekday_rejected():
    _, errors = HabitForm.from_payload({"name": "Gym", "frequency": "custom", "active_days": [7]})
    assert "active_days" in errors


def test_active_days_dropped_for_non_custom():
    form, _ = HabitForm.from_payload({"name": "Gym", "frequency": "weekly", "active_days": [1]})
    assert form.habit_columns()["active_days"] is None
    assert form.habit_columns()["frequency"] == "WEEKLY"


def test_inverted_window_rejected():
    _, errors = HabitForm.from_payload(
        {"name": "Diet", "start_date": "2024-03-10", "end_date": "2024-03-01"}
    )
    assert errors


def test_reminder_time_is_normalised():
    form, _ = HabitForm.from_payload(
        {"name": "Walk", "reminder_time": "7:05", "reminder_timezone": "Europe/Paris"}
    )
    assert form.reminder_time == "07:05"


def test_unknown_timezone_rejected():
    _, errors = HabitForm.from_payload({"name": "Walk", "reminder_timezone": "Nowhere/City"})
    assert "reminder_timezone" in errors


def test_region_directory_timezone_rejected():
    form, errors = HabitForm.from_payload(
        {"name": "Walk", "reminder_time": "09:00", "reminder_timezone": "Europe"}
    )
    assert form is None
    assert errors["reminder_timezone"] == ["Value error, Unknown timezone: Europe"]


def test_habit_columns_match_model_fields():
    form, _ = HabitForm.from_payload({"name": "Walk", "start_date": "2024-01-01"})
    columns = form.habit_columns()

    assert columns["start_date"] == date(2024, 1, 1)
    assert set(columns) == {
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


def test_blank_category_means_uncategorised():
    form, _ = HabitForm.from_payload({"name": "Walk", "category_id": ""})
    assert form.category_id is None

    form, _ = HabitForm.from_payload({"name": "Walk", "category_id": "3"})
    assert form.habit_columns()["category_id"] == 3


def test_category_form_limits_colors():
    form, errors = CategoryForm.from_payload({"name": " Health ", "color": "teal"})
    assert errors == {}
    assert (form.name, form.color) == ("Health", "teal")

    _, errors = CategoryForm.from_payload({"name": "Health", "color": "black"})
    assert list(errors) == ["color"]
