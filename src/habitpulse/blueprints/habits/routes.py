"""Habit routes."""

from __future__ import annotations

from datetime import timedelta

from flask import current_app, jsonify, request

from ...extensions import category_repository, habit_repository
from ...models.habit import Habit, HabitReminder
from ...services.activity import parse_active_days
from ...services.habits import build_dashboard
from .. import common
from . import bp
from .forms import HabitForm


def _habit_payload(habit: Habit) -> dict:
    reminder = habit.reminders[0] if habit.reminders else None
    return {
        "id": habit.id,
        "name": habit.name,
        "description": habit.description,
        "color": habit.color,
        "categoryId": habit.category_id,
        "category": habit.category.name if habit.category else None,
        "categoryColor": habit.category.color if habit.category else None,
        "frequency": habit.frequency,
        "activeDays": sorted(parse_active_days(habit.active_days)),
        "startDate": habit.start_date.isoformat() if habit.start_date else None,
        "endDate": habit.end_date.isoformat() if habit.end_date else None,
        "notificationsEnabled": habit.notifications_enabled,
        "createdAt": habit.created_at.isoformat(),
        "reminder": (
            {"atTime": reminder.at_time, "timezone": reminder.timezone} if reminder else None
        ),
    }


def _validated_form(user_id: int):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return None, (jsonify({"errors": {"__root__": ["Expected a JSON object."]}}), 400)
    form, errors = HabitForm.from_payload(payload)
    if errors:
        return None, (jsonify({"errors": errors}), 400)
    if form.category_id is not None and (
        category_repository().get_by_id(form.category_id, user_id=user_id) is None
    ):
        return None, (jsonify({"errors": {"category_id": ["Unknown category."]}}), 400)
    return form, None


@bp.get("/")
def list_habits():
    """Dashboard cards: streaks, due-today flags and today's completion ratio."""

    user_id = common.require_user_id()
    today = common.today_or_param()
    lookback = current_app.config["HABITPULSE_CONFIG"].STREAK_LOOKBACK_DAYS

    repo = habit_repository()
    habits = repo.list_all(user_id=user_id)
    completions = repo.completion_dates(
        [habit.id for habit in habits],
        start=today - timedelta(days=lookback),
        end=today,
    )
    return jsonify(build_dashboard(habits, completions, today=today, max_lookback=lookback))


@bp.post("/")
def create_habit():
    """Create a habit from a JSON payload."""

    user_id = common.require_user_id()
    form, error = _validated_form(user_id)
    if error:
        return error

    reminder = None
    if form.reminder_time:
        reminder = HabitReminder(at_time=form.reminder_time, timezone=form.reminder_timezone)
    habit = habit_repository().create(
        Habit(user_id=user_id, **form.habit_columns()), user_id=user_id, reminder=reminder
    )
    current_app.logger.info("Habit %s created for user %s", habit.id, user_id)
    return jsonify(_habit_payload(habit)), 201


@bp.get("/<int:habit_id>")
def get_habit(habit_id: int):
    user_id = common.require_user_id()
    habit = habit_repository().get_by_id(habit_id, user_id=user_id)
    if habit is None:
        return jsonify({"error": "Habit not found"}), 404
    return jsonify(_habit_payload(habit))


@bp.put("/<int:habit_id>")
def update_habit(habit_id: int):
    """Replace a habit's settings and reminder."""

    user_id = common.require_user_id()
    form, error = _validated_form(user_id)
    if error:
        return error

    repo = habit_repository()
    if repo.update(habit_id, form.habit_columns(), user_id=user_id) is None:
        return jsonify({"error": "Habit not found"}), 404
    repo.save_reminder(habit_id, form.reminder_time, form.reminder_timezone, user_id=user_id)
    return jsonify(_habit_payload(repo.get_by_id(habit_id, user_id=user_id)))


@bp.delete("/<int:habit_id>")
def delete_habit(habit_id: int):
    user_id = common.require_user_id()
    if not habit_repository().delete(habit_id, user_id=user_id):
        return jsonify({"error": "Habit not found"}), 404
    return jsonify({"success": True})


@bp.post("/<int:habit_id>/toggle")
def toggle_habit(habit_id: int):
    """Toggle habit completion for a day (today in UTC unless ``date`` is given)."""

    user_id = common.require_user_id()
    body = request.get_json(silent=True)
    raw_day = body.get("date") if isinstance(body, dict) else None
    day = common.parse_day(raw_day) or common.utc_now().date()

    done = habit_repository().toggle_log(habit_id, day, user_id=user_id)
    if done is None:
        return jsonify({"error": "Habit not found"}), 404
    return jsonify({"habitId": habit_id, "date": day.isoformat(), "done": done})
