"""Stats and calendar routes."""

from __future__ import annotations

from datetime import timedelta

from flask import abort, current_app, jsonify, request

from ...extensions import habit_repository
from ...services.habits import build_calendar, build_stats
from .. import common
from . import bp


@bp.get("/stats")
def stats():
    """Headline numbers plus the last seven days."""

    user_id = common.require_user_id()
    today = common.today_or_param()
    lookback = current_app.config["HABITPULSE_CONFIG"].STREAK_LOOKBACK_DAYS

    repo = habit_repository()
    habits = repo.list_all(user_id=user_id)
    # Full history: longest streak and total completions look past the lookback.
    completions = repo.completion_dates([habit.id for habit in habits], end=today)
    return jsonify(build_stats(habits, completions, today=today, max_lookback=lookback))


@bp.get("/calendar")
def calendar_view():
    """Month grid with due and completed habits per day."""

    user_id = common.require_user_id()
    today = common.utc_now().date()
    year = request.args.get("year", default=today.year, type=int)
    month = request.args.get("month", default=today.month, type=int)
    habit_id = request.args.get("habit_id", type=int)
    if not 1 <= month <= 12 or not 1900 <= year <= 3000:
        abort(400, description="Invalid year or month")

    repo = habit_repository()
    habits = repo.list_all(user_id=user_id)
    # The grid spills into neighbouring months by up to six days each side.
    first = today.replace(year=year, month=month, day=1)
    completions = repo.completion_dates(
        [habit.id for habit in habits],
        start=first - timedelta(days=7),
        end=first + timedelta(days=45),
    )
    return jsonify(build_calendar(habits, completions, year=year, month=month, habit_id=habit_id))
