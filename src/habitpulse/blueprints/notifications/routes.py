"""Notification center and reminder trigger routes."""

from __future__ import annotations

import hmac

from flask import abort, current_app, jsonify, request

from ...extensions import get_reminder_policy, habit_repository, notification_repository
from ...services.notifications import run_reminder_pass
from .. import common
from . import bp


def _check_cron_secret() -> None:
    secret = current_app.config["HABITPULSE_CONFIG"].CRON_SECRET
    if not secret:
        return
    supplied = request.headers.get("Authorization", "")
    if not hmac.compare_digest(supplied, f"Bearer {secret}"):
        abort(401, description="Invalid cron secret")


def _run_pass(user_id: int | None):
    """Run one reminder pass; return (fired ids, None) or (None, 500 response)."""

    now = common.utc_now()
    try:
        fired = run_reminder_pass(
            habit_repository(),
            notification_repository(),
            now=now,
            user_id=user_id,
            policy=get_reminder_policy(),
        )
    except Exception:
        current_app.logger.exception("Reminder pass failed (user=%s)", user_id)
        return None, (jsonify({"success": False, "error": "Reminder pass failed"}), 500)
    return fired, None


@bp.get("/")
def list_notifications():
    user_id = common.require_user_id()
    limit = request.args.get("limit", default=50, type=int)
    repo = notification_repository()
    rows = repo.list_recent(user_id=user_id, limit=max(1, min(limit, 200)))
    return jsonify(
        {
            "notifications": [row.to_dict() for row in rows],
            "unreadCount": repo.unread_count(user_id=user_id),
        }
    )


@bp.get("/check")
def check():
    """Unread badge count."""

    user_id = common.require_user_id()
    return jsonify({"unreadCount": notification_repository().unread_count(user_id=user_id)})


@bp.get("/tick")
def tick():
    """Client poll: run the reminder pass for the caller's habits only."""

    user_id = common.require_user_id()
    fired, error = _run_pass(user_id)
    if error:
        return error
    return jsonify(
        {
            "success": True,
            "notificationsCreated": len(fired),
            "habits": fired,
            "unreadCount": notification_repository().unread_count(user_id=user_id),
        }
    )


@bp.get("/schedule")
def schedule():
    """Cron entry point: one pass over every user's habits."""

    _check_cron_secret()
    fired, error = _run_pass(None)
    if error:
        return error
    return jsonify({"success": True, "notificationsCreated": len(fired), "habits": fired})


@bp.get("/<int:notification_id>")
def get_notification(notification_id: int):
    user_id = common.require_user_id()
    row = notification_repository().get_by_id(notification_id, user_id=user_id)
    if row is None:
        return jsonify({"error": "Notification not found"}), 404
    return jsonify(row.to_dict())


@bp.post("/<int:notification_id>/read")
def mark_read(notification_id: int):
    user_id = common.require_user_id()
    if not notification_repository().mark_read(notification_id, user_id=user_id):
        return jsonify({"error": "Notification not found"}), 404
    return jsonify({"success": True})


@bp.post("/read-all")
def mark_all_read():
    user_id = common.require_user_id()
    updated = notification_repository().mark_all_read(user_id=user_id)
    return jsonify({"success": True, "updated": updated})


@bp.delete("/<int:notification_id>")
def delete_notification(notification_id: int):
    user_id = common.require_user_id()
    if not notification_repository().delete(notification_id, user_id=user_id):
        return jsonify({"error": "Notification not found"}), 404
    return jsonify({"success": True})
