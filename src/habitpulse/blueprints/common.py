"""Request helpers shared by the JSON blueprints."""

from __future__ import annotations

from datetime import date, datetime, timezone

from flask import abort, request

USER_HEADER = "X-User-Id"


def utc_now() -> datetime:
    """Wall clock for request handlers; the service layer never reads it itself."""

    return datetime.now(timezone.utc)


def require_user_id() -> int:
    """Resolve the caller from the ``X-User-Id`` header set by the auth layer."""

    raw = request.headers.get(USER_HEADER, "").strip()
    try:
        user_id = int(raw)
    except ValueError:
        abort(401, description="Not authenticated")
    if user_id <= 0:
        abort(401, description="Not authenticated")
    return user_id


def parse_day(raw: str | None, *, field: str = "date") -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` value; 400 on garbage, None when absent."""

    if raw is None or raw == "":
        return None
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        abort(400, description=f"Invalid {field}: expected YYYY-MM-DD")


def today_or_param() -> date:
    """``?date=`` when given, else the current UTC day."""

    return parse_day(request.args.get("date")) or utc_now().date()
