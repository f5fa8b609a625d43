"""Timezone helpers for reminder scheduling."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger("habitpulse.timezones")

DEFAULT_TIMEZONE = "Europe/Paris"


def _load_zone(name: str) -> ZoneInfo | None:
    # Region names such as "Europe" are tzdata directories and raise OSError.
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def is_known_timezone(name: str) -> bool:
    """Whether ``name`` is a loadable IANA zone."""

    return _load_zone(name) is not None


def resolve_timezone(name: str | None, *, default: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Return the ZoneInfo for ``name``, falling back to ``default``.

    Unknown or malformed names never raise; one bad reminder must not stop a
    scheduling pass.
    """

    if name:
        zone = _load_zone(name)
        if zone is not None:
            return zone
        logger.warning("Unknown timezone %r, falling back to %s", name, default)
    return ZoneInfo(default)


def ensure_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime. Naive values are taken as UTC."""

    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_day(value: date | datetime) -> date:
    """Truncate a date or instant to its UTC calendar day."""

    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def timezone_offset_minutes(
    instant: datetime, tz_name: str | None, *, default: str = DEFAULT_TIMEZONE
) -> int:
    """UTC offset of ``tz_name`` at ``instant``, in minutes (local minus UTC).

    Europe/Paris gives 60 in January (CET) and 120 in July (CEST).
    """

    tz = resolve_timezone(tz_name, default=default)
    offset = ensure_utc(instant).astimezone(tz).utcoffset()
    if offset is None:  # pragma: no cover - ZoneInfo always answers
        return 0
    return int(offset.total_seconds() // 60)


__all__ = [
    "DEFAULT_TIMEZONE",
    "ensure_utc",
    "is_known_timezone",
    "resolve_timezone",
    "timezone_offset_minutes",
    "utc_day",
]
