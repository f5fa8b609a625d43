"""Tests for timezone offset resolution."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from habitpulse.services.timezones import (
    ensure_utc,
    is_known_timezone,
    resolve_timezone,
    timezone_offset_minutes,
    utc_day,
)


def test_paris_offset_follows_daylight_saving():
    assert timezone_offset_minutes(datetime(2024, 1, 15, 12, tzinfo=timezone.utc), "Europe/Paris") == 60
    assert timezone_offset_minutes(datetime(2024, 7, 15, 12, tzinfo=timezone.utc), "Europe/Paris") == 120


def test_western_zone_is_negative():
    instant = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
    assert timezone_offset_minutes(instant, "America/New_York") == -300


def test_half_hour_zone():
    instant = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
    assert timezone_offset_minutes(instant, "Asia/Kolkata") == 330


def test_offset_switches_at_the_dst_transition():
    # Paris moves to CEST at 01:00Z on 2024-03-31
    before = datetime(2024, 3, 31, 0, 59, tzinfo=timezone.utc)
    after = datetime(2024, 3, 31, 1, 0, tzinfo=timezone.utc)
    assert timezone_offset_minutes(before, "Europe/Paris") == 60
    assert timezone_offset_minutes(after, "Europe/Paris") == 120


def test_unknown_timezone_falls_back_to_default(caplog):
    caplog.set_level(logging.WARNING, logger="habitpulse")
    instant = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)

    assert timezone_offset_minutes(instant, "Mars/Olympus_Mons") == 60
    assert "Unknown timezone" in caplog.text


def test_missing_timezone_uses_given_default():
    instant = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
    assert timezone_offset_minutes(instant, None, default="UTC") == 0
    assert resolve_timezone("", default="UTC").key == "UTC"


def test_naive_instants_are_utc():
    naive = datetime(2024, 1, 1, 23, 30)
    assert ensure_utc(naive).tzinfo is timezone.utc
    assert utc_day(naive).isoformat() == "2024-01-01"


def test_utc_day_converts_aware_instants():
    from zoneinfo import ZoneInfo

    local = datetime(2024, 1, 2, 0, 30, tzinfo=ZoneInfo("Europe/Paris"))
    assert utc_day(local).isoformat() == "2024-01-01"


def test_region_directory_name_falls_back_to_default(caplog):
    caplog.set_level(logging.WARNING, logger="habitpulse")
    instant = datetime(2024, 1, 10, tzinfo=timezone.utc)

    assert timezone_offset_minutes(instant, "Europe") == 60
    assert resolve_timezone("America").key == "Europe/Paris"
    assert "Unknown timezone 'Europe'" in caplog.text


def test_is_known_timezone():
    assert is_known_timezone("Asia/Kolkata")
    assert not is_known_timezone("Europe")
    assert not is_known_timezone("Mars/Olympus_Mons")
    assert not is_known_timezone("../etc/passwd")
