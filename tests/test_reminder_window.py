"""Tests for the reminder firing window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

import pytest

from habitpulse.services.reminders import (
    InvalidReminderTime,
    ReminderPolicy,
    compute_reminder_window,
    parse_at_time,
    should_fire_now,
)


@dataclass
class Reminder:
    at_time: str
    timezone: str | None = "Europe/Paris"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestWindowBounds:
    def test_winter_reminder_opens_twenty_minutes_early(self):
        window = compute_reminder_window(utc(2024, 1, 10, 6, 0), Reminder("09:00"))

        assert window.due_at == utc(2024, 1, 10, 8, 0)
        assert window.notify_at == utc(2024, 1, 10, 7, 40)
        assert window.closes_at == utc(2024, 1, 10, 8, 0)

    def test_summer_reminder_uses_cest(self):
        window = compute_reminder_window(utc(2024, 7, 10, 6, 0), Reminder("09:00"))

        assert window.notify_at == utc(2024, 7, 10, 6, 40)
        assert window.closes_at == utc(2024, 7, 10, 7, 0)

    def test_default_reminder_has_no_lead(self):
        window = compute_reminder_window(utc(2024, 1, 10, 6, 0))

        assert window.due_at is None
        assert window.notify_at == utc(2024, 1, 10, 7, 0)
        assert window.closes_at == utc(2024, 1, 10, 9, 0)

    def test_timezone_defaults_when_reminder_has_none(self):
        window = compute_reminder_window(utc(2024, 1, 10, 6, 0), Reminder("09:00", None))
        assert window.notify_at == utc(2024, 1, 10, 7, 40)

    def test_grace_caps_closing_when_lead_exceeds_it(self):
        policy = ReminderPolicy(lead=timedelta(hours=3), grace=timedelta(hours=1))
        window = compute_reminder_window(utc(2024, 1, 10, 3, 0), Reminder("12:00"), policy=policy)

        assert window.notify_at == utc(2024, 1, 10, 8, 0)
        assert window.closes_at == utc(2024, 1, 10, 9, 0)


class TestShouldFireNow:
    reminder = Reminder("09:00")

    @pytest.mark.parametrize(
        ("now", "expected"),
        [
            (utc(2024, 1, 10, 7, 39, 59), False),
            (utc(2024, 1, 10, 7, 40), True),
            (utc(2024, 1, 10, 7, 55), True),
            (utc(2024, 1, 10, 8, 0), True),
            (utc(2024, 1, 10, 8, 0, 1), False),
        ],
    )
    def test_window_boundaries(self, now, expected):
        assert should_fire_now(now, self.reminder) is expected

    def test_default_window_stays_open_two_hours(self):
        assert should_fire_now(utc(2024, 1, 10, 8, 59))
        assert not should_fire_now(utc(2024, 1, 10, 9, 1))

    def test_window_must_open_on_the_current_utc_day(self):
        # 00:10 Paris is 23:10Z the previous day; the window is computed on
        # today's UTC date and has already gone by.
        reminder = Reminder("00:10")
        assert not should_fire_now(utc(2024, 1, 10, 23, 15), reminder)

    def test_aware_non_utc_instants_are_normalised(self):
        from zoneinfo import ZoneInfo

        local = datetime(2024, 1, 10, 8, 45, tzinfo=ZoneInfo("Europe/Paris"))
        assert should_fire_now(local, self.reminder)

    def test_invalid_at_time_raises(self):
        with pytest.raises(InvalidReminderTime):
            should_fire_now(utc(2024, 1, 10, 7, 45), Reminder("25:99"))


@pytest.mark.parametrize("raw", ["7:05", "07:05", " 07:05 "])
def test_parse_at_time_accepts_short_hours(raw):
    assert parse_at_time(raw) == time(7, 5)


@pytest.mark.parametrize("raw", ["", "0705", "24:00", "12:60", "ab:cd"])
def test_parse_at_time_rejects_garbage(raw):
    with pytest.raises(InvalidReminderTime):
        parse_at_time(raw)


def test_policy_from_config():
    class Config:
        DEFAULT_REMINDER_TIME = "07:30"
        DEFAULT_TIMEZONE = "UTC"
        REMINDER_LEAD_MINUTES = 10
        REMINDER_GRACE_MINUTES = 30

    policy = ReminderPolicy.from_config(Config())
    window = compute_reminder_window(utc(2024, 1, 10, 6, 0), policy=policy)

    assert window.notify_at == utc(2024, 1, 10, 7, 30)
    assert window.closes_at == utc(2024, 1, 10, 8, 0)
