"""Flask CLI commands for HabitPulse."""

from __future__ import annotations

from datetime import datetime, timezone

import click


def _parse_instant(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise click.BadParameter(f"expected an ISO 8601 timestamp, got {value!r}") from exc
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("reminders-tick")
    @click.option("--user-id", type=int, default=None, help="Only evaluate this user's habits")
    @click.option("--at", "at", default=None, help="Evaluate as of this ISO 8601 instant (UTC if naive)")
    def reminders_tick(user_id: int | None, at: str | None) -> None:
        """Run one reminder pass and print the habits that fired."""

        # Import here to avoid loading the repositories at CLI registration time
        from .extensions import get_reminder_policy, habit_repository, notification_repository
        from .services.notifications import run_reminder_pass

        now = _parse_instant(at)
        fired = run_reminder_pass(
            habit_repository(app),
            notification_repository(app),
            now=now,
            user_id=user_id,
            policy=get_reminder_policy(app),
        )
        click.echo(f"Reminder pass at {now.isoformat()}: {len(fired)} notification(s) created.")
        for habit_id in fired:
            click.echo(f"  habit {habit_id}")
