"""Management helpers for migrations and summary maintenance.

Wraps Flask-Migrate so migrations can run without invoking the Flask CLI
directly, and exposes operational commands for rebuilding stored summaries
and granting roles.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from time import perf_counter
from typing import Optional

import click

# Ensure models are imported so Flask-Migrate sees them
import models  # noqa: F401
import sqlalchemy as sa
import structlog
from app import app
from enums import UserRole
from extensions import db
from flask_migrate import init as flask_migrate_init  # type: ignore[import]
from flask_migrate import migrate as flask_migrate_migrate  # type: ignore[import]
from flask_migrate import upgrade as flask_migrate_upgrade  # type: ignore[import]
from models import User
from security import BusinessError
from services import admin_service, summary_service

logger = structlog.get_logger("momentum.manage")
MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


@click.group()
def cli():
    """Manage the Momentum database."""


@cli.command("init")
def init_command():
    """Initialise the migrations directory if it does not exist."""

    if (MIGRATIONS_DIR / "env.py").exists():
        click.echo("Migrations directory already initialised, skipping.")
        return

    with app.app_context():
        flask_migrate_init(directory=str(MIGRATIONS_DIR))
    click.echo(f"Initialized migrations folder at {MIGRATIONS_DIR}")


@cli.command("migrate")
@click.option("--message", "-m", default="auto", help="Migration message")
def migrate_command(message: str):
    """Generate a new migration based on current models."""

    if not MIGRATIONS_DIR.exists():
        raise click.ClickException("Migrations directory missing, run 'init' first.")

    with app.app_context():
        flask_migrate_migrate(directory=str(MIGRATIONS_DIR), message=message or "auto")
    click.echo("Migration script generated in migrations/versions.")


@cli.command("upgrade")
@click.option("--revision", default="head", help="Target revision (default: head)")
def upgrade_command(revision: str):
    """Apply migrations up to the selected revision."""

    if not MIGRATIONS_DIR.exists():
        raise click.ClickException("Migrations directory missing, run 'init' first.")

    with app.app_context():
        flask_migrate_upgrade(directory=str(MIGRATIONS_DIR), revision=revision)
    click.echo(f"Database upgraded to revision {revision}.")


def _resolve_user_ids(session, *, email: Optional[str], all_users: bool) -> list[int]:
    if all_users:
        return [row[0] for row in session.execute(sa.select(User.id).order_by(User.id)).all()]
    if email:
        user_id = session.execute(
            sa.select(User.id).where(User.email == email.strip().lower())
        ).scalar_one_or_none()
        if user_id is None:
            raise click.ClickException(f"User '{email}' not found.")
        return [user_id]
    raise click.ClickException("Specify --email or --all-users.")


@cli.command("rebuild-summaries")
@click.option("--email", help="Rebuild summaries for this user.")
@click.option(
    "--all-users",
    is_flag=True,
    default=False,
    help="Rebuild summaries for every user.",
)
@click.option(
    "--date",
    "target_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Day to rebuild in YYYY-MM-DD format (defaults to today).",
)
def rebuild_summaries(email: Optional[str], all_users: bool, target_date: Optional[datetime]) -> None:
    """Recompute the daily summary for a day plus its week and month."""

    day = target_date.date() if target_date else date.today()

    with app.app_context():
        ids = _resolve_user_ids(db.session, email=email, all_users=all_users)
        start_time = perf_counter()
        totals = {"daily": 0, "weekly": 0, "monthly": 0}
        for uid in ids:
            rebuilt = summary_service.rebuild_for_date(uid, day)
            totals["daily"] += rebuilt["daily"]["totalDeepworkTime"]
            totals["weekly"] += rebuilt["weekly"]["totalDeepworkTime"]
            totals["monthly"] += rebuilt["monthly"]["totalDeepworkTime"]
        summary = {
            "users": len(ids),
            "date": day.isoformat(),
            "deepwork_minutes": totals,
            "duration_s": round(perf_counter() - start_time, 2),
        }
        logger.info("summary.rebuild", user_ids=ids, summary=summary)
        click.echo(json.dumps(summary))


@cli.command("set-role")
@click.option("--email", required=True, help="Existing user email.")
@click.option(
    "--role",
    type=click.Choice([role.value for role in UserRole]),
    default=UserRole.ROLE_ADMIN.value,
    show_default=True,
)
def set_role(email: str, role: str) -> None:
    """Grant or revoke the admin role."""

    with app.app_context():
        try:
            user = admin_service.set_role(email, UserRole(role))
        except BusinessError as exc:
            raise click.ClickException(exc.message) from exc
    logger.info("user.role_changed", email=user["email"], role=user["role"])
    click.echo(json.dumps(user))


if __name__ == "__main__":
    cli()
