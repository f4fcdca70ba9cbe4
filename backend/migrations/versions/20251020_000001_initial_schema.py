"""Initial schema for Momentum."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "20251020_000001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _user_fk(nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Integer(),
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
    )


def _summary_totals() -> list[sa.Column]:
    return [
        sa.Column("total_deepwork_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_planned_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_schedule_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("complete_schedule_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deepwork_session_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_deepwork_session", sa.Integer(), nullable=False, server_default="0"),
    ]


def _period_columns() -> list[sa.Column]:
    return [
        sa.Column("memoir_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("most_productive_day", sa.String(length=10), nullable=False),
        sa.Column("most_completed_category", sa.String(length=50), nullable=False),
        sa.Column("least_completed_category", sa.String(length=50), nullable=False),
        sa.Column("growth_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="ROLE_USER"),
        *_timestamps(),
    )

    op.create_table(
        "deep_work_session",
        sa.Column("id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("distraction_count", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column(
            "distraction_override_count", sa.BigInteger(), nullable=False, server_default="0"
        ),
        *_timestamps(),
    )
    op.create_index("ix_deep_work_session_user_id", "deep_work_session", ["user_id"])

    op.create_table(
        "schedule",
        sa.Column("id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("start_at", sa.DateTime(), nullable=False),
        sa.Column("end_at", sa.DateTime(), nullable=False),
        sa.Column("notify_minutes", sa.String(length=32), nullable=False, server_default="NONE"),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="OTHER"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="PENDING"),
        sa.Column("memo", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_schedule_user_id", "schedule", ["user_id"])
    op.create_index("ix_schedule_start_at", "schedule", ["start_at"])

    op.create_table(
        "memoir",
        sa.Column("id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("satisfaction", sa.String(length=32), nullable=False),
        sa.Column("concentration", sa.String(length=32), nullable=False),
        sa.Column("achievement", sa.Text(), nullable=True),
        sa.Column("improvement", sa.Text(), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_memoir_user_id", "memoir", ["user_id"])

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("is_check", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_notification_user_id", "notification", ["user_id"])

    op.create_table(
        "daily_summary",
        sa.Column("d_summary_id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("date", sa.Date(), nullable=False),
        *_summary_totals(),
        sa.Column("is_memoir", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_streak", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_summary_user_date"),
    )
    op.create_index("idx_user_date", "daily_summary", ["user_id", "date"])

    op.create_table(
        "weekly_summary",
        sa.Column("w_summary_id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        *_summary_totals(),
        *_period_columns(),
        sa.Column("prev_week_deepwork_time", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "week_start_date", name="uq_weekly_summary_user_week"),
    )
    op.create_index("idx_user_week", "weekly_summary", ["user_id", "week_start_date"])

    op.create_table(
        "monthly_summary",
        sa.Column("m_summary_id", sa.Integer(), primary_key=True),
        _user_fk(),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        *_summary_totals(),
        *_period_columns(),
        sa.Column("prev_month_deepwork_time", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "year", "month", name="uq_monthly_summary_user_month"),
    )
    op.create_index("idx_user_year_month", "monthly_summary", ["user_id", "year", "month"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        _user_fk(nullable=True, ondelete="SET NULL"),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("context", sa.JSON(), nullable=True),
        sa.Column("level", sa.String(length=20), nullable=False, server_default="info"),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_event_type", "audit_logs", ["event_type"])
    op.create_index("ix_audit_logs_level", "audit_logs", ["level"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("monthly_summary")
    op.drop_table("weekly_summary")
    op.drop_table("daily_summary")
    op.drop_table("notification")
    op.drop_table("memoir")
    op.drop_table("schedule")
    op.drop_table("deep_work_session")
    op.drop_table("users")
