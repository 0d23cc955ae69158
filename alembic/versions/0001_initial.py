"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    recurrence_pattern_enum = sa.Enum("once", "daily", "specific_days", "weekly", name="recurrence_pattern")
    badge_tier_enum = sa.Enum("gold", "silver", "bronze", "shameful", name="badge_tier")
    milestone_tier_enum = sa.Enum("early", "intermediate", "advanced", "legendary", name="milestone_tier")
    notification_type_enum = sa.Enum("milestone", name="notification_type")

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("display_name", sa.String(length=100), server_default="Me", nullable=False),
        sa.Column("timezone", sa.String(length=64), server_default="UTC", nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.String(length=8000), server_default="", nullable=False),
        sa.Column("color", sa.String(length=16), server_default="#2563EB", nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=100)),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"])
    op.create_index("ix_tasks_user_id_deleted_at", "tasks", ["user_id", "deleted_at"])

    op.create_table(
        "recurrence_rules",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("task_id", sa.Uuid(), nullable=False, unique=True),
        sa.Column("pattern", recurrence_pattern_enum, nullable=False),
        sa.Column("days", sa.JSON(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("exceptions", sa.JSON(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("materialized_through", sa.Date()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_recurrence_rules_start_date", "recurrence_rules", ["start_date"])

    op.create_table(
        "occurrences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("skipped", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_exception", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_occurrences_task_id", "occurrences", ["task_id"])
    op.create_index("ix_occurrences_scheduled_date", "occurrences", ["scheduled_date"])
    op.create_unique_constraint(
        "uq_occurrences_task_id_scheduled_date",
        "occurrences",
        ["task_id", "scheduled_date"],
    )

    op.create_table(
        "daily_summaries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("day_date", sa.Date(), nullable=False),
        sa.Column("total_tasks", sa.Integer(), server_default="0", nullable=False),
        sa.Column("completed_tasks", sa.Integer(), server_default="0", nullable=False),
        sa.Column("completion_rate", sa.Float(), server_default="0", nullable=False),
        sa.Column("badge_tier", badge_tier_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_daily_summaries_user_id", "daily_summaries", ["user_id"])
    op.create_index("ix_daily_summaries_day_date", "daily_summaries", ["day_date"])
    op.create_index("ix_daily_summaries_badge_tier", "daily_summaries", ["badge_tier"])
    op.create_unique_constraint(
        "uq_daily_summaries_user_id_day_date",
        "daily_summaries",
        ["user_id", "day_date"],
    )

    op.create_table(
        "badges",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("day_date", sa.Date(), nullable=False),
        sa.Column("tier", postgresql.ENUM(name="badge_tier", create_type=False), nullable=False),
        sa.Column("awarded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_badges_user_id_day_date", "badges", ["user_id", "day_date"])

    op.create_table(
        "streaks",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("current_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("longest_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_completion_date", sa.Date()),
        sa.Column("freeze_tokens", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_token_refresh", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "milestone_achievements",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("days", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("emoji", sa.String(length=16), nullable=False),
        sa.Column("tier", milestone_tier_enum, nullable=False),
        sa.Column("achieved_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_milestone_achievements_user_id", "milestone_achievements", ["user_id"])
    op.create_index("ix_milestone_achievements_days", "milestone_achievements", ["days"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("type", notification_type_enum, nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("message", sa.String(length=4000)),
        sa.Column("data", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_type", "notifications", ["type"])


def downgrade() -> None:
    op.drop_index("ix_notifications_type", table_name="notifications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_milestone_achievements_days", table_name="milestone_achievements")
    op.drop_index("ix_milestone_achievements_user_id", table_name="milestone_achievements")
    op.drop_table("milestone_achievements")
    op.drop_table("streaks")
    op.drop_index("ix_badges_user_id_day_date", table_name="badges")
    op.drop_table("badges")
    op.drop_constraint("uq_daily_summaries_user_id_day_date", "daily_summaries", type_="unique")
    op.drop_index("ix_daily_summaries_badge_tier", table_name="daily_summaries")
    op.drop_index("ix_daily_summaries_day_date", table_name="daily_summaries")
    op.drop_index("ix_daily_summaries_user_id", table_name="daily_summaries")
    op.drop_table("daily_summaries")
    op.drop_constraint("uq_occurrences_task_id_scheduled_date", "occurrences", type_="unique")
    op.drop_index("ix_occurrences_scheduled_date", table_name="occurrences")
    op.drop_index("ix_occurrences_task_id", table_name="occurrences")
    op.drop_table("occurrences")
    op.drop_index("ix_recurrence_rules_start_date", table_name="recurrence_rules")
    op.drop_table("recurrence_rules")
    op.drop_index("ix_tasks_user_id_deleted_at", table_name="tasks")
    op.drop_index("ix_tasks_user_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("notification_type", "milestone_tier", "badge_tier", "recurrence_pattern"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
