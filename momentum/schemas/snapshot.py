from __future__ import annotations

import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field

from momentum.models.enums import BadgeTier, MilestoneTier, NotificationType, RecurrencePattern


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserRow(_Row):
    id: uuid.UUID
    display_name: str
    timezone: str
    settings: dict
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskRow(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str = ""
    color: str
    duration: int
    category: str | None = None
    version: int = 1
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecurrenceRuleRow(_Row):
    id: uuid.UUID
    task_id: uuid.UUID
    pattern: RecurrencePattern
    days: list[str] = Field(default_factory=list)
    start_date: date
    end_date: date | None = None
    exceptions: list[str] = Field(default_factory=list)
    start_time: time
    materialized_through: date | None = None
    created_at: datetime | None = None


class OccurrenceRow(_Row):
    id: uuid.UUID
    task_id: uuid.UUID
    scheduled_date: date
    scheduled_time: time
    completed: bool = False
    completed_at: datetime | None = None
    skipped: bool = False
    is_exception: bool = False


class DailySummaryRow(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    day_date: date
    total_tasks: int
    completed_tasks: int
    completion_rate: float
    badge_tier: BadgeTier
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BadgeRow(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    day_date: date
    tier: BadgeTier
    awarded_at: datetime | None = None


class StreakRow(_Row):
    user_id: uuid.UUID
    current_streak: int = 0
    longest_streak: int = 0
    last_completion_date: date | None = None
    freeze_tokens: int = 0
    last_token_refresh: datetime | None = None


class MilestoneAchievementRow(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    days: int
    name: str
    emoji: str
    tier: MilestoneTier
    achieved_at: datetime | None = None


class NotificationRow(_Row):
    id: uuid.UUID
    user_id: uuid.UUID
    type: NotificationType
    title: str
    message: str | None = None
    data: dict | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None


class Snapshot(BaseModel):
    version: int
    export_date: datetime
    users: list[UserRow]
    tasks: list[TaskRow]
    recurrence_rules: list[RecurrenceRuleRow] = Field(default_factory=list)
    occurrences: list[OccurrenceRow] = Field(default_factory=list)
    daily_summaries: list[DailySummaryRow] = Field(default_factory=list)
    badges: list[BadgeRow] = Field(default_factory=list)
    streaks: list[StreakRow] = Field(default_factory=list)
    milestone_achievements: list[MilestoneAchievementRow] = Field(default_factory=list)
    notifications: list[NotificationRow] = Field(default_factory=list)


class ImportResult(BaseModel):
    records_imported: dict[str, int]
