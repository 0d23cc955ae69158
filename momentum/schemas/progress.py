from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from momentum.models.enums import BadgeTier, MilestoneTier


class DailySummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_date: date
    total_tasks: int
    completed_tasks: int
    completion_rate: float
    badge_tier: BadgeTier
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DayCompletionOut(BaseModel):
    day: date
    completed: int
    total: int
    percentage: float
    tier: BadgeTier


class BadgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_date: date
    tier: BadgeTier
    awarded_at: datetime


class StreakOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_streak: int
    longest_streak: int
    last_completion_date: date | None = None
    freeze_tokens: int
    last_token_refresh: datetime | None = None


class MilestoneOut(BaseModel):
    days: int
    name: str
    emoji: str
    tier: MilestoneTier
    achieved: bool
    achieved_at: datetime | None = None
    claim_count: int
