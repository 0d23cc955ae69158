from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.models.badge import Badge
from momentum.models.daily_summary import DailySummary
from momentum.services.badges import badge_tier
from momentum.services.completion import completion_rate
from momentum.services.events import ProgressEvent, ProgressEventType, queue_event
from momentum.services.streaks import update_streak


logger = logging.getLogger(__name__)


async def get_daily_summary(db: AsyncSession, user_id: uuid.UUID, day: date) -> DailySummary | None:
    return (
        await db.execute(
            select(DailySummary).where(DailySummary.user_id == user_id, DailySummary.day_date == day)
        )
    ).scalar_one_or_none()


async def recalculate_daily_badge(db: AsyncSession, *, user_id: uuid.UUID, day: date) -> DailySummary | None:
    """
    Recompute ``day``'s completion rate and badge, and fold it into the streak.

    A day without occurrences has no rate: any stale summary is removed and
    nothing reaches the streak. The streak only moves when the day had no
    summary yet or its tier changed, so repeated calls are idempotent.
    """
    stats = await completion_rate(db, user_id, day)
    existing = await get_daily_summary(db, user_id, day)

    if stats is None:
        if existing is not None:
            await db.delete(existing)
            queue_event(db, ProgressEvent(type=ProgressEventType.summary_removed, user_id=user_id, day=day))
        return None

    tier = badge_tier(stats.percentage)
    now = datetime.now(timezone.utc)
    tier_changed = existing is None or existing.badge_tier != tier

    if existing is None:
        summary = DailySummary(
            id=uuid.uuid4(),
            user_id=user_id,
            day_date=day,
            total_tasks=stats.total,
            completed_tasks=stats.completed,
            completion_rate=stats.rounded_percentage,
            badge_tier=tier,
            created_at=now,
            updated_at=now,
        )
        db.add(summary)
    else:
        summary = existing
        if (summary.total_tasks, summary.completed_tasks, summary.badge_tier) != (stats.total, stats.completed, tier):
            summary.total_tasks = stats.total
            summary.completed_tasks = stats.completed
            summary.completion_rate = stats.rounded_percentage
            summary.badge_tier = tier
            summary.updated_at = now

    queue_event(
        db,
        ProgressEvent(
            type=ProgressEventType.summary_changed,
            user_id=user_id,
            day=day,
            data={
                "completed": stats.completed,
                "total": stats.total,
                "completion_rate": stats.rounded_percentage,
                "badge_tier": tier.value,
            },
        ),
    )

    if tier_changed:
        await db.flush()
        await update_streak(db, user_id=user_id, day=day, tier=tier)
    return summary


async def has_badge(db: AsyncSession, user_id: uuid.UUID, day: date) -> bool:
    badge_id = (
        await db.execute(select(Badge.id).where(Badge.user_id == user_id, Badge.day_date == day).limit(1))
    ).scalar_one_or_none()
    return badge_id is not None


async def finalize_daily_badge(db: AsyncSession, *, user_id: uuid.UUID, day: date) -> Badge | None:
    """
    Award the badge of the day once: recompute the summary and append a Badge record.

    Safe to call repeatedly; a day that already has a Badge is left alone.
    """
    if await has_badge(db, user_id, day):
        return None
    summary = await recalculate_daily_badge(db, user_id=user_id, day=day)
    if summary is None:
        return None

    badge = Badge(
        id=uuid.uuid4(),
        user_id=user_id,
        day_date=day,
        tier=summary.badge_tier,
        awarded_at=datetime.now(timezone.utc),
    )
    db.add(badge)
    logger.info("Awarded %s badge to user %s for %s", summary.badge_tier.value, user_id, day)
    return badge


async def list_badges(db: AsyncSession, user_id: uuid.UUID, start: date, end: date) -> list[Badge]:
    return list(
        (
            await db.execute(
                select(Badge)
                .where(Badge.user_id == user_id, Badge.day_date >= start, Badge.day_date <= end)
                .order_by(Badge.day_date, Badge.awarded_at)
            )
        ).scalars().all()
    )
