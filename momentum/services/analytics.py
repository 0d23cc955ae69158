from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.models.daily_summary import DailySummary
from momentum.models.enums import BadgeTier
from momentum.services.completion import DayCompletion, completion_rates_for_range
from momentum.services.date_math import WEEKDAY_NAMES, weekday_name


def _empty_distribution() -> dict[str, int]:
    return {tier.value: 0 for tier in BadgeTier}


def tier_distribution(tiers: Iterable[BadgeTier]) -> dict[str, int]:
    distribution = _empty_distribution()
    for tier in tiers:
        distribution[BadgeTier(tier).value] += 1
    return distribution


def tiers_by_weekday(days: Iterable[tuple[date, BadgeTier]]) -> dict[str, dict[str, int]]:
    stats = {name: _empty_distribution() for name in WEEKDAY_NAMES}
    for day, tier in days:
        stats[weekday_name(day)][BadgeTier(tier).value] += 1
    return stats


async def get_summaries(db: AsyncSession, user_id: uuid.UUID, start: date, end: date) -> list[DailySummary]:
    return list(
        (
            await db.execute(
                select(DailySummary)
                .where(
                    DailySummary.user_id == user_id,
                    DailySummary.day_date >= start,
                    DailySummary.day_date <= end,
                )
                .order_by(DailySummary.day_date)
            )
        ).scalars().all()
    )


async def badge_distribution(db: AsyncSession, user_id: uuid.UUID, start: date, end: date) -> dict[str, int]:
    summaries = await get_summaries(db, user_id, start, end)
    return tier_distribution(s.badge_tier for s in summaries)


async def day_of_week_analysis(
    db: AsyncSession, user_id: uuid.UUID, start: date, end: date
) -> dict[str, dict[str, int]]:
    summaries = await get_summaries(db, user_id, start, end)
    return tiers_by_weekday((s.day_date, s.badge_tier) for s in summaries)


# Real-time variants read occurrences directly instead of stored summaries.


async def realtime_analytics(db: AsyncSession, user_id: uuid.UUID, start: date, end: date) -> list[DayCompletion]:
    return await completion_rates_for_range(db, user_id, start, end)


async def realtime_badge_distribution(
    db: AsyncSession, user_id: uuid.UUID, start: date, end: date
) -> dict[str, int]:
    days = await completion_rates_for_range(db, user_id, start, end)
    return tier_distribution(d.tier for d in days)


async def realtime_day_of_week_analysis(
    db: AsyncSession, user_id: uuid.UUID, start: date, end: date
) -> dict[str, dict[str, int]]:
    days = await completion_rates_for_range(db, user_id, start, end)
    return tiers_by_weekday((d.day, d.tier) for d in days)
