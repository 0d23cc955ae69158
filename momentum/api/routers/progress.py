from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user, user_today
from momentum.db import get_db
from momentum.schemas.progress import BadgeOut, DailySummaryOut, DayCompletionOut, StreakOut
from momentum.services import analytics
from momentum.services.badges import badge_tier
from momentum.services.completion import completion_rate
from momentum.services.date_math import utc_now
from momentum.services.events import dispatch_pending
from momentum.services.locks import user_write_lock
from momentum.services.progress import get_daily_summary, list_badges, recalculate_daily_badge
from momentum.services.streaks import get_streak, refresh_freeze_tokens


router = APIRouter()


def _range_or_default(user, start: date | None, end: date | None) -> tuple[date, date]:
    end = end or user_today(user)
    start = start or end - timedelta(days=29)
    if end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end must not be before start")
    return start, end


@router.get("/summary/{day}", response_model=DailySummaryOut)
async def daily_summary(day: date, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> DailySummaryOut:
    summary = await get_daily_summary(db, user.id, day)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No summary for this day")
    return DailySummaryOut.model_validate(summary)


@router.get("/completion/{day}", response_model=DayCompletionOut | None)
async def live_completion(
    day: date, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)
) -> DayCompletionOut | None:
    stats = await completion_rate(db, user.id, day)
    if stats is None:
        return None
    return DayCompletionOut(
        day=day,
        completed=stats.completed,
        total=stats.total,
        percentage=stats.rounded_percentage,
        tier=badge_tier(stats.percentage),
    )


@router.post("/summary/{day}/recalculate", response_model=DailySummaryOut | None)
async def recalculate(
    day: date, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)
) -> DailySummaryOut | None:
    async with user_write_lock(user.id):
        summary = await recalculate_daily_badge(db, user_id=user.id, day=day)
        await db.commit()
    await dispatch_pending(db)
    return DailySummaryOut.model_validate(summary) if summary is not None else None


@router.get("/streak", response_model=StreakOut)
async def streak(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> StreakOut:
    return StreakOut.model_validate(await get_streak(db, user.id))


@router.post("/streak/refresh-tokens", response_model=StreakOut)
async def refresh_tokens(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> StreakOut:
    async with user_write_lock(user.id):
        streak = await refresh_freeze_tokens(db, user_id=user.id, now=utc_now())
        await db.commit()
    await dispatch_pending(db)
    return StreakOut.model_validate(streak)


@router.get("/badges", response_model=list[BadgeOut])
async def badges(
    start: date | None = None,
    end: date | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[BadgeOut]:
    start, end = _range_or_default(user, start, end)
    return [BadgeOut.model_validate(b) for b in await list_badges(db, user.id, start, end)]


@router.get("/analytics/summaries", response_model=list[DailySummaryOut])
async def summaries(
    start: date | None = None,
    end: date | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[DailySummaryOut]:
    start, end = _range_or_default(user, start, end)
    return [DailySummaryOut.model_validate(s) for s in await analytics.get_summaries(db, user.id, start, end)]


@router.get("/analytics/distribution")
async def distribution(
    start: date | None = None,
    end: date | None = None,
    realtime: bool = False,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> dict[str, int]:
    start, end = _range_or_default(user, start, end)
    if realtime:
        return await analytics.realtime_badge_distribution(db, user.id, start, end)
    return await analytics.badge_distribution(db, user.id, start, end)


@router.get("/analytics/weekdays")
async def weekdays(
    start: date | None = None,
    end: date | None = None,
    realtime: bool = False,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> dict[str, dict[str, int]]:
    start, end = _range_or_default(user, start, end)
    if realtime:
        return await analytics.realtime_day_of_week_analysis(db, user.id, start, end)
    return await analytics.day_of_week_analysis(db, user.id, start, end)


@router.get("/analytics/realtime", response_model=list[DayCompletionOut])
async def realtime(
    start: date | None = None,
    end: date | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[DayCompletionOut]:
    start, end = _range_or_default(user, start, end)
    days = await analytics.realtime_analytics(db, user.id, start, end)
    return [
        DayCompletionOut(day=d.day, completed=d.completed, total=d.total, percentage=d.percentage, tier=d.tier)
        for d in days
    ]
