from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from momentum.db import SessionLocal
from momentum.models.user import User
from momentum.services.date_math import local_today, previous_day, utc_now
from momentum.services.events import dispatch_pending
from momentum.services.locks import user_write_lock
from momentum.services.progress import finalize_daily_badge
from momentum.services.recurrence import extend_recurrences
from momentum.services.streaks import get_streak, refresh_freeze_tokens, token_refresh_due


logger = logging.getLogger(__name__)


async def run_periodic_work_for_user(
    db: AsyncSession,
    *,
    user: User,
    today: date,
    now: datetime,
) -> dict:
    """
    Catch up on time-triggered work for one user.

    Every step first checks whether it already happened (badge recorded for
    the finished day, tokens granted this month), so missed triggers are
    simply picked up on the next run.
    """
    results: dict = {"badge": None, "tokens_refreshed": False, "occurrences_created": 0}

    async with user_write_lock(user.id):
        badge = await finalize_daily_badge(db, user_id=user.id, day=previous_day(today))
        if badge is not None:
            results["badge"] = badge.tier.value

        streak = await get_streak(db, user.id)
        if token_refresh_due(streak, now):
            await refresh_freeze_tokens(db, user_id=user.id, now=now)
            results["tokens_refreshed"] = True

        results["occurrences_created"] = await extend_recurrences(db, user_id=user.id, today=today)
        await db.commit()

    await dispatch_pending(db)
    return results


async def run_periodic_work(
    now: datetime | None = None,
    session_factory: async_sessionmaker[AsyncSession] = SessionLocal,
) -> dict[str, dict]:
    now = now or utc_now()
    results: dict[str, dict] = {}
    async with session_factory() as db:
        users = (await db.execute(select(User))).scalars().all()
        for user in users:
            today = local_today(user.timezone, now)
            results[str(user.id)] = await run_periodic_work_for_user(db, user=user, today=today, now=now)

    logger.info("Periodic work done for %s user(s)", len(results))
    return results
