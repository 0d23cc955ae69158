from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.config import settings
from momentum.errors import PreconditionViolation
from momentum.models.daily_summary import DailySummary
from momentum.models.enums import BadgeTier
from momentum.models.milestone_achievement import MilestoneAchievement
from momentum.models.notification import Notification
from momentum.models.streak import Streak
from momentum.models.user import User
from momentum.services.date_math import days_between, previous_day, same_month
from momentum.services.events import ProgressEvent, ProgressEventType, queue_event, queue_notification
from momentum.services.milestones import check_and_award


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    last_completion_date: date | None = None
    freeze_tokens: int = 0


@dataclass(frozen=True)
class StreakTransition:
    old_streak: int
    new_streak: int
    freeze_token_used: bool
    state: StreakState

    @property
    def increased(self) -> bool:
        return self.new_streak > self.old_streak


@dataclass(frozen=True)
class StreakUpdate:
    transition: StreakTransition
    achievement: MilestoneAchievement | None = None
    notification: Notification | None = None


def apply_badge_to_streak(
    state: StreakState,
    day: date,
    tier: BadgeTier,
    previous_day_tier: BadgeTier | None,
) -> StreakTransition:
    """
    Fold one day's badge into the gold streak.

    Only gold days extend the streak. A single missed day between two gold
    days can be bridged by spending a freeze token; any non-gold day breaks an
    active streak without touching the tokens.
    """
    old = state.current_streak

    if tier != BadgeTier.gold:
        if old > 0:
            state = replace(state, current_streak=0, last_completion_date=day)
        return StreakTransition(old_streak=old, new_streak=state.current_streak, freeze_token_used=False, state=state)

    token_used = False
    tokens = state.freeze_tokens
    if previous_day_tier == BadgeTier.gold:
        new = old + 1
    elif old == 0 or state.last_completion_date is None:
        new = 1
    else:
        gap = days_between(state.last_completion_date, day)
        if gap == 2 and tokens > 0:
            tokens -= 1
            token_used = True
            new = old + 1
        else:
            new = 1

    state = StreakState(
        current_streak=new,
        longest_streak=max(state.longest_streak, new),
        last_completion_date=day,
        freeze_tokens=tokens,
    )
    return StreakTransition(old_streak=old, new_streak=new, freeze_token_used=token_used, state=state)


def streak_state(streak: Streak) -> StreakState:
    return StreakState(
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        last_completion_date=streak.last_completion_date,
        freeze_tokens=streak.freeze_tokens,
    )


async def get_streak(db: AsyncSession, user_id: uuid.UUID) -> Streak:
    streak = (await db.execute(select(Streak).where(Streak.user_id == user_id))).scalar_one_or_none()
    if streak is None:
        raise PreconditionViolation(f"Streak record missing for user {user_id}")
    return streak


async def update_streak(db: AsyncSession, *, user_id: uuid.UUID, day: date, tier: BadgeTier) -> StreakUpdate:
    streak = await get_streak(db, user_id)
    previous_tier = (
        await db.execute(
            select(DailySummary.badge_tier).where(
                DailySummary.user_id == user_id,
                DailySummary.day_date == previous_day(day),
            )
        )
    ).scalar_one_or_none()

    transition = apply_badge_to_streak(streak_state(streak), day, BadgeTier(tier), previous_tier)
    new_state = transition.state
    streak.current_streak = new_state.current_streak
    streak.longest_streak = new_state.longest_streak
    streak.last_completion_date = new_state.last_completion_date
    streak.freeze_tokens = new_state.freeze_tokens

    logger.debug(
        "Streak for user %s on %s (%s): %s -> %s%s",
        user_id,
        day,
        BadgeTier(tier).value,
        transition.old_streak,
        transition.new_streak,
        " (freeze token used)" if transition.freeze_token_used else "",
    )
    queue_event(
        db,
        ProgressEvent(
            type=ProgressEventType.streak_changed,
            user_id=user_id,
            day=day,
            data={
                "old_streak": transition.old_streak,
                "new_streak": transition.new_streak,
                "freeze_token_used": transition.freeze_token_used,
            },
        ),
    )

    if not transition.increased:
        return StreakUpdate(transition=transition)

    awarded = await check_and_award(
        db, user_id=user_id, old_streak=transition.old_streak, new_streak=transition.new_streak
    )
    if awarded is None:
        return StreakUpdate(transition=transition)

    achievement, notification = awarded
    queue_notification(db, notification)
    queue_event(
        db,
        ProgressEvent(
            type=ProgressEventType.milestone_achieved,
            user_id=user_id,
            day=day,
            data={"days": achievement.days, "name": achievement.name},
        ),
    )
    return StreakUpdate(transition=transition, achievement=achievement, notification=notification)


def token_refresh_due(streak: Streak, now: datetime) -> bool:
    return streak.last_token_refresh is None or not same_month(streak.last_token_refresh, now)


async def refresh_freeze_tokens(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    now: datetime,
) -> Streak:
    """Monthly grant of freeze tokens, capped at ``MAX_FREEZE_TOKENS``."""
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise PreconditionViolation(f"User {user_id} missing")
    streak = await get_streak(db, user_id)

    grant = (user.settings or {}).get("freeze_tokens_per_month")
    if grant is None:
        grant = settings.FREEZE_TOKENS_PER_MONTH
    streak.freeze_tokens = min(streak.freeze_tokens + grant, settings.MAX_FREEZE_TOKENS)
    streak.last_token_refresh = now
    logger.info("Refreshed freeze tokens for user %s: now %s", user_id, streak.freeze_tokens)

    queue_event(
        db,
        ProgressEvent(
            type=ProgressEventType.streak_changed,
            user_id=user_id,
            data={"freeze_tokens": streak.freeze_tokens},
        ),
    )
    return streak
