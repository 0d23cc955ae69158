from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.models.enums import MilestoneTier, NotificationType
from momentum.models.milestone_achievement import MilestoneAchievement
from momentum.models.notification import Notification
from momentum.services.notifications import add_notification


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Milestone:
    days: int
    name: str
    emoji: str
    tier: MilestoneTier


MILESTONES: tuple[Milestone, ...] = (
    # Building momentum
    Milestone(1, "First Flame", "🔥", MilestoneTier.early),
    Milestone(2, "Spark Keeper", "✨", MilestoneTier.early),
    Milestone(3, "Triple Threat", "⚡", MilestoneTier.early),
    Milestone(5, "High Five Hero", "🙌", MilestoneTier.early),
    Milestone(7, "Seven Samurai", "🗡️", MilestoneTier.early),
    Milestone(10, "Perfect Ten", "💯", MilestoneTier.early),
    Milestone(14, "Fortnight Fighter", "⚔️", MilestoneTier.early),
    # Establishing habits
    Milestone(21, "Habit Forger", "🔨", MilestoneTier.intermediate),
    Milestone(30, "Thirty & Thriving", "🌟", MilestoneTier.intermediate),
    Milestone(45, "Six Week Sultan", "👑", MilestoneTier.intermediate),
    Milestone(50, "Half Century", "🎯", MilestoneTier.intermediate),
    Milestone(60, "Two Month Titan", "💪", MilestoneTier.intermediate),
    Milestone(75, "Quarter Year Champion", "🏆", MilestoneTier.intermediate),
    # True dedication
    Milestone(90, "Three Month Maestro", "🎼", MilestoneTier.advanced),
    Milestone(125, "Consistency King/Queen", "👸", MilestoneTier.advanced),
    Milestone(150, "Five Month Phoenix", "🦅", MilestoneTier.advanced),
    Milestone(180, "Semester Supreme", "📚", MilestoneTier.advanced),
    Milestone(200, "Bicentennial Boss", "💼", MilestoneTier.advanced),
    Milestone(250, "Elite Executor", "⚜️", MilestoneTier.advanced),
    Milestone(270, "Nine Month Noble", "🎖️", MilestoneTier.advanced),
    # Elite status
    Milestone(300, "Triple Century Legend", "🌠", MilestoneTier.legendary),
    Milestone(365, "Year Long Yaksha", "🐉", MilestoneTier.legendary),
    Milestone(400, "Quadruple Century Conqueror", "⚡", MilestoneTier.legendary),
    Milestone(500, "Half Millennium Monarch", "👑", MilestoneTier.legendary),
    Milestone(730, "Biennial Beast", "🦁", MilestoneTier.legendary),
    Milestone(1000, "The Eternal Flame", "🔥", MilestoneTier.legendary),
    Milestone(1095, "Three Year Overlord", "💀", MilestoneTier.legendary),
    Milestone(1500, "Immortal", "∞", MilestoneTier.legendary),
    Milestone(2000, "The Legend", "🌌", MilestoneTier.legendary),
)


def achieved_milestones(streak: int) -> list[Milestone]:
    return [m for m in MILESTONES if m.days <= streak]


def current_milestone(streak: int) -> Milestone | None:
    achieved = achieved_milestones(streak)
    return achieved[-1] if achieved else None


def next_milestone(streak: int) -> Milestone | None:
    return next((m for m in MILESTONES if m.days > streak), None)


def check_new_milestone(old_streak: int, new_streak: int) -> Milestone | None:
    """
    Highest milestone newly reached between ``old_streak`` and ``new_streak``.

    When one jump crosses several thresholds only the highest is returned;
    the ones in between are not reported on their own.
    """
    old = achieved_milestones(old_streak)
    new = achieved_milestones(new_streak)
    if len(new) > len(old):
        return new[-1]
    return None


def _milestone_message(milestone: Milestone) -> str:
    unit = "day" if milestone.days == 1 else "days"
    return f"You've reached {milestone.days} {unit}: {milestone.name}!"


async def check_and_award(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    old_streak: int,
    new_streak: int,
) -> tuple[MilestoneAchievement, Notification] | None:
    milestone = check_new_milestone(old_streak, new_streak)
    if milestone is None:
        logger.debug("No new milestone for streak %s -> %s", old_streak, new_streak)
        return None

    now = datetime.now(timezone.utc)
    achievement = MilestoneAchievement(
        id=uuid.uuid4(),
        user_id=user_id,
        days=milestone.days,
        name=milestone.name,
        emoji=milestone.emoji,
        tier=milestone.tier,
        achieved_at=now,
    )
    db.add(achievement)

    notification = add_notification(
        db=db,
        user_id=user_id,
        type=NotificationType.milestone,
        title="🎉 Milestone Achieved!",
        message=_milestone_message(milestone),
        data={
            "achievement_id": str(achievement.id),
            "emoji": milestone.emoji,
            "name": milestone.name,
            "tier": milestone.tier.value,
            "days": milestone.days,
        },
    )
    logger.info("User %s reached milestone %s (%s days)", user_id, milestone.name, milestone.days)
    return achievement, notification


async def get_all_milestones(db: AsyncSession, user_id: uuid.UUID) -> list[dict]:
    """Every milestone with whether it was ever reached, when last, and how many times."""
    achievements = (
        await db.execute(
            select(MilestoneAchievement)
            .where(MilestoneAchievement.user_id == user_id)
            .order_by(MilestoneAchievement.achieved_at)
        )
    ).scalars().all()

    claims: dict[int, int] = {}
    latest: dict[int, datetime] = {}
    for achievement in achievements:
        claims[achievement.days] = claims.get(achievement.days, 0) + 1
        latest[achievement.days] = achievement.achieved_at

    return [
        {
            **asdict(milestone),
            "achieved": milestone.days in claims,
            "achieved_at": latest.get(milestone.days),
            "claim_count": claims.get(milestone.days, 0),
        }
        for milestone in MILESTONES
    ]
