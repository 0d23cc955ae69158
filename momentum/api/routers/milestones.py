from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user
from momentum.db import get_db
from momentum.schemas.progress import MilestoneOut
from momentum.services.milestones import current_milestone, get_all_milestones, next_milestone
from momentum.services.streaks import get_streak


router = APIRouter()


@router.get("", response_model=list[MilestoneOut])
async def list_milestones(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> list[MilestoneOut]:
    return [MilestoneOut(**m) for m in await get_all_milestones(db, user.id)]


@router.get("/progress")
async def milestone_progress(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> dict:
    streak = await get_streak(db, user.id)
    current = current_milestone(streak.current_streak)
    upcoming = next_milestone(streak.current_streak)
    return {
        "current_streak": streak.current_streak,
        "current": current.name if current else None,
        "next": upcoming.name if upcoming else None,
        "days_to_next": upcoming.days - streak.current_streak if upcoming else None,
    }
