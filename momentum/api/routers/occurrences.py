from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user
from momentum.db import get_db
from momentum.models.occurrence import Occurrence
from momentum.schemas.occurrence import OccurrenceOut, OverlapQuery
from momentum.schemas.progress import DailySummaryOut
from momentum.services.events import dispatch_pending
from momentum.services.locks import user_write_lock
from momentum.services.overlaps import find_overlaps
from momentum.services.progress import recalculate_daily_badge
from momentum.services.tasks import get_occurrences_for_range, toggle_occurrence_completion


router = APIRouter()


def _occurrence_to_out(occ: Occurrence) -> OccurrenceOut:
    return OccurrenceOut(
        id=occ.id,
        task_id=occ.task_id,
        title=occ.task.title,
        color=occ.task.color,
        duration=occ.task.duration,
        scheduled_date=occ.scheduled_date,
        scheduled_time=occ.scheduled_time,
        completed=occ.completed,
        completed_at=occ.completed_at,
        skipped=occ.skipped,
        is_exception=occ.is_exception,
    )


@router.get("", response_model=list[OccurrenceOut])
async def list_occurrences(
    start: date,
    end: date | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[OccurrenceOut]:
    end = end or start
    if end < start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end must not be before start")
    occurrences = await get_occurrences_for_range(db, user.id, start, end)
    return [_occurrence_to_out(o) for o in occurrences]


@router.post("/overlaps", response_model=list[OccurrenceOut])
async def check_overlaps(
    payload: OverlapQuery,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[OccurrenceOut]:
    conflicts = await find_overlaps(
        db,
        user_id=user.id,
        day=payload.day,
        start_time=payload.start_time,
        duration=payload.duration,
        exclude_task_id=payload.exclude_task_id,
    )
    return [_occurrence_to_out(o) for o in conflicts]


@router.post("/{occurrence_id}/toggle", response_model=DailySummaryOut | None)
async def toggle_occurrence(
    occurrence_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> DailySummaryOut | None:
    async with user_write_lock(user.id):
        occurrence = await toggle_occurrence_completion(db, user_id=user.id, occurrence_id=occurrence_id)
        summary = await recalculate_daily_badge(db, user_id=user.id, day=occurrence.scheduled_date)
        await db.commit()
    await dispatch_pending(db)
    return DailySummaryOut.model_validate(summary) if summary is not None else None
