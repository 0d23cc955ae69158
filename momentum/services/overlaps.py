from __future__ import annotations

import uuid
from datetime import date, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.models.occurrence import Occurrence
from momentum.models.task import Task
from momentum.services.date_math import end_minutes, time_to_minutes


def ranges_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open ``[start, end)`` minute ranges; touching ends do not overlap."""
    return (
        (start_a >= start_b and start_a < end_b)
        or (end_a > start_b and end_a <= end_b)
        or (start_a <= start_b and end_a >= end_b)
    )


async def find_overlaps(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    day: date,
    start_time: time,
    duration: int,
    exclude_task_id: uuid.UUID | None = None,
) -> list[Occurrence]:
    """
    Occurrences on ``day`` whose time range intersects the candidate range.

    Advisory only: the caller decides whether to go ahead anyway.
    """
    stmt = (
        select(Occurrence)
        .join(Task, Task.id == Occurrence.task_id)
        .where(
            Occurrence.scheduled_date == day,
            Task.user_id == user_id,
            Task.deleted_at.is_(None),
        )
    )
    if exclude_task_id is not None:
        stmt = stmt.where(Occurrence.task_id != exclude_task_id)
    occurrences = (await db.execute(stmt.order_by(Occurrence.scheduled_time))).scalars().all()

    new_start = time_to_minutes(start_time)
    new_end = new_start + duration
    return [
        occ
        for occ in occurrences
        if ranges_overlap(
            new_start,
            new_end,
            time_to_minutes(occ.scheduled_time),
            end_minutes(occ.scheduled_time, occ.task.duration),
        )
    ]
