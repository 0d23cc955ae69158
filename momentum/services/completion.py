from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.models.enums import BadgeTier
from momentum.models.occurrence import Occurrence
from momentum.models.task import Task
from momentum.services.badges import badge_tier


@dataclass(frozen=True)
class CompletionStats:
    completed: int
    total: int
    percentage: float

    @property
    def rounded_percentage(self) -> float:
        return round(self.percentage, 1)


@dataclass(frozen=True)
class DayCompletion:
    day: date
    completed: int
    total: int
    percentage: float
    tier: BadgeTier


def summarize(occurrences: Iterable[Occurrence]) -> CompletionStats | None:
    """Completion stats for a set of occurrences; ``None`` when there are none."""
    total = 0
    completed = 0
    for occ in occurrences:
        total += 1
        if occ.completed:
            completed += 1
    if total == 0:
        return None
    return CompletionStats(completed=completed, total=total, percentage=completed / total * 100)


def _user_occurrences(user_id: uuid.UUID):
    return (
        select(Occurrence)
        .join(Task, Task.id == Occurrence.task_id)
        .where(Task.user_id == user_id, Task.deleted_at.is_(None))
    )


async def completion_rate(db: AsyncSession, user_id: uuid.UUID, day: date) -> CompletionStats | None:
    # Always recomputed from the occurrences themselves, never from a stored summary.
    occurrences = (
        await db.execute(_user_occurrences(user_id).where(Occurrence.scheduled_date == day))
    ).scalars().all()
    return summarize(occurrences)


async def completion_rates_for_range(
    db: AsyncSession, user_id: uuid.UUID, start: date, end: date
) -> list[DayCompletion]:
    if end < start:
        return []
    occurrences = (
        await db.execute(
            _user_occurrences(user_id).where(
                Occurrence.scheduled_date >= start, Occurrence.scheduled_date <= end
            )
        )
    ).scalars().all()

    by_day: dict[date, list[Occurrence]] = {}
    for occ in occurrences:
        by_day.setdefault(occ.scheduled_date, []).append(occ)

    result: list[DayCompletion] = []
    for day in sorted(by_day):
        stats = summarize(by_day[day])
        result.append(
            DayCompletion(
                day=day,
                completed=stats.completed,
                total=stats.total,
                percentage=stats.percentage,
                tier=badge_tier(stats.percentage),
            )
        )
    return result
