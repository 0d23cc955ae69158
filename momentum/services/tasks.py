from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.errors import InvalidRuleError, NotFoundError
from momentum.models.enums import RecurrencePattern
from momentum.models.occurrence import Occurrence
from momentum.models.recurrence_rule import RecurrenceRule
from momentum.models.task import Task
from momentum.schemas.task import TaskCreate, TaskUpdate
from momentum.services.events import ProgressEvent, ProgressEventType, queue_event
from momentum.services.recurrence import insert_occurrences, materialize_occurrences, validate_rule


logger = logging.getLogger(__name__)


async def get_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
    task = (
        await db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == user_id, Task.deleted_at.is_(None))
        )
    ).scalar_one_or_none()
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


async def list_tasks(db: AsyncSession, user_id: uuid.UUID) -> list[Task]:
    stmt = select(Task).where(Task.user_id == user_id, Task.deleted_at.is_(None))
    return list((await db.execute(stmt.order_by(Task.created_at))).scalars().all())


async def create_task(db: AsyncSession, *, user_id: uuid.UUID, draft: TaskCreate, today: date) -> Task:
    """
    Persist a task and materialize its occurrences.

    With a recurrence the rule is expanded up to the rolling horizon in one
    bulk insert; without one a single occurrence is created on ``draft.day``.
    """
    now = datetime.now(timezone.utc)
    task = Task(
        id=uuid.uuid4(),
        user_id=user_id,
        title=draft.title,
        description=draft.description,
        color=draft.color,
        duration=draft.duration,
        category=draft.category,
        version=1,
        created_at=now,
        updated_at=now,
    )

    if draft.recurrence is None:
        task.recurrence = None
        db.add(task)
        await db.flush()
        await insert_occurrences(db, task.id, [(draft.day, draft.start_time)])
    else:
        recurrence = draft.recurrence
        rule = RecurrenceRule(
            id=uuid.uuid4(),
            task_id=task.id,
            pattern=recurrence.pattern,
            days=[day.value for day in recurrence.days],
            start_date=recurrence.start_date or draft.day or today,
            end_date=recurrence.end_date,
            exceptions=sorted({value.isoformat() for value in recurrence.exceptions}),
            start_time=draft.start_time,
            created_at=now,
        )
        validate_rule(rule)
        task.recurrence = rule
        db.add(task)
        await db.flush()
        await materialize_occurrences(db, task=task, rule=rule, today=today)
        await db.flush()

    queue_event(db, ProgressEvent(type=ProgressEventType.tasks_changed, user_id=user_id, data={"task_id": str(task.id)}))
    return task


async def update_task(db: AsyncSession, *, user_id: uuid.UUID, task_id: uuid.UUID, patch: TaskUpdate) -> Task:
    task = await get_task(db, user_id, task_id)
    changes = patch.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(task, key, value)
    task.version += 1
    task.updated_at = datetime.now(timezone.utc)
    queue_event(db, ProgressEvent(type=ProgressEventType.tasks_changed, user_id=user_id, data={"task_id": str(task.id)}))
    return task


async def delete_task(db: AsyncSession, *, user_id: uuid.UUID, task_id: uuid.UUID) -> list[date]:
    """
    Soft-delete the task and hard-delete its occurrences.

    Returns the dates that lost occurrences so callers can recompute them.
    """
    task = await get_task(db, user_id, task_id)
    task.deleted_at = datetime.now(timezone.utc)
    task.updated_at = task.deleted_at
    affected = (
        await db.execute(select(Occurrence.scheduled_date).where(Occurrence.task_id == task.id).distinct())
    ).scalars().all()
    await db.execute(delete(Occurrence).where(Occurrence.task_id == task.id))
    logger.debug("Deleted task %s and %s occurrence date(s)", task.id, len(affected))
    queue_event(db, ProgressEvent(type=ProgressEventType.tasks_changed, user_id=user_id, data={"task_id": str(task.id)}))
    return sorted(affected)


async def add_exception(db: AsyncSession, *, user_id: uuid.UUID, task_id: uuid.UUID, day: date) -> RecurrenceRule:
    """Skip ``day`` for a recurring task and drop its pending occurrence on that date."""
    task = await get_task(db, user_id, task_id)
    rule = task.recurrence
    if rule is None or RecurrencePattern(rule.pattern) == RecurrencePattern.once:
        raise InvalidRuleError("Only recurring tasks accept exception dates")

    rule.exceptions = sorted({*(rule.exceptions or []), day.isoformat()})
    await db.execute(
        delete(Occurrence).where(
            Occurrence.task_id == task.id,
            Occurrence.scheduled_date == day,
            Occurrence.completed.is_(False),
        )
    )
    queue_event(db, ProgressEvent(type=ProgressEventType.tasks_changed, user_id=user_id, day=day, data={"task_id": str(task.id)}))
    return rule


async def get_occurrence(db: AsyncSession, user_id: uuid.UUID, occurrence_id: uuid.UUID) -> Occurrence:
    occurrence = (
        await db.execute(
            select(Occurrence)
            .join(Task, Task.id == Occurrence.task_id)
            .where(Occurrence.id == occurrence_id, Task.user_id == user_id, Task.deleted_at.is_(None))
        )
    ).scalar_one_or_none()
    if occurrence is None:
        raise NotFoundError("Occurrence", occurrence_id)
    return occurrence


async def toggle_occurrence_completion(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    occurrence_id: uuid.UUID,
    now: datetime | None = None,
) -> Occurrence:
    """
    Flip the completed flag of one occurrence.

    The day's summary is not touched here; callers follow up with
    ``recalculate_daily_badge`` for ``occurrence.scheduled_date``.
    """
    occurrence = await get_occurrence(db, user_id, occurrence_id)
    occurrence.completed = not occurrence.completed
    occurrence.completed_at = (now or datetime.now(timezone.utc)) if occurrence.completed else None
    queue_event(
        db,
        ProgressEvent(
            type=ProgressEventType.completion_changed,
            user_id=user_id,
            day=occurrence.scheduled_date,
            data={"occurrence_id": str(occurrence.id), "completed": occurrence.completed},
        ),
    )
    return occurrence


async def get_occurrences_for_range(
    db: AsyncSession, user_id: uuid.UUID, start: date, end: date
) -> list[Occurrence]:
    stmt = (
        select(Occurrence)
        .join(Task, Task.id == Occurrence.task_id)
        .where(
            Task.user_id == user_id,
            Task.deleted_at.is_(None),
            Occurrence.scheduled_date >= start,
            Occurrence.scheduled_date <= end,
        )
        .order_by(Occurrence.scheduled_date, Occurrence.scheduled_time)
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_occurrences_for_date(db: AsyncSession, user_id: uuid.UUID, day: date) -> list[Occurrence]:
    return await get_occurrences_for_range(db, user_id, day, day)
