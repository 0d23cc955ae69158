from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user, user_today
from momentum.db import get_db
from momentum.models.task import Task
from momentum.schemas.task import ExceptionCreate, RecurrenceOut, TaskCreate, TaskOut, TaskUpdate
from momentum.services.events import dispatch_pending
from momentum.services.locks import user_write_lock
from momentum.services.progress import recalculate_daily_badge
from momentum.services.tasks import add_exception, create_task, delete_task, get_task, list_tasks, update_task


router = APIRouter()


def _task_to_out(task: Task) -> TaskOut:
    return TaskOut.model_validate(task)


@router.get("", response_model=list[TaskOut])
async def list_tasks_endpoint(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> list[TaskOut]:
    return [_task_to_out(t) for t in await list_tasks(db, user.id)]


@router.get("/{task_id}", response_model=TaskOut)
async def get_task_endpoint(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> TaskOut:
    return _task_to_out(await get_task(db, user.id, task_id))


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> TaskOut:
    task = await create_task(db, user_id=user.id, draft=payload, today=user_today(user))
    await db.commit()
    await dispatch_pending(db)
    return _task_to_out(task)


@router.patch("/{task_id}", response_model=TaskOut)
async def update_task_endpoint(
    task_id: uuid.UUID,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> TaskOut:
    task = await update_task(db, user_id=user.id, task_id=task_id, patch=payload)
    await db.commit()
    await dispatch_pending(db)
    return _task_to_out(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    today = user_today(user)
    async with user_write_lock(user.id):
        affected = await delete_task(db, user_id=user.id, task_id=task_id)
        # Summaries up to today change when their occurrences go away.
        for day in affected:
            if day <= today:
                await recalculate_daily_badge(db, user_id=user.id, day=day)
        await db.commit()
    await dispatch_pending(db)


@router.post("/{task_id}/exceptions", response_model=RecurrenceOut)
async def add_exception_endpoint(
    task_id: uuid.UUID,
    payload: ExceptionCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> RecurrenceOut:
    async with user_write_lock(user.id):
        rule = await add_exception(db, user_id=user.id, task_id=task_id, day=payload.day)
        # The dropped occurrence changes that day's rate if it already has a summary.
        if payload.day <= user_today(user):
            await recalculate_daily_badge(db, user_id=user.id, day=payload.day)
        await db.commit()
    await dispatch_pending(db)
    return RecurrenceOut.model_validate(rule)
