from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user
from momentum.db import get_db
from momentum.schemas.notification import NotificationOut
from momentum.services.notifications import (
    delete_notification,
    list_notifications,
    mark_all_read,
    mark_read,
    unread_count,
)


router = APIRouter()


@router.get("", response_model=list[NotificationOut])
async def list_notifications_endpoint(
    unread_only: bool = False,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[NotificationOut]:
    items = await list_notifications(db, user.id, unread_only=unread_only)
    return [NotificationOut.model_validate(n) for n in items]


@router.get("/unread-count")
async def unread_count_endpoint(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> dict:
    return {"count": await unread_count(db, user.id)}


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_read_endpoint(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> NotificationOut:
    notification = await mark_read(db, user.id, notification_id)
    await db.commit()
    return NotificationOut.model_validate(notification)


@router.post("/read-all")
async def mark_all_read_endpoint(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)) -> dict:
    await mark_all_read(db, user.id)
    await db.commit()
    return {"ok": True}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification_endpoint(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    await delete_notification(db, user.id, notification_id)
    await db.commit()
