from __future__ import annotations

import asyncio
import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.config import settings
from momentum.errors import NotFoundError
from momentum.integrations.redis import get_redis_sync
from momentum.models.enums import NotificationType
from momentum.models.notification import Notification


CHANNEL = "momentum_notifications"


def add_notification(
    *,
    db,
    user_id: uuid.UUID,
    type: NotificationType,
    title: str,
    message: str | None = None,
    data: dict | None = None,
) -> Notification:
    notification = Notification(
        id=uuid.uuid4(),
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data,
        created_at=datetime.now(timezone.utc),
    )
    db.add(notification)
    return notification


def notification_to_payload(notification: Notification) -> dict:
    return {
        "id": str(notification.id),
        "user_id": str(notification.user_id),
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
    }


async def publish_notification(*, user_id: uuid.UUID, notification: Notification) -> None:
    if not settings.REDIS_ENABLED:
        return
    client = get_redis_sync()
    payload = json.dumps({"user_id": str(user_id), "notification": {"type": "notification", **notification_to_payload(notification)}})
    await asyncio.to_thread(client.publish, CHANNEL, payload)


async def list_notifications(db: AsyncSession, user_id: uuid.UUID, *, unread_only: bool = False) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read_at.is_(None))
    return list((await db.execute(stmt.order_by(Notification.created_at.desc()))).scalars().all())


async def unread_count(db: AsyncSession, user_id: uuid.UUID) -> int:
    return (
        await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.read_at.is_(None)
            )
        )
    ).scalar_one()


async def _get_notification(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
    notification = (
        await db.execute(
            select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        )
    ).scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification", notification_id)
    return notification


async def mark_read(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
    notification = await _get_notification(db, user_id, notification_id)
    if notification.read_at is None:
        notification.read_at = datetime.now(timezone.utc)
    return notification


async def mark_all_read(db: AsyncSession, user_id: uuid.UUID) -> None:
    await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read_at.is_(None))
        .values(read_at=datetime.now(timezone.utc))
    )


async def delete_notification(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> None:
    await _get_notification(db, user_id, notification_id)
    await db.execute(
        delete(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
