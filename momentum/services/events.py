from __future__ import annotations

import asyncio
import enum
import inspect
import json
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date

from momentum.config import settings
from momentum.integrations.redis import get_redis_sync
from momentum.models.notification import Notification
from momentum.services.notifications import publish_notification


CHANNEL = "momentum_progress"
_PENDING_EVENTS = "momentum.pending_events"
_PENDING_NOTIFICATIONS = "momentum.pending_notifications"

logger = logging.getLogger(__name__)


class ProgressEventType(str, enum.Enum):
    tasks_changed = "tasks_changed"
    completion_changed = "completion_changed"
    summary_changed = "summary_changed"
    summary_removed = "summary_removed"
    streak_changed = "streak_changed"
    milestone_achieved = "milestone_achieved"


@dataclass(frozen=True)
class ProgressEvent:
    type: ProgressEventType
    user_id: uuid.UUID
    day: date | None = None
    data: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "type": self.type.value,
            "user_id": str(self.user_id),
            "day": self.day.isoformat() if self.day else None,
            "data": self.data,
        }


ProgressListener = Callable[[ProgressEvent], Awaitable[None] | None]


class ProgressEvents:
    def __init__(self) -> None:
        self._listeners: list[ProgressListener] = []

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def emit(self, event: ProgressEvent) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Progress listener failed for %s", event.type.value)


progress_events = ProgressEvents()


def queue_event(db, event: ProgressEvent) -> None:
    """Hold ``event`` on the session until the caller has committed."""
    db.info.setdefault(_PENDING_EVENTS, []).append(event)


def queue_notification(db, notification: Notification) -> None:
    db.info.setdefault(_PENDING_NOTIFICATIONS, []).append(notification)


def discard_pending(db) -> None:
    db.info.pop(_PENDING_EVENTS, None)
    db.info.pop(_PENDING_NOTIFICATIONS, None)


async def _publish_event(event: ProgressEvent) -> None:
    if not settings.REDIS_ENABLED:
        return
    client = get_redis_sync()
    await asyncio.to_thread(client.publish, CHANNEL, json.dumps(event.to_payload()))


async def dispatch_pending(db) -> list[ProgressEvent]:
    """Deliver events and notifications queued on ``db``. Call after commit."""
    events: list[ProgressEvent] = db.info.pop(_PENDING_EVENTS, [])
    notifications: list[Notification] = db.info.pop(_PENDING_NOTIFICATIONS, [])

    for event in events:
        await progress_events.emit(event)
        try:
            await _publish_event(event)
        except Exception:
            logger.exception("Failed to publish progress event %s", event.type.value)

    for n in notifications:
        try:
            await publish_notification(user_id=n.user_id, notification=n)
        except Exception:
            logger.exception("Failed to publish notification %s", n.id)

    return events
