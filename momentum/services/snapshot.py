from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.errors import SnapshotError
from momentum.models.badge import Badge
from momentum.models.daily_summary import DailySummary
from momentum.models.milestone_achievement import MilestoneAchievement
from momentum.models.notification import Notification
from momentum.models.occurrence import Occurrence
from momentum.models.recurrence_rule import RecurrenceRule
from momentum.models.streak import Streak
from momentum.models.task import Task
from momentum.models.user import User
from momentum.schemas.snapshot import (
    BadgeRow,
    DailySummaryRow,
    MilestoneAchievementRow,
    NotificationRow,
    OccurrenceRow,
    RecurrenceRuleRow,
    Snapshot,
    StreakRow,
    TaskRow,
    UserRow,
)


SNAPSHOT_VERSION = 1

logger = logging.getLogger(__name__)

# Parents first; deletion walks the list backwards.
TABLES = (
    ("users", User, UserRow),
    ("tasks", Task, TaskRow),
    ("recurrence_rules", RecurrenceRule, RecurrenceRuleRow),
    ("occurrences", Occurrence, OccurrenceRow),
    ("daily_summaries", DailySummary, DailySummaryRow),
    ("badges", Badge, BadgeRow),
    ("streaks", Streak, StreakRow),
    ("milestone_achievements", MilestoneAchievement, MilestoneAchievementRow),
    ("notifications", Notification, NotificationRow),
)


async def export_snapshot(db: AsyncSession) -> dict:
    payload: dict = {"version": SNAPSHOT_VERSION, "export_date": datetime.now(timezone.utc)}
    for key, model, row_schema in TABLES:
        rows = (await db.execute(select(model))).scalars().all()
        payload[key] = [row_schema.model_validate(row) for row in rows]
    return Snapshot(**payload).model_dump(mode="json")


async def import_snapshot(db: AsyncSession, payload: dict) -> dict[str, int]:
    """Replace every table with the snapshot's contents. The caller commits."""
    if not isinstance(payload, dict) or payload.get("version") != SNAPSHOT_VERSION:
        raise SnapshotError("Unsupported or missing snapshot version")
    try:
        snapshot = Snapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc.error_count()} error(s)") from exc

    # Rows are replaced wholesale; nothing loaded before the import stays valid.
    db.expunge_all()
    for _, model, _ in reversed(TABLES):
        await db.execute(delete(model).execution_options(synchronize_session=False))

    counts: dict[str, int] = {}
    for key, model, _ in TABLES:
        rows = getattr(snapshot, key)
        for row in rows:
            db.add(model(**row.model_dump(exclude_none=True)))
        # Flush per table so parents exist before their children.
        await db.flush()
        counts[key] = len(rows)

    logger.info("Imported snapshot: %s", counts)
    return counts
