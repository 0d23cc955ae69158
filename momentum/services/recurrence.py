from __future__ import annotations

import logging
import uuid
from datetime import date, time, timedelta

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.config import settings
from momentum.errors import InvalidRuleError
from momentum.models.enums import RecurrencePattern
from momentum.models.occurrence import Occurrence
from momentum.models.recurrence_rule import RecurrenceRule
from momentum.models.task import Task
from momentum.services.date_math import WEEKDAY_NAMES, date_range, parse_iso_date, weekday_name


logger = logging.getLogger(__name__)


def horizon_end_date(today: date, horizon_days: int | None = None) -> date:
    """
    Last date covered by a rolling horizon of ``horizon_days`` days starting today.

    Counted inclusively, so a daily rule starting today expands to exactly
    ``horizon_days`` occurrences.
    """
    days = settings.HORIZON_DAYS if horizon_days is None else horizon_days
    return today + timedelta(days=days - 1)


def _rule_days(rule) -> set[str]:
    days = set(rule.days or [])
    unknown = days.difference(WEEKDAY_NAMES)
    if unknown:
        raise InvalidRuleError(f"Unknown weekday name(s): {', '.join(sorted(unknown))}")
    return days


def _rule_exceptions(rule) -> set[date]:
    return {parse_iso_date(value) for value in (rule.exceptions or [])}


def validate_rule(rule) -> None:
    _rule_days(rule)
    if rule.end_date is not None and rule.end_date < rule.start_date:
        raise InvalidRuleError("Recurrence end date is before its start date")


def matches_rule_date(rule, target: date, days: set[str] | None = None) -> bool:
    pattern = RecurrencePattern(rule.pattern)
    if pattern == RecurrencePattern.once:
        return target == rule.start_date
    if pattern == RecurrencePattern.daily:
        return True
    # specific_days and weekly share the same weekday-membership test.
    if days is None:
        days = _rule_days(rule)
    return weekday_name(target) in days


def expand(rule, start_time: time, horizon_end: date) -> list[tuple[date, time]]:
    """
    Expand a recurrence rule into concrete ``(date, time)`` pairs.

    One-off rules yield their start date regardless of the horizon. Recurring
    rules cover ``rule.start_date`` to ``min(rule.end_date, horizon_end)``
    inclusive; dates listed in ``rule.exceptions`` are skipped.
    """
    exceptions = _rule_exceptions(rule)
    pattern = RecurrencePattern(rule.pattern)

    if pattern == RecurrencePattern.once:
        if rule.start_date in exceptions:
            return []
        return [(rule.start_date, start_time)]

    days = _rule_days(rule)
    if pattern in (RecurrencePattern.specific_days, RecurrencePattern.weekly) and not days:
        logger.warning("Recurrence rule %s has no weekdays selected; nothing to expand", getattr(rule, "id", None))
        return []

    last = horizon_end if rule.end_date is None else min(rule.end_date, horizon_end)
    return [
        (current, start_time)
        for current in date_range(rule.start_date, last)
        if current not in exceptions and matches_rule_date(rule, current, days)
    ]


def _expansion_limit(rule: RecurrenceRule, horizon_end: date) -> date:
    if RecurrencePattern(rule.pattern) == RecurrencePattern.once:
        return rule.start_date
    return horizon_end if rule.end_date is None else min(rule.end_date, horizon_end)


async def insert_occurrences(db: AsyncSession, task_id: uuid.UUID, pairs: list[tuple[date, time]]) -> int:
    if not pairs:
        return 0
    rows = [
        {
            "id": uuid.uuid4(),
            "task_id": task_id,
            "scheduled_date": day,
            "scheduled_time": start_time,
            "completed": False,
            "completed_at": None,
            "skipped": False,
            "is_exception": False,
        }
        for day, start_time in pairs
    ]
    await db.execute(insert(Occurrence), rows)
    return len(rows)


async def materialize_occurrences(
    db: AsyncSession,
    *,
    task: Task,
    rule: RecurrenceRule,
    today: date,
    horizon_days: int | None = None,
) -> int:
    """Bulk-insert every occurrence of ``rule`` up to the rolling horizon."""
    horizon_end = horizon_end_date(today, horizon_days)
    pairs = expand(rule, rule.start_time, horizon_end)
    created = await insert_occurrences(db, task.id, pairs)
    rule.materialized_through = _expansion_limit(rule, horizon_end)
    logger.debug("Materialized %s occurrence(s) for task %s through %s", created, task.id, rule.materialized_through)
    return created


async def extend_recurrences(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    today: date,
    horizon_days: int | None = None,
) -> int:
    """
    Top up materialized occurrences of live recurring tasks to the current horizon.

    Idempotent: dates that already have an occurrence for the task are left alone.
    """
    horizon_end = horizon_end_date(today, horizon_days)
    rules = (
        await db.execute(
            select(RecurrenceRule)
            .join(Task, Task.id == RecurrenceRule.task_id)
            .where(
                Task.user_id == user_id,
                Task.deleted_at.is_(None),
                RecurrenceRule.pattern != RecurrencePattern.once,
            )
        )
    ).scalars().all()

    created = 0
    for rule in rules:
        limit = _expansion_limit(rule, horizon_end)
        if rule.materialized_through is not None and rule.materialized_through >= limit:
            continue

        pairs = expand(rule, rule.start_time, horizon_end)
        if rule.materialized_through is not None:
            pairs = [pair for pair in pairs if pair[0] > rule.materialized_through]
        if pairs:
            existing = set(
                (
                    await db.execute(
                        select(Occurrence.scheduled_date).where(
                            Occurrence.task_id == rule.task_id,
                            Occurrence.scheduled_date >= pairs[0][0],
                        )
                    )
                ).scalars().all()
            )
            pairs = [pair for pair in pairs if pair[0] not in existing]
            created += await insert_occurrences(db, rule.task_id, pairs)
        rule.materialized_through = limit

    if created:
        logger.info("Extended recurrences for user %s: %s new occurrence(s)", user_id, created)
    return created
