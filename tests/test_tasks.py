import unittest
from datetime import date, time, timedelta

from db_support import DatabaseTestCase
from momentum.config import settings
from momentum.errors import InvalidRuleError, NotFoundError
from momentum.models.enums import RecurrencePattern
from momentum.schemas.task import RecurrenceIn, TaskCreate, TaskUpdate
from momentum.services.recurrence import extend_recurrences, horizon_end_date
from momentum.services.tasks import (
    add_exception,
    create_task,
    delete_task,
    get_occurrences_for_date,
    get_task,
    list_tasks,
    toggle_occurrence_completion,
    update_task,
)


TODAY = date(2024, 1, 1)


def _daily(**recurrence) -> TaskCreate:
    return TaskCreate(
        title="Stretch",
        duration=15,
        start_time=time(7, 0),
        recurrence=RecurrenceIn(pattern=RecurrencePattern.daily, **recurrence),
    )


class TestCreateTask(DatabaseTestCase):
    async def test_daily_task_materializes_horizon(self) -> None:
        task = await create_task(self.db, user_id=self.user.id, draft=_daily(), today=TODAY)
        await self.db.commit()

        occurrences = await self.occurrences_of(task.id)
        self.assertEqual(len(occurrences), settings.HORIZON_DAYS)
        self.assertEqual(occurrences[0].scheduled_date, TODAY)
        self.assertEqual(occurrences[0].scheduled_time, time(7, 0))
        self.assertFalse(occurrences[0].completed)
        self.assertEqual(task.recurrence.materialized_through, horizon_end_date(TODAY))

    async def test_specific_days_task(self) -> None:
        draft = TaskCreate(
            title="Run",
            duration=45,
            start_time=time(18, 0),
            recurrence=RecurrenceIn(
                pattern=RecurrencePattern.specific_days,
                days=["Tuesday", "Thursday"],
                start_date=TODAY,
                end_date=TODAY + timedelta(days=13),
            ),
        )
        task = await create_task(self.db, user_id=self.user.id, draft=draft, today=TODAY)
        days = [o.scheduled_date for o in await self.occurrences_of(task.id)]
        self.assertEqual(days, [date(2024, 1, 2), date(2024, 1, 4), date(2024, 1, 9), date(2024, 1, 11)])

    async def test_single_task_creates_one_occurrence(self) -> None:
        task = await self.add_single_task(date(2024, 2, 10), time(14, 0))
        occurrences = await self.occurrences_of(task.id)
        self.assertEqual(len(occurrences), 1)
        self.assertEqual(occurrences[0].scheduled_date, date(2024, 2, 10))
        self.assertIsNone(task.recurrence)

    async def test_exceptions_from_draft_are_skipped(self) -> None:
        draft = _daily(end_date=date(2024, 1, 5), exceptions=[date(2024, 1, 3)])
        task = await create_task(self.db, user_id=self.user.id, draft=draft, today=TODAY)
        days = [o.scheduled_date for o in await self.occurrences_of(task.id)]
        self.assertEqual(days, [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 4), date(2024, 1, 5)])

    async def test_task_without_day_or_recurrence_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TaskCreate(title="Nowhere", duration=10, start_time=time(9, 0))


class TestExtendRecurrences(DatabaseTestCase):
    async def test_extension_is_incremental_and_idempotent(self) -> None:
        task = await create_task(self.db, user_id=self.user.id, draft=_daily(), today=TODAY)
        await self.db.commit()

        later = TODAY + timedelta(days=10)
        created = await extend_recurrences(self.db, user_id=self.user.id, today=later)
        self.assertEqual(created, 10)
        self.assertEqual(await extend_recurrences(self.db, user_id=self.user.id, today=later), 0)

        occurrences = await self.occurrences_of(task.id)
        self.assertEqual(len(occurrences), settings.HORIZON_DAYS + 10)
        self.assertEqual(occurrences[-1].scheduled_date, horizon_end_date(later))

    async def test_deleted_tasks_are_not_extended(self) -> None:
        task = await create_task(self.db, user_id=self.user.id, draft=_daily(), today=TODAY)
        await delete_task(self.db, user_id=self.user.id, task_id=task.id)
        created = await extend_recurrences(self.db, user_id=self.user.id, today=TODAY + timedelta(days=10))
        self.assertEqual(created, 0)

    async def test_ended_rule_is_not_extended(self) -> None:
        await create_task(self.db, user_id=self.user.id, draft=_daily(end_date=date(2024, 1, 5)), today=TODAY)
        created = await extend_recurrences(self.db, user_id=self.user.id, today=TODAY + timedelta(days=30))
        self.assertEqual(created, 0)


class TestTaskLifecycle(DatabaseTestCase):
    async def test_update_bumps_version(self) -> None:
        task = await self.add_single_task(TODAY)
        updated = await update_task(
            self.db, user_id=self.user.id, task_id=task.id, patch=TaskUpdate(title="Renamed", duration=30)
        )
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.duration, 30)
        self.assertEqual(updated.version, 2)

    async def test_delete_soft_deletes_task_and_drops_occurrences(self) -> None:
        task = await create_task(self.db, user_id=self.user.id, draft=_daily(end_date=date(2024, 1, 3)), today=TODAY)
        affected = await delete_task(self.db, user_id=self.user.id, task_id=task.id)

        self.assertEqual(affected, [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)])
        self.assertIsNotNone(task.deleted_at)
        self.assertEqual(await self.occurrences_of(task.id), [])
        self.assertEqual(await list_tasks(self.db, self.user.id), [])
        with self.assertRaises(NotFoundError):
            await get_task(self.db, self.user.id, task.id)

    async def test_add_exception_drops_pending_occurrence(self) -> None:
        task = await create_task(self.db, user_id=self.user.id, draft=_daily(end_date=date(2024, 1, 5)), today=TODAY)
        rule = await add_exception(self.db, user_id=self.user.id, task_id=task.id, day=date(2024, 1, 2))

        self.assertEqual(rule.exceptions, ["2024-01-02"])
        days = [o.scheduled_date for o in await self.occurrences_of(task.id)]
        self.assertNotIn(date(2024, 1, 2), days)
        self.assertEqual(len(days), 4)

    async def test_add_exception_requires_recurring_task(self) -> None:
        task = await self.add_single_task(TODAY)
        with self.assertRaises(InvalidRuleError):
            await add_exception(self.db, user_id=self.user.id, task_id=task.id, day=TODAY)

    async def test_toggle_flips_completion(self) -> None:
        await self.add_single_task(TODAY)
        (occurrence,) = await get_occurrences_for_date(self.db, self.user.id, TODAY)

        toggled = await toggle_occurrence_completion(self.db, user_id=self.user.id, occurrence_id=occurrence.id)
        self.assertTrue(toggled.completed)
        self.assertIsNotNone(toggled.completed_at)

        toggled = await toggle_occurrence_completion(self.db, user_id=self.user.id, occurrence_id=occurrence.id)
        self.assertFalse(toggled.completed)
        self.assertIsNone(toggled.completed_at)


if __name__ == "__main__":
    unittest.main()
