import json
import unittest
from datetime import date, time

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db_support import DatabaseTestCase, make_engine
from momentum.db import Base
from momentum.errors import SnapshotError
from momentum.models.enums import RecurrencePattern
from momentum.schemas.task import RecurrenceIn, TaskCreate
from momentum.services.progress import recalculate_daily_badge
from momentum.services.snapshot import SNAPSHOT_VERSION, export_snapshot, import_snapshot
from momentum.services.streaks import get_streak
from momentum.services.tasks import create_task, list_tasks


TODAY = date(2024, 1, 1)


class TestSnapshot(DatabaseTestCase):
    async def _seed(self) -> None:
        draft = TaskCreate(
            title="Journal",
            duration=10,
            start_time=time(22, 0),
            recurrence=RecurrenceIn(pattern=RecurrencePattern.daily, end_date=date(2024, 1, 3)),
        )
        await create_task(self.db, user_id=self.user.id, draft=draft, today=TODAY)
        await recalculate_daily_badge(self.db, user_id=self.user.id, day=TODAY)
        await self.db.commit()

    async def test_export_covers_every_table(self) -> None:
        await self._seed()
        snapshot = await export_snapshot(self.db)

        self.assertEqual(snapshot["version"], SNAPSHOT_VERSION)
        self.assertEqual(len(snapshot["users"]), 1)
        self.assertEqual(len(snapshot["tasks"]), 1)
        self.assertEqual(len(snapshot["recurrence_rules"]), 1)
        self.assertEqual(len(snapshot["occurrences"]), 3)
        self.assertEqual(len(snapshot["daily_summaries"]), 1)
        self.assertEqual(len(snapshot["streaks"]), 1)
        # Plain JSON all the way down.
        json.dumps(snapshot)

    async def test_import_into_empty_database(self) -> None:
        await self._seed()
        snapshot = await export_snapshot(self.db)

        engine = make_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        try:
            async with async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)() as other:
                counts = await import_snapshot(other, snapshot)
                await other.commit()

                self.assertEqual(counts["tasks"], 1)
                self.assertEqual(counts["occurrences"], 3)
                tasks = await list_tasks(other, self.user.id)
                self.assertEqual([t.title for t in tasks], ["Journal"])
                self.assertEqual(tasks[0].recurrence.pattern, RecurrencePattern.daily)
                self.assertIsNotNone(await get_streak(other, self.user.id))
        finally:
            await engine.dispose()

    async def test_import_replaces_existing_rows(self) -> None:
        await self._seed()
        snapshot = await export_snapshot(self.db)
        await self.add_single_task(TODAY, title="Not in snapshot")
        await self.db.commit()

        await import_snapshot(self.db, snapshot)
        await self.db.commit()
        self.assertEqual([t.title for t in await list_tasks(self.db, self.user.id)], ["Journal"])

    async def test_rejects_unknown_version(self) -> None:
        with self.assertRaises(SnapshotError):
            await import_snapshot(self.db, {"version": 99, "users": [], "tasks": []})

    async def test_rejects_malformed_payload(self) -> None:
        with self.assertRaises(SnapshotError):
            await import_snapshot(self.db, {"version": SNAPSHOT_VERSION, "users": "nope"})


if __name__ == "__main__":
    unittest.main()
