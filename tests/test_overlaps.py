import unittest
from datetime import date, time

from db_support import DatabaseTestCase
from momentum.services.overlaps import find_overlaps, ranges_overlap
from momentum.services.tasks import delete_task


class TestRangesOverlap(unittest.TestCase):
    def test_partial_overlap(self) -> None:
        # 09:00-10:00 vs 09:30-10:30
        self.assertTrue(ranges_overlap(540, 600, 570, 630))
        self.assertTrue(ranges_overlap(570, 630, 540, 600))

    def test_touching_ranges_do_not_overlap(self) -> None:
        # 09:00-10:00 vs 10:00-11:00
        self.assertFalse(ranges_overlap(540, 600, 600, 660))
        self.assertFalse(ranges_overlap(600, 660, 540, 600))

    def test_containment(self) -> None:
        self.assertTrue(ranges_overlap(480, 720, 540, 600))
        self.assertTrue(ranges_overlap(540, 600, 480, 720))


class TestFindOverlaps(DatabaseTestCase):
    async def test_finds_conflicting_occurrences_on_the_day(self) -> None:
        day = date(2024, 3, 4)
        meeting = await self.add_single_task(day, time(9, 0), 60, title="Meeting")
        await self.add_single_task(day, time(10, 0), 60, title="Gym")
        await self.add_single_task(date(2024, 3, 5), time(9, 0), 60, title="Tomorrow")

        conflicts = await find_overlaps(self.db, user_id=self.user.id, day=day, start_time=time(9, 30), duration=60)
        self.assertEqual([c.task.title for c in conflicts], ["Meeting", "Gym"])

        conflicts = await find_overlaps(
            self.db,
            user_id=self.user.id,
            day=day,
            start_time=time(9, 30),
            duration=15,
            exclude_task_id=meeting.id,
        )
        self.assertEqual(conflicts, [])

    async def test_excluded_task_does_not_hide_other_conflicts(self) -> None:
        day = date(2024, 3, 4)
        edited = await self.add_single_task(day, time(9, 0), 60, title="Edited")
        await self.add_single_task(day, time(9, 30), 60, title="Other")

        conflicts = await find_overlaps(
            self.db,
            user_id=self.user.id,
            day=day,
            start_time=time(9, 30),
            duration=30,
            exclude_task_id=edited.id,
        )
        self.assertEqual([c.task.title for c in conflicts], ["Other"])

    async def test_task_does_not_conflict_with_itself(self) -> None:
        day = date(2024, 3, 4)
        task = await self.add_single_task(day, time(9, 0), 60)
        conflicts = await find_overlaps(
            self.db, user_id=self.user.id, day=day, start_time=time(9, 30), duration=30, exclude_task_id=task.id
        )
        self.assertEqual(conflicts, [])

    async def test_deleted_tasks_are_ignored(self) -> None:
        day = date(2024, 3, 4)
        task = await self.add_single_task(day, time(9, 0), 60)
        await delete_task(self.db, user_id=self.user.id, task_id=task.id)
        conflicts = await find_overlaps(self.db, user_id=self.user.id, day=day, start_time=time(9, 0), duration=30)
        self.assertEqual(conflicts, [])


if __name__ == "__main__":
    unittest.main()
