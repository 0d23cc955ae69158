import unittest
from datetime import date, time

from sqlalchemy import func, select

from db_support import DatabaseTestCase
from momentum.models.daily_summary import DailySummary
from momentum.models.enums import BadgeTier
from momentum.models.milestone_achievement import MilestoneAchievement
from momentum.services.analytics import (
    badge_distribution,
    day_of_week_analysis,
    realtime_analytics,
    realtime_badge_distribution,
)
from momentum.services.completion import completion_rate
from momentum.services.progress import finalize_daily_badge, get_daily_summary, list_badges, recalculate_daily_badge
from momentum.services.streaks import get_streak
from momentum.services.tasks import delete_task, get_occurrences_for_date, toggle_occurrence_completion


DAY = date(2024, 1, 8)


class ProgressTestCase(DatabaseTestCase):
    async def complete_all(self, day: date) -> None:
        for occurrence in await get_occurrences_for_date(self.db, self.user.id, day):
            if not occurrence.completed:
                await toggle_occurrence_completion(self.db, user_id=self.user.id, occurrence_id=occurrence.id)

    async def achievement_count(self) -> int:
        return (await self.db.execute(select(func.count(MilestoneAchievement.id)))).scalar_one()


class TestRecalculateDailyBadge(ProgressTestCase):
    async def test_day_without_occurrences_has_no_summary(self) -> None:
        self.assertIsNone(await completion_rate(self.db, self.user.id, DAY))
        self.assertIsNone(await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY))
        self.assertIsNone(await get_daily_summary(self.db, self.user.id, DAY))

    async def test_partial_day_gets_lower_tier(self) -> None:
        await self.add_single_task(DAY, time(9, 0))
        await self.add_single_task(DAY, time(11, 0))
        (first, _) = await get_occurrences_for_date(self.db, self.user.id, DAY)
        await toggle_occurrence_completion(self.db, user_id=self.user.id, occurrence_id=first.id)

        summary = await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)
        self.assertEqual((summary.completed_tasks, summary.total_tasks), (1, 2))
        self.assertEqual(summary.completion_rate, 50.0)
        self.assertEqual(summary.badge_tier, BadgeTier.shameful)
        self.assertEqual((await get_streak(self.db, self.user.id)).current_streak, 0)

    async def test_recalculate_is_idempotent(self) -> None:
        await self.add_single_task(DAY)
        await self.complete_all(DAY)

        first = await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)
        await self.db.commit()
        second = await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)
        await self.db.commit()

        self.assertEqual(first.id, second.id)
        self.assertEqual(second.badge_tier, BadgeTier.gold)
        self.assertEqual(second.completion_rate, 100.0)
        streak = await get_streak(self.db, self.user.id)
        self.assertEqual(streak.current_streak, 1)
        self.assertEqual(await self.achievement_count(), 1)

    async def test_tier_change_moves_streak(self) -> None:
        await self.add_single_task(DAY)
        await self.complete_all(DAY)
        await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)

        (occurrence,) = await get_occurrences_for_date(self.db, self.user.id, DAY)
        await toggle_occurrence_completion(self.db, user_id=self.user.id, occurrence_id=occurrence.id)
        summary = await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)

        self.assertEqual(summary.badge_tier, BadgeTier.shameful)
        streak = await get_streak(self.db, self.user.id)
        self.assertEqual(streak.current_streak, 0)
        self.assertEqual(streak.longest_streak, 1)

    async def test_consecutive_gold_days_extend_streak(self) -> None:
        for day in (date(2024, 1, 8), date(2024, 1, 9), date(2024, 1, 10)):
            await self.add_single_task(day)
            await self.complete_all(day)
            await recalculate_daily_badge(self.db, user_id=self.user.id, day=day)

        streak = await get_streak(self.db, self.user.id)
        self.assertEqual(streak.current_streak, 3)
        self.assertEqual(streak.last_completion_date, date(2024, 1, 10))
        # First Flame, Spark Keeper, Triple Threat.
        self.assertEqual(await self.achievement_count(), 3)

    async def test_stale_summary_removed_when_day_empties(self) -> None:
        task = await self.add_single_task(DAY)
        await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)
        self.assertIsNotNone(await get_daily_summary(self.db, self.user.id, DAY))

        await delete_task(self.db, user_id=self.user.id, task_id=task.id)
        self.assertIsNone(await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY))
        await self.db.flush()
        self.assertIsNone(await get_daily_summary(self.db, self.user.id, DAY))


class TestFinalizeDailyBadge(ProgressTestCase):
    async def test_badge_awarded_once(self) -> None:
        await self.add_single_task(DAY)
        await self.complete_all(DAY)

        badge = await finalize_daily_badge(self.db, user_id=self.user.id, day=DAY)
        await self.db.commit()
        self.assertEqual(badge.tier, BadgeTier.gold)
        self.assertIsNone(await finalize_daily_badge(self.db, user_id=self.user.id, day=DAY))

        badges = await list_badges(self.db, self.user.id, DAY, DAY)
        self.assertEqual(len(badges), 1)

    async def test_empty_day_gets_no_badge(self) -> None:
        self.assertIsNone(await finalize_daily_badge(self.db, user_id=self.user.id, day=DAY))
        self.assertEqual(await list_badges(self.db, self.user.id, DAY, DAY), [])


class TestAnalytics(ProgressTestCase):
    async def test_stored_and_realtime_distributions(self) -> None:
        monday, tuesday = date(2024, 1, 8), date(2024, 1, 9)
        await self.add_single_task(monday)
        await self.complete_all(monday)
        await self.add_single_task(tuesday)
        for day in (monday, tuesday):
            await recalculate_daily_badge(self.db, user_id=self.user.id, day=day)
        await self.db.flush()

        expected = {"gold": 1, "silver": 0, "bronze": 0, "shameful": 1}
        self.assertEqual(await badge_distribution(self.db, self.user.id, monday, tuesday), expected)
        self.assertEqual(await realtime_badge_distribution(self.db, self.user.id, monday, tuesday), expected)

        weekdays = await day_of_week_analysis(self.db, self.user.id, monday, tuesday)
        self.assertEqual(weekdays["Monday"]["gold"], 1)
        self.assertEqual(weekdays["Tuesday"]["shameful"], 1)
        self.assertEqual(sum(weekdays["Sunday"].values()), 0)

        days = await realtime_analytics(self.db, self.user.id, monday, tuesday)
        self.assertEqual([d.day for d in days], [monday, tuesday])
        self.assertEqual(days[0].percentage, 100.0)

    async def test_summary_rows_are_unique_per_day(self) -> None:
        await self.add_single_task(DAY)
        for _ in range(3):
            await recalculate_daily_badge(self.db, user_id=self.user.id, day=DAY)
        await self.db.flush()
        count = (await self.db.execute(select(func.count(DailySummary.id)))).scalar_one()
        self.assertEqual(count, 1)


if __name__ == "__main__":
    unittest.main()
