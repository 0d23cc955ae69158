import unittest
from datetime import date, time, timedelta
from types import SimpleNamespace

from momentum.errors import InvalidRuleError
from momentum.models.enums import RecurrencePattern
from momentum.services.recurrence import expand, horizon_end_date, matches_rule_date, validate_rule


START = time(7, 30)


def _rule(pattern, start_date, *, days=None, end_date=None, exceptions=None):
    return SimpleNamespace(
        id=None,
        pattern=pattern,
        days=days or [],
        start_date=start_date,
        end_date=end_date,
        exceptions=exceptions or [],
    )


class TestHorizon(unittest.TestCase):
    def test_horizon_is_inclusive_of_today(self) -> None:
        self.assertEqual(horizon_end_date(date(2024, 1, 1), 90), date(2024, 3, 30))
        self.assertEqual(horizon_end_date(date(2024, 1, 1), 1), date(2024, 1, 1))


class TestExpand(unittest.TestCase):
    def test_daily_without_end_fills_horizon(self) -> None:
        today = date(2024, 1, 1)
        rule = _rule(RecurrencePattern.daily, today)
        pairs = expand(rule, START, horizon_end_date(today, 30))
        self.assertEqual(len(pairs), 30)
        self.assertEqual(pairs[0], (today, START))
        self.assertEqual(pairs[-1][0], today + timedelta(days=29))

    def test_exceptions_are_skipped(self) -> None:
        today = date(2024, 1, 1)
        rule = _rule(RecurrencePattern.daily, today, exceptions=["2024-01-02", "2024-01-05"])
        days = [d for d, _ in expand(rule, START, horizon_end_date(today, 7))]
        self.assertEqual(len(days), 5)
        self.assertNotIn(date(2024, 1, 2), days)
        self.assertNotIn(date(2024, 1, 5), days)

    def test_end_date_caps_expansion(self) -> None:
        rule = _rule(RecurrencePattern.daily, date(2024, 1, 1), end_date=date(2024, 1, 3))
        pairs = expand(rule, START, date(2024, 6, 1))
        self.assertEqual([d for d, _ in pairs], [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)])

    def test_specific_days_only_matching_weekdays(self) -> None:
        rule = _rule(RecurrencePattern.specific_days, date(2024, 1, 1), days=["Monday", "Wednesday"])
        days = [d for d, _ in expand(rule, START, date(2024, 1, 14))]
        self.assertEqual(days, [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 8), date(2024, 1, 10)])

    def test_weekly_expands_like_specific_days(self) -> None:
        weekly = _rule(RecurrencePattern.weekly, date(2024, 1, 1), days=["Friday"])
        specific = _rule(RecurrencePattern.specific_days, date(2024, 1, 1), days=["Friday"])
        horizon = date(2024, 2, 1)
        self.assertEqual(expand(weekly, START, horizon), expand(specific, START, horizon))

    def test_empty_day_set_yields_nothing_and_warns(self) -> None:
        rule = _rule(RecurrencePattern.specific_days, date(2024, 1, 1))
        with self.assertLogs("momentum.services.recurrence", level="WARNING"):
            self.assertEqual(expand(rule, START, date(2024, 2, 1)), [])

    def test_unknown_weekday_raises(self) -> None:
        rule = _rule(RecurrencePattern.specific_days, date(2024, 1, 1), days=["Funday"])
        with self.assertRaises(InvalidRuleError):
            expand(rule, START, date(2024, 2, 1))

    def test_once_ignores_horizon(self) -> None:
        rule = _rule(RecurrencePattern.once, date(2025, 6, 1))
        self.assertEqual(expand(rule, START, date(2024, 1, 10)), [(date(2025, 6, 1), START)])

    def test_once_on_exception_date_yields_nothing(self) -> None:
        rule = _rule(RecurrencePattern.once, date(2024, 1, 5), exceptions=["2024-01-05"])
        self.assertEqual(expand(rule, START, date(2024, 2, 1)), [])

    def test_start_after_horizon_yields_nothing(self) -> None:
        rule = _rule(RecurrencePattern.daily, date(2024, 5, 1))
        self.assertEqual(expand(rule, START, date(2024, 4, 1)), [])


class TestRuleValidation(unittest.TestCase):
    def test_end_before_start_rejected(self) -> None:
        rule = _rule(RecurrencePattern.daily, date(2024, 1, 10), end_date=date(2024, 1, 1))
        with self.assertRaises(InvalidRuleError):
            validate_rule(rule)

    def test_matches_rule_date(self) -> None:
        rule = _rule(RecurrencePattern.specific_days, date(2024, 1, 1), days=["Tuesday"])
        self.assertTrue(matches_rule_date(rule, date(2024, 1, 2)))
        self.assertFalse(matches_rule_date(rule, date(2024, 1, 3)))


if __name__ == "__main__":
    unittest.main()
