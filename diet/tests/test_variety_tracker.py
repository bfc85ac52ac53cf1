import unittest
from datetime import date, timedelta

from diet.domain.Plan import UsageRecord
from diet.logic.variety.tracker import VarietyTracker
from diet.tests.helpers import make_dish

TODAY = date(2025, 3, 10)


class TestVarietyTracker(unittest.TestCase):
    def setUp(self):
        self.tracker = VarietyTracker(lookback_days=7)
        self.soup = make_dish("soup")

    def _served(self, days_ago, scope="household", dish=None):
        self.tracker.record(scope, dish or self.soup, TODAY - timedelta(days=days_ago))

    def test_never_served_has_no_penalty(self):
        self.assertEqual(self.tracker.penalty(self.soup, "household", TODAY), 0.0)

    def test_penalty_curve(self):
        self._served(0)
        self.assertEqual(self.tracker.penalty(self.soup, "household", TODAY), 1.0)
        expected = {1: 1.0, 2: 1 - 1 / 7, 4: 1 - 3 / 7, 7: 1 / 7, 8: 0.0, 30: 0.0}
        for days_ago, penalty in expected.items():
            tracker = VarietyTracker([UsageRecord("household", "soup", TODAY - timedelta(days=days_ago))], 7)
            self.assertAlmostEqual(tracker.penalty(self.soup, "household", TODAY), penalty, msg=f"{days_ago} days")

    def test_most_recent_use_counts(self):
        self._served(6)
        self._served(2)
        self.assertAlmostEqual(self.tracker.penalty(self.soup, "household", TODAY), 1 - 1 / 7)

    def test_future_records_ignored(self):
        self.tracker.record("household", self.soup, TODAY + timedelta(days=1))
        self.assertEqual(self.tracker.penalty(self.soup, "household", TODAY), 0.0)

    def test_scopes_are_independent(self):
        self._served(1, scope="member:a")
        self.assertEqual(self.tracker.penalty(self.soup, "member:b", TODAY), 0.0)
        self.assertEqual(self.tracker.combined_penalty(self.soup, ["household", "member:a", "member:b"], TODAY), 1.0)

    def test_lookback_override(self):
        self._served(5)
        self.assertEqual(self.tracker.penalty(self.soup, "household", TODAY, lookback_days=3), 0.0)
        self.assertGreater(self.tracker.penalty(self.soup, "household", TODAY), 0.0)

    def test_duplicate_record_ignored(self):
        first = self.tracker.record("household", self.soup, TODAY)
        self.assertIsNotNone(first)
        self.assertIsNone(self.tracker.record("household", self.soup, TODAY))
        self.assertEqual(len(self.tracker.records()), 1)

    def test_invalid_lookback(self):
        with self.assertRaises(ValueError):
            VarietyTracker(lookback_days=0)
        self._served(2)
        # an explicit 0 is an error, not a request for the default window
        with self.assertRaises(ValueError):
            self.tracker.penalty(self.soup, "household", TODAY, lookback_days=0)
        with self.assertRaises(ValueError):
            self.tracker.combined_penalty(self.soup, ["household"], TODAY, lookback_days=0)
        with self.assertRaises(ValueError):
            self.tracker.recent_dishes("household", TODAY, lookback_days=0)

    def test_recent_dishes_and_diversity(self):
        rice = make_dish("rice")
        self._served(3)
        self._served(1)
        self._served(2, dish=rice)
        self._served(20, dish=rice)
        self.assertEqual(self.tracker.recent_dishes("household", TODAY), ["soup", "rice", "soup"])
        self.assertEqual(self.tracker.diversity_score("household", TODAY), 66.67)
        self.assertEqual(self.tracker.diversity_score("member:x", TODAY), 0.0)


if __name__ == '__main__':
    unittest.main()
