import unittest
from datetime import date
from decimal import Decimal

from diet.domain.Plan import DayPlan, PlanAssignment, UnassignableSlot
from diet.logic.reporting.nutrition import NutrientTotals, format_totals, rollup, summarize_day_plan
from diet.tests.helpers import make_dish

SOUP = make_dish("soup", "Miso soup", calories=80.1, protein=0.1, carbohydrate=6.2, fat=2.3, sodium=610,
                 glycemic_index=40)
RICE = make_dish("rice", "Steamed rice", calories=300, protein=5.5, carbohydrate=66.1, fat=0.7, sodium=5,
                 potassium=55)


def _assign(day, dish, scope="household", members=("a", "b"), slot="lunch"):
    return PlanAssignment(day, slot, scope, dish, is_unified=scope == "household", members=members)


class TestNutritionRollup(unittest.TestCase):
    def setUp(self):
        self.assignments = [
            _assign(date(2025, 1, 30), SOUP),
            _assign(date(2025, 1, 30), RICE, slot="dinner"),
            _assign(date(2025, 1, 31), SOUP),
            _assign(date(2025, 1, 31), RICE, scope="member:a", members=("a",)),
            _assign(date(2025, 2, 1), SOUP),
            _assign(date(2025, 2, 1), SOUP, slot="dinner"),
            _assign(date(2025, 2, 1), SOUP, slot="snack"),
        ]

    def test_day_keys_and_exact_sums(self):
        days = rollup(self.assignments, "day")
        self.assertEqual(list(days), ["2025-01-30", "2025-01-31", "2025-02-01"])
        self.assertEqual(days["2025-02-01"]["protein"], Decimal("0.3"))
        self.assertEqual(days["2025-02-01"]["calories"], Decimal("240.3"))
        self.assertEqual(days["2025-01-30"].dishes, 2)

    def test_month_is_sum_of_days(self):
        days = rollup(self.assignments, "day")
        months = rollup(self.assignments, "month")
        self.assertEqual(list(months), ["2025-01", "2025-02"])
        january = NutrientTotals()
        for key, totals in days.items():
            if key.startswith("2025-01"):
                january = january + totals
        self.assertEqual(months["2025-01"], january)
        self.assertEqual(rollup(self.assignments, "year")["2025"], months["2025-01"] + months["2025-02"])

    def test_recomputation_is_identical(self):
        self.assertEqual(rollup(self.assignments, "week"), rollup(self.assignments, "week"))

    def test_iso_week_keys(self):
        weeks = rollup([_assign(date(2024, 12, 30), SOUP), _assign(date(2025, 1, 5), SOUP),
                        _assign(date(2025, 1, 6), SOUP)], "week")
        self.assertEqual({k: v.dishes for k, v in weeks.items()}, {"2025-W01": 2, "2025-W02": 1})

    def test_glycemic_index_not_summed(self):
        totals = rollup(self.assignments, "year")["2025"]
        self.assertNotIn("glycemic_index", totals.to_dict())
        # absent optional values count as zero
        self.assertEqual(totals["potassium"], Decimal("110"))

    def test_scope_filter(self):
        member_a = rollup(self.assignments, "day", scope="member:a")
        member_b = rollup(self.assignments, "day", scope="member:b")
        household = rollup(self.assignments, "day", scope="household")
        self.assertEqual(member_a["2025-01-31"].dishes, 2)
        self.assertEqual(member_b["2025-01-31"].dishes, 1)
        self.assertEqual(household["2025-01-31"].dishes, 1)
        self.assertEqual(rollup(self.assignments, "day", scope="member:zzz"), {})

    def test_unknown_granularity(self):
        with self.assertRaises(ValueError):
            rollup(self.assignments, "fortnight")

    def test_format_totals_rounds_half_up(self):
        totals = NutrientTotals({"protein": Decimal("0.25"), "fat": Decimal("1.04")}, dishes=1)
        formatted = format_totals(totals)
        self.assertEqual(formatted["protein"], 0.3)
        self.assertEqual(formatted["fat"], 1.0)
        self.assertEqual(formatted["dishes"], 1)
        self.assertEqual(format_totals(totals, digits=2)["protein"], 0.25)

    def test_summarize_day_plan(self):
        day = date(2025, 1, 31)
        plan = DayPlan(day, assignments=[a for a in self.assignments if a.date == day],
                       gaps=[UnassignableSlot(day, "dinner", "member:b", "no_safe_candidate", members=("b",))])
        report = summarize_day_plan(plan)
        self.assertEqual(report["date"], "2025-01-31")
        self.assertEqual(sorted(report["slots"]), ["lunch"])
        self.assertEqual(len(report["slots"]["lunch"]), 2)
        self.assertEqual(report["gaps"][0]["message"], "No safe option found. Please consult a professional.")
        self.assertEqual(report["totals"]["household"]["calories"], 80.1)
        self.assertEqual(report["totals"]["member:a"]["calories"], 380.1)
        self.assertEqual(report["totals"]["member:b"]["dishes"], 1)


if __name__ == '__main__':
    unittest.main()
