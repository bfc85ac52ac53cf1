import unittest

from diet.domain.Allergy import Allergy, AllergyReference
from diet.events.Event_Bus import ALLERGY_UNKNOWN_CODE
from diet.logic.safety.allergy_filter import AllergySafetyFilter, dish_corpus
from diet.tests.helpers import make_dish, make_member, make_reference, EventCollector
from diet.utilities.constants import SAFETY_BANNER


class TestAllergySafetyFilter(unittest.TestCase):
    def setUp(self):
        self.reference = make_reference()
        self.filter = AllergySafetyFilter(self.reference)

    def test_derived_ingredient_only_is_high(self):
        dish = make_dish("stir-fry", "Chicken stir fry", ["chicken", "broccoli"], ["oyster sauce"])
        check = self.filter.is_safe(dish, ["shellfish"])
        self.assertFalse(check.safe)
        self.assertEqual(check.matched_allergens, ())
        self.assertEqual(check.matched_derived, ("oyster sauce",))
        self.assertEqual(check.severity, "high")
        self.assertIn("oyster sauce", check.warning_message)

    def test_direct_critical_match(self):
        dish = make_dish("noodles", "Peanut noodles", ["rice noodles", "peanut"])
        check = self.filter.is_safe(dish, ["peanut"])
        self.assertFalse(check.safe)
        self.assertEqual(check.matched_allergens, ("peanut",))
        self.assertEqual(check.severity, "critical")

    def test_direct_high_match(self):
        check = self.filter.is_safe(make_dish("tea", "Milk tea", ["black tea", "milk"]), ["milk"])
        self.assertFalse(check.safe)
        self.assertEqual(check.severity, "high")

    def test_direct_moderate_match_reported_high(self):
        dish = make_dish("tofu", "Soy glazed tofu", ["tofu", "green onion"])
        check = self.filter.is_safe(dish, ["soy"])
        self.assertFalse(check.safe)
        self.assertEqual(check.matched_allergens, ("soy",))
        self.assertEqual(check.matched_derived, ("tofu",))
        self.assertEqual(check.severity, "high")

    def test_matching_ignores_case_and_spacing(self):
        dish = make_dish("beef", "Beef and greens", ["beef"], ["Oyster   Sauce"])
        self.assertFalse(self.filter.is_safe(dish, ["shellfish"]).safe)
        self.assertIn("oyster sauce", dish_corpus(dish))

    def test_no_allergies_is_safe(self):
        dish = make_dish("noodles", "Peanut noodles", ["peanut"])
        check = self.filter.is_safe(dish, [])
        self.assertTrue(check.safe)
        self.assertEqual(check.severity, "safe")

    def test_clean_dish_is_safe(self):
        dish = make_dish("salad", "Green salad", ["lettuce", "cucumber"], ["olive oil"])
        check = self.filter.is_safe(dish, ["peanut", "milk", "shellfish"])
        self.assertTrue(check.safe)
        self.assertIsNone(check.warning_message)

    def test_soundness_over_catalog(self):
        catalog = [
            make_dish("a", "Peanut butter toast", ["bread", "peanut butter"]),
            make_dish("b", "Shrimp fried rice", ["rice", "shrimp", "egg"]),
            make_dish("c", "Cheese omelette", ["egg", "cheese"]),
            make_dish("d", "Tahini dressing salad", ["lettuce"], ["tahini"]),
            make_dish("e", "Plain rice", ["rice"]),
        ]
        for code in self.reference.codes():
            allergy = self.reference.get(code)
            for dish in self.filter.safe_subset(catalog, [code]):
                corpus = dish_corpus(dish)
                self.assertNotIn(allergy.name, corpus)
                for derived in allergy.derived:
                    self.assertNotIn(derived, corpus, f"{dish.id} passed for {code}")

    def test_safe_subset_keeps_catalog_order(self):
        catalog = [make_dish("z", "Rice"), make_dish("y", "Milk pudding"), make_dish("x", "Soup")]
        self.assertEqual([d.id for d in self.filter.safe_subset(catalog, ["milk"])], ["z", "x"])

    def test_fail_closed_without_reference(self):
        closed = AllergySafetyFilter.fail_closed()
        self.assertFalse(closed.reference_available)
        check = closed.is_safe(make_dish("salad", "Green salad", ["lettuce"]), ["milk"])
        self.assertFalse(check.safe)
        self.assertEqual(check.severity, "critical")
        self.assertFalse(check.reference_available)
        # nothing declared, nothing to protect
        self.assertTrue(closed.is_safe(make_dish("salad", "Green salad"), []).safe)

    def test_empty_reference_fails_closed(self):
        empty = AllergySafetyFilter(AllergyReference([]))
        self.assertFalse(empty.reference_available)
        self.assertFalse(empty.is_safe(make_dish("rice", "Rice"), ["peanut"]).safe)

    def test_unknown_code_contributes_nothing_and_is_reported_once(self):
        collector = EventCollector(ALLERGY_UNKNOWN_CODE)
        try:
            dish = make_dish("kiwi", "Kiwi salad", ["kiwi"])
            self.assertTrue(self.filter.is_safe(dish, ["kiwi"]).safe)
            self.assertTrue(self.filter.is_safe(dish, ["kiwi"]).safe)
        finally:
            collector.stop()
        self.assertEqual(collector.of(ALLERGY_UNKNOWN_CODE), [{"code": "kiwi"}])

    def test_unknown_code_does_not_hide_known_match(self):
        dish = make_dish("toast", "Peanut butter toast", ["bread"])
        check = self.filter.is_safe(dish, ["kiwi", "peanut"])
        self.assertFalse(check.safe)
        self.assertEqual(check.severity, "critical")

    def test_mixed_case_reference_code_resolves(self):
        reference = AllergyReference([Allergy(" Tree_Nut", "walnut", "critical", ["almond"], "major")])
        gate = AllergySafetyFilter(reference)
        cake = make_dish("cake", "Walnut almond cake", ["walnut", "almond", "flour"])
        for codes in (["Tree_Nut"], ["tree_nut"], [" TREE_NUT "]):
            check = gate.is_safe(cake, codes)
            self.assertFalse(check.safe)
            self.assertEqual(check.severity, "critical")
        member = make_member("a", allergies=["Tree_Nut"])
        self.assertEqual(gate.safe_subset([cake], member.allergies), [])
        self.assertEqual(reference.codes(), ["tree_nut"])
        self.assertIn("TREE_NUT", reference)
        self.assertEqual(reference.derived_for(["Tree_Nut"]), {"tree_nut": ("almond",)})

    def test_safety_notice(self):
        self.assertEqual(AllergySafetyFilter.safety_notice(["milk"]), SAFETY_BANNER)
        self.assertIsNone(AllergySafetyFilter.safety_notice([]))


if __name__ == '__main__':
    unittest.main()
