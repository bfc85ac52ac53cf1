import unittest

from diet.domain.Dish import NutrientFacts
from diet.events.Event_Bus import DISEASE_UNKNOWN_CODE
from diet.logic.scoring.disease_scorer import DiseaseConstraintScorer, aggregate_verdict
from diet.tests.helpers import EventCollector


class TestDiseaseConstraintScorer(unittest.TestCase):
    def setUp(self):
        self.scorer = DiseaseConstraintScorer()

    def test_diabetes_high_carbohydrate_warns(self):
        result = self.scorer.score(NutrientFacts(calories=600, carbohydrate=80), ["diabetes"])
        self.assertEqual(result.verdict, "warning")
        self.assertEqual(len(result.findings), 1)
        finding = result.findings[0]
        self.assertEqual((finding.disease, finding.nutrient, finding.kind), ("diabetes", "carbohydrate", "warn"))
        self.assertEqual(finding.threshold, 60)
        self.assertIn("80.0g", finding.message)

    def test_diabetes_low_carbohydrate_is_positive(self):
        result = self.scorer.score(NutrientFacts(carbohydrate=20), ["diabetes"])
        self.assertEqual(result.verdict, "positive")
        self.assertEqual(result.findings[0].kind, "improve")

    def test_glycemic_index_rule(self):
        result = self.scorer.score(NutrientFacts(carbohydrate=45, glycemic_index=40), ["diabetes"])
        self.assertEqual(result.verdict, "positive")
        self.assertEqual([f.nutrient for f in result.findings], ["glycemic_index"])

    def test_thresholds_are_strict(self):
        self.assertEqual(self.scorer.score(NutrientFacts(carbohydrate=60), ["diabetes"]).verdict, "neutral")
        self.assertEqual(self.scorer.score(NutrientFacts(carbohydrate=30), ["diabetes"]).verdict, "neutral")

    def test_kidney_warn_beats_improve(self):
        result = self.scorer.score(NutrientFacts(protein=35, sodium=400), ["kidney_disease"])
        self.assertEqual(result.verdict, "warning")
        kinds = {f.nutrient: f.kind for f in result.findings}
        self.assertEqual(kinds, {"protein": "warn", "sodium": "improve"})

    def test_absent_optional_nutrients_are_skipped(self):
        result = self.scorer.score(NutrientFacts(protein=25, sodium=700), ["kidney_disease"])
        self.assertEqual(result.verdict, "neutral")
        self.assertEqual(result.findings, ())
        result = self.scorer.score(NutrientFacts(protein=25, sodium=700, potassium=650, phosphorus=200),
                                   ["kidney_disease"])
        self.assertEqual([f.nutrient for f in result.findings], ["potassium"])

    def test_fat_share_for_hypertension(self):
        # 20g fat * 9 / 400 kcal = 45% of calories
        result = self.scorer.score(NutrientFacts(calories=400, fat=20, sodium=700), ["hypertension"])
        self.assertEqual(result.verdict, "warning")
        self.assertEqual(result.findings[0].nutrient, "fat_calorie_pct")
        self.assertAlmostEqual(result.findings[0].value, 45.0)

    def test_fat_share_skipped_without_calories(self):
        result = self.scorer.score(NutrientFacts(calories=0, fat=20, sodium=700), ["cardiovascular_disease"])
        self.assertEqual(result.verdict, "neutral")

    def test_gout_and_gastritis(self):
        self.assertEqual(self.scorer.score(NutrientFacts(protein=31), ["gout"]).verdict, "warning")
        self.assertEqual(self.scorer.score(NutrientFacts(protein=10), ["gout"]).verdict, "neutral")
        self.assertEqual(self.scorer.score(NutrientFacts(sodium=1200), ["gastritis"]).verdict, "warning")

    def test_findings_concatenated_across_diseases(self):
        result = self.scorer.score(NutrientFacts(carbohydrate=20, protein=40), ["gout", "diabetes"])
        self.assertEqual(result.verdict, "warning")
        self.assertEqual([f.disease for f in result.findings], ["diabetes", "gout"])
        self.assertEqual(result.to_dict()["per_disease"], {"diabetes": "positive", "gout": "warning"})

    def test_unknown_disease_is_neutral_and_reported_once(self):
        collector = EventCollector(DISEASE_UNKNOWN_CODE)
        try:
            first = self.scorer.score(NutrientFacts(carbohydrate=90), ["lupus"])
            self.scorer.score(NutrientFacts(carbohydrate=90), ["lupus"])
        finally:
            collector.stop()
        self.assertEqual(first.verdict, "neutral")
        self.assertEqual(first.findings, ())
        self.assertEqual(collector.of(DISEASE_UNKNOWN_CODE), [{"code": "lupus"}])

    def test_no_diseases_is_neutral(self):
        self.assertEqual(self.scorer.score(NutrientFacts(carbohydrate=200), []).verdict, "neutral")

    def test_aggregate_verdict(self):
        self.assertEqual(aggregate_verdict(["positive", "warning"]), "warning")
        self.assertEqual(aggregate_verdict(["neutral", "positive"]), "positive")
        self.assertEqual(aggregate_verdict([]), "neutral")


if __name__ == '__main__':
    unittest.main()
