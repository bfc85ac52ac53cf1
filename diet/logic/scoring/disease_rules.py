"""Per-disease nutrient threshold rules.

Adding a disease is a data change: append an entry to DISEASE_RULES. Each rule
warns when the nutrient is above warn_above and counts as an improvement when
it is below improve_below (either bound may be None). Thresholds are per
serving.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ThresholdRule:
    nutrient: str
    unit: str
    warn_above: Optional[float]
    improve_below: Optional[float]
    warn_message: str
    improve_message: str = ""


NUTRIENT_LABELS: Dict[str, str] = {
    "carbohydrate": "Carbohydrate",
    "glycemic_index": "Glycemic index",
    "protein": "Protein",
    "sodium": "Sodium",
    "potassium": "Potassium",
    "phosphorus": "Phosphorus",
    "fat_calorie_pct": "Calories from fat",
}

_DIABETES = (
    ThresholdRule("carbohydrate", "g", 60, 30,
                  "Carbohydrate is high ({value:.1f}g > {threshold:g}g); watch blood sugar.",
                  "Carbohydrate is moderate ({value:.1f}g < {threshold:g}g)."),
    ThresholdRule("glycemic_index", "", 70, 55,
                  "High glycemic index (GI {value:.0f} > {threshold:g}); expect a fast blood sugar rise.",
                  "Low glycemic index (GI {value:.0f} < {threshold:g}); blood sugar rises gently."),
)

_KIDNEY = (
    ThresholdRule("protein", "g", 30, 20,
                  "Protein is high ({value:.1f}g > {threshold:g}g); limit protein to reduce kidney load.",
                  "Protein is kidney-friendly ({value:.1f}g < {threshold:g}g)."),
    ThresholdRule("sodium", "mg", 1000, 500,
                  "Sodium is high ({value:.0f}mg > {threshold:g}mg); risk of swelling and raised blood pressure.",
                  "Sodium is low ({value:.0f}mg < {threshold:g}mg)."),
    ThresholdRule("potassium", "mg", 500, None,
                  "Potassium is high ({value:.0f}mg > {threshold:g}mg); may need limiting depending on kidney function."),
    ThresholdRule("phosphorus", "mg", 300, None,
                  "Phosphorus is high ({value:.0f}mg > {threshold:g}mg); phosphorus intake should be restricted."),
)

_CARDIOVASCULAR = (
    ThresholdRule("sodium", "mg", 1000, 500,
                  "Sodium is high ({value:.0f}mg > {threshold:g}mg); watch blood pressure.",
                  "Sodium is low ({value:.0f}mg < {threshold:g}mg)."),
    ThresholdRule("fat_calorie_pct", "%", 35, 25,
                  "Fat share is high ({value:.1f}% of calories > {threshold:g}%); watch cholesterol.",
                  "Fat share is moderate ({value:.1f}% of calories < {threshold:g}%)."),
)

_GOUT = (
    ThresholdRule("protein", "g", 30, None,
                  "Protein is high ({value:.1f}g > {threshold:g}g); possibly high in purines, may aggravate gout."),
)

_GASTRITIS = (
    ThresholdRule("sodium", "mg", 1000, None,
                  "Sodium is high ({value:.0f}mg > {threshold:g}mg); salty food can aggravate gastritis."),
)

DISEASE_RULES: Dict[str, Tuple[ThresholdRule, ...]] = {
    "diabetes": _DIABETES,
    "kidney_disease": _KIDNEY,
    "cardiovascular_disease": _CARDIOVASCULAR,
    "hypertension": _CARDIOVASCULAR,
    "gout": _GOUT,
    "gastritis": _GASTRITIS,
}

__all__ = ["ThresholdRule", "DISEASE_RULES", "NUTRIENT_LABELS"]
