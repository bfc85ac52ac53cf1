from fastapi import APIRouter, HTTPException

from diet.domain.Dish import Dish, NutrientFacts
from diet.infra.Allergy_Repository import load_allergy_reference
from diet.logic.safety.allergy_filter import AllergySafetyFilter
from diet.logic.scoring.disease_scorer import DiseaseConstraintScorer
from diet.utilities.errors import SafetyReferenceUnavailable
from diet.utilities.validators import AllergyCheckInput, DiseaseScoreInput

router = APIRouter(prefix="/api/safety", tags=["safety"])


def _reference():
    try:
        return load_allergy_reference()
    except SafetyReferenceUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/allergies")
def list_allergies():
    """Allergy reference grouped by category (major, special, intolerance, other)."""
    reference = _reference()
    return {
        "version": reference.version,
        "locale": reference.locale,
        "categories": {cat: [a.to_dict() for a in items] for cat, items in reference.group_by_category().items()},
    }


@router.post("/check")
def check_dish(body: AllergyCheckInput):
    allergy_filter = AllergySafetyFilter(_reference())
    dish = Dish.from_dict(body.dish.to_raw())
    result = allergy_filter.is_safe(dish, body.allergies).to_dict()
    result["dish_id"] = dish.id
    result["notice"] = allergy_filter.safety_notice(body.allergies)
    return result


@router.post("/score")
def score_nutrients(body: DiseaseScoreInput):
    scorer = DiseaseConstraintScorer()
    nutrients = NutrientFacts.from_dict(body.nutrients.to_raw(), dish_id="adhoc")
    result = scorer.score(nutrients, body.diseases).to_dict()
    result["known_diseases"] = scorer.known_codes()
    return result
