import logging
from datetime import date as _date

from fastapi import APIRouter, HTTPException, Response

from diet.domain.Meal import CompositeSpec
from diet.infra.Allergy_Repository import load_allergy_reference
from diet.infra.Catalog_Repository import reading_from_catalog
from diet.infra.Member_Repository import reading_from_members
from diet.infra.Plan_Repository import PlanRepository
from diet.infra.Usage_Repository import load_usage, replace_day_usage
from diet.infra.pdf_utils import generate_pdf_for_day
from diet.logic.planning.reconciler import FamilyPlanReconciler
from diet.logic.reporting.nutrition import summarize_day_plan
from diet.logic.safety.allergy_filter import AllergySafetyFilter
from diet.logic.variety.tracker import VarietyTracker
from diet.utilities.config import VARIETY_LOOKBACK_DAYS
from diet.utilities.errors import SafetyReferenceUnavailable
from diet.utilities.validators import ComposeRequest

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger(__name__)


@router.post("/compose")
def compose_day(req: ComposeRequest):
    """Compose a day for the household, replace the stored day and its usage records."""
    try:
        reference = load_allergy_reference()
    except SafetyReferenceUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    catalog = reading_from_catalog()
    members = reading_from_members()
    # Records of an earlier run for the same date are replaced, so they must not penalise this one
    history = [r for r in load_usage() if r.used_on != req.date]
    tracker = VarietyTracker(history, lookback_days=req.lookback_days or VARIETY_LOOKBACK_DAYS)

    composition = {slot: CompositeSpec(**spec.model_dump()) for slot, spec in req.composite_slots.items()}
    reconciler = FamilyPlanReconciler(AllergySafetyFilter(reference), tracker=tracker,
                                      lookback_days=req.lookback_days)
    day_plan = reconciler.compose(members, catalog, req.date, slots=req.slots, composition=composition)

    PlanRepository().replace_day(day_plan)
    replace_day_usage(req.date, day_plan.usage)
    return summarize_day_plan(day_plan)


def _stored_day(day: _date):
    day_plan = PlanRepository().get_day(day)
    if day_plan is None:
        raise HTTPException(status_code=404, detail=f"No plan stored for {day.isoformat()}")
    return day_plan


@router.get("/{day}")
def get_day(day: _date):
    return summarize_day_plan(_stored_day(day))


@router.get("/{day}/pdf")
def export_day_pdf(day: _date):
    pdf_bytes = generate_pdf_for_day(summarize_day_plan(_stored_day(day)))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=diet_plan_{day.isoformat()}.pdf"
        }
    )
