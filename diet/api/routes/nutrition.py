from datetime import date as _date
from typing import Optional

from fastapi import APIRouter, Query

from diet.infra.Plan_Repository import PlanRepository
from diet.logic.reporting.nutrition import format_totals, rollup

router = APIRouter(prefix="/api", tags=["nutrition"])


@router.get("/nutrition")
def nutrition_rollup(
    granularity: str = Query(default="day", pattern=r'^(day|week|month|year)$'),
    scope: Optional[str] = Query(default=None, description="'household' or 'member:<id>'; omit for everything"),
    start: Optional[_date] = Query(default=None),
    end: Optional[_date] = Query(default=None),
    digits: int = Query(default=1, ge=0, le=4),
):
    """Nutrient totals over stored plans, one entry per period."""
    assignments = PlanRepository().assignments_between(start, end)
    totals = rollup(assignments, granularity, scope=scope)
    return {
        "granularity": granularity,
        "scope": scope,
        "periods": {key: format_totals(t, digits) for key, t in totals.items()},
    }
