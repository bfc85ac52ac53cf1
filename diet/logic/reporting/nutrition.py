"""Nutrition aggregation logic.

Rolls assigned dishes up into day / week / month / year nutrient totals.
Sums are exact Decimal values; rounding only happens in format_totals().
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from diet.domain.Dish import NutrientFacts
from diet.domain.Plan import DayPlan, PlanAssignment
from diet.utilities.constants import (
    DATE_FORMAT, GRANULARITIES, HOUSEHOLD_SCOPE, MEAL_SLOTS, MEMBER_SCOPE_PREFIX,
)

# Glycemic index is a property of a food, not an amount, so it is never summed
SUMMED_NUTRIENTS = ("calories", "protein", "carbohydrate", "fat", "sodium", "potassium", "phosphorus", "fiber")

_ZERO = Decimal(0)


def _dec(value) -> Decimal:
    if value is None:
        return _ZERO
    # str() first so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


class NutrientTotals:
    def __init__(self, values: Optional[Dict[str, Decimal]] = None, dishes: int = 0):
        self.values = {k: _ZERO for k in SUMMED_NUTRIENTS}
        if values:
            self.values.update({k: Decimal(v) for k, v in values.items() if k in self.values})
        self.dishes = dishes

    def add(self, nutrients: NutrientFacts):
        for k in SUMMED_NUTRIENTS:
            self.values[k] += _dec(getattr(nutrients, k))
        self.dishes += 1

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals({k: self.values[k] + other.values[k] for k in SUMMED_NUTRIENTS},
                              self.dishes + other.dishes)

    def __getitem__(self, nutrient: str) -> Decimal:
        return self.values[nutrient]

    def __eq__(self, other):
        return isinstance(other, NutrientTotals) and other.values == self.values and other.dishes == self.dishes

    def __repr__(self):
        inner = ", ".join(f"{k}={v}" for k, v in self.values.items())
        return f"NutrientTotals({inner}, dishes={self.dishes})"

    def to_dict(self):
        d = {k: str(v) for k, v in self.values.items()}
        d["dishes"] = self.dishes
        return d


def period_key(day: date, granularity: str) -> str:
    if granularity == "day":
        return day.strftime(DATE_FORMAT)
    if granularity == "week":
        year, week, _ = day.isocalendar()
        return f"{year:04d}-W{week:02d}"
    if granularity == "month":
        return f"{day.year:04d}-{day.month:02d}"
    if granularity == "year":
        return f"{day.year:04d}"
    raise ValueError(f"Unknown granularity '{granularity}', expected one of {', '.join(GRANULARITIES)}")


def in_scope(assignment: PlanAssignment, scope: Optional[str]) -> bool:
    '''A member scope also covers unified assignments that feed that member.'''
    if scope is None or assignment.scope == scope:
        return True
    if scope.startswith(MEMBER_SCOPE_PREFIX) and assignment.is_unified:
        return assignment.feeds(scope[len(MEMBER_SCOPE_PREFIX):])
    return False


def rollup(assignments: Iterable[PlanAssignment], granularity: str = "day",
           scope: Optional[str] = None) -> Dict[str, NutrientTotals]:
    """Aggregate nutrient totals per period.

    Returns {period key: NutrientTotals}, keys sorted ascending:
      day   -> 'YYYY-MM-DD'
      week  -> 'YYYY-Www' (ISO week)
      month -> 'YYYY-MM'
      year  -> 'YYYY'
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity '{granularity}', expected one of {', '.join(GRANULARITIES)}")

    days: Dict[date, NutrientTotals] = defaultdict(NutrientTotals)
    for a in assignments:
        if in_scope(a, scope):
            days[a.date].add(a.dish.nutrients)

    result: Dict[str, NutrientTotals] = {}
    for day in sorted(days):
        key = period_key(day, granularity)
        result[key] = result.get(key, NutrientTotals()) + days[day]
    return result


def format_totals(totals: NutrientTotals, digits: int = 1) -> Dict[str, float]:
    quantum = Decimal(1).scaleb(-digits)
    d = {k: float(v.quantize(quantum, rounding=ROUND_HALF_UP)) for k, v in totals.values.items()}
    d["dishes"] = totals.dishes
    return d


def _row(a: PlanAssignment):
    return {
        "scope": a.scope,
        "role": a.role,
        "position": a.position,
        "dish_id": a.dish.id,
        "dish": a.dish.name,
        "is_unified": a.is_unified,
        "members": list(a.members),
        "rationale": list(a.rationale),
        "notices": list(a.notices),
        "nutrients": a.dish.nutrients.to_dict(),
    }


def summarize_day_plan(day_plan: DayPlan):
    """Report for one composed or stored day.

    Returns structure:
    {
      'date': 'YYYY-MM-DD',
      'reference_available': bool,
      'slots': { 'breakfast': [ {scope, role, position, dish_id, dish, is_unified, members,
                                 rationale, notices, nutrients}, ... ], ... },
      'gaps': [ {date, meal_slot, scope, reason, role, position, members, message}, ... ],
      'totals': { 'household': {...}, 'member:<id>': {...} }
    }
    """
    slots: Dict[str, List[dict]] = {}
    for slot in MEAL_SLOTS:
        rows = [_row(a) for a in day_plan.assignments if a.meal_slot == slot]
        if rows:
            slots[slot] = rows

    scopes = [HOUSEHOLD_SCOPE]
    for a in day_plan.assignments:
        for member_id in a.members:
            s = MEMBER_SCOPE_PREFIX + member_id
            if s not in scopes:
                scopes.append(s)

    totals = {}
    for s in scopes:
        per_day = rollup(day_plan.assignments, "day", scope=s)
        totals[s] = format_totals(per_day.get(day_plan.date.strftime(DATE_FORMAT), NutrientTotals()))

    return {
        "date": day_plan.date.strftime(DATE_FORMAT),
        "reference_available": day_plan.reference_available,
        "slots": slots,
        "gaps": [g.to_dict() for g in day_plan.gaps],
        "totals": totals,
    }


__all__ = ["NutrientTotals", "SUMMED_NUTRIENTS", "period_key", "in_scope", "rollup", "format_totals",
           "summarize_day_plan"]
