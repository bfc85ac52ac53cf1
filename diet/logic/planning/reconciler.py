"""Family plan reconciliation.

For every meal slot (and, for composite slots, every sub-role position):

  1. intersect the allergy-safe catalog subsets of all opted-in members
  2. non-empty intersection -> rank it with everyone's signals and assign one
     unified dish under the household scope
  3. empty intersection -> no unified dish, every member is planned alone
  4. members planned alone (opted out, or after step 3) get the best dish
     from their own safe subset
  5. a member with no safe dish gets an explicit UnassignableSlot, never an
     unsafe dish

Allergy safety is the only hard gate. Disease verdicts, variety and
preferences only order the candidates.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from diet.domain.Dish import Dish
from diet.domain.Meal import CompositeSpec, SIMPLE_POSITION, build_meal
from diet.domain.Member import Member
from diet.domain.Plan import DayPlan, PlanAssignment, UnassignableSlot
from diet.events.event_helpers import (
    publish_unassignable, publish_plan_composed, publish_reference_unavailable,
)
from diet.logic.planning.ranking import rank_candidates, RankedCandidate
from diet.logic.safety.allergy_filter import AllergySafetyFilter
from diet.logic.scoring.disease_scorer import DiseaseConstraintScorer
from diet.logic.variety.tracker import VarietyTracker
from diet.utilities.constants import (
    HOUSEHOLD_SCOPE, MEAL_SLOTS, NO_DISTINCT_CANDIDATE, NO_SAFE_CANDIDATE, REFERENCE_UNAVAILABLE,
    STATE_INDIVIDUALLY_ASSIGNED, STATE_UNASSIGNABLE, STATE_UNIFIED_ASSIGNED, STATE_UNIFIED_EVALUATED,
)

logger = logging.getLogger(__name__)

__all__ = ["FamilyPlanReconciler"]


class FamilyPlanReconciler:
    def __init__(self, allergy_filter: AllergySafetyFilter, scorer: Optional[DiseaseConstraintScorer] = None,
                 tracker: Optional[VarietyTracker] = None, lookback_days: Optional[int] = None):
        self.allergy_filter = allergy_filter
        self.scorer = scorer or DiseaseConstraintScorer()
        self.tracker = tracker if tracker is not None else VarietyTracker()
        self.lookback_days = lookback_days

    # --- Public API -------------------------------------------------------
    def compose(self, members: Iterable[Member], catalog: Iterable[Dish], on_date: date,
                slots: Optional[Sequence[str]] = None,
                composition: Optional[Dict[str, CompositeSpec]] = None) -> DayPlan:
        '''Compose one date for the household. Usage records are written to the tracker as dishes are placed.'''
        active = [m for m in members if m.active]
        dishes = list(catalog)
        composition = composition or {}
        plan = DayPlan(date=on_date, reference_available=self.allergy_filter.reference_available)

        if not plan.reference_available:
            logger.error(f"Composing {on_date} without allergy reference: members with allergies stay unassigned")
            publish_reference_unavailable(None, "allergy filter running fail-closed")

        # Allergy gate once per member over the whole catalog
        safe_ids: Dict[str, Set[str]] = {
            m.id: {d.id for d in self.allergy_filter.safe_subset(dishes, m.allergies)} for m in active
        }

        for meal_slot in (slots or MEAL_SLOTS):
            spec = composition.get(meal_slot)
            slot_catalog = [d for d in dishes if d.fits_slot(meal_slot)]
            placed: Dict[str, Dict[tuple, Dish]] = defaultdict(dict)
            eaten: Dict[str, Set[str]] = defaultdict(set)
            positions = spec.positions() if spec else [SIMPLE_POSITION]
            for role, index in positions:
                pool = [d for d in slot_catalog if d.has_role(role)]
                self._reconcile_position(plan, meal_slot, role, index, pool, active, safe_ids, placed, eaten)
            for scope, by_position in placed.items():
                plan.meals[(meal_slot, scope)] = build_meal(spec, by_position)

        logger.info(f"Composed {on_date}: {len(plan.assignments)} assignments "
                    f"({len(plan.unified())} unified), {len(plan.gaps)} unassignable")
        publish_plan_composed(plan)
        return plan

    # --- Internals --------------------------------------------------------
    def _reconcile_position(self, plan: DayPlan, meal_slot: str, role, index, pool: List[Dish],
                            active: List[Member], safe_ids, placed, eaten):
        included = [m for m in active if m.include_in_unified_plan]
        unified_assigned = False

        if included:
            for m in included:
                plan.states[(meal_slot, m.scope, role, index)] = STATE_UNIFIED_EVALUATED
            taken = set().union(*(eaten[m.id] for m in included))
            candidates = [d for d in pool
                          if all(d.id in safe_ids[m.id] for m in included) and d.id not in taken]
            if candidates:
                scopes = [HOUSEHOLD_SCOPE] + [m.scope for m in included]
                top = rank_candidates(candidates, included, self.scorer, self.tracker, plan.date,
                                      scopes, self.lookback_days)[0]
                self._assign(plan, meal_slot, role, index, HOUSEHOLD_SCOPE, included, top, unified=True)
                placed[HOUSEHOLD_SCOPE][(role, index)] = top.dish
                for m in included:
                    eaten[m.id].add(top.dish.id)
                    plan.states[(meal_slot, m.scope, role, index)] = STATE_UNIFIED_ASSIGNED
                unified_assigned = True
            else:
                logger.info(f"No unified candidate for {plan.date} {meal_slot} {role or ''}".rstrip()
                            + ", planning members individually")

        individuals = [m for m in active if not (unified_assigned and m.include_in_unified_plan)]
        for member in individuals:
            safe = [d for d in pool if d.id in safe_ids[member.id]]
            candidates = [d for d in safe if d.id not in eaten[member.id]]
            if not candidates:
                self._gap(plan, meal_slot, role, index, member, safe)
                continue
            top = rank_candidates(candidates, [member], self.scorer, self.tracker, plan.date,
                                  [member.scope], self.lookback_days)[0]
            self._assign(plan, meal_slot, role, index, member.scope, [member], top, unified=False)
            placed[member.scope][(role, index)] = top.dish
            eaten[member.id].add(top.dish.id)
            plan.states[(meal_slot, member.scope, role, index)] = STATE_INDIVIDUALLY_ASSIGNED

    def _assign(self, plan: DayPlan, meal_slot: str, role, index, scope: str,
                members: List[Member], chosen: RankedCandidate, unified: bool):
        rationale = list(chosen.rationale)
        if unified:
            rationale.insert(0, "Unified meal for: " + ", ".join(m.name or m.id for m in members))
        notice = self.allergy_filter.safety_notice(a for m in members for a in m.allergies)
        assignment = PlanAssignment(
            date=plan.date,
            meal_slot=meal_slot,
            scope=scope,
            dish=chosen.dish,
            rationale=tuple(rationale),
            is_unified=unified,
            members=tuple(m.id for m in members),
            role=role,
            position=index,
            notices=(notice,) if notice else (),
        )
        plan.assignments.append(assignment)
        record = self.tracker.record(scope, chosen.dish, plan.date)
        if record is not None:
            plan.usage.append(record)

    def _gap(self, plan: DayPlan, meal_slot: str, role, index, member: Member, safe: List[Dish]):
        if safe:
            reason = NO_DISTINCT_CANDIDATE
        elif member.allergies and not self.allergy_filter.reference_available:
            reason = REFERENCE_UNAVAILABLE
        else:
            reason = NO_SAFE_CANDIDATE
        gap = UnassignableSlot(
            date=plan.date,
            meal_slot=meal_slot,
            scope=member.scope,
            reason=reason,
            role=role,
            position=index,
            members=(member.id,),
        )
        plan.gaps.append(gap)
        plan.states[(meal_slot, member.scope, role, index)] = STATE_UNASSIGNABLE
        logger.warning(f"Unassignable {plan.date} {meal_slot} for {member.scope} ({reason})")
        publish_unassignable(gap)
