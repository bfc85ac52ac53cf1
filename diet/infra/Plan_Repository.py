import json
import logging
from datetime import date
from typing import List, Optional

from diet.domain.Plan import DayPlan, PlanAssignment
from diet.infra import paths
from diet.infra.json_store import read_json, atomic_write_json
from diet.utilities.constants import DATE_FORMAT

logger = logging.getLogger(__name__)


def _day_key(day: date) -> str:
    return day.strftime(DATE_FORMAT)


class PlanRepository:
    """Stored day plans, keyed by date. A day is always replaced as a whole."""

    def __init__(self, plan_file=None):
        self.plan_file = plan_file or paths.PLAN_FILE

    def _load(self) -> dict:
        try:
            return read_json(self.plan_file, {})
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in plan file: {e}")
            return {}

    def get_day(self, day: date) -> Optional[DayPlan]:
        raw = self._load().get(_day_key(day))
        if raw is None:
            return None
        return DayPlan.from_dict(raw)

    def replace_day(self, day_plan: DayPlan) -> None:
        store = self._load()
        store[_day_key(day_plan.date)] = day_plan.to_dict()
        atomic_write_json(self.plan_file, store)
        logger.info(f"Stored plan for {_day_key(day_plan.date)} "
                    f"({len(day_plan.assignments)} assignments, {len(day_plan.gaps)} gaps)")

    def days(self) -> List[date]:
        return sorted(DayPlan.from_dict(raw).date for raw in self._load().values())

    def assignments_between(self, start: Optional[date] = None, end: Optional[date] = None) -> List[PlanAssignment]:
        out: List[PlanAssignment] = []
        for raw in self._load().values():
            plan = DayPlan.from_dict(raw)
            if start and plan.date < start:
                continue
            if end and plan.date > end:
                continue
            out.extend(plan.assignments)
        return out


__all__ = ["PlanRepository"]
