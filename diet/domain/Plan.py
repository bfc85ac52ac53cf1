"""Plan domain entities: assignments, unassignable gaps, usage records and the per-date DayPlan."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from diet.domain.Dish import Dish
from diet.utilities.constants import DATE_FORMAT, UNASSIGNABLE_MESSAGE, STATE_UNASSIGNED


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value), DATE_FORMAT).date()


@dataclass(frozen=True)
class PlanAssignment:
    date: date
    meal_slot: str
    scope: str
    dish: Dish
    rationale: Tuple[str, ...] = ()
    is_unified: bool = False
    members: Tuple[str, ...] = ()
    role: Optional[str] = None
    position: Optional[int] = None
    notices: Tuple[str, ...] = ()

    def feeds(self, member_id: str) -> bool:
        return member_id in self.members

    def to_dict(self):
        return {
            "date": self.date.strftime(DATE_FORMAT),
            "meal_slot": self.meal_slot,
            "scope": self.scope,
            "dish": self.dish.to_dict(),
            "rationale": list(self.rationale),
            "is_unified": self.is_unified,
            "members": list(self.members),
            "role": self.role,
            "position": self.position,
            "notices": list(self.notices),
        }

    @staticmethod
    def from_dict(data):
        return PlanAssignment(
            date=_parse_date(data["date"]),
            meal_slot=data["meal_slot"],
            scope=data["scope"],
            dish=Dish.from_dict(data["dish"]),
            rationale=tuple(data.get("rationale", ())),
            is_unified=bool(data.get("is_unified", False)),
            members=tuple(data.get("members", ())),
            role=data.get("role"),
            position=data.get("position"),
            notices=tuple(data.get("notices", ())),
        )


@dataclass(frozen=True)
class UnassignableSlot:
    """A slot (or sub-role position) with no allergy-safe dish for its scope."""
    date: date
    meal_slot: str
    scope: str
    reason: str
    role: Optional[str] = None
    position: Optional[int] = None
    members: Tuple[str, ...] = ()
    message: str = UNASSIGNABLE_MESSAGE

    def to_dict(self):
        return {
            "date": self.date.strftime(DATE_FORMAT),
            "meal_slot": self.meal_slot,
            "scope": self.scope,
            "reason": self.reason,
            "role": self.role,
            "position": self.position,
            "members": list(self.members),
            "message": self.message,
        }

    @staticmethod
    def from_dict(data):
        return UnassignableSlot(
            date=_parse_date(data["date"]),
            meal_slot=data["meal_slot"],
            scope=data["scope"],
            reason=data.get("reason", ""),
            role=data.get("role"),
            position=data.get("position"),
            members=tuple(data.get("members", ())),
            message=data.get("message", UNASSIGNABLE_MESSAGE),
        )


@dataclass(frozen=True)
class UsageRecord:
    scope: str
    dish_id: str
    used_on: date

    @property
    def key(self):
        return (self.scope, self.dish_id, self.used_on)

    def to_dict(self):
        return {"scope": self.scope, "dish_id": self.dish_id, "used_on": self.used_on.strftime(DATE_FORMAT)}

    @staticmethod
    def from_dict(data):
        return UsageRecord(scope=data["scope"], dish_id=str(data["dish_id"]), used_on=_parse_date(data["used_on"]))


@dataclass
class DayPlan:
    """Everything one composition run produced for one date."""
    date: date
    assignments: List[PlanAssignment] = field(default_factory=list)
    gaps: List[UnassignableSlot] = field(default_factory=list)
    usage: List[UsageRecord] = field(default_factory=list)
    # (meal_slot, scope, role, position) -> terminal state
    states: Dict[tuple, str] = field(default_factory=dict)
    meals: Dict[tuple, object] = field(default_factory=dict)
    reference_available: bool = True

    def __iter__(self):
        return iter(self.assignments)

    def __len__(self):
        return len(self.assignments)

    def for_scope(self, scope: str) -> List[PlanAssignment]:
        return [a for a in self.assignments if a.scope == scope]

    def unified(self) -> List[PlanAssignment]:
        return [a for a in self.assignments if a.is_unified]

    def for_member(self, member_id: str) -> List[PlanAssignment]:
        '''Assignments a member will eat: their own plus unified ones covering them.'''
        return [a for a in self.assignments if a.feeds(member_id)]

    def state_of(self, meal_slot: str, scope: str, role=None, position=None) -> str:
        return self.states.get((meal_slot, scope, role, position), STATE_UNASSIGNED)

    def to_dict(self):
        return {
            "date": self.date.strftime(DATE_FORMAT),
            "assignments": [a.to_dict() for a in self.assignments],
            "gaps": [g.to_dict() for g in self.gaps],
            "reference_available": self.reference_available,
        }

    @staticmethod
    def from_dict(data):
        return DayPlan(
            date=_parse_date(data["date"]),
            assignments=[PlanAssignment.from_dict(a) for a in data.get("assignments", [])],
            gaps=[UnassignableSlot.from_dict(g) for g in data.get("gaps", [])],
            reference_available=bool(data.get("reference_available", True)),
        )


__all__ = ["PlanAssignment", "UnassignableSlot", "UsageRecord", "DayPlan"]
