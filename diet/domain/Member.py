"""Member domain entity: household role, diseases, allergies, ranked ingredient preferences."""
from typing import Iterable, List, Optional

from diet.domain.Allergy import normalize_code
from diet.utilities.constants import ROLE_SELF, ROLE_DEPENDENT, MEMBER_SCOPE_PREFIX

LIST_FIELDS = ("diseases", "allergies", "preferred", "excluded")


def member_scope(member_id: str) -> str:
    return f"{MEMBER_SCOPE_PREFIX}{member_id}"


class Member:
    def __init__(self, id: str, name: str = "", role: str = ROLE_SELF,
                 diseases: Optional[Iterable[str]] = None, allergies: Optional[Iterable[str]] = None,
                 preferred: Optional[List[str]] = None, excluded: Optional[List[str]] = None,
                 include_in_unified_plan: bool = True, active: bool = True):
        self.id = str(id)
        self.name = name
        self.role = role if role in (ROLE_SELF, ROLE_DEPENDENT) else ROLE_DEPENDENT
        self.diseases = frozenset(normalize_code(d) for d in (diseases or ()) if normalize_code(d))
        self.allergies = frozenset(normalize_code(a) for a in (allergies or ()) if normalize_code(a))
        # Ranked lists, most important first
        self.preferred = [p.strip() for p in (preferred or []) if p and p.strip()]
        self.excluded = [e.strip() for e in (excluded or []) if e and e.strip()]
        self.include_in_unified_plan = include_in_unified_plan
        self.active = active

    @property
    def scope(self) -> str:
        return member_scope(self.id)

    def deactivate(self):
        '''Soft-deactivate: the member stays resolvable for historical plans but is no longer planned for.'''
        self.active = False
        return self

    def __str__(self) -> str:
        parts = [f"{self.name or self.id} ({self.role})"]
        if self.diseases:
            parts.append("Diseases: " + ", ".join(sorted(self.diseases)))
        if self.allergies:
            parts.append("Allergies: " + ", ".join(sorted(self.allergies)))
        if not self.include_in_unified_plan:
            parts.append("individual plan only")
        if not self.active:
            parts.append("inactive")
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Member from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        if not d.get("id"):
            raise ValueError(f"Member record without id: {d.get('name', '')!r}")
        allowed = {"id", "name", "role", "diseases", "allergies", "preferred", "excluded",
                   "include_in_unified_plan", "active"}
        filtered = {k: v for k, v in d.items() if k in allowed}
        for field in LIST_FIELDS:
            value = filtered.get(field)
            # A bare string would otherwise be read one character per code
            if value is not None and not isinstance(value, (list, tuple)):
                raise ValueError(f"Member '{d['id']}': {field} must be a list, got {type(value).__name__}")
        filtered["include_in_unified_plan"] = bool(filtered.get("include_in_unified_plan", True))
        filtered["active"] = bool(filtered.get("active", True))
        return Member(**filtered)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "diseases": sorted(self.diseases),
            "allergies": sorted(self.allergies),
            "preferred": list(self.preferred),
            "excluded": list(self.excluded),
            "include_in_unified_plan": self.include_in_unified_plan,
            "active": self.active,
        }
