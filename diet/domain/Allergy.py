"""Allergy reference data: allergy entries and the versioned code -> allergy dataset."""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from diet.utilities.constants import SEVERITIES, SEVERITY_HIGH

ALLERGY_CATEGORIES = ("major", "special", "intolerance", "other")


def normalize_code(code) -> str:
    '''Allergy and disease codes compare trimmed and lower-cased everywhere.'''
    return str(code).strip().lower() if code is not None else ""


class Allergy:
    def __init__(self, code: str, name: str, severity: str = SEVERITY_HIGH,
                 derived: Optional[Iterable[str]] = None, category: str = "other"):
        self.code = normalize_code(code)
        self.name = name
        self.severity = severity if severity in SEVERITIES else SEVERITY_HIGH
        self.derived = tuple(d for d in (derived or ()) if d)
        self.category = category if category in ALLERGY_CATEGORIES else "other"

    def __str__(self) -> str:
        return f"{self.name} [{self.code}] - {self.severity} - derived: {', '.join(self.derived) or '-'}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        if not d.get("code") or not d.get("name"):
            raise ValueError(f"Allergy record needs code and name: {d!r}")
        return Allergy(
            code=d["code"],
            name=d["name"],
            severity=d.get("severity", SEVERITY_HIGH),
            derived=d.get("derived", []),
            category=d.get("category", "other"),
        )

    def to_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "severity": self.severity,
            "category": self.category,
            "derived": list(self.derived),
        }


class AllergyReference:
    """Read-only, versioned allergy -> derived-ingredient dataset.

    Injected into AllergySafetyFilter rather than read from module state, so a
    test or a locale can swap the whole table without touching call sites.
    """

    def __init__(self, allergies: Iterable[Allergy], version: str = "", locale: str = ""):
        self._by_code: Dict[str, Allergy] = {a.code: a for a in allergies}
        self.version = version
        self.locale = locale

    def __len__(self):
        return len(self._by_code)

    def __contains__(self, code) -> bool:
        return normalize_code(code) in self._by_code

    def get(self, code: str) -> Optional[Allergy]:
        return self._by_code.get(normalize_code(code))

    def codes(self) -> List[str]:
        return sorted(self._by_code)

    def derived_for(self, codes: Iterable[str]) -> Dict[str, tuple]:
        '''Maps each known code to its derived ingredient names. Unknown codes are left out.'''
        found = (normalize_code(c) for c in codes)
        return {c: self._by_code[c].derived for c in found if c in self._by_code}

    def group_by_category(self) -> Dict[str, List[Allergy]]:
        grouped: Dict[str, List[Allergy]] = defaultdict(list)
        for cat in ALLERGY_CATEGORIES:
            grouped[cat] = []
        for allergy in sorted(self._by_code.values(), key=lambda a: a.name.lower()):
            grouped[allergy.category].append(allergy)
        return dict(grouped)

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allergies = [Allergy.from_dict(a) for a in d.get("allergies", [])]
        return AllergyReference(allergies, version=str(d.get("version", "")), locale=d.get("locale", ""))

    def to_dict(self):
        return {
            "version": self.version,
            "locale": self.locale,
            "allergies": [self._by_code[c].to_dict() for c in self.codes()],
        }
