"""Allergy safety gate.

A dish is unsafe for a member when any declared allergy's display name, or any
of that allergy's derived ingredient names, appears as a substring of the dish
text (name + ingredients + sauces/seasonings, lower-cased).

Severity:
  - any direct allergen match -> 'critical' if one of the matched allergies is
    critical, else 'high'
  - derived-ingredient matches only -> 'high'
  - nothing matched -> 'safe'

Without a reference dataset the filter fails closed: every dish is unsafe for
anyone who declares at least one allergy.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from diet.domain.Allergy import AllergyReference, normalize_code
from diet.domain.Dish import Dish
from diet.events.event_helpers import publish_unknown_allergy
from diet.utilities.constants import (
    SAFETY_BANNER, SEVERITY_CRITICAL, SEVERITY_HIGH, SEVERITY_SAFE,
)

logger = logging.getLogger(__name__)

__all__ = ["AllergyCheck", "AllergySafetyFilter", "dish_corpus"]


def _normalize(text: str) -> str:
    return " ".join(str(text or "").lower().split())


def dish_corpus(dish: Dish) -> str:
    """One lower-case string holding every piece of text on the dish."""
    return " ".join(_normalize(t) for t in dish.text_fields() if t)


@dataclass(frozen=True)
class AllergyCheck:
    safe: bool
    matched_allergens: Tuple[str, ...] = ()
    matched_derived: Tuple[str, ...] = ()
    severity: str = SEVERITY_SAFE
    warning_message: Optional[str] = None
    reference_available: bool = True

    def to_dict(self):
        return {
            "safe": self.safe,
            "matched_allergens": list(self.matched_allergens),
            "matched_derived": list(self.matched_derived),
            "severity": self.severity,
            "warning_message": self.warning_message,
            "reference_available": self.reference_available,
        }


def _warning_message(allergens, derived, severity) -> str:
    parts: List[str] = []
    if allergens:
        parts.append(f"Allergens found: {', '.join(allergens)}.")
    if derived:
        parts.append(f"Allergen-derived ingredients found: {', '.join(derived)}.")
    if severity == SEVERITY_CRITICAL:
        parts.append("Critical risk: do not eat this dish, it may cause anaphylaxis.")
    elif severity == SEVERITY_HIGH:
        parts.append("High risk: avoid this dish, a serious allergic reaction is possible.")
    return " ".join(parts)


class AllergySafetyFilter:
    def __init__(self, reference: Optional[AllergyReference]):
        # An empty dataset is as good as none: fail closed
        self.reference = reference if reference is not None and len(reference) > 0 else None
        self._reported_unknown: set = set()
        if self.reference is None:
            logger.error("Allergy reference unavailable, allergy filter running fail-closed")

    @classmethod
    def fail_closed(cls) -> "AllergySafetyFilter":
        return cls(None)

    @property
    def reference_available(self) -> bool:
        return self.reference is not None

    def _report_unknown(self, code: str):
        if code in self._reported_unknown:
            return
        self._reported_unknown.add(code)
        logger.warning(f"Unknown allergy code '{code}' (reference version {self.reference.version or '-'}), no match contributed")
        publish_unknown_allergy(code)

    def is_safe(self, dish: Dish, allergy_codes: Iterable[str]) -> AllergyCheck:
        codes = sorted({normalize_code(c) for c in allergy_codes} - {""})
        if not codes:
            return AllergyCheck(safe=True, reference_available=self.reference_available)

        if self.reference is None:
            return AllergyCheck(
                safe=False,
                matched_allergens=tuple(codes),
                severity=SEVERITY_CRITICAL,
                warning_message="Allergy reference data is unavailable; this dish cannot be confirmed safe.",
                reference_available=False,
            )

        corpus = dish_corpus(dish)
        matched_allergens: List[str] = []
        matched_derived: List[str] = []
        critical_direct = False

        for code in codes:
            allergy = self.reference.get(code)
            if allergy is None:
                self._report_unknown(code)
                continue
            name = _normalize(allergy.name)
            if name and name in corpus:
                matched_allergens.append(allergy.name)
                critical_direct = critical_direct or allergy.severity == SEVERITY_CRITICAL
            for derived in allergy.derived:
                needle = _normalize(derived)
                if needle and needle in corpus and derived not in matched_derived:
                    matched_derived.append(derived)

        if matched_allergens:
            severity = SEVERITY_CRITICAL if critical_direct else SEVERITY_HIGH
        elif matched_derived:
            severity = SEVERITY_HIGH
        else:
            return AllergyCheck(safe=True)

        logger.debug(f"Dish '{dish.id}' unsafe for {codes}: {matched_allergens} / {matched_derived}")
        return AllergyCheck(
            safe=False,
            matched_allergens=tuple(matched_allergens),
            matched_derived=tuple(matched_derived),
            severity=severity,
            warning_message=_warning_message(matched_allergens, matched_derived, severity),
        )

    def safe_subset(self, dishes: Iterable[Dish], allergy_codes: Iterable[str]) -> List[Dish]:
        """Dishes that pass the gate, catalog order preserved."""
        codes = list(allergy_codes)
        return [d for d in dishes if self.is_safe(d, codes).safe]

    @staticmethod
    def safety_notice(allergy_codes: Iterable[str]) -> Optional[str]:
        """Standing banner for anyone with declared allergies: ingredient data can be wrong."""
        return SAFETY_BANNER if any(allergy_codes) else None
