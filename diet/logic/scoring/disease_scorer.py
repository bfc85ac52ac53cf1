"""Disease-aware dish scoring.

Scores a dish's nutrient facts against the rule table for each declared
disease. The result ranks and annotates candidates; it never removes one.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from diet.domain.Dish import NutrientFacts
from diet.events.event_helpers import publish_unknown_disease
from diet.logic.scoring.disease_rules import DISEASE_RULES, ThresholdRule
from diet.utilities.constants import VERDICT_POSITIVE, VERDICT_NEUTRAL, VERDICT_WARNING

logger = logging.getLogger(__name__)

__all__ = ["Finding", "DiseaseAssessment", "DiseaseScore", "DiseaseConstraintScorer", "aggregate_verdict"]

WARN = "warn"
IMPROVE = "improve"


@dataclass(frozen=True)
class Finding:
    disease: str
    nutrient: str
    kind: str
    value: float
    threshold: float
    message: str

    def to_dict(self):
        return {
            "disease": self.disease,
            "nutrient": self.nutrient,
            "kind": self.kind,
            "value": self.value,
            "threshold": self.threshold,
            "message": self.message,
        }


@dataclass(frozen=True)
class DiseaseAssessment:
    disease: str
    verdict: str
    findings: Tuple[Finding, ...] = ()


@dataclass(frozen=True)
class DiseaseScore:
    verdict: str
    findings: Tuple[Finding, ...] = ()
    assessments: Tuple[DiseaseAssessment, ...] = ()

    def to_dict(self):
        return {
            "verdict": self.verdict,
            "findings": [f.to_dict() for f in self.findings],
            "per_disease": {a.disease: a.verdict for a in self.assessments},
        }


def aggregate_verdict(verdicts: Iterable[str]) -> str:
    """Worst case wins: any warning -> warning, else any positive -> positive, else neutral."""
    seen = set(verdicts)
    if VERDICT_WARNING in seen:
        return VERDICT_WARNING
    if VERDICT_POSITIVE in seen:
        return VERDICT_POSITIVE
    return VERDICT_NEUTRAL


def _apply(rule: ThresholdRule, disease: str, value: float) -> Optional[Finding]:
    if rule.warn_above is not None and value > rule.warn_above:
        return Finding(disease, rule.nutrient, WARN, value, rule.warn_above,
                       rule.warn_message.format(value=value, threshold=rule.warn_above))
    if rule.improve_below is not None and value < rule.improve_below:
        return Finding(disease, rule.nutrient, IMPROVE, value, rule.improve_below,
                       rule.improve_message.format(value=value, threshold=rule.improve_below))
    return None


class DiseaseConstraintScorer:
    def __init__(self, rules: Optional[Dict[str, Tuple[ThresholdRule, ...]]] = None):
        self.rules = rules if rules is not None else DISEASE_RULES
        self._reported_unknown: set = set()

    def known_codes(self) -> List[str]:
        return sorted(self.rules)

    def assess(self, nutrients: NutrientFacts, disease: str) -> DiseaseAssessment:
        rules = self.rules.get(disease)
        if rules is None:
            if disease not in self._reported_unknown:
                self._reported_unknown.add(disease)
                logger.warning(f"Unknown disease code '{disease}', scored neutral")
                publish_unknown_disease(disease)
            return DiseaseAssessment(disease, VERDICT_NEUTRAL)

        findings: List[Finding] = []
        for rule in rules:
            value = nutrients.get(rule.nutrient)
            if value is None:
                # optional nutrient not supplied for this dish
                continue
            finding = _apply(rule, disease, value)
            if finding is not None:
                findings.append(finding)

        if any(f.kind == WARN for f in findings):
            verdict = VERDICT_WARNING
        elif findings:
            verdict = VERDICT_POSITIVE
        else:
            verdict = VERDICT_NEUTRAL
        return DiseaseAssessment(disease, verdict, tuple(findings))

    def score(self, nutrients: NutrientFacts, disease_codes: Iterable[str]) -> DiseaseScore:
        assessments = [self.assess(nutrients, code) for code in sorted(set(disease_codes))]
        # Concatenated, never merged: each disease keeps its own rationale
        findings = tuple(f for a in assessments for f in a.findings)
        return DiseaseScore(
            verdict=aggregate_verdict(a.verdict for a in assessments),
            findings=findings,
            assessments=tuple(assessments),
        )
