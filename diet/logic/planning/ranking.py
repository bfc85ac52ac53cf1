"""Candidate ranking shared by unified and individual assignment.

Order, best first:
  1. aggregated disease verdict (positive > neutral > warning)
  2. lowest combined variety penalty
  3. highest preference score (preferred ingredients add, excluded subtract,
     weighted by rank so the first-listed ingredient counts most)
  4. dish id, so equal candidates always come out in the same order
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from diet.domain.Dish import Dish
from diet.domain.Member import Member
from diet.logic.safety.allergy_filter import dish_corpus
from diet.logic.scoring.disease_scorer import DiseaseConstraintScorer, aggregate_verdict
from diet.logic.variety.tracker import VarietyTracker
from diet.utilities.constants import VERDICT_ORDER

logger = logging.getLogger(__name__)

__all__ = ["RankedCandidate", "preference_score", "rank_candidates"]


@dataclass(frozen=True)
class RankedCandidate:
    dish: Dish
    verdict: str
    variety_penalty: float
    preference: int
    rationale: Tuple[str, ...] = ()

    @property
    def sort_key(self):
        return (VERDICT_ORDER[self.verdict], self.variety_penalty, -self.preference, self.dish.id)


def _ranked_hits(names: Sequence[str], corpus: str) -> List[Tuple[str, int]]:
    n = len(names)
    return [(name, n - idx) for idx, name in enumerate(names) if " ".join(name.lower().split()) in corpus]


def preference_score(dish: Dish, members: Iterable[Member]) -> Tuple[int, List[str], List[str]]:
    """Returns (score, preferred names found, excluded names found)."""
    corpus = dish_corpus(dish)
    score = 0
    liked: List[str] = []
    disliked: List[str] = []
    for member in members:
        for name, weight in _ranked_hits(member.preferred, corpus):
            score += weight
            liked.append(name)
        for name, weight in _ranked_hits(member.excluded, corpus):
            score -= weight
            disliked.append(name)
    return score, liked, disliked


def _label(member: Member) -> str:
    return member.name or member.id


def rank_candidates(candidates: Iterable[Dish], members: Sequence[Member], scorer: DiseaseConstraintScorer,
                    tracker: VarietyTracker, on_date: date, scopes: Sequence[str],
                    lookback_days: Optional[int] = None) -> List[RankedCandidate]:
    """Rank dishes for the given members; variety is read from every scope in `scopes`."""
    ranked: List[RankedCandidate] = []
    for dish in candidates:
        notes: List[str] = []
        verdicts = []
        for member in members:
            if not member.diseases:
                continue
            result = scorer.score(dish.nutrients, member.diseases)
            verdicts.append(result.verdict)
            notes.extend(f"{_label(member)}: {f.message}" for f in result.findings)
        verdict = aggregate_verdict(verdicts)
        if verdicts:
            notes.insert(0, f"Disease check: {verdict}")

        penalty = tracker.combined_penalty(dish, scopes, on_date, lookback_days)
        if penalty > 0:
            notes.append(f"Served recently (variety penalty {penalty:.2f})")

        pref, liked, disliked = preference_score(dish, members)
        if liked:
            notes.append("Preferred ingredients: " + ", ".join(dict.fromkeys(liked)))
        if disliked:
            notes.append("Contains excluded ingredients: " + ", ".join(dict.fromkeys(disliked)))

        ranked.append(RankedCandidate(dish, verdict, penalty, pref, tuple(notes)))

    ranked.sort(key=lambda c: c.sort_key)
    if ranked:
        top = ranked[0]
        logger.debug(f"Ranked {len(ranked)} candidates for {list(scopes)}; top '{top.dish.id}' "
                     f"({top.verdict}, penalty {top.variety_penalty:.2f}, preference {top.preference})")
    return ranked
