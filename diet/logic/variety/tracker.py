"""Recently-served tracking for dish variety.

penalty() is a soft signal in [0, 1]: 1 for a dish served yesterday (or
earlier the same day), falling linearly to 1/lookback at the window edge and
0 beyond it or for a dish never served in that scope.
"""
from __future__ import annotations
import logging
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from diet.domain.Dish import Dish
from diet.domain.Plan import UsageRecord
from diet.utilities.config import VARIETY_LOOKBACK_DAYS

logger = logging.getLogger(__name__)

__all__ = ["VarietyTracker"]


class VarietyTracker:
    def __init__(self, records: Optional[Iterable[UsageRecord]] = None,
                 lookback_days: int = VARIETY_LOOKBACK_DAYS):
        if lookback_days < 1:
            raise ValueError(f"lookback_days must be >= 1: {lookback_days}")
        self.lookback_days = lookback_days
        self._records: List[UsageRecord] = []
        self._keys: set = set()
        # (scope, dish_id) -> sorted usage dates
        self._index: Dict[Tuple[str, str], List[date]] = {}
        for r in records or ():
            self._add(r)

    def _add(self, record: UsageRecord) -> bool:
        if record.key in self._keys:
            return False
        self._keys.add(record.key)
        self._records.append(record)
        dates = self._index.setdefault((record.scope, record.dish_id), [])
        dates.append(record.used_on)
        dates.sort()
        return True

    def _window(self, lookback_days: Optional[int]) -> int:
        if lookback_days is None:
            return self.lookback_days
        if lookback_days < 1:
            raise ValueError(f"lookback_days must be >= 1: {lookback_days}")
        return lookback_days

    def record(self, scope: str, dish: Dish, on_date: date) -> Optional[UsageRecord]:
        '''Append a usage record. Returns None when (scope, dish, date) was already recorded.'''
        rec = UsageRecord(scope=scope, dish_id=dish.id, used_on=on_date)
        return rec if self._add(rec) else None

    def records(self) -> List[UsageRecord]:
        return list(self._records)

    def last_used(self, dish: Dish, scope: str, on_date: date) -> Optional[date]:
        '''Most recent usage on or before on_date.'''
        latest = None
        for d in self._index.get((scope, dish.id), ()):
            if d > on_date:
                break
            latest = d
        return latest

    def penalty(self, dish: Dish, scope: str, on_date: date, lookback_days: Optional[int] = None) -> float:
        window = self._window(lookback_days)
        last = self.last_used(dish, scope, on_date)
        if last is None:
            return 0.0
        days_ago = (on_date - last).days
        if days_ago > window:
            return 0.0
        if days_ago <= 1:
            return 1.0
        return 1.0 - (days_ago - 1) / window

    def combined_penalty(self, dish: Dish, scopes: Iterable[str], on_date: date,
                         lookback_days: Optional[int] = None) -> float:
        return sum(self.penalty(dish, s, on_date, lookback_days) for s in scopes)

    def recent_dishes(self, scope: str, on_date: date, lookback_days: Optional[int] = None) -> List[str]:
        '''Dish ids used in the window, most recent first.'''
        window = self._window(lookback_days)
        start = on_date - timedelta(days=window)
        recent = [r for r in self._records if r.scope == scope and start <= r.used_on <= on_date]
        recent.sort(key=lambda r: (r.used_on, r.dish_id), reverse=True)
        return [r.dish_id for r in recent]

    def diversity_score(self, scope: str, on_date: date, lookback_days: Optional[int] = None) -> float:
        """
        Meal diversity score (0-100) over the window.
        Higher score = more variety in meals.
        """
        recent = self.recent_dishes(scope, on_date, lookback_days)
        if not recent:
            return 0.0
        counts = Counter(recent)
        return round(len(counts) / len(recent) * 100, 2)
