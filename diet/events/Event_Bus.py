"""Simple Event Bus / Observer implementation for engine notifications.

Event names used so far:
  plan.unassignable -> payload {"date", "meal_slot", "scope", "role", "position", "reason"}
  plan.composed -> payload {"date", "assignments": int, "gaps": int}
  safety.reference_unavailable -> payload {"source", "error"}
  allergy.unknown_code -> payload {"code"}
  disease.unknown_code -> payload {"code"}
  nutrients.invalid -> payload {"dish_id", "field", "value"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_UNASSIGNABLE = "plan.unassignable"
PLAN_COMPOSED = "plan.composed"
SAFETY_REFERENCE_UNAVAILABLE = "safety.reference_unavailable"
ALLERGY_UNKNOWN_CODE = "allergy.unknown_code"
DISEASE_UNKNOWN_CODE = "disease.unknown_code"
NUTRIENTS_INVALID = "nutrients.invalid"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:  # pragma: no cover
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'PLAN_UNASSIGNABLE', 'PLAN_COMPOSED', 'SAFETY_REFERENCE_UNAVAILABLE',
	'ALLERGY_UNKNOWN_CODE', 'DISEASE_UNKNOWN_CODE', 'NUTRIENTS_INVALID'
]
