"""Event helper utilities.

This module provides helper functions for publishing engine events
using the global event bus.

Quick import:
    from diet.events.event_helpers import (
        publish_unassignable, publish_unknown_allergy, publish_unknown_disease,
        publish_invalid_nutrient, publish_reference_unavailable, publish_plan_composed
    )

"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    publish,
    PLAN_UNASSIGNABLE, PLAN_COMPOSED, SAFETY_REFERENCE_UNAVAILABLE,
    ALLERGY_UNKNOWN_CODE, DISEASE_UNKNOWN_CODE, NUTRIENTS_INVALID,
)

__all__ = [
    'publish_unassignable', 'publish_plan_composed', 'publish_reference_unavailable',
    'publish_unknown_allergy', 'publish_unknown_disease', 'publish_invalid_nutrient',
]


def publish_unassignable(gap: Any):
    """Publish a plan.unassignable event for an UnassignableSlot."""
    publish(PLAN_UNASSIGNABLE, {
        'date': gap.date.isoformat(),
        'meal_slot': gap.meal_slot,
        'scope': gap.scope,
        'role': gap.role,
        'position': gap.position,
        'reason': gap.reason,
    })


def publish_plan_composed(day_plan: Any):
    """Publish a plan.composed summary event."""
    publish(PLAN_COMPOSED, {
        'date': day_plan.date.isoformat(),
        'assignments': len(day_plan.assignments),
        'gaps': len(day_plan.gaps),
    })


def publish_reference_unavailable(source: Any, error: Optional[str] = None):
    """Publish a safety.reference_unavailable event."""
    publish(SAFETY_REFERENCE_UNAVAILABLE, {
        'source': str(source) if source is not None else None,
        'error': error,
    })


def publish_unknown_allergy(code: str):
    publish(ALLERGY_UNKNOWN_CODE, {'code': code})


def publish_unknown_disease(code: str):
    publish(DISEASE_UNKNOWN_CODE, {'code': code})


def publish_invalid_nutrient(dish_id: str, field: str, value: Any):
    """Publish a nutrients.invalid event (value was missing, non-numeric, non-finite or negative)."""
    publish(NUTRIENTS_INVALID, {
        'dish_id': dish_id,
        'field': field,
        'value': value,
    })
