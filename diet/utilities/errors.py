"""Error taxonomy for the composition engine.

Only a missing allergy reference is fatal. Unknown disease / allergy codes,
invalid nutrient facts and slots without a safe dish are logged, published on
the event bus and folded into the result (no finding, no match, a zeroed
nutrient, an UnassignableSlot).
"""


class DietEngineError(Exception):
    """Base class for engine errors."""


class SafetyReferenceUnavailable(DietEngineError):
    """The allergy / derived-ingredient reference could not be loaded."""

    def __init__(self, message: str = "Allergy reference data is unavailable", source=None):
        super().__init__(message)
        self.source = source


__all__ = ["DietEngineError", "SafetyReferenceUnavailable"]
