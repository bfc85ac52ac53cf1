"""Dish domain entity: name, ingredient text, sauces/seasonings, nutrient facts, catalog roles."""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from diet.events.event_helpers import publish_invalid_nutrient
from diet.utilities.constants import SUB_ROLES, MEAL_SLOTS

logger = logging.getLogger(__name__)

REQUIRED_NUTRIENTS = ("calories", "protein", "carbohydrate", "fat", "sodium")
OPTIONAL_NUTRIENTS = ("potassium", "phosphorus", "fiber", "glycemic_index")

# Key synonyms accepted from catalog data
_SYNONYMS = {
    "calories": ("calories", "kcal", "energy"),
    "protein": ("protein",),
    "carbohydrate": ("carbohydrate", "carbohydrates", "carbs"),
    "fat": ("fat", "fats"),
    "sodium": ("sodium",),
    "potassium": ("potassium",),
    "phosphorus": ("phosphorus",),
    "fiber": ("fiber", "fibre"),
    "glycemic_index": ("glycemic_index", "gi", "gi_index"),
}


def _coerce(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # inf and nan parse as floats but can never be summed or compared
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class NutrientFacts:
    """Per-serving nutrient facts. Required fields are never negative or missing."""
    calories: float = 0.0
    protein: float = 0.0
    carbohydrate: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0
    potassium: Optional[float] = None
    phosphorus: Optional[float] = None
    fiber: Optional[float] = None
    glycemic_index: Optional[float] = None

    @property
    def fat_calorie_pct(self) -> Optional[float]:
        """Share of calories coming from fat, in percent (None without calories)."""
        if self.calories <= 0:
            return None
        return self.fat * 9 / self.calories * 100

    def get(self, nutrient: str) -> Optional[float]:
        if nutrient == "fat_calorie_pct":
            return self.fat_calorie_pct
        return getattr(self, nutrient, None)

    @staticmethod
    def from_dict(data, dish_id: str = "") -> "NutrientFacts":
        '''Builds facts from raw data. Missing, non-numeric, non-finite or negative required values become 0; an optional value that is present but invalid becomes 0.'''
        d = data if isinstance(data, dict) else {}
        values: Dict[str, Optional[float]] = {}
        for field, keys in _SYNONYMS.items():
            raw = next((d[k] for k in keys if k in d), None)
            value = _coerce(raw)
            if field in REQUIRED_NUTRIENTS:
                if value is None or value < 0:
                    logger.warning(f"Invalid nutrient facts for dish '{dish_id}': {field}={raw!r}, treated as 0")
                    publish_invalid_nutrient(dish_id, field, raw)
                    value = 0.0
            elif (raw is not None and value is None) or (value is not None and value < 0):
                logger.warning(f"Invalid nutrient facts for dish '{dish_id}': {field}={raw!r}, treated as 0")
                publish_invalid_nutrient(dish_id, field, raw)
                value = 0.0
            values[field] = value
        return NutrientFacts(**values)

    def to_dict(self):
        d = {k: getattr(self, k) for k in REQUIRED_NUTRIENTS}
        for k in OPTIONAL_NUTRIENTS:
            if getattr(self, k) is not None:
                d[k] = getattr(self, k)
        return d


class Dish:
    def __init__(self, id: str, name: str = "", ingredients: Optional[Iterable[str]] = None,
                 sauces: Optional[Iterable[str]] = None, nutrients: Optional[NutrientFacts] = None,
                 roles: Optional[Iterable[str]] = None, meal_slots: Optional[Iterable[str]] = None):
        self.id = str(id)
        self.name = name
        self.ingredients = tuple(ingredients or ())
        self.sauces = tuple(sauces or ())
        self.nutrients = nutrients or NutrientFacts()
        # Empty roles: a single dish. Empty meal_slots: fits any slot.
        self.roles = frozenset(r for r in (roles or ()) if r in SUB_ROLES)
        self.meal_slots = frozenset(s for s in (meal_slots or ()) if s in MEAL_SLOTS)

    def text_fields(self) -> List[str]:
        '''All free text an allergen could hide in: name, ingredients, sauces and seasonings.'''
        return [self.name, *self.ingredients, *self.sauces]

    def fits_slot(self, meal_slot: str) -> bool:
        return not self.meal_slots or meal_slot in self.meal_slots

    def has_role(self, role: Optional[str]) -> bool:
        if role is None:
            return not self.roles
        return role in self.roles

    def __eq__(self, other):
        return isinstance(other, Dish) and other.id == self.id

    def __hash__(self):
        return hash(self.id)

    def __str__(self) -> str:
        n = self.nutrients
        return (f"{self.name} ({self.id}) - {n.calories:g} kcal - Protein: {n.protein:g}g, "
                f"Carbs: {n.carbohydrate:g}g, Fat: {n.fat:g}g, Sodium: {n.sodium:g}mg")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Dish from a catalog record. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        if not d.get("id"):
            raise ValueError(f"Dish record without id: {d.get('name', '')!r}")
        dish_id = str(d["id"])
        return Dish(
            id=dish_id,
            name=d.get("name", ""),
            ingredients=[str(i) for i in d.get("ingredients", []) if i],
            sauces=[str(s) for s in d.get("sauces", []) if s],
            nutrients=NutrientFacts.from_dict(d.get("nutrients", {}), dish_id=dish_id),
            roles=d.get("roles", []),
            meal_slots=d.get("meal_slots", []),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "ingredients": list(self.ingredients),
            "sauces": list(self.sauces),
            "nutrients": self.nutrients.to_dict(),
            "roles": sorted(self.roles),
            "meal_slots": [s for s in MEAL_SLOTS if s in self.meal_slots],
        }
