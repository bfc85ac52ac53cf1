"""
Input validation schemas using Pydantic for the HTTP surface.
"""
from datetime import date as _date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from diet.utilities.constants import MEAL_SLOTS
from diet.utilities.config import DEFAULT_SIDE_COUNT


class NutrientFactsInput(BaseModel):
    """Raw nutrient facts. Missing or negative values are sanitised by the domain layer, not rejected here."""
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbohydrate: Optional[float] = None
    fat: Optional[float] = None
    sodium: Optional[float] = None
    potassium: Optional[float] = None
    phosphorus: Optional[float] = None
    fiber: Optional[float] = None
    glycemic_index: Optional[float] = None

    def to_raw(self) -> dict:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class DishInput(BaseModel):
    """Schema for a dish submitted for checking or scoring."""
    id: str = Field(default="adhoc", min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    ingredients: List[str] = Field(default_factory=list)
    sauces: List[str] = Field(default_factory=list)
    nutrients: NutrientFactsInput = Field(default_factory=NutrientFactsInput)
    roles: List[str] = Field(default_factory=list)
    meal_slots: List[str] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError('Dish name cannot be empty')
        return v.strip()

    @field_validator('ingredients', 'sauces')
    @classmethod
    def drop_blank(cls, v):
        """Filter out empty entries."""
        return [item.strip() for item in v if item and item.strip()]

    def to_raw(self) -> dict:
        d = self.model_dump()
        d["nutrients"] = self.nutrients.to_raw()
        return d


def _codes(v):
    return [c.strip().lower() for c in v if c and c.strip()]


class AllergyCheckInput(BaseModel):
    dish: DishInput
    allergies: List[str] = Field(default_factory=list)

    @field_validator('allergies')
    @classmethod
    def normalize_codes(cls, v):
        return _codes(v)


class DiseaseScoreInput(BaseModel):
    nutrients: NutrientFactsInput
    diseases: List[str] = Field(default_factory=list)

    @field_validator('diseases')
    @classmethod
    def normalize_codes(cls, v):
        return _codes(v)


class CompositeSlotInput(BaseModel):
    sides: int = Field(default=DEFAULT_SIDE_COUNT, ge=0, le=10)
    staple: bool = True
    soup: bool = True


class ComposeRequest(BaseModel):
    """Schema for a composition run."""
    date: _date
    slots: Optional[List[str]] = None
    lookback_days: Optional[int] = Field(default=None, ge=1, le=365)
    composite_slots: Dict[str, CompositeSlotInput] = Field(default_factory=dict)

    @field_validator('slots')
    @classmethod
    def validate_slots(cls, v):
        if v is None:
            return v
        bad = [s for s in v if s not in MEAL_SLOTS]
        if bad:
            raise ValueError(f"Unknown meal slot(s): {', '.join(bad)}")
        # composition order is fixed, duplicates dropped
        return [s for s in MEAL_SLOTS if s in v]

    @field_validator('composite_slots')
    @classmethod
    def validate_composite(cls, v):
        bad = [s for s in v if s not in MEAL_SLOTS]
        if bad:
            raise ValueError(f"Unknown meal slot(s): {', '.join(bad)}")
        return v
