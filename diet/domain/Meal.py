"""Meal shapes for one slot: a single dish, or a composite staple / sides / soup meal.

Ranking and filtering never look at the shape; they work on positions
(role, index) and on the flattened list of constituent dishes.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from diet.domain.Dish import Dish
from diet.utilities.constants import STAPLE, SIDE, SOUP

Position = Tuple[Optional[str], Optional[int]]
SIMPLE_POSITION: Position = (None, None)


@dataclass(frozen=True)
class CompositeSpec:
    """How a composite slot decomposes into sub-role positions."""
    sides: int = 3
    staple: bool = True
    soup: bool = True

    def positions(self) -> List[Position]:
        out: List[Position] = []
        if self.staple:
            out.append((STAPLE, 0))
        out.extend((SIDE, i) for i in range(max(0, self.sides)))
        if self.soup:
            out.append((SOUP, 0))
        return out


@dataclass(frozen=True)
class SimpleMeal:
    dish: Optional[Dish] = None
    kind: str = field(default="simple", init=False)

    def dishes(self) -> List[Dish]:
        return [self.dish] if self.dish is not None else []

    def positions(self) -> List[Position]:
        return [SIMPLE_POSITION]

    def is_complete(self) -> bool:
        return self.dish is not None


@dataclass(frozen=True)
class CompositeMeal:
    staple: Optional[Dish] = None
    sides: Tuple[Optional[Dish], ...] = ()
    soup: Optional[Dish] = None
    kind: str = field(default="composite", init=False)

    def dishes(self) -> List[Dish]:
        return [d for d in (self.staple, *self.sides, self.soup) if d is not None]

    def positions(self) -> List[Position]:
        return [(STAPLE, 0), *((SIDE, i) for i in range(len(self.sides))), (SOUP, 0)]

    def is_complete(self) -> bool:
        return self.staple is not None and self.soup is not None and all(s is not None for s in self.sides)


def build_meal(spec: Optional[CompositeSpec], placed: dict):
    """Assemble a meal from {position: dish}; positions left out stay empty."""
    if spec is None:
        return SimpleMeal(placed.get(SIMPLE_POSITION))
    return CompositeMeal(
        staple=placed.get((STAPLE, 0)) if spec.staple else None,
        sides=tuple(placed.get((SIDE, i)) for i in range(max(0, spec.sides))),
        soup=placed.get((SOUP, 0)) if spec.soup else None,
    )


__all__ = ["CompositeSpec", "SimpleMeal", "CompositeMeal", "build_meal", "SIMPLE_POSITION", "Position"]
