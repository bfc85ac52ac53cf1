"""Small builders shared by the test modules."""
from diet.domain.Allergy import Allergy, AllergyReference
from diet.domain.Dish import Dish, NutrientFacts
from diet.domain.Member import Member
from diet.events.Event_Bus import GLOBAL_EVENT_BUS


def make_dish(dish_id, name=None, ingredients=(), sauces=(), roles=(), meal_slots=(), **nutrients):
    return Dish(dish_id, name or dish_id, ingredients, sauces, NutrientFacts(**nutrients), roles, meal_slots)


def make_member(member_id, allergies=(), diseases=(), **kwargs):
    return Member(member_id, name=member_id.capitalize(), allergies=allergies, diseases=diseases, **kwargs)


def make_reference():
    return AllergyReference([
        Allergy("peanut", "peanut", "critical", ["peanut butter", "groundnut"], "major"),
        Allergy("milk", "milk", "high", ["cheese", "yogurt", "cream"], "major"),
        Allergy("shellfish", "shellfish", "critical", ["oyster sauce", "shrimp"], "major"),
        Allergy("soy", "soy", "moderate", ["tofu"], "major"),
        Allergy("sesame", "sesame", "high", ["tahini"], "special"),
    ], version="test", locale="en")


class EventCollector:
    """Collects published events of the given names until stop() is called."""

    def __init__(self, *names):
        self.names = names
        self.events = []
        for name in names:
            GLOBAL_EVENT_BUS.subscribe(name, self._collect)

    def _collect(self, event_name, payload):
        self.events.append((event_name, payload))

    def of(self, name):
        return [p for n, p in self.events if n == name]

    def stop(self):
        for name in self.names:
            GLOBAL_EVENT_BUS.unsubscribe(name, self._collect)
