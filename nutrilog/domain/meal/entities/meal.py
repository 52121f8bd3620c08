"""Meal aggregate root - one eating occasion with its foods."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .food import Food


@dataclass
class Meal:
    """
    Aggregate Root: named, timestamped collection of foods.

    Example:
        Meal = "Dejeuner" (2025-01-15T12:30:00.000Z)
        ├─ Food 1 = "Pates completes"
        └─ Food 2 = "Yaourt nature"

    Invariants:
    - id, name and date are non-empty strings
    - date is an ISO-8601 timestamp; lexical order equals chronological order
    - date is set at creation and never changes

    Identity: ``id`` (epoch millis + random suffix, see MealFactory)
    """

    id: str
    name: str  # MealType label or free text
    date: str  # ISO-8601, e.g. "2025-01-15T12:30:00.000Z"
    foods: List[Food] = field(default_factory=list)

    @property
    def day(self) -> str:
        """Calendar day prefix (YYYY-MM-DD) of the meal date."""
        return self.date[:10]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "foods": [food.to_dict() for food in self.foods],
        }
