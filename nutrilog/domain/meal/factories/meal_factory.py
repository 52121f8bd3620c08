"""Meal factory - builds new meals for the add-flow."""

import secrets
import string
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from nutrilog.domain.meal.entities.food import Food
from nutrilog.domain.meal.entities.meal import Meal

_BASE36 = string.digits + string.ascii_lowercase


class MealType(str, Enum):
    """Meal-type labels offered by the add screen."""

    BREAKFAST = "Petit-dejeuner"
    LUNCH = "Dejeuner"
    DINNER = "Diner"
    SNACK = "Snack"


def to_iso_timestamp(moment: datetime) -> str:
    """
    Format a datetime as UTC ISO-8601 with millisecond precision.

    Naive datetimes are taken as UTC.

    Example:
        >>> to_iso_timestamp(datetime(2025, 1, 15, 12, 30, tzinfo=timezone.utc))
        '2025-01-15T12:30:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def generate_meal_id(moment: datetime, suffix_length: int = 6) -> str:
    """Build ``<epoch-millis>-<random base36>`` identifiers."""
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(suffix_length))
    return f"{millis}-{suffix}"


def dedupe_foods(foods: Iterable[Food]) -> List[Food]:
    """
    Drop foods whose id was already seen, keeping the first occurrence.

    The store itself keeps duplicates; this is for the add-flow's
    transient selection list.
    """
    seen = set()
    unique: List[Food] = []
    for food in foods:
        if food.id in seen:
            continue
        seen.add(food.id)
        unique.append(food)
    return unique


class MealFactory:
    """
    Factory for new Meal aggregates.

    Example:
        >>> meal = MealFactory.create(MealType.LUNCH, [food])
        >>> meal.name
        'Dejeuner'
    """

    @staticmethod
    def create(
        name: str,
        foods: Iterable[Food],
        now: Optional[datetime] = None,
    ) -> Meal:
        """
        Create a meal stamped with the creation time.

        Args:
            name: MealType (or its label) or free text
            foods: Foods to log; copied into a new list
            now: Creation time (defaults to current UTC time)

        Returns:
            New Meal with generated id and ISO date

        Raises:
            ValueError: If name is blank
        """
        label = name.value if isinstance(name, MealType) else name
        if not label or not label.strip():
            raise ValueError("Meal name cannot be empty")

        moment = now or datetime.now(timezone.utc)
        return Meal(
            id=generate_meal_id(moment),
            name=label.strip(),
            date=to_iso_timestamp(moment),
            foods=list(foods),
        )
