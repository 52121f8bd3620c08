"""Unit tests for MealFactory and helpers."""

import re
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from nutrilog.domain.meal.entities import Food
from nutrilog.domain.meal.factories import (
    MealFactory,
    MealType,
    dedupe_foods,
    generate_meal_id,
    to_iso_timestamp,
)

NOW = datetime(2025, 1, 15, 12, 30, 0, 123456, tzinfo=timezone.utc)


class TestTimestamps:
    """Test timestamp and id formatting."""

    def test_iso_timestamp_millis_utc(self) -> None:
        assert to_iso_timestamp(NOW) == "2025-01-15T12:30:00.123Z"

    def test_iso_timestamp_converts_offset(self) -> None:
        paris = datetime(2025, 1, 15, 0, 30, tzinfo=timezone(timedelta(hours=1)))
        assert to_iso_timestamp(paris) == "2025-01-14T23:30:00.000Z"

    def test_iso_timestamp_naive_is_utc(self) -> None:
        assert to_iso_timestamp(datetime(2025, 1, 15, 8, 0)) == "2025-01-15T08:00:00.000Z"

    def test_meal_id_format(self) -> None:
        meal_id = generate_meal_id(NOW)

        millis, suffix = meal_id.split("-")
        assert millis == str(int(NOW.timestamp() * 1000))
        assert re.fullmatch(r"[0-9a-z]{6}", suffix)


class TestMealFactory:
    """Test meal creation."""

    def test_create_from_meal_type(self, make_food: Callable[..., Food]) -> None:
        foods = [make_food()]

        meal = MealFactory.create(MealType.LUNCH, foods, now=NOW)

        assert meal.name == "Dejeuner"
        assert meal.date == "2025-01-15T12:30:00.123Z"
        assert meal.day == "2025-01-15"
        assert meal.foods == foods
        assert meal.foods is not foods

    def test_create_free_text_is_stripped(self) -> None:
        meal = MealFactory.create("  Gouter ", [], now=NOW)
        assert meal.name == "Gouter"

    def test_ids_are_unique(self) -> None:
        ids = {MealFactory.create(MealType.SNACK, [], now=NOW).id for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, name: str) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            MealFactory.create(name, [])

    def test_meal_types(self) -> None:
        assert [t.value for t in MealType] == ["Petit-dejeuner", "Dejeuner", "Diner", "Snack"]


class TestDedupeFoods:
    """Test the add-flow selection dedupe."""

    def test_keeps_first_occurrence(self, make_food: Callable[..., Food]) -> None:
        first = make_food(food_id="1", name="Premier")
        foods = [first, make_food(food_id="2"), make_food(food_id="1", name="Second")]

        unique = dedupe_foods(foods)

        assert [f.id for f in unique] == ["1", "2"]
        assert unique[0] is first
