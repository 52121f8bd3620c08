"""
Shared fixtures for unit tests.

Builders return plain entities and raw dicts so tests can exercise both the
typed path (entities) and the persisted path (JSON-shaped dicts).
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from nutrilog.application.meal.meal_store import MealStore
from nutrilog.domain.meal.entities import Food, Meal
from nutrilog.infrastructure.config import load_env_files
from nutrilog.infrastructure.persistence.in_memory.key_value_store import InMemoryKeyValueStore
from nutrilog.logging_config import configure_logging

# .env then .env.test (override) from the project root
load_env_files(Path(__file__).parent.parent)
configure_logging()


# ═══════════════════════════════════════════════════════════
# DOMAIN BUILDERS
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def make_food() -> Callable[..., Food]:
    """Build a Food with sensible defaults."""

    def _make(
        food_id: str = "3017620422003",
        name: str = "Pate a tartiner",
        calories: float = 100.0,
        proteins: float = 5.0,
        carbs: float = 10.0,
        fats: float = 2.0,
    ) -> Food:
        return Food(
            id=food_id,
            name=name,
            brand="Ferrero",
            image_url="https://images.openfoodfacts.org/front.jpg",
            nutriscore="E",
            calories=calories,
            proteins=proteins,
            carbs=carbs,
            fats=fats,
        )

    return _make


@pytest.fixture
def make_meal(make_food: Callable[..., Food]) -> Callable[..., Meal]:
    """Build a Meal; foods default to one 100 kcal food."""

    def _make(
        meal_id: str = "1736944200000-abc123",
        name: str = "Dejeuner",
        date: str = "2025-01-15T12:30:00.000Z",
        foods: Optional[List[Food]] = None,
    ) -> Meal:
        return Meal(
            id=meal_id,
            name=name,
            date=date,
            foods=[make_food()] if foods is None else foods,
        )

    return _make


@pytest.fixture
def raw_meal() -> Dict[str, Any]:
    """Meal as persisted JSON."""
    return {
        "id": "1736944200000-abc123",
        "name": "Dejeuner",
        "date": "2025-01-15T12:30:00.000Z",
        "foods": [
            {
                "id": "3017620422003",
                "name": "Pate a tartiner",
                "brand": "Ferrero",
                "image_url": "",
                "nutriscore": "E",
                "calories": 539,
                "proteins": 6.3,
                "carbs": 57.5,
                "fats": 30.9,
            }
        ],
    }


# ═══════════════════════════════════════════════════════════
# STORE FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Fresh in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def meal_store(kv_store: InMemoryKeyValueStore) -> MealStore:
    """Scoped (multi-tenant) meal store over the in-memory store."""
    return MealStore(kv_store, multi_tenant=True)


@pytest.fixture
def single_user_store(kv_store: InMemoryKeyValueStore) -> MealStore:
    """Unscoped meal store sharing the legacy keys."""
    return MealStore(kv_store, multi_tenant=False)
