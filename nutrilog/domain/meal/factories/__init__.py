"""Factories for meal aggregates."""

from .meal_factory import MealFactory, MealType, dedupe_foods, generate_meal_id, to_iso_timestamp

__all__ = ["MealFactory", "MealType", "dedupe_foods", "generate_meal_id", "to_iso_timestamp"]
