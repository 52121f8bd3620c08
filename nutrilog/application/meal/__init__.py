"""Meal application services."""

from nutrilog.application.meal.meal_store import MealStore
from nutrilog.application.meal.migration import LegacyMigrator

__all__ = ["MealStore", "LegacyMigrator"]
