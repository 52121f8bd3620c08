"""Meal domain: entities, sanitizer, key scheme and aggregation."""

from nutrilog.domain.meal.aggregation import (
    DailySummary,
    GoalProgress,
    GoalStatus,
    NutritionTotals,
    get_calories_for_day,
    get_goal_progress,
    get_meal_calories,
    get_today_calories,
    get_totals,
    summarize_by_day,
)
from nutrilog.domain.meal.entities import Food, Meal
from nutrilog.domain.meal.sanitizer import sanitize_food, sanitize_meal, sanitize_meals, to_number

__all__ = [
    "Food",
    "Meal",
    "sanitize_food",
    "sanitize_meal",
    "sanitize_meals",
    "to_number",
    "NutritionTotals",
    "GoalStatus",
    "GoalProgress",
    "DailySummary",
    "get_totals",
    "get_meal_calories",
    "get_calories_for_day",
    "get_today_calories",
    "get_goal_progress",
    "summarize_by_day",
]
