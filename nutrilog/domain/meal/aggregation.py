"""Nutrition aggregation over foods and meals.

Pure functions, no I/O. Input is assumed well-typed (sanitized entities).
Day grouping uses the ``YYYY-MM-DD`` prefix of the ISO timestamp, without
timezone conversion.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from nutrilog.domain.meal.entities.food import Food
from nutrilog.domain.meal.entities.meal import Meal


@dataclass(frozen=True)
class NutritionTotals:
    """Summed macro/calorie values."""

    calories: float = 0.0
    proteins: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0

    def __add__(self, other: "NutritionTotals") -> "NutritionTotals":
        return NutritionTotals(
            calories=self.calories + other.calories,
            proteins=self.proteins + other.proteins,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
        )


class GoalStatus(str, Enum):
    """Visual state of the daily calorie indicator."""

    UNDER_GOAL = "under_goal"
    OVER_GOAL = "over_goal"


@dataclass(frozen=True)
class GoalProgress:
    """
    Progress of today's intake against the calorie goal.

    ``ratio`` is the raw value (may exceed 1); ``display_ratio`` is clamped
    to [0, 1] for a fixed-width progress bar.
    """

    calories: float
    goal: int
    ratio: float
    display_ratio: float
    status: GoalStatus

    @property
    def display_percent(self) -> int:
        return round(self.display_ratio * 100)


@dataclass(frozen=True)
class DailySummary:
    date: str  # YYYY-MM-DD
    totals: NutritionTotals
    meal_count: int


def get_totals(foods: Iterable[Food]) -> NutritionTotals:
    """
    Sum calories and macros across foods.

    Args:
        foods: Foods to sum (may be empty)

    Returns:
        NutritionTotals; all zeros for an empty input
    """
    calories = 0.0
    proteins = 0.0
    carbs = 0.0
    fats = 0.0
    for food in foods:
        calories += food.calories
        proteins += food.proteins
        carbs += food.carbs
        fats += food.fats
    return NutritionTotals(calories=calories, proteins=proteins, carbs=carbs, fats=fats)


def get_meal_calories(meal: Meal) -> float:
    """Total calories of a meal."""
    return sum((food.calories for food in meal.foods), 0.0)


def _day_key(day: Union[date, str]) -> str:
    text = day.isoformat() if isinstance(day, date) else day
    return text[:10]


def get_calories_for_day(meals: Iterable[Meal], day: Union[date, str]) -> float:
    """
    Sum calories of the meals logged on a calendar day.

    Args:
        meals: Meals to scan
        day: ``date`` or ``YYYY-MM-DD`` string (longer ISO strings are cut)

    Returns:
        Calories logged that day
    """
    key = _day_key(day)
    return sum((get_meal_calories(meal) for meal in meals if meal.day == key), 0.0)


def get_today_calories(meals: Iterable[Meal], today: Optional[date] = None) -> float:
    """Calories logged today, using the local clock when ``today`` is omitted."""
    return get_calories_for_day(meals, today or date.today())


def get_goal_progress(calories: float, goal: int) -> GoalProgress:
    """
    Compare an intake with the calorie goal.

    Args:
        calories: Calories consumed
        goal: Daily calorie goal

    Returns:
        GoalProgress with raw ratio, clamped display ratio and status

    Example:
        >>> p = get_goal_progress(2500, 2000)
        >>> p.ratio, p.display_ratio, p.status
        (1.25, 1.0, <GoalStatus.OVER_GOAL: 'over_goal'>)
    """
    ratio = calories / goal if goal > 0 else 0.0
    display_ratio = min(max(ratio, 0.0), 1.0)
    status = GoalStatus.OVER_GOAL if ratio > 1 else GoalStatus.UNDER_GOAL
    return GoalProgress(
        calories=calories,
        goal=goal,
        ratio=ratio,
        display_ratio=display_ratio,
        status=status,
    )


def summarize_by_day(meals: Iterable[Meal]) -> List[DailySummary]:
    """
    Group meals by calendar day and sum their nutrition.

    Returns:
        One DailySummary per day with at least one meal, oldest day first
    """
    per_day: Dict[str, NutritionTotals] = {}
    counts: Dict[str, int] = {}

    for meal in meals:
        day = meal.day
        per_day[day] = per_day.get(day, NutritionTotals()) + get_totals(meal.foods)
        counts[day] = counts.get(day, 0) + 1

    return [
        DailySummary(date=day, totals=per_day[day], meal_count=counts[day])
        for day in sorted(per_day)
    ]
