"""Calorie goal rules: default value, normalization and parsing."""

import math
from typing import Optional

DEFAULT_CALORIE_GOAL = 2000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_calorie_goal(goal: object) -> int:
    """
    Normalize a goal to a positive integer.

    Non-numeric, non-finite or non-positive input becomes 2000.

    Examples:
        >>> normalize_calorie_goal(1850.7)
        1851
        >>> normalize_calorie_goal(-5)
        2000
    """
    if isinstance(goal, bool) or not isinstance(goal, (int, float)):
        return DEFAULT_CALORIE_GOAL
    try:
        if not math.isfinite(goal) or goal <= 0:
            return DEFAULT_CALORIE_GOAL
        return _round_half_up(goal)
    except OverflowError:
        return DEFAULT_CALORIE_GOAL


def parse_calorie_goal(raw: Optional[str]) -> Optional[int]:
    """
    Parse a persisted goal string.

    Returns:
        Rounded positive goal, or None when the value is missing, not a
        decimal number, non-finite or not positive
    """
    if not raw or "_" in raw:
        return None
    try:
        parsed = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(parsed) or parsed <= 0:
        return None
    return _round_half_up(parsed)
