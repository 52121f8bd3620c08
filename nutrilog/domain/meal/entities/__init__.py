"""Core entities for meal domain."""

from .food import Food
from .meal import Meal

__all__ = ["Food", "Meal"]
