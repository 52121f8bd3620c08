"""Shared kernel: errors and ports used across the meal domain."""

from nutrilog.domain.shared.errors import (
    FoodLookupError,
    InvalidUserError,
    MalformedRecordError,
    NutrilogError,
    PersistenceError,
)

__all__ = [
    "NutrilogError",
    "InvalidUserError",
    "PersistenceError",
    "MalformedRecordError",
    "FoodLookupError",
]
