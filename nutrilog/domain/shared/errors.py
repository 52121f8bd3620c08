"""
Domain exceptions.

Typed exceptions for explicit error handling. Read paths of the meal store
never raise these (they degrade to defaults); write paths and the food
lookup client do.
"""

from __future__ import annotations

from typing import Any, Optional


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class NutrilogError(Exception):
    """
    Base exception for all nutrilog errors.

    Allows callers (presentation layer) to catch every error raised by the
    core with a single except clause and show a localized message.
    """

    pass


# ═══════════════════════════════════════════════════════════
# STORE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class InvalidUserError(NutrilogError):
    """
    User identifier missing or blank on a scoped operation.

    Raised before any storage I/O is attempted.

    Example:
        >>> raise InvalidUserError("User identifier is missing")
    """

    pass


class PersistenceError(NutrilogError):
    """
    Underlying key-value write failed.

    Raised by write paths (save_meals, save_calorie_goal) and propagated by
    compound mutations (add_meal, delete_meal, update_meal).

    Attributes:
        key: Storage key whose write failed (if known)
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class MalformedRecordError(NutrilogError):
    """
    Persisted record failed validation.

    Never raised by the store: instances are handed to the optional
    ``on_reject`` callback of the sanitizer so callers can audit dropped data.

    Attributes:
        kind: Record kind ("food", "meal" or "meals")
        value: Raw value that was rejected
        reason: Short human-readable reason
    """

    def __init__(self, kind: str, value: Any, reason: str) -> None:
        super().__init__(f"Malformed {kind}: {reason}")
        self.kind = kind
        self.value = value
        self.reason = reason


# ═══════════════════════════════════════════════════════════
# FOOD LOOKUP EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class FoodLookupError(NutrilogError):
    """
    External food database lookup failed.

    Raised when:
    - OpenFoodFacts answers with a non-success status (not retried)
    - Response body is not valid JSON

    Example:
        >>> raise FoodLookupError("OpenFoodFacts search failed (403)")
    """

    pass
