"""
Sanitizer for persisted meal records.

Turns arbitrary deserialized JSON into well-formed Food/Meal entities.
Malformed records are dropped instead of raising: persisted data may be
truncated, hand-edited or written by an older app version, and the rest of
the system must only ever see well-typed entities.

Dropped records can be audited through the optional ``on_reject`` callback,
which receives a MalformedRecordError. Without a callback the loss is silent
apart from a debug log line.
"""

from __future__ import annotations

import math
from typing import Any, Callable, List, Mapping, Optional

import structlog

from nutrilog.domain.meal.entities.food import (
    DEFAULT_BRAND,
    DEFAULT_IMAGE_URL,
    DEFAULT_NUTRISCORE,
    Food,
)
from nutrilog.domain.meal.entities.meal import Meal
from nutrilog.domain.shared.errors import MalformedRecordError

logger = structlog.get_logger(__name__)

RejectCallback = Callable[[MalformedRecordError], None]


def to_number(value: Any) -> float:
    """Coerce a persisted numeric field to a finite float.

    Accepts ints, floats and numeric text using either ``.`` or ``,`` as
    decimal separator. Everything else (None, booleans, NaN/inf, ints too
    large for a float, garbage or digit-grouped text like ``"1_500"``)
    yields 0.0.

    Examples:
        >>> to_number("12,5")
        12.5
        >>> to_number("abc")
        0.0
    """
    if isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            parsed = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        if "_" in value:
            return 0.0
        try:
            parsed = float(value.strip().replace(",", "."))
        except ValueError:
            return 0.0
    else:
        return 0.0

    return parsed if math.isfinite(parsed) else 0.0


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    """Return a mapping view of a raw record or an already-built entity."""
    if isinstance(value, (Food, Meal)):
        return value.to_dict()
    if isinstance(value, Mapping):
        return value
    return None


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _text_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _reject(
    kind: str,
    value: Any,
    reason: str,
    on_reject: Optional[RejectCallback],
) -> None:
    logger.debug("Dropping malformed record", kind=kind, reason=reason)
    if on_reject is not None:
        on_reject(MalformedRecordError(kind, value, reason))


def sanitize_food(value: Any, on_reject: Optional[RejectCallback] = None) -> Optional[Food]:
    """
    Validate and normalize a raw food record.

    Args:
        value: Deserialized value (dict) or Food
        on_reject: Optional callback notified when the record is dropped

    Returns:
        Food with defaults filled in, or None if ``id``/``name`` are missing
    """
    record = _as_mapping(value)
    if record is None:
        _reject("food", value, "not an object", on_reject)
        return None

    if not _is_text(record.get("id")) or not _is_text(record.get("name")):
        _reject("food", value, "missing id or name", on_reject)
        return None

    return Food(
        id=record["id"],
        name=record["name"],
        brand=_text_or(record.get("brand"), DEFAULT_BRAND),
        image_url=_text_or(record.get("image_url"), DEFAULT_IMAGE_URL),
        nutriscore=_text_or(record.get("nutriscore"), DEFAULT_NUTRISCORE),
        calories=to_number(record.get("calories")),
        proteins=to_number(record.get("proteins")),
        carbs=to_number(record.get("carbs")),
        fats=to_number(record.get("fats")),
    )


def sanitize_meal(value: Any, on_reject: Optional[RejectCallback] = None) -> Optional[Meal]:
    """
    Validate and normalize a raw meal record.

    Bad food entries are dropped from the meal; the meal itself is only
    rejected when ``id``, ``name`` or ``date`` is missing or ``foods`` is
    not a list.

    Args:
        value: Deserialized value (dict) or Meal
        on_reject: Optional callback notified for every dropped record

    Returns:
        Meal, or None if the record is rejected
    """
    record = _as_mapping(value)
    if record is None:
        _reject("meal", value, "not an object", on_reject)
        return None

    if not all(_is_text(record.get(name)) for name in ("id", "name", "date")):
        _reject("meal", value, "missing id, name or date", on_reject)
        return None

    raw_foods = record.get("foods")
    if not isinstance(raw_foods, list):
        _reject("meal", value, "foods is not a list", on_reject)
        return None

    foods: List[Food] = []
    for raw_food in raw_foods:
        food = sanitize_food(raw_food, on_reject)
        if food is not None:
            foods.append(food)

    return Meal(id=record["id"], name=record["name"], date=record["date"], foods=foods)


def sanitize_meals(value: Any, on_reject: Optional[RejectCallback] = None) -> List[Meal]:
    """
    Validate a raw meal list and sort it newest first.

    Args:
        value: Deserialized value (expected: list of meal records)
        on_reject: Optional callback notified for every dropped record

    Returns:
        Valid meals in date-descending order (stable for equal dates);
        empty list if ``value`` is not a list
    """
    if not isinstance(value, list):
        _reject("meals", value, "not a list", on_reject)
        return []

    meals: List[Meal] = []
    for raw_meal in value:
        meal = sanitize_meal(raw_meal, on_reject)
        if meal is not None:
            meals.append(meal)

    meals.sort(key=lambda m: m.date, reverse=True)
    return meals
