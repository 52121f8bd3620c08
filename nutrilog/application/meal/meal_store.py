"""Meal store - CRUD contract over a key-value persistence port.

Failure policy:
- read paths (load_meals, load_calorie_goal) never raise on storage or
  parse errors: they log and return an empty list / the default goal
- write paths (save_meals, save_calorie_goal) raise PersistenceError
- add/delete/update are read-modify-write and inherit the write policy

With ``multi_tenant=True`` every operation validates the user id before any
I/O (InvalidUserError) and reads run the legacy migration first.

Mutations are not atomic across the read and the write: two concurrent
mutations for the same user can lose one update (last write wins).
"""

import json
from typing import List, Optional

import structlog

from nutrilog.application.meal.migration import LegacyMigrator
from nutrilog.domain.meal.calorie_goal import (
    DEFAULT_CALORIE_GOAL,
    normalize_calorie_goal,
    parse_calorie_goal,
)
from nutrilog.domain.meal.entities.meal import Meal
from nutrilog.domain.meal.sanitizer import RejectCallback, sanitize_meals
from nutrilog.domain.meal.storage_keys import StorageKeys
from nutrilog.domain.shared.errors import PersistenceError
from nutrilog.domain.shared.ports.key_value_store import IKeyValueStore

logger = structlog.get_logger(__name__)


class MealStore:
    """
    Persistent meal log and calorie goal, optionally namespaced per user.

    Example:
        >>> store = MealStore(InMemoryKeyValueStore())
        >>> meals = await store.add_meal(meal, user_id="user123")
        >>> goal = await store.load_calorie_goal(user_id="user123")
    """

    def __init__(
        self,
        store: IKeyValueStore,
        multi_tenant: bool = True,
        default_calorie_goal: int = DEFAULT_CALORIE_GOAL,
        on_reject: Optional[RejectCallback] = None,
    ) -> None:
        """
        Args:
            store: Key-value persistence adapter
            multi_tenant: Scope keys per user (False: shared legacy keys)
            default_calorie_goal: Goal returned when none is stored
            on_reject: Optional audit callback for records dropped on load
        """
        self._store = store
        self._keys = StorageKeys(multi_tenant=multi_tenant)
        self._migrator = LegacyMigrator(store)
        self._default_calorie_goal = default_calorie_goal
        self._on_reject = on_reject

    @property
    def multi_tenant(self) -> bool:
        return self._keys.multi_tenant

    # ============================================================
    # Meals
    # ============================================================

    async def load_meals(self, user_id: Optional[str] = None) -> List[Meal]:
        """
        Load the meal log, newest first.

        Args:
            user_id: Owner (required when multi_tenant)

        Returns:
            Sanitized meals sorted by date descending; [] on any read or
            parse error

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
        """
        key = self._keys.meals(user_id)

        try:
            if self.multi_tenant:
                await self._migrator.migrate_legacy_meals_if_needed(user_id)  # type: ignore[arg-type]
            raw = await self._store.get_item(key)
            if not raw:
                return []
            return sanitize_meals(json.loads(raw), self._on_reject)
        except Exception as e:
            logger.warning("Failed to load meals, returning empty list", key=key, error=str(e))
            return []

    async def save_meals(self, meals: List[Meal], user_id: Optional[str] = None) -> None:
        """
        Replace the stored meal log.

        Meals are sanitized and sorted before being written.

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
            PersistenceError: If the write fails
        """
        await self._write_meals(self._keys.meals(user_id), meals)

    async def add_meal(self, meal: Meal, user_id: Optional[str] = None) -> List[Meal]:
        """
        Add a meal to the log.

        Returns:
            Full meal list as persisted (sorted)

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
            PersistenceError: If the write fails
        """
        key = self._keys.meals(user_id)
        current = await self.load_meals(user_id)
        return await self._write_meals(key, [meal, *current])

    async def delete_meal(self, meal_id: str, user_id: Optional[str] = None) -> List[Meal]:
        """
        Remove every meal with the given id.

        Returns:
            Remaining meals as persisted

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
            PersistenceError: If the write fails
        """
        key = self._keys.meals(user_id)
        current = await self.load_meals(user_id)
        remaining = [meal for meal in current if meal.id != meal_id]

        if len(remaining) == len(current):
            logger.debug("No meal matched for deletion", key=key, meal_id=meal_id)

        return await self._write_meals(key, remaining)

    async def update_meal(self, meal: Meal, user_id: Optional[str] = None) -> List[Meal]:
        """
        Replace the first stored meal having the same id.

        Returns:
            Meal list as persisted (unchanged content if no id matched)

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
            PersistenceError: If the write fails
        """
        key = self._keys.meals(user_id)
        current = await self.load_meals(user_id)

        for index, existing in enumerate(current):
            if existing.id == meal.id:
                current[index] = meal
                break
        else:
            logger.warning("Meal to update not found", key=key, meal_id=meal.id)

        return await self._write_meals(key, current)

    async def _write_meals(self, key: str, meals: List[Meal]) -> List[Meal]:
        sanitized = sanitize_meals(meals, self._on_reject)

        try:
            payload = json.dumps([meal.to_dict() for meal in sanitized], ensure_ascii=False)
            await self._store.set_item(key, payload)
        except Exception as e:
            logger.error("Failed to save meals", key=key, error=str(e))
            raise PersistenceError("Unable to save meals", key=key) from e

        return sanitized

    # ============================================================
    # Calorie goal
    # ============================================================

    async def load_calorie_goal(
        self,
        default: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """
        Load the daily calorie goal.

        Args:
            default: Fallback goal (defaults to the store's configured goal)
            user_id: Owner (required when multi_tenant)

        Returns:
            Stored goal rounded to an integer, or ``default`` when missing,
            invalid, non-positive or unreadable

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
        """
        fallback = self._default_calorie_goal if default is None else default
        key = self._keys.calorie_goal(user_id)

        try:
            if self.multi_tenant:
                await self._migrator.migrate_legacy_calorie_goal_if_needed(user_id)  # type: ignore[arg-type]
            raw = await self._store.get_item(key)
        except Exception as e:
            logger.warning("Failed to load calorie goal, using default", key=key, error=str(e))
            return fallback

        goal = parse_calorie_goal(raw)
        return fallback if goal is None else goal

    async def save_calorie_goal(self, goal: float, user_id: Optional[str] = None) -> int:
        """
        Store the daily calorie goal.

        Returns:
            Normalized goal actually stored (2000 for invalid input)

        Raises:
            InvalidUserError: If multi_tenant and user_id is missing
            PersistenceError: If the write fails
        """
        key = self._keys.calorie_goal(user_id)
        normalized = normalize_calorie_goal(goal)

        try:
            await self._store.set_item(key, str(normalized))
        except Exception as e:
            logger.error("Failed to save calorie goal", key=key, error=str(e))
            raise PersistenceError("Unable to save calorie goal", key=key) from e

        return normalized
