"""One-time migration of legacy (unscoped) records into per-user keys.

The first time a user's meals or calorie goal is read, a value still
sitting under the legacy global key is copied verbatim into the user's
scoped key and the legacy key is removed. Later calls are no-ops.

Not atomic across keys: if the process dies between the copy and the
removal, both keys stay populated and the next call is a no-op because
the scoped key already has a value.
"""

import asyncio

import structlog

from nutrilog.domain.meal.storage_keys import (
    LEGACY_CALORIE_GOAL_KEY,
    LEGACY_MEALS_KEY,
    calorie_goal_key,
    meals_key,
)
from nutrilog.domain.shared.ports.key_value_store import IKeyValueStore

logger = structlog.get_logger(__name__)


class LegacyMigrator:
    """
    Copies legacy records to scoped keys on first access.

    Example:
        >>> migrator = LegacyMigrator(store)
        >>> await migrator.migrate_legacy_meals_if_needed("user123")
        True
    """

    def __init__(self, store: IKeyValueStore) -> None:
        self._store = store

    async def migrate_legacy_meals_if_needed(self, user_id: str) -> bool:
        """Move ``@meals`` into ``@meals:<user_id>`` if needed."""
        return await self._migrate(meals_key(user_id), LEGACY_MEALS_KEY)

    async def migrate_legacy_calorie_goal_if_needed(self, user_id: str) -> bool:
        """Move ``@calorie_goal`` into ``@calorie_goal:<user_id>`` if needed."""
        return await self._migrate(calorie_goal_key(user_id), LEGACY_CALORIE_GOAL_KEY)

    async def _migrate(self, scoped_key: str, legacy_key: str) -> bool:
        """
        Copy legacy value to scoped key, then remove legacy key.

        Returns:
            True if a value was migrated, False if nothing had to be done

        Raises:
            Exception: Storage errors are propagated to the caller
        """
        scoped_value, legacy_value = await asyncio.gather(
            self._store.get_item(scoped_key),
            self._store.get_item(legacy_key),
        )

        if scoped_value is not None or legacy_value is None:
            return False

        await self._store.set_item(scoped_key, legacy_value)
        await self._store.remove_item(legacy_key)

        logger.info("Migrated legacy record", legacy_key=legacy_key, scoped_key=scoped_key)
        return True
