"""Store Factory for Persistence Layer.

Environment-based backend selection with in-memory as safe default.
Strategy:
- .env (runtime): NUTRILOG_STORAGE_BACKEND=jsonfile or mongodb
- .env.test (pytest): NUTRILOG_STORAGE_BACKEND=inmemory (fast, isolated tests)
- Default: inmemory (safe fallback if env vars not set)

Usage:
    from nutrilog.infrastructure.persistence.factory import (
        create_meal_store,
        get_meal_store,
    )

    store = create_meal_store()  # New MealStore on the configured backend
    store = get_meal_store()     # Singleton instance
"""

from typing import Optional

import structlog

from nutrilog.application.meal.meal_store import MealStore
from nutrilog.domain.shared.ports.key_value_store import IKeyValueStore
from nutrilog.infrastructure.config import (
    get_data_file,
    get_default_calorie_goal,
    get_mongodb_uri,
    get_storage_backend,
    is_multi_tenant,
)
from nutrilog.infrastructure.persistence.in_memory.key_value_store import InMemoryKeyValueStore
from nutrilog.infrastructure.persistence.json_file.key_value_store import JsonFileKeyValueStore

logger = structlog.get_logger(__name__)


def create_key_value_store() -> IKeyValueStore:
    """Create key-value store based on NUTRILOG_STORAGE_BACKEND env var.

    Values:
        - "inmemory": In-memory store (default, fast, transient)
        - "jsonfile": JSON document at NUTRILOG_DATA_FILE
        - "mongodb": MongoDB collection (requires MONGODB_URI)

    Returns:
        IKeyValueStore: Store instance

    Raises:
        ValueError: If mongodb selected but MONGODB_URI not set, or if the
            backend name is unknown
    """
    mode = get_storage_backend()

    if mode == "mongodb":
        if not get_mongodb_uri():
            raise ValueError(
                "NUTRILOG_STORAGE_BACKEND=mongodb but MONGODB_URI not set. "
                "Set MONGODB_URI in .env or use NUTRILOG_STORAGE_BACKEND=inmemory"
            )
        # Imported lazily so motor is only loaded when actually used
        from nutrilog.infrastructure.persistence.mongodb.key_value_store import (
            MongoKeyValueStore,
        )

        return MongoKeyValueStore()

    if mode == "jsonfile":
        return JsonFileKeyValueStore(get_data_file())

    if mode == "inmemory":
        return InMemoryKeyValueStore()

    raise ValueError(
        f"Unknown NUTRILOG_STORAGE_BACKEND '{mode}'. Use inmemory, jsonfile or mongodb."
    )


def create_meal_store(store: Optional[IKeyValueStore] = None) -> MealStore:
    """Create a MealStore configured from environment.

    Args:
        store: Key-value store to use (default: create_key_value_store())

    Returns:
        MealStore honouring NUTRILOG_MULTI_TENANT and
        NUTRILOG_DEFAULT_CALORIE_GOAL
    """
    kv_store = store if store is not None else create_key_value_store()
    multi_tenant = is_multi_tenant()

    logger.info(
        "Creating meal store",
        backend=type(kv_store).__name__,
        multi_tenant=multi_tenant,
    )

    return MealStore(
        kv_store,
        multi_tenant=multi_tenant,
        default_calorie_goal=get_default_calorie_goal(),
    )


# Singleton instance (lazy initialization)
_meal_store: Optional[MealStore] = None


def get_meal_store() -> MealStore:
    """Get singleton meal store instance.

    Example:
        store = get_meal_store()
        meals = await store.load_meals(user_id="user123")
    """
    global _meal_store
    if _meal_store is None:
        _meal_store = create_meal_store()
    return _meal_store


def reset_meal_store() -> None:
    """Reset singleton meal store instance.

    Useful for testing to force re-creation with different env vars.
    """
    global _meal_store
    _meal_store = None
