"""Key-value store port (interface).

Defines the contract the meal store relies on for persistence.
Follows the Dependency Inversion Principle: domain defines the port,
infrastructure provides the implementation.
"""

from typing import Optional, Protocol


class IKeyValueStore(Protocol):
    """
    Interface for string key → string value persistence.

    Implementations must make a single-key write atomic (a reader never sees
    a partially written value). No cross-key transactions are expected.

    Implementations:
    - InMemoryKeyValueStore (tests, ephemeral sessions)
    - JsonFileKeyValueStore (single JSON document on local disk)
    - MongoKeyValueStore (MongoDB collection)

    Example usage (application layer):
        >>> class MealStore:
        ...     def __init__(self, store: IKeyValueStore):
        ...         self._store = store
        ...
        ...     async def load_raw(self, key: str) -> Optional[str]:
        ...         return await self._store.get_item(key)
    """

    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent
        """
        ...

    async def set_item(self, key: str, value: str) -> None:
        """
        Write (create or overwrite) a value.

        Args:
            key: Storage key
            value: String value to store

        Raises:
            Exception: Any adapter-specific I/O failure
        """
        ...

    async def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Args:
            key: Storage key
        """
        ...
