"""
In-memory key-value store implementation.

Simple dict-backed store for testing and ephemeral sessions.
Data is lost on process restart; use the JSON file or MongoDB backend to
persist across runs.
"""

from typing import Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore:
    """In-memory implementation of IKeyValueStore.

    Values are plain strings; callers deserialize a fresh object graph
    from every read.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        """Initialize store, optionally seeded with existing pairs."""
        self._data: Dict[str, str] = dict(initial or {})
        logger.debug("InMemoryKeyValueStore initialized", keys=len(self._data))

    async def get_item(self, key: str) -> Optional[str]:
        """Get the value stored under a key, or None."""
        value = self._data.get(key)
        logger.debug("Key read", key=key, hit=value is not None)
        return value

    async def set_item(self, key: str, value: str) -> None:
        """Create or overwrite a key."""
        self._data[key] = value
        logger.debug("Key written", key=key, size=len(value))

    async def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        if key in self._data:
            del self._data[key]
            logger.debug("Key removed", key=key)

    def keys(self) -> List[str]:
        """List stored keys (for tests and diagnostics)."""
        return sorted(self._data)

    def clear(self) -> None:
        """Remove every key (for testing)."""
        self._data.clear()
        logger.debug("Store cleared")
