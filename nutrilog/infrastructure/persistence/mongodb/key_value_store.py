"""MongoDB key-value store.

Each key is one document:

    {
        "_id": "@meals:user123",
        "value": "[{...}]",
        "updated_at": "2025-01-15T12:30:00+00:00"
    }

Single-document writes are atomic in MongoDB, which is all the meal store
needs. Errors are logged and re-raised; the meal store decides whether to
degrade (reads) or surface them (writes).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from nutrilog.infrastructure.config import (
    get_kv_collection,
    get_mongodb_database,
    get_mongodb_uri,
)

logger = structlog.get_logger(__name__)


class MongoKeyValueStore:
    """
    MongoDB implementation of IKeyValueStore.

    Connection pooling is handled by motor. Pass an existing client to share
    it between components (or a mock in tests).

    Example:
        >>> store = MongoKeyValueStore()
        >>> await store.set_item("@calorie_goal:user123", "1800")
        >>> await store.get_item("@calorie_goal:user123")
        '1800'
    """

    def __init__(
        self,
        client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None,
        collection_name: Optional[str] = None,
    ) -> None:
        """
        Initialize store with optional client.

        Args:
            client: Motor client (if None, creates new one from config)
            collection_name: Collection name (default from config)

        Raises:
            ValueError: If no client is given and MONGODB_URI is not set
        """
        if client is None:
            uri = get_mongodb_uri()
            if not uri:
                raise ValueError(
                    "MONGODB_URI not configured. "
                    "Set MONGODB_URI, MONGODB_USER, "
                    "and MONGODB_PASSWORD environment variables."
                )
            self._client: AsyncIOMotorClient[Dict[str, Any]] = AsyncIOMotorClient(uri)
        else:
            self._client = client

        self._collection_name = collection_name or get_kv_collection()
        self._db = self._client[get_mongodb_database()]
        self._collection = self._db[self._collection_name]

        logger.info("Initialized MongoKeyValueStore", collection=self._collection_name)

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        """Get MongoDB collection handle."""
        return self._collection

    async def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            Stored string, or None if missing or not a string

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            doc = await self._collection.find_one({"_id": key}, {"value": 1})
        except Exception as e:
            logger.error("MongoDB find_one failed", collection=self._collection_name, key=key, error=str(e))
            raise

        if doc is None:
            return None
        value = doc.get("value")
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        """
        Upsert a value.

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        update = {
            "$set": {
                "value": value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
        }
        try:
            await self._collection.update_one({"_id": key}, update, upsert=True)
        except Exception as e:
            logger.error("MongoDB update_one failed", collection=self._collection_name, key=key, error=str(e))
            raise

    async def remove_item(self, key: str) -> None:
        """
        Delete a key (no-op if absent).

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            await self._collection.delete_one({"_id": key})
        except Exception as e:
            logger.error("MongoDB delete_one failed", collection=self._collection_name, key=key, error=str(e))
            raise

    async def close(self) -> None:
        """Close MongoDB connection."""
        self._client.close()
        logger.info("Closed MongoDB connection", collection=self._collection_name)
