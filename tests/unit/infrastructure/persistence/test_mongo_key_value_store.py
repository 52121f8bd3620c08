"""Unit tests for MongoKeyValueStore (motor client mocked)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nutrilog.infrastructure.persistence.mongodb.key_value_store import MongoKeyValueStore


@pytest.fixture
def collection() -> MagicMock:
    """Mock motor collection."""
    coll = MagicMock()
    coll.find_one = AsyncMock(return_value=None)
    coll.update_one = AsyncMock()
    coll.delete_one = AsyncMock()
    return coll


@pytest.fixture
def client(collection: MagicMock) -> MagicMock:
    """Mock motor client returning the mock collection."""
    mock_client = MagicMock()
    mock_client.__getitem__.return_value.__getitem__.return_value = collection
    return mock_client


@pytest.fixture
def store(client: MagicMock, monkeypatch: pytest.MonkeyPatch) -> MongoKeyValueStore:
    monkeypatch.delenv("MONGODB_DATABASE", raising=False)
    return MongoKeyValueStore(client=client, collection_name="kv_test")


class TestMongoKeyValueStore:
    """Test MongoDB key-value operations."""

    def test_uses_configured_database_and_collection(
        self, store: MongoKeyValueStore, client: MagicMock, collection: MagicMock
    ) -> None:
        client.__getitem__.assert_called_with("nutrilog")
        client.__getitem__.return_value.__getitem__.assert_called_with("kv_test")
        assert store.collection is collection

    def test_requires_uri_without_client(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MONGODB_URI", raising=False)

        with pytest.raises(ValueError, match="MONGODB_URI"):
            MongoKeyValueStore()

    @pytest.mark.asyncio
    async def test_get_item(self, store: MongoKeyValueStore, collection: MagicMock) -> None:
        collection.find_one.return_value = {"_id": "@meals:u1", "value": "[]"}

        assert await store.get_item("@meals:u1") == "[]"
        collection.find_one.assert_awaited_once_with({"_id": "@meals:u1"}, {"value": 1})

    @pytest.mark.asyncio
    async def test_get_missing(self, store: MongoKeyValueStore) -> None:
        assert await store.get_item("@meals:u1") is None

    @pytest.mark.asyncio
    async def test_get_non_string_value(self, store: MongoKeyValueStore, collection: MagicMock) -> None:
        collection.find_one.return_value = {"_id": "@meals:u1", "value": 42}
        assert await store.get_item("@meals:u1") is None

    @pytest.mark.asyncio
    async def test_set_item_upserts(self, store: MongoKeyValueStore, collection: MagicMock) -> None:
        await store.set_item("@calorie_goal:u1", "1800")

        args, kwargs = collection.update_one.call_args
        assert args[0] == {"_id": "@calorie_goal:u1"}
        assert args[1]["$set"]["value"] == "1800"
        assert "updated_at" in args[1]["$set"]
        assert kwargs == {"upsert": True}

    @pytest.mark.asyncio
    async def test_remove_item(self, store: MongoKeyValueStore, collection: MagicMock) -> None:
        await store.remove_item("@meals")
        collection.delete_one.assert_awaited_once_with({"_id": "@meals"})

    @pytest.mark.asyncio
    async def test_errors_are_reraised(self, store: MongoKeyValueStore, collection: MagicMock) -> None:
        collection.update_one.side_effect = ConnectionError("network down")

        with pytest.raises(ConnectionError):
            await store.set_item("@meals", "[]")

    @pytest.mark.asyncio
    async def test_close(self, store: MongoKeyValueStore, client: MagicMock) -> None:
        await store.close()
        client.close.assert_called_once()
