"""Unit tests for LegacyMigrator."""

from unittest.mock import AsyncMock

import pytest

from nutrilog.application.meal.migration import LegacyMigrator
from nutrilog.domain.shared.errors import InvalidUserError
from nutrilog.infrastructure.persistence.in_memory.key_value_store import InMemoryKeyValueStore


class TestMigrateMeals:
    """Test meals migration."""

    @pytest.mark.asyncio
    async def test_nothing_to_migrate(self) -> None:
        store = InMemoryKeyValueStore()

        assert await LegacyMigrator(store).migrate_legacy_meals_if_needed("u1") is False
        assert store.keys() == []

    @pytest.mark.asyncio
    async def test_copies_verbatim_and_removes_legacy(self) -> None:
        store = InMemoryKeyValueStore({"@meals": "not even json"})

        migrated = await LegacyMigrator(store).migrate_legacy_meals_if_needed("u1")

        assert migrated is True
        assert await store.get_item("@meals:u1") == "not even json"
        assert await store.get_item("@meals") is None

    @pytest.mark.asyncio
    async def test_existing_scoped_value_blocks_migration(self) -> None:
        store = InMemoryKeyValueStore({"@meals": "[1]", "@meals:u1": "[2]"})

        assert await LegacyMigrator(store).migrate_legacy_meals_if_needed("u1") is False
        assert await store.get_item("@meals:u1") == "[2]"
        assert await store.get_item("@meals") == "[1]"

    @pytest.mark.asyncio
    async def test_second_call_is_noop(self) -> None:
        store = InMemoryKeyValueStore({"@meals": "[]"})
        migrator = LegacyMigrator(store)

        assert await migrator.migrate_legacy_meals_if_needed("u1") is True
        assert await migrator.migrate_legacy_meals_if_needed("u1") is False
        assert store.keys() == ["@meals:u1"]

    @pytest.mark.asyncio
    async def test_only_first_user_gets_legacy_data(self) -> None:
        store = InMemoryKeyValueStore({"@meals": "[]"})
        migrator = LegacyMigrator(store)

        assert await migrator.migrate_legacy_meals_if_needed("alice") is True
        assert await migrator.migrate_legacy_meals_if_needed("bob") is False
        assert await store.get_item("@meals:bob") is None

    @pytest.mark.asyncio
    async def test_requires_user(self) -> None:
        with pytest.raises(InvalidUserError):
            await LegacyMigrator(InMemoryKeyValueStore()).migrate_legacy_meals_if_needed("")


class TestMigrateCalorieGoal:
    """Test calorie goal migration."""

    @pytest.mark.asyncio
    async def test_copies_goal(self) -> None:
        store = InMemoryKeyValueStore({"@calorie_goal": "1800"})

        assert await LegacyMigrator(store).migrate_legacy_calorie_goal_if_needed("u1") is True
        assert store.keys() == ["@calorie_goal:u1"]
        assert await store.get_item("@calorie_goal:u1") == "1800"

    @pytest.mark.asyncio
    async def test_goal_and_meals_are_independent(self) -> None:
        store = InMemoryKeyValueStore({"@calorie_goal": "1800", "@meals": "[]"})

        await LegacyMigrator(store).migrate_legacy_calorie_goal_if_needed("u1")

        assert await store.get_item("@meals") == "[]"


class TestInterruptedMigration:
    """Test a failure between the copy and the legacy removal."""

    @pytest.mark.asyncio
    async def test_remove_failure_propagates_and_recovers(self) -> None:
        backing = InMemoryKeyValueStore({"@meals": "[]"})
        flaky = AsyncMock()
        flaky.get_item.side_effect = backing.get_item
        flaky.set_item.side_effect = backing.set_item
        flaky.remove_item.side_effect = ConnectionError("crashed")

        with pytest.raises(ConnectionError):
            await LegacyMigrator(flaky).migrate_legacy_meals_if_needed("u1")

        assert backing.keys() == ["@meals", "@meals:u1"]
        assert await LegacyMigrator(backing).migrate_legacy_meals_if_needed("u1") is False
        assert backing.keys() == ["@meals", "@meals:u1"]

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self) -> None:
        store = AsyncMock()
        store.get_item.side_effect = ConnectionError("offline")

        with pytest.raises(ConnectionError):
            await LegacyMigrator(store).migrate_legacy_meals_if_needed("u1")

        store.set_item.assert_not_awaited()
