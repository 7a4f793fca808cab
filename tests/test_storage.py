import json
from unittest.mock import AsyncMock

import pytest

from webinar_bot.platform.config import Settings
from webinar_bot.platform.storage import build_store
from webinar_bot.platform.storage.memory import InMemoryStore
from webinar_bot.platform.storage.redis import RedisStore
from webinar_bot.platform.storage.sql import SqlStore


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_missing_key_returns_default(self):
        store = InMemoryStore()
        assert await store.read("webinar-users", []) == []

    @pytest.mark.asyncio
    async def test_write_then_read(self):
        store = InMemoryStore()
        await store.write("webinar-users", [{"id": "user_1", "name": "سارا"}])

        assert await store.read("webinar-users", []) == [{"id": "user_1", "name": "سارا"}]

    @pytest.mark.asyncio
    async def test_write_replaces_previous_value(self):
        store = InMemoryStore()
        await store.write("k", {"a": 1})
        await store.write("k", {"b": 2})

        assert await store.read("k", None) == {"b": 2}

    @pytest.mark.asyncio
    async def test_malformed_value_falls_back_to_default(self):
        store = InMemoryStore({"webinar-users": "{not json"})
        assert await store.read("webinar-users", []) == []

    @pytest.mark.asyncio
    async def test_default_is_not_shared_between_reads(self):
        store = InMemoryStore()
        default: list = []

        first = await store.read("k", default)
        first.append("mutated")

        assert await store.read("k", default) == []
        assert default == []


class TestSqlStore:
    @pytest.mark.asyncio
    async def test_round_trip_through_sqlite(self, tmp_path):
        store = SqlStore(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}")
        await store.setup()
        try:
            assert await store.read("webinar-settings", {"x": 1}) == {"x": 1}

            await store.write("webinar-settings", {"isSmsActive": True})
            await store.write("webinar-settings", {"isSmsActive": False})

            assert await store.read("webinar-settings", None) == {"isSmsActive": False}
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_keys_are_isolated(self, tmp_path):
        store = SqlStore(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}")
        await store.setup()
        try:
            await store.write("a", [1])
            await store.write("b", [2])

            assert await store.read("a", []) == [1]
            assert await store.read("b", []) == [2]
        finally:
            await store.close()


class TestRedisStore:
    @pytest.mark.asyncio
    async def test_read_parses_json_from_redis(self):
        client = AsyncMock()
        client.get.return_value = json.dumps([{"id": "user_1"}])
        store = RedisStore(client=client)

        assert await store.read("webinar-users", []) == [{"id": "user_1"}]
        client.get.assert_awaited_once_with("webinar-users")

    @pytest.mark.asyncio
    async def test_missing_key_returns_default(self):
        client = AsyncMock()
        client.get.return_value = None
        store = RedisStore(client=client)

        assert await store.read("webinar-users", []) == []

    @pytest.mark.asyncio
    async def test_write_serialises_json(self):
        client = AsyncMock()
        store = RedisStore(client=client)

        await store.write("webinar-settings", {"smsText": "سلام"})

        client.set.assert_awaited_once_with("webinar-settings", '{"smsText": "سلام"}')


def test_build_store_defaults_to_memory():
    assert isinstance(build_store(Settings(STORAGE_BACKEND="memory")), InMemoryStore)


def test_build_store_sql(tmp_path):
    store = build_store(
        Settings(STORAGE_BACKEND="sql", DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    )
    assert isinstance(store, SqlStore)
