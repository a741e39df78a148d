import asyncio

import pytest

from app.core.cache import MemoryCacheStore, RedisCacheStore, build_cache_store
from conftest import make_settings


class TestMemoryCacheStore:
    @pytest.mark.asyncio
    async def test_value_visible_until_ttl_elapses(self, memory_cache, clock):
        await memory_cache.set("k", {"v": 1}, 10)

        clock.advance(9)
        assert await memory_cache.get("k") == {"v": 1}

        clock.advance(1)
        assert await memory_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_set_again_resets_expiry(self, memory_cache, clock):
        await memory_cache.set("k", "first", 10)
        clock.advance(8)
        await memory_cache.set("k", "second", 10)

        # Past the first expiry, before the second
        clock.advance(5)
        assert await memory_cache.get("k") == "second"

        clock.advance(5)
        assert await memory_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_shorter_ttl_on_reset_wins(self, memory_cache, clock):
        await memory_cache.set("k", "long", 100)
        await memory_cache.set("k", "short", 1)

        clock.advance(2)
        assert await memory_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_non_positive_ttl_is_never_readable(self, memory_cache):
        await memory_cache.set("k", "old", 10)
        await memory_cache.set("k", "new", 0)

        assert await memory_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self, memory_cache):
        assert await memory_cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_keys_expire_independently(self, memory_cache, clock):
        await memory_cache.set("a", 1, 5)
        await memory_cache.set("b", 2, 50)

        clock.advance(10)
        assert await memory_cache.get("a") is None
        assert await memory_cache.get("b") == 2

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, memory_cache):
        await memory_cache.set("a", 1, 5)
        await memory_cache.set("b", 2, 5)

        await memory_cache.delete("a")
        assert await memory_cache.get("a") is None

        await memory_cache.clear()
        assert await memory_cache.get("b") is None
        assert memory_cache.stats()["size"] == 0

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired_entries(self, memory_cache, clock):
        await memory_cache.set("a", 1, 5)
        await memory_cache.set("b", 2, 5)
        await memory_cache.set("c", 3, 60)

        clock.advance(6)
        assert memory_cache.sweep() == 2
        assert memory_cache.stats()["keys"] == ["c"]
        assert memory_cache.sweep() == 0

    @pytest.mark.asyncio
    async def test_reset_key_is_swept_once_at_new_expiry(self, memory_cache, clock):
        await memory_cache.set("k", 1, 5)
        await memory_cache.set("k", 2, 20)

        clock.advance(6)
        assert memory_cache.sweep() == 0
        assert await memory_cache.get("k") == 2

        clock.advance(20)
        assert memory_cache.sweep() == 1

    @pytest.mark.asyncio
    async def test_sweeper_task_starts_and_stops(self):
        store = MemoryCacheStore(maxsize=10)
        sweeps = []
        store.sweep = lambda: sweeps.append(1) or 0

        store.start_sweeper(0.01)
        await asyncio.sleep(0.05)
        assert sweeps

        await store.stop_sweeper()
        assert store._sweeper is None


class TestRedisCacheStore:
    class _FakeRedis:
        def __init__(self):
            self.data = {}
            self.px = {}

        async def get(self, key):
            return self.data.get(key)

        async def set(self, key, value, px=None):
            self.data[key] = value
            self.px[key] = px

        async def delete(self, *keys):
            for key in keys:
                self.data.pop(key, None)

        async def scan_iter(self, match=None, count=None):
            prefix = match.rstrip("*")
            for key in list(self.data):
                if key.startswith(prefix):
                    yield key

        async def aclose(self):
            pass

    @pytest.fixture
    def store(self):
        store = RedisCacheStore("redis://localhost:6379/0", key_prefix="test:")
        store._client = self._FakeRedis()
        return store

    @pytest.mark.asyncio
    async def test_round_trips_json_with_millisecond_ttl(self, store):
        await store.set("k", {"a": [1, 2]}, 1.5)

        assert store._client.px["test:k"] == 1500
        assert await store.get("k") == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_clear_only_touches_prefixed_keys(self, store):
        await store.set("a", 1, 10)
        store._client.data["other:b"] = "2"

        await store.clear()

        assert store._client.data == {"other:b": "2"}

    @pytest.mark.asyncio
    async def test_backend_errors_read_as_miss(self, store):
        class _Broken:
            async def get(self, key):
                raise ConnectionError("down")

        store._client = _Broken()
        assert await store.get("k") is None


def test_build_cache_store_picks_backend():
    assert isinstance(build_cache_store(make_settings()), MemoryCacheStore)
    assert isinstance(build_cache_store(make_settings(CACHE_BACKEND="redis")), RedisCacheStore)
