import asyncio
import json
import time
from collections.abc import Callable
from typing import Any, NamedTuple

import redis.asyncio as redis
from cachetools import TLRUCache
from loguru import logger

from app.core.config import Settings


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _entry_expiry(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheStore:
    """
    In-process key/value store with a TTL per entry.

    Expiry timestamps live in the TLRU heap: reads never return an entry at or past
    its expiry, and the periodic sweep drops expired entries so memory is bounded
    independently of read traffic. Setting a key again replaces its heap slot, so a
    key only ever has one pending expiry.
    """

    def __init__(self, maxsize: int = 10000, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)
        self._sweeper: asyncio.Task | None = None

    async def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            # Already expired; make sure an older value does not linger.
            self._entries.pop(key, None)
            return
        self._entries[key] = _Entry(value, ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        removed = len(self._entries.expire())
        if removed:
            logger.info(f"Cleaned up {removed} expired cache entries")
        return removed

    def stats(self) -> dict[str, Any]:
        self._entries.expire()
        keys = list(self._entries.keys())
        return {"backend": "memory", "size": len(keys), "keys": keys}

    def start_sweeper(self, interval: float) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever(interval))

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.sweep()

    async def close(self) -> None:
        await self.stop_sweeper()


class RedisCacheStore:
    """
    Redis-backed store sharing the same contract as the memory store.
    Redis enforces expiry itself, so there is nothing to sweep locally.
    Connection errors are logged and read as a miss.
    """

    def __init__(self, url: str, key_prefix: str = "streamhub:", max_connections: int = 20):
        self.url = url
        self.key_prefix = key_prefix
        self.max_connections = max_connections
        self._client: redis.Redis | None = None

    async def get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Initializing Redis Cache Client")
            self._client = redis.from_url(
                self.url,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=self.max_connections,
                health_check_interval=30,
            )
        return self._client

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Any:
        try:
            client = await self.get_client()
            raw = await client.get(self._key(key))
        except Exception as e:
            logger.error(f"Redis GET failed for {key}: {e}")
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: float) -> None:
        try:
            client = await self.get_client()
            if ttl <= 0:
                await client.delete(self._key(key))
                return
            # PX keeps sub-second TTLs exact
            await client.set(self._key(key), json.dumps(value), px=int(ttl * 1000))
        except Exception as e:
            logger.error(f"Redis SET failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            client = await self.get_client()
            await client.delete(self._key(key))
        except Exception as e:
            logger.error(f"Redis DELETE failed for {key}: {e}")

    async def clear(self) -> None:
        try:
            client = await self.get_client()
            keys = [k async for k in client.scan_iter(match=f"{self.key_prefix}*", count=500)]
            if keys:
                await client.delete(*keys)
        except Exception as e:
            logger.error(f"Redis CLEAR failed: {e}")

    def sweep(self) -> int:
        return 0

    def stats(self) -> dict[str, Any]:
        return {"backend": "redis", "url": self.url, "prefix": self.key_prefix}

    def start_sweeper(self, interval: float) -> None:
        return None

    async def stop_sweeper(self) -> None:
        return None

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None


CacheStore = MemoryCacheStore | RedisCacheStore


def build_cache_store(settings: Settings, timer: Callable[[], float] = time.monotonic) -> CacheStore:
    if settings.CACHE_BACKEND == "redis":
        return RedisCacheStore(settings.REDIS_URL, key_prefix=settings.REDIS_KEY_PREFIX)
    return MemoryCacheStore(maxsize=settings.CACHE_MAX_ENTRIES, timer=timer)
