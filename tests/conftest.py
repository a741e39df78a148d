"""
Shared fixtures: fake adapters, a manual clock and settings factories.

Fakes record every call so tests can assert which adapters were queried.
"""

import asyncio

import pytest

from app.core.cache import MemoryCacheStore
from app.core.config import Settings
from app.models.records import ContentRecord, StreamRecord
from app.services.aggregation.fanout import FanOutCoordinator
from app.services.catalog import CatalogService
from app.services.sources.registry import AdapterRegistry
from app.shared.ids import parse_content_id


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSourceAdapter:
    def __init__(
        self,
        name: str,
        records: list[ContentRecord] | None = None,
        streams: list[StreamRecord] | None = None,
        details: dict[str, ContentRecord] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.base_url = f"https://{name}.example"
        self.records = records or []
        self.streams = streams or []
        self.details = details or {}
        self.error = error
        self.delay = delay
        self.calls: list[tuple] = []
        self.closed = False

    async def _respond(self, call: tuple, value):
        self.calls.append(call)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return value

    async def search(self, query, kind):
        return await self._respond(("search", query, kind), list(self.records))

    async def get_popular(self, kind, genre=None):
        return await self._respond(("popular", kind, genre), list(self.records))

    async def get_detail(self, content_id, kind):
        return await self._respond(("detail", content_id, kind), self.details.get(content_id))

    async def get_streams(self, content_id, kind):
        ref = parse_content_id(content_id)
        owned = ref is not None and ref.adapter == self.name
        return await self._respond(("streams", content_id, kind), list(self.streams) if owned else [])

    async def close(self):
        self.closed = True


class FakeTorrentAdapter:
    def __init__(
        self,
        name: str,
        streams: list[StreamRecord] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.base_url = f"https://{name}.example"
        self.streams = streams or []
        self.error = error
        self.delay = delay
        self.queries: list[str] = []
        self.closed = False

    async def search(self, query):
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.streams)

    async def close(self):
        self.closed = True


def content(title: str, adapter: str = "alpha", kind: str = "movie", **fields) -> ContentRecord:
    key = fields.pop("key", title.lower().replace(" ", "-"))
    return ContentRecord(id=f"scraped:{adapter}:{key}", kind=kind, title=title, source_name=adapter, **fields)


def direct(url: str, quality: str | None = None, source: str = "alpha") -> StreamRecord:
    return StreamRecord(url=url, quality=quality, source_name=source, source_kind="direct")


def torrent(info_hash: str, seeders: int, quality: str | None = None, source: str = "EZTV (Torrent)", **fields):
    return StreamRecord(
        url=f"magnet:?xt=urn:btih:{info_hash}",
        quality=quality,
        source_name=source,
        source_kind="torrent",
        seeder_count=seeders,
        leecher_count=fields.pop("leechers", 0),
        info_hash=info_hash,
        **fields,
    )


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_cache(clock) -> MemoryCacheStore:
    return MemoryCacheStore(maxsize=100, timer=clock)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def build_service(memory_cache):
    """Factory wiring fake adapters into a real CatalogService."""

    def _build(sources=(), torrents=(), cinemeta=None, disabled=(), **overrides) -> CatalogService:
        source_registry = AdapterRegistry("source")
        for adapter in sources:
            source_registry.register(adapter, enabled=adapter.name not in disabled)
        torrent_registry = AdapterRegistry("torrent")
        for adapter in torrents:
            torrent_registry.register(adapter, enabled=adapter.name not in disabled)
        config = make_settings(**overrides)
        fanout = FanOutCoordinator(config.MAX_CONCURRENT_REQUESTS, config.ADAPTER_TIMEOUT_SECONDS)
        return CatalogService(source_registry, torrent_registry, fanout, memory_cache, config, cinemeta=cinemeta)

    return _build
