from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from app.core.cache import CacheStore
from app.core.config import Settings
from app.core.constants import CATALOG_KEY, CONTENT_TYPES, META_KEY, STREAMS_KEY
from app.models.records import ContentRecord, StreamRecord
from app.services.aggregation.fallback import StreamFallbackOrchestrator
from app.services.aggregation.fanout import FanOutCoordinator, collect
from app.services.aggregation.merge import merge_records
from app.services.aggregation.query import TorrentQueryResolver
from app.services.aggregation.ranking import rank_content
from app.services.cinemeta_service import CinemetaService
from app.services.sources.base import SourceAdapter, TorrentAdapter
from app.services.sources.registry import AdapterRegistry
from app.shared.ids import parse_content_id

_CONTENT_LIST = TypeAdapter(list[ContentRecord])
_CONTENT = TypeAdapter(ContentRecord)
_STREAM_LIST = TypeAdapter(list[StreamRecord])


class CatalogService:
    """
    Facade over the aggregation pipeline used by the Stremio endpoints.

    Every call checks the cache first. On a miss the enabled adapters are
    queried through the fan-out coordinator, merged and ranked, and a
    non-empty result is cached with the TTL of its request kind. Empty
    results are not cached so a recovering source is picked up on the next
    request.
    """

    def __init__(
        self,
        sources: AdapterRegistry[SourceAdapter],
        torrents: AdapterRegistry[TorrentAdapter],
        fanout: FanOutCoordinator,
        cache: CacheStore,
        settings: Settings,
        cinemeta: CinemetaService | None = None,
    ):
        self.sources = sources
        self.torrents = torrents
        self.fanout = fanout
        self.cache = cache
        self.cinemeta = cinemeta
        self.cache_enabled = settings.CACHE_ENABLED
        self.ttls = {
            "catalog": settings.CACHE_CATALOG_TTL,
            "meta": settings.CACHE_META_TTL,
            "streams": settings.CACHE_STREAMS_TTL,
        }
        self.query_resolver = TorrentQueryResolver(self.get_meta, cinemeta)
        self.fallback = StreamFallbackOrchestrator(
            sources,
            torrents,
            fanout,
            self.query_resolver,
            torrents_enabled=settings.TORRENTS_ENABLED,
            max_results=settings.TORRENT_MAX_RESULTS,
            min_seeders=settings.TORRENT_MIN_SEEDERS,
        )

    async def _read(self, key: str, adapter: TypeAdapter) -> Any:
        if not self.cache_enabled:
            return None
        raw = await self.cache.get(key)
        if raw is None:
            return None
        try:
            value = adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Dropping invalid cache entry {key}: {e}")
            await self.cache.delete(key)
            return None
        logger.debug(f"Cache hit for {key}")
        return value

    async def _write(self, key: str, adapter: TypeAdapter, value: Any, ttl: int) -> None:
        if not self.cache_enabled or not value:
            return
        await self.cache.set(key, adapter.dump_python(value, mode="json"), ttl)

    async def list_catalog(
        self, kind: str, search: str | None = None, genre: str | None = None
    ) -> list[ContentRecord]:
        """Search results when ``search`` is given, the popular listing otherwise."""
        if kind not in CONTENT_TYPES:
            logger.warning(f"Unsupported content type: {kind}")
            return []

        search = (search or "").strip()
        genre = (genre or "").strip()
        key = CATALOG_KEY.format(kind=kind, search=search.lower(), genre=genre.lower())

        cached = await self._read(key, _CONTENT_LIST)
        if cached is not None:
            return cached

        if search:
            outcomes = await self.fanout.fan_out(
                "search",
                self.sources.enabled(),
                lambda adapter: adapter.search(search, kind),
                context=f"for {search!r}",
            )
        else:
            outcomes = await self.fanout.fan_out(
                "popular",
                self.sources.enabled(),
                lambda adapter: adapter.get_popular(kind, genre or None),
                context=f"for {kind}" + (f"/{genre}" if genre else ""),
            )

        records = [r for r in merge_records(collect(outcomes)) if r.kind == kind]
        records = rank_content(records)
        await self._write(key, _CONTENT_LIST, records, self.ttls["catalog"])
        return records

    async def get_meta(self, content_id: str, kind: str) -> ContentRecord | None:
        """Detail record from the adapter that owns ``content_id``; None when unroutable."""
        ref = parse_content_id(content_id)
        if ref is None or ref.is_external:
            return None

        key = META_KEY.format(kind=kind, id=ref.base_id)
        cached = await self._read(key, _CONTENT)
        if cached is not None:
            return cached

        adapter = self.sources.route(ref.base_id)
        if adapter is None:
            return None

        outcomes = await self.fanout.fan_out(
            "meta",
            [adapter],
            lambda a: a.get_detail(ref.base_id, kind),
            default=lambda: None,
            context=f"for {ref.base_id}",
        )
        record = outcomes[0].result
        if record is not None:
            await self._write(key, _CONTENT, record, self.ttls["meta"])
        return record

    async def get_streams(self, content_id: str, kind: str) -> list[StreamRecord]:
        if parse_content_id(content_id) is None:
            logger.debug(f"Unroutable stream id {content_id}")
            return []

        key = STREAMS_KEY.format(kind=kind, id=content_id)
        cached = await self._read(key, _STREAM_LIST)
        if cached is not None:
            return cached

        result = await self.fallback.resolve(content_id, kind)
        logger.info(f"Found {len(result.streams)} streams for {content_id} ({result.stage.value})")
        await self._write(key, _STREAM_LIST, result.streams, self.ttls["streams"])
        return result.streams

    async def clear_cache(self) -> None:
        await self.cache.clear()
        logger.info("Cache cleared")

    def stats(self) -> dict[str, Any]:
        return {
            "scrapers": self.sources.stats(),
            "torrents": self.torrents.stats(),
            "cache": self.cache.stats(),
        }

    async def close(self) -> None:
        await self.sources.close()
        await self.torrents.close()
        if self.cinemeta is not None:
            await self.cinemeta.close()
        await self.cache.close()
