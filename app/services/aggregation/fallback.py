from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from app.models.records import StreamRecord
from app.services.aggregation.fanout import FanOutCoordinator, collect
from app.services.aggregation.merge import merge_streams
from app.services.aggregation.query import TorrentQueryResolver
from app.services.aggregation.ranking import rank_streams
from app.services.sources.base import SourceAdapter, TorrentAdapter
from app.services.sources.registry import AdapterRegistry
from app.shared.ids import parse_content_id


class FallbackStage(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass
class FallbackResult:
    streams: list[StreamRecord] = field(default_factory=list)
    stage: FallbackStage | None = None


class StreamFallbackOrchestrator:
    """
    Stream lookup in two stages.

    PRIMARY asks every enabled direct-stream adapter for the content id. Only
    when that yields nothing does SECONDARY search the enabled torrent indexes
    with a query derived from the id, keeping the best ``max_results``.
    """

    def __init__(
        self,
        sources: AdapterRegistry[SourceAdapter],
        torrents: AdapterRegistry[TorrentAdapter],
        fanout: FanOutCoordinator,
        query_resolver: TorrentQueryResolver,
        torrents_enabled: bool = True,
        max_results: int = 10,
        min_seeders: int = 0,
    ):
        self.sources = sources
        self.torrents = torrents
        self.fanout = fanout
        self.query_resolver = query_resolver
        self.torrents_enabled = torrents_enabled
        self.max_results = max_results
        self.min_seeders = min_seeders

    async def resolve(self, content_id: str, kind: str) -> FallbackResult:
        if parse_content_id(content_id) is None:
            logger.debug(f"Unroutable stream id {content_id}")
            return FallbackResult()

        streams = await self._primary(content_id, kind)
        if streams:
            return FallbackResult(streams, FallbackStage.PRIMARY)

        logger.info(f"No direct streams for {content_id}, falling back to torrents")
        return FallbackResult(await self._secondary(content_id, kind), FallbackStage.SECONDARY)

    async def _primary(self, content_id: str, kind: str) -> list[StreamRecord]:
        outcomes = await self.fanout.fan_out(
            "streams",
            self.sources.enabled(),
            lambda adapter: adapter.get_streams(content_id, kind),
            context=f"for {content_id}",
        )
        return rank_streams(merge_streams(collect(outcomes)))

    async def _secondary(self, content_id: str, kind: str) -> list[StreamRecord]:
        adapters = self.torrents.enabled()
        if not self.torrents_enabled or not adapters:
            return []

        query = await self.query_resolver.resolve(content_id, kind)
        if not query:
            logger.info(f"Could not derive a torrent query for {content_id}")
            return []

        outcomes = await self.fanout.fan_out(
            "torrent search",
            adapters,
            lambda adapter: adapter.search(query),
            context=f"for {query!r}",
        )
        streams = merge_streams(collect(outcomes), min_seeders=self.min_seeders)
        return rank_streams(streams, limit=self.max_results)
