import httpx
from loguru import logger

from app.core.cache import CacheStore, build_cache_store
from app.core.config import Settings
from app.core.constants import TORRENT_INDEXES
from app.services.aggregation.fanout import FanOutCoordinator
from app.services.catalog import CatalogService
from app.services.cinemeta_service import CinemetaService
from app.services.sources.api_source import JsonApiSourceAdapter
from app.services.sources.base import SourceAdapter, TorrentAdapter
from app.services.sources.registry import AdapterRegistry
from app.services.torrents.index import TorrentIndexAdapter


def build_source_registry(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> AdapterRegistry[SourceAdapter]:
    registry: AdapterRegistry[SourceAdapter] = AdapterRegistry("source")
    enabled = set(settings.enabled_scrapers)
    logger.info("Registering source adapters:")
    for name, api_url in settings.SOURCE_ENDPOINTS.items():
        adapter = JsonApiSourceAdapter(
            name,
            api_url,
            timeout=settings.ADAPTER_TIMEOUT_SECONDS,
            max_retries=settings.RETRY_ATTEMPTS,
            retry_delay=settings.RETRY_DELAY_SECONDS,
            user_agent=settings.USER_AGENT,
            transport=transport,
        )
        registry.register(adapter, enabled=name.lower() in enabled)

    unknown = enabled - {name.lower() for name in settings.SOURCE_ENDPOINTS}
    if unknown:
        logger.warning(f"Enabled scrapers without a configured endpoint: {', '.join(sorted(unknown))}")
    return registry


def build_torrent_registry(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> AdapterRegistry[TorrentAdapter]:
    registry: AdapterRegistry[TorrentAdapter] = AdapterRegistry("torrent")
    enabled = set(settings.enabled_torrent_sources)
    logger.info("Registering torrent indexes:")
    for name, (display_name, base_url, search_url) in TORRENT_INDEXES.items():
        adapter = TorrentIndexAdapter(
            name,
            display_name,
            base_url,
            search_url,
            timeout=settings.ADAPTER_TIMEOUT_SECONDS,
            max_retries=settings.RETRY_ATTEMPTS,
            retry_delay=settings.RETRY_DELAY_SECONDS,
            user_agent=settings.USER_AGENT,
            transport=transport,
        )
        registry.register(adapter, enabled=name in enabled)
    return registry


def build_catalog_service(
    settings: Settings,
    cache: CacheStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CatalogService:
    """Wire registries, fan-out coordinator, cache and Cinemeta into one service.

    ``transport`` is handed to every outbound HTTP client, which lets tests
    replace the network with ``httpx.MockTransport``.
    """
    fanout = FanOutCoordinator(
        max_concurrency=settings.MAX_CONCURRENT_REQUESTS,
        timeout=settings.ADAPTER_TIMEOUT_SECONDS,
    )
    return CatalogService(
        sources=build_source_registry(settings, transport),
        torrents=build_torrent_registry(settings, transport),
        fanout=fanout,
        cache=cache if cache is not None else build_cache_store(settings),
        settings=settings,
        cinemeta=CinemetaService(transport=transport),
    )
