from typing import Any

import httpx
from async_lru import alru_cache
from loguru import logger

from app.core.base_client import BaseClient
from app.core.constants import CINEMETA_BASE_URL


class CinemetaService:
    """Resolves IMDb ids to titles through Stremio's public Cinemeta addon."""

    def __init__(
        self,
        base_url: str = CINEMETA_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = BaseClient(base_url=base_url, timeout=timeout, max_retries=2, transport=transport)

    async def close(self):
        await self.client.close()

    @alru_cache(maxsize=2000, ttl=86400)
    async def _fetch_meta(self, imdb_id: str, content_type: str) -> dict[str, Any]:
        data = await self.client.get(f"/meta/{content_type}/{imdb_id}.json")
        if not isinstance(data, dict):
            return {}
        return data.get("meta") or {}

    async def get_metadata(self, imdb_id: str, content_type: str) -> dict[str, Any]:
        try:
            return await self._fetch_meta(imdb_id, content_type)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error getting metadata for {imdb_id}: {e}")
            return {}
