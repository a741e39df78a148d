import re
from typing import Any
from urllib.parse import urljoin

import httpx
from loguru import logger
from pydantic import ValidationError

from app.core.base_client import BaseClient
from app.core.constants import CONTENT_TYPES
from app.models.records import ContentRecord, EpisodeRecord, StreamRecord
from app.services.sources.base import AdapterError
from app.shared.ids import build_content_id, parse_content_id
from app.utils.release import extract_language, extract_quality

_YEAR = re.compile(r"(19|20)\d{2}")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def _parse_year(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    match = _YEAR.search(str(value))
    return int(match.group(0)) if match else None


def _parse_rating(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER.search(str(value))
    return float(match.group(0)) if match else None


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item.get("name") if isinstance(item, dict) else item) for item in value]


class JsonApiSourceAdapter:
    """
    Source adapter for streaming sites that publish a JSON API.

    Endpoints, relative to the API base:
        /search?q=&type=            search results
        /popular?type=&genre=       popular listing
        /{type}/{slug}              detail
        /{type}/{slug}/streams      playable streams (season/episode as query params)
    """

    def __init__(
        self,
        name: str,
        api_url: str,
        site_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name.lower()
        self.base_url = site_url or api_url
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        self.client = BaseClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.close()

    async def search(self, query: str, kind: str) -> list[ContentRecord]:
        data = await self.client.get("/search", params={"q": query, "type": kind})
        return self._parse_listing(data, kind)

    async def get_popular(self, kind: str, genre: str | None = None) -> list[ContentRecord]:
        params = {"type": kind}
        if genre:
            params["genre"] = genre
        data = await self.client.get("/popular", params=params)
        return self._parse_listing(data, kind)

    async def get_detail(self, content_id: str, kind: str) -> ContentRecord | None:
        ref = parse_content_id(content_id)
        if ref is None or ref.adapter != self.name:
            return None
        data = await self.client.get(f"/{kind}/{ref.key}")
        if not isinstance(data, dict) or not data:
            return None
        payload = data.get("result", data)
        if not isinstance(payload, dict):
            raise AdapterError(f"{self.name}: malformed detail payload for {content_id}")
        try:
            return self._to_record(payload, kind)
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise AdapterError(f"{self.name}: malformed detail payload for {content_id}: {e}") from e

    async def get_streams(self, content_id: str, kind: str) -> list[StreamRecord]:
        ref = parse_content_id(content_id)
        if ref is None or ref.adapter != self.name:
            return []
        params = {}
        if ref.season is not None and ref.episode is not None:
            params = {"season": ref.season, "episode": ref.episode}
        data = await self.client.get(f"/{kind}/{ref.key}/streams", params=params or None)
        items = data.get("streams", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise AdapterError(f"{self.name}: unexpected streams payload")

        streams = []
        for item in items:
            if not isinstance(item, dict) or not item.get("url"):
                continue
            url = self._clean_url(item["url"])
            quality = item.get("quality") or extract_quality(item.get("title") or url)
            streams.append(
                StreamRecord(
                    url=url,
                    quality=quality,
                    language=item.get("language") or extract_language(item.get("title")),
                    source_name=self.name,
                    source_kind="direct",
                    title=item.get("title") or f"{self.name} - {quality or 'Unknown Quality'}",
                    size_label=item.get("size"),
                )
            )
        return streams

    def _parse_listing(self, data: Any, kind: str) -> list[ContentRecord]:
        if isinstance(data, dict):
            items = data.get("results") or []
        elif isinstance(data, list):
            items = data
        else:
            raise AdapterError(f"{self.name}: unexpected listing payload")
        if not isinstance(items, list):
            raise AdapterError(f"{self.name}: unexpected listing payload")

        records = []
        for item in items:
            if not isinstance(item, dict):
                logger.debug(f"[{self.name}] Skipping non-object item: {item!r}")
                continue
            try:
                records.append(self._to_record(item, kind))
            except (ValueError, KeyError, TypeError, ValidationError) as e:
                logger.debug(f"[{self.name}] Skipping malformed item: {e}")
        return records

    def _to_record(self, item: dict[str, Any], kind: str) -> ContentRecord:
        slug = item.get("slug") or item.get("id")
        title = item.get("title") or item.get("name")
        if not slug or not title:
            raise ValueError("item is missing slug or title")

        item_kind = item.get("type")
        if item_kind == "tv":
            item_kind = "series"
        if item_kind not in CONTENT_TYPES:
            item_kind = kind

        poster = self._clean_url(item.get("poster_url") or item.get("poster"))
        episodes = []
        if item_kind == "series":
            for ep in item.get("episodes") or []:
                if not isinstance(ep, dict):
                    continue
                episodes.append(
                    EpisodeRecord(
                        season=int(ep["season"]),
                        episode=int(ep.get("episode") or ep.get("number")),
                        title=ep.get("title"),
                        overview=ep.get("overview"),
                        thumbnail=self._clean_url(ep.get("thumbnail")),
                    )
                )

        runtime = item.get("runtime")
        return ContentRecord(
            id=build_content_id(self.name, str(slug)),
            kind=item_kind,
            title=str(title).strip(),
            year=_parse_year(item.get("year") or item.get("release_date")),
            poster_url=poster,
            background_url=self._clean_url(item.get("backdrop_url")) or poster,
            rating=_parse_rating(item.get("imdb_rating") or item.get("rating")),
            description=item.get("plot") or item.get("description"),
            genres=_as_list(item.get("genres")),
            cast=_as_list(item.get("cast")),
            director=_as_list(item.get("director")),
            runtime=str(runtime) if runtime else None,
            episodes=episodes,
            source_name=self.name,
        )

    def _clean_url(self, url: str | None) -> str | None:
        if not url:
            return None
        if url.startswith("//"):
            return f"https:{url}"
        if url.startswith("/"):
            return urljoin(self.base_url, url)
        return url
