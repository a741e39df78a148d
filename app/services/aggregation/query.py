import re
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from app.models.records import ContentRecord
from app.services.cinemeta_service import CinemetaService
from app.shared.ids import parse_content_id

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")
_YEAR = re.compile(r"(\d{4})")

MetaLookup = Callable[[str, str], Awaitable[ContentRecord | None]]


def build_query(title: str, year: int | None = None, season: int | None = None, episode: int | None = None) -> str:
    """Torrent search string for a title: ``Title 2020`` or ``Title S01E02``."""
    clean = _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", title)).strip()
    if season is not None and episode is not None:
        return f"{clean} S{season:02d}E{episode:02d}"
    if year:
        return f"{clean} {year}"
    return clean


def _year_from_cinemeta(meta: dict[str, Any]) -> int | None:
    for field in ("year", "releaseInfo"):
        match = _YEAR.search(str(meta.get(field) or ""))
        if match:
            return int(match.group(1))
    return None


class TorrentQueryResolver:
    """
    Turns a content id into a torrent search string.

    IMDb ids are looked up on Cinemeta. Adapter ids go through ``meta_lookup``,
    which is expected to be cache-fronted so an already fetched detail record is
    reused. Unroutable ids, or ids whose title cannot be found, resolve to None.
    """

    def __init__(self, meta_lookup: MetaLookup, cinemeta: CinemetaService | None = None):
        self.meta_lookup = meta_lookup
        self.cinemeta = cinemeta

    async def resolve(self, content_id: str, kind: str) -> str | None:
        ref = parse_content_id(content_id)
        if ref is None:
            return None

        if ref.is_external:
            if self.cinemeta is None:
                return None
            meta = await self.cinemeta.get_metadata(ref.key, kind)
            title, year = meta.get("name"), _year_from_cinemeta(meta)
        else:
            record = await self.meta_lookup(ref.base_id, kind)
            if record is None:
                return None
            title, year = record.title, record.year

        if not title:
            logger.debug(f"No title found to build a torrent query for {content_id}")
            return None

        query = build_query(title, year, ref.season, ref.episode)
        logger.debug(f"Torrent query for {content_id}: {query!r}")
        return query
