import re

import httpx
from bs4 import BeautifulSoup, Tag
from loguru import logger

from app.core.base_client import BaseClient
from app.models.records import StreamRecord
from app.utils.release import extract_language, extract_quality, parse_int, parse_magnet

_ROW_SELECTOR = "table tr, .torrent-item, .result-item"
_SIZE = re.compile(r"([0-9.]+\s*[KMGT]i?B)", re.IGNORECASE)
_SEEDERS = re.compile(r"S:\s*(\d+)", re.IGNORECASE)
_LEECHERS = re.compile(r"L:\s*(\d+)", re.IGNORECASE)


def _text_of(row: Tag, selector: str) -> str:
    node = row.select_one(selector)
    return node.get_text(strip=True) if node else ""


class TorrentIndexAdapter:
    """
    Torrent index queried with ``{search_url}?q=<query>``.

    Result rows are read generically: any table row or ``.torrent-item`` /
    ``.result-item`` block holding a magnet link becomes one candidate.
    """

    def __init__(
        self,
        name: str,
        display_name: str,
        base_url: str,
        search_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name.lower()
        self.display_name = display_name
        self.base_url = base_url
        self.search_url = search_url
        headers = {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        if user_agent:
            headers["User-Agent"] = user_agent
        self.client = BaseClient(
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            headers=headers,
            transport=transport,
        )

    @property
    def source_label(self) -> str:
        return f"{self.display_name} (Torrent)"

    async def close(self) -> None:
        await self.client.close()

    async def search(self, query: str) -> list[StreamRecord]:
        logger.debug(f"[{self.display_name}] Searching for: {query}")
        html = await self.client.get_text(self.search_url, params={"q": query})
        streams = self.parse_results(html)
        logger.debug(f"[{self.display_name}] Found {len(streams)} results")
        return streams

    def parse_results(self, html: str) -> list[StreamRecord]:
        soup = BeautifulSoup(html, "html.parser")
        streams: list[StreamRecord] = []
        seen: set[str] = set()

        for row in soup.select(_ROW_SELECTOR):
            magnet_node = row.select_one('a[href^="magnet:"]')
            if magnet_node is None:
                continue
            magnet = magnet_node.get("href", "")
            if magnet in seen:
                continue

            title = ""
            for link in row.find_all("a"):
                if not link.get("href", "").startswith("magnet:") and link.get_text(strip=True):
                    title = link.get_text(strip=True)
                    break
            title = title or _text_of(row, ".title, .name")
            if not title:
                continue

            row_text = row.get_text(" ", strip=True)
            size = _text_of(row, ".size, .filesize")
            if not size:
                match = _SIZE.search(row_text)
                size = match.group(1) if match else ""

            seeders_text = _text_of(row, ".seeders, .seeds")
            if not seeders_text:
                match = _SEEDERS.search(row_text)
                seeders_text = match.group(1) if match else "0"
            leechers_text = _text_of(row, ".leechers, .peers")
            if not leechers_text:
                match = _LEECHERS.search(row_text)
                leechers_text = match.group(1) if match else "0"

            seen.add(magnet)
            streams.append(self._to_stream(title, magnet, size, parse_int(seeders_text), parse_int(leechers_text)))

        return streams

    def _to_stream(self, title: str, magnet: str, size: str, seeders: int, leechers: int) -> StreamRecord:
        info_hash = None
        try:
            info_hash = parse_magnet(magnet).info_hash
        except ValueError as e:
            logger.debug(f"[{self.display_name}] Could not parse magnet link: {e}")

        return StreamRecord(
            url=magnet,
            quality=extract_quality(title),
            language=extract_language(title),
            source_name=self.source_label,
            source_kind="torrent",
            title=title,
            seeder_count=seeders,
            leecher_count=leechers,
            size_label=size or None,
            info_hash=info_hash,
        )
