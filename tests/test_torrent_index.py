import httpx
import pytest

from app.services.torrents.index import TorrentIndexAdapter

HASH_A = "a" * 40
HASH_B = "b" * 40

TABLE_HTML = f"""
<html><body>
<table>
  <tr><th>Name</th><th>Size</th><th>Seeds</th><th>Peers</th></tr>
  <tr>
    <td><a href="/t/1">Dune.2021.1080p.BluRay.ENGLISH</a></td>
    <td><a href="magnet:?xt=urn:btih:{HASH_A.upper()}&dn=Dune">M</a></td>
    <td class="size">2.1 GB</td>
    <td class="seeders">1,204</td>
    <td class="leechers">87</td>
  </tr>
  <tr>
    <td><a href="/t/2">Dune.2021.720p.WEBRip</a></td>
    <td><a href="magnet:?xt=urn:btih:{HASH_A.upper()}&dn=Dune">M</a></td>
    <td class="seeders">5</td>
  </tr>
  <tr><td><a href="/t/3">No magnet here</a></td></tr>
</table>
<div class="result-item">
  <span class="title">Dune 2021 2160p</span>
  <a href="magnet:?xt=urn:btih:{HASH_B}">download</a>
  <span>Size 14.7 GiB S: 33 L: 4</span>
</div>
</body></html>
"""


def _adapter(transport=None):
    return TorrentIndexAdapter(
        "eztv", "EZTV", "https://eztv.test", "https://eztv.test/search", max_retries=1, transport=transport
    )


class TestParseResults:
    def test_reads_table_rows_and_result_blocks(self):
        streams = _adapter().parse_results(TABLE_HTML)

        assert len(streams) == 2
        first, second = streams

        assert first.title == "Dune.2021.1080p.BluRay.ENGLISH"
        assert first.info_hash == HASH_A
        assert first.quality == "1080p"
        assert first.language == "en"
        assert (first.seeder_count, first.leecher_count, first.size_label) == (1204, 87, "2.1 GB")
        assert first.source_kind == "torrent"
        assert first.source_name == "EZTV (Torrent)"

        assert second.title == "Dune 2021 2160p"
        assert second.quality == "2160p"
        assert second.info_hash == HASH_B
        assert (second.seeder_count, second.leecher_count, second.size_label) == (33, 4, "14.7 GiB")

    def test_rows_without_magnets_are_ignored(self):
        assert _adapter().parse_results("<table><tr><td><a href='/x'>x</a></td></tr></table>") == []

    def test_empty_page(self):
        assert _adapter().parse_results("") == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_queries_search_url(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, text=TABLE_HTML)

        adapter = _adapter(httpx.MockTransport(handler))
        streams = await adapter.search("Dune 2021")
        await adapter.close()

        assert seen[0].path == "/search"
        assert seen[0].params["q"] == "Dune 2021"
        assert len(streams) == 2

    @pytest.mark.asyncio
    async def test_http_errors_propagate(self):
        adapter = _adapter(httpx.MockTransport(lambda request: httpx.Response(503)))

        with pytest.raises(httpx.HTTPStatusError):
            await adapter.search("Dune")
        await adapter.close()
