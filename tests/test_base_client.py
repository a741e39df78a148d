import httpx
import pytest

from app.core.base_client import BaseClient


def _client(handler, max_retries=3):
    return BaseClient(
        base_url="https://api.test",
        max_retries=max_retries,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_retries_until_success():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)

    assert await client.get("/items", params={"q": "dune"}) == {"ok": True}
    assert len(attempts) == 3
    assert all(dict(r.url.params) == {"q": "dune"} for r in attempts)
    await client.close()


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(500)

    client = _client(handler, max_retries=2)

    with pytest.raises(httpx.HTTPStatusError):
        await client.get_text("/page")
    assert len(attempts) == 2
    await client.close()


@pytest.mark.asyncio
async def test_get_text_returns_body():
    client = _client(lambda r: httpx.Response(200, text="<html></html>"))

    assert await client.get_text("/page") == "<html></html>"
    await client.close()
