from typing import Protocol, runtime_checkable

from app.models.records import ContentRecord, StreamRecord


class AdapterError(Exception):
    """Raised by adapters when an upstream payload cannot be understood."""


@runtime_checkable
class SourceAdapter(Protocol):
    """
    Capability interface for sites that provide metadata and direct streams.

    Every call may fail with a transient error (network, timeout, parse); callers
    treat such failures as an empty contribution from this adapter.
    """

    name: str
    base_url: str | None

    async def search(self, query: str, kind: str) -> list[ContentRecord]: ...

    async def get_popular(self, kind: str, genre: str | None = None) -> list[ContentRecord]: ...

    async def get_detail(self, content_id: str, kind: str) -> ContentRecord | None: ...

    async def get_streams(self, content_id: str, kind: str) -> list[StreamRecord]: ...

    async def close(self) -> None: ...


@runtime_checkable
class TorrentAdapter(Protocol):
    """Capability interface for torrent indexes queried by free text."""

    name: str
    base_url: str | None

    async def search(self, query: str) -> list[StreamRecord]: ...

    async def close(self) -> None: ...
