from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ContentKind = Literal["movie", "series"]
SourceKind = Literal["direct", "torrent"]


class EpisodeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    season: int
    episode: int
    title: str | None = None
    overview: str | None = None
    thumbnail: str | None = None


class ContentRecord(BaseModel):
    """One discoverable title as returned by a source adapter."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: ContentKind
    title: str
    year: int | None = None
    poster_url: str | None = None
    background_url: str | None = None
    rating: float | None = None
    description: str | None = None
    genres: list[str] = Field(default_factory=list)
    cast: list[str] = Field(default_factory=list)
    director: list[str] = Field(default_factory=list)
    runtime: str | None = None
    episodes: list[EpisodeRecord] = Field(default_factory=list)
    source_name: str | None = None


class StreamRecord(BaseModel):
    """One playable candidate: a direct URL or a magnet locator."""

    model_config = ConfigDict(frozen=True)

    url: str
    quality: str | None = None
    language: str | None = None
    source_name: str
    source_kind: SourceKind = "direct"
    title: str | None = None
    seeder_count: int | None = None
    leecher_count: int | None = None
    size_label: str | None = None
    info_hash: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_peer_counts(cls, data: Any) -> Any:
        # Torrent candidates always carry non-negative peer counts.
        if isinstance(data, dict) and data.get("source_kind") == "torrent":
            data = dict(data)
            for field in ("seeder_count", "leecher_count"):
                value = data.get(field)
                data[field] = max(int(value), 0) if value is not None else 0
        return data

    @property
    def locator(self) -> str:
        """Identity used to collapse the same stream reported by several adapters."""
        if self.info_hash:
            return f"btih:{self.info_hash.lower()}"
        return self.url


class AdapterDescriptor(BaseModel):
    name: str
    enabled: bool = True
    base_url: str | None = None
    kind: Literal["source", "torrent"] = "source"
