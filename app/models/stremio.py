from pydantic import BaseModel, Field


class StremioVideo(BaseModel):
    """Episode entry of a series meta."""

    id: str
    title: str
    season: int
    episode: int
    overview: str | None = None
    thumbnail: str | None = None


class StremioMeta(BaseModel):
    """Stremio metadata item format."""

    id: str
    type: str
    name: str
    poster: str | None = None
    posterShape: str | None = None
    background: str | None = None
    description: str | None = None
    releaseInfo: str | None = None
    year: str | None = None
    imdbRating: str | None = None
    genres: list[str] | None = None
    cast: list[str] | None = None
    director: list[str] | None = None
    runtime: str | None = None
    videos: list[StremioVideo] | None = None


class StremioBehaviorHints(BaseModel):
    notWebReady: bool = False
    bingeGroup: str | None = None


class StremioStream(BaseModel):
    """Stremio stream object format."""

    url: str | None = None
    infoHash: str | None = None
    name: str | None = None
    title: str | None = None
    behaviorHints: StremioBehaviorHints = Field(default_factory=StremioBehaviorHints)


class StremioCatalogResponse(BaseModel):
    """Stremio catalog response format."""

    metas: list[StremioMeta]


class StremioMetaResponse(BaseModel):
    meta: StremioMeta | None = None


class StremioStreamResponse(BaseModel):
    streams: list[StremioStream]
