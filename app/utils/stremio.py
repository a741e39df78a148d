from app.models.records import ContentRecord, StreamRecord
from app.models.stremio import StremioBehaviorHints, StremioMeta, StremioStream, StremioVideo


def to_stremio_meta(record: ContentRecord, full: bool = False) -> StremioMeta:
    """Shape a record for Stremio. ``full`` adds the detail-only fields (cast, episodes...)."""
    year = str(record.year) if record.year is not None else None
    meta = StremioMeta(
        id=record.id,
        type=record.kind,
        name=record.title,
        poster=record.poster_url,
        posterShape="poster",
        background=record.background_url,
        description=record.description,
        releaseInfo=year,
        year=year,
        imdbRating=f"{record.rating:.1f}" if record.rating is not None else None,
        genres=record.genres or None,
    )
    if not full:
        return meta

    meta.cast = record.cast or None
    meta.director = record.director or None
    meta.runtime = record.runtime
    if record.episodes:
        meta.videos = [
            StremioVideo(
                id=f"{record.id}:{ep.season}:{ep.episode}",
                title=ep.title or f"Episode {ep.episode}",
                season=ep.season,
                episode=ep.episode,
                overview=ep.overview,
                thumbnail=ep.thumbnail,
            )
            for ep in record.episodes
        ]
    return meta


def _binge_group(stream: StreamRecord) -> str:
    source = stream.source_name.lower().replace(" ", "-")
    return f"streamhub-{source}-{(stream.quality or 'unknown').lower()}"


def to_stremio_stream(stream: StreamRecord) -> StremioStream:
    quality = stream.quality or "Unknown"
    hints = StremioBehaviorHints(bingeGroup=_binge_group(stream))

    if stream.source_kind == "torrent":
        title = f"{stream.source_name} - {quality} - S:{stream.seeder_count or 0} L:{stream.leecher_count or 0}"
        if stream.size_label:
            title += f" - {stream.size_label}"
        if stream.info_hash:
            return StremioStream(infoHash=stream.info_hash, name=stream.source_name, title=title, behaviorHints=hints)
        return StremioStream(url=stream.url, name=stream.source_name, title=title, behaviorHints=hints)

    return StremioStream(
        url=stream.url,
        name=stream.source_name,
        title=stream.title or f"{stream.source_name} - {quality}",
        behaviorHints=hints,
    )
