from app.models.records import ContentRecord, StreamRecord
from app.utils.release import quality_tier


def content_sort_key(record: ContentRecord) -> tuple:
    # Missing ratings and years sort after present ones
    return (
        record.rating is None,
        -(record.rating or 0.0),
        record.year is None,
        -(record.year or 0),
    )


def stream_sort_key(stream: StreamRecord) -> tuple:
    # Direct candidates carry no seeder counts and rank by quality alone,
    # ahead of torrent candidates when a list mixes both.
    if stream.source_kind == "torrent":
        return (1, -(stream.seeder_count or 0), -quality_tier(stream.quality))
    return (0, 0, -quality_tier(stream.quality))


def rank_content(records: list[ContentRecord]) -> list[ContentRecord]:
    """Rating descending, then year descending. Stable, so equal keys keep input order."""
    return sorted(records, key=content_sort_key)


def rank_streams(streams: list[StreamRecord], limit: int | None = None) -> list[StreamRecord]:
    """Seeders descending (torrents), then quality tier descending. Stable."""
    ranked = sorted(streams, key=stream_sort_key)
    if limit is not None:
        return ranked[:limit]
    return ranked
