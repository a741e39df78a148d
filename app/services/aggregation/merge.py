"""
Cross-source deduplication.

Content records collide when normalized title, kind and year match. A
challenger replaces the incumbent wholesale when the first of these rules
holds: the incumbent lacks a poster and the challenger has one; the incumbent
lacks a rating and the challenger has one; the challenger's rating is higher;
the challenger's description is longer. When no rule holds the incumbent is
kept, so exact ties keep the first record seen. The set of surviving keys never
depends on input order; which duplicate wins may.
"""

import re
from collections.abc import Iterable

from app.models.records import ContentRecord, StreamRecord
from app.utils.release import quality_tier

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str | None) -> str:
    if not title:
        return ""
    cleaned = _PUNCTUATION.sub("", title.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


def dedup_key(record: ContentRecord) -> tuple[str, str, str]:
    title = normalize_title(record.title)
    if not title:
        # Untitled records never collapse into each other
        return (f"id:{record.id}", record.kind, "unknown")
    return (title, record.kind, str(record.year) if record.year is not None else "unknown")


def is_more_complete(challenger: ContentRecord, incumbent: ContentRecord) -> bool:
    """True when ``challenger`` should replace ``incumbent`` wholesale."""
    if not incumbent.poster_url and challenger.poster_url:
        return True
    if incumbent.rating is None and challenger.rating is not None:
        return True
    if incumbent.rating is not None and challenger.rating is not None and challenger.rating > incumbent.rating:
        return True
    return len(challenger.description or "") > len(incumbent.description or "")


def merge_records(lists: Iterable[Iterable[ContentRecord]]) -> list[ContentRecord]:
    """Collapse duplicates across adapter result lists.

    The output keeps the position where each title was first seen.
    """
    merged: dict[tuple[str, str, str], ContentRecord] = {}
    for records in lists:
        for record in records:
            key = dedup_key(record)
            incumbent = merged.get(key)
            if incumbent is None or is_more_complete(record, incumbent):
                merged[key] = record
    return list(merged.values())


def _stream_strength(stream: StreamRecord) -> tuple[int, int]:
    return (stream.seeder_count or 0, quality_tier(stream.quality))


def merge_streams(lists: Iterable[Iterable[StreamRecord]], min_seeders: int = 0) -> list[StreamRecord]:
    """Collapse the same stream reported by several adapters.

    Streams are identified by info hash (magnets) or URL. Torrent candidates with
    fewer than ``min_seeders`` seeders are dropped.
    """
    merged: dict[str, StreamRecord] = {}
    for streams in lists:
        for stream in streams:
            if stream.source_kind == "torrent" and (stream.seeder_count or 0) < min_seeders:
                continue
            incumbent = merged.get(stream.locator)
            if incumbent is None or _stream_strength(stream) > _stream_strength(incumbent):
                merged[stream.locator] = stream
    return list(merged.values())
