"""Helpers for reading quality, language and torrent details out of release names."""

import re
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlparse

from app.core.constants import QUALITY_TIERS

# Checked in order; the first hit wins. Resolution groups map to a canonical label.
_QUALITY_PATTERNS: list[tuple[re.Pattern, str | None]] = [
    (re.compile(r"\b(2160p|4K|UHD)\b", re.IGNORECASE), "2160p"),
    (re.compile(r"\b(1080p|FHD)\b", re.IGNORECASE), "1080p"),
    (re.compile(r"\b(720p|HD)\b", re.IGNORECASE), "720p"),
    (re.compile(r"\b(480p|SD)\b", re.IGNORECASE), "480p"),
    (re.compile(r"\b(CAM|TS|TC|SCR|R5|DVDRip|BRRip|BluRay|WEBRip|WEB-DL|HDTV)\b", re.IGNORECASE), None),
]

_LANGUAGE_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\b(english|eng)\b", re.IGNORECASE), "en"),
    (re.compile(r"\b(spanish|esp)\b", re.IGNORECASE), "es"),
    (re.compile(r"\b(french|fra)\b", re.IGNORECASE), "fr"),
    (re.compile(r"\b(german|ger)\b", re.IGNORECASE), "de"),
    (re.compile(r"\b(italian|ita)\b", re.IGNORECASE), "it"),
    (re.compile(r"\b(portuguese|por)\b", re.IGNORECASE), "pt"),
    (re.compile(r"\b(russian|rus)\b", re.IGNORECASE), "ru"),
    (re.compile(r"\b(chinese|chi)\b", re.IGNORECASE), "zh"),
    (re.compile(r"\b(japanese|jap)\b", re.IGNORECASE), "ja"),
    (re.compile(r"\b(korean|kor)\b", re.IGNORECASE), "ko"),
]

_RESOLUTION = re.compile(r"^(\d{3,4})p?$", re.IGNORECASE)


def extract_quality(text: str | None) -> str | None:
    """Return a quality label such as ``1080p`` or a rip tag (``WEBRIP``), or None."""
    if not text:
        return None
    for pattern, canonical in _QUALITY_PATTERNS:
        match = pattern.search(text)
        if match:
            return canonical or match.group(1).upper()
    return None


def quality_tier(quality: str | None) -> int:
    """Ordinal rank of a quality label: 2160p > 1080p > 720p > 480p > anything else."""
    if not quality:
        return 0
    label = quality.strip().upper()
    if label in QUALITY_TIERS:
        return QUALITY_TIERS[label]
    match = _RESOLUTION.match(label)
    if match:
        return QUALITY_TIERS.get(f"{match.group(1)}P", 0)
    return 0


def extract_language(text: str | None) -> str | None:
    if not text:
        return None
    for pattern, code in _LANGUAGE_PATTERNS:
        if pattern.search(text):
            return code
    return None


def parse_int(text: str | None) -> int:
    """Lenient integer parsing for scraped counters (``"1,204"`` -> 1204, junk -> 0)."""
    if not text:
        return 0
    match = re.search(r"\d[\d,]*", str(text))
    if not match:
        return 0
    return int(match.group(0).replace(",", ""))


@dataclass(frozen=True)
class MagnetInfo:
    info_hash: str | None
    name: str | None = None
    trackers: list[str] = field(default_factory=list)


def parse_magnet(uri: str) -> MagnetInfo:
    """Parse a magnet URI. Raises ValueError when ``uri`` is not a magnet link."""
    if not uri or not uri.startswith("magnet:"):
        raise ValueError("Invalid magnet link")

    params = parse_qs(urlparse(uri).query)
    info_hash = None
    for xt in params.get("xt", []):
        if xt.lower().startswith("urn:btih:"):
            info_hash = xt[len("urn:btih:") :].lower()  # noqa
            break

    names = params.get("dn")
    return MagnetInfo(info_hash=info_hash, name=names[0] if names else None, trackers=params.get("tr", []))
