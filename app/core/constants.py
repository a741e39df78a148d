"""
Core constants used across the application. Keep these simple and documented.
"""

CONTENT_TYPES: tuple[str, ...] = ("movie", "series")

# Content ids: scraped:<adapter>:<adapter-local key>
SCRAPED_ID_PREFIX: str = "scraped"
IMDB_ID_PREFIX: str = "tt"

# Cache keys, one namespace per request kind
CATALOG_KEY: str = "catalog:{kind}:{search}:{genre}"
META_KEY: str = "meta:{kind}:{id}"
STREAMS_KEY: str = "streams:{kind}:{id}"

# Ordinal quality tiers, higher is better. Anything else ranks as 0.
QUALITY_TIERS: dict[str, int] = {
    "2160P": 4,
    "4K": 4,
    "UHD": 4,
    "1080P": 3,
    "FHD": 3,
    "720P": 2,
    "HD": 2,
    "480P": 1,
    "SD": 1,
}

# name -> (display name, base url, search url)
TORRENT_INDEXES: dict[str, tuple[str, str, str]] = {
    "eztv": ("EZTV", "https://eztvx.to", "https://eztvx.to/search"),
    "ext": ("ExtraTorrent", "https://ext.to", "https://ext.to/search"),
    "watchsomuch": ("WatchSoMuch", "https://watchsomuch.to", "https://watchsomuch.to/search"),
}

CINEMETA_BASE_URL: str = "https://v3-cinemeta.strem.io"
