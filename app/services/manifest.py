from typing import Any

from app.core.config import Settings
from app.core.constants import CONTENT_TYPES, IMDB_ID_PREFIX, SCRAPED_ID_PREFIX
from app.core.version import __version__

CATALOG_NAMES = {"movie": "Movies", "series": "Series"}


class ManifestService:
    """Service for generating the Stremio manifest."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def catalog_id(self, kind: str) -> str:
        return f"{self.settings.ADDON_NAME.lower().replace(' ', '-')}-{kind}"

    def get_catalogs(self) -> list[dict[str, Any]]:
        return [
            {
                "type": kind,
                "id": self.catalog_id(kind),
                "name": f"{self.settings.ADDON_NAME} {CATALOG_NAMES[kind]}",
                "extra": [
                    {"name": "search", "isRequired": False},
                    {"name": "genre", "isRequired": False},
                    {"name": "skip", "isRequired": False},
                ],
            }
            for kind in CONTENT_TYPES
        ]

    def get_base_manifest(self) -> dict[str, Any]:
        return {
            "id": self.settings.ADDON_ID,
            "version": __version__,
            "name": self.settings.ADDON_NAME,
            "description": "Movies and series aggregated from streaming sites, with torrent fallback.",
            "resources": ["catalog", "meta", "stream"],
            "types": list(CONTENT_TYPES),
            "idPrefixes": [f"{SCRAPED_ID_PREFIX}:", IMDB_ID_PREFIX],
            "catalogs": self.get_catalogs(),
            "behaviorHints": {"configurable": False, "configurationRequired": False},
        }
