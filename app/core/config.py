from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.version import __version__

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production"] = "production"
    ADDON_ID: str = "com.streamhub.addon"
    ADDON_NAME: str = "StreamHub"
    HOST_NAME: str = "http://localhost:8000"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    # Fan-out
    MAX_CONCURRENT_REQUESTS: int = 5
    ADAPTER_TIMEOUT_SECONDS: float = 30.0
    RETRY_ATTEMPTS: int = 3
    RETRY_DELAY_SECONDS: float = 1.0
    USER_AGENT: str = DEFAULT_USER_AGENT

    # Cache
    CACHE_ENABLED: bool = True
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_KEY_PREFIX: str = "streamhub:"
    CACHE_MAX_ENTRIES: int = 10000
    CACHE_SWEEP_INTERVAL_SECONDS: int = 300
    CACHE_CATALOG_TTL: int = 3600  # 1 hour
    CACHE_META_TTL: int = 86400  # 24 hours
    CACHE_STREAMS_TTL: int = 1800  # 30 minutes

    # Direct/metadata sources, comma separated
    SCRAPERS_ENABLED: str = "cinemaos,hexawatch"
    SOURCE_ENDPOINTS: dict[str, str] = Field(
        default_factory=lambda: {
            "cinemaos": "https://cinemaos.live/api/v1",
            "hexawatch": "https://hexa.watch/api",
        }
    )

    # Torrent fallback
    TORRENTS_ENABLED: bool = True
    TORRENT_SOURCES: str = "eztv,ext,watchsomuch"
    TORRENT_MAX_RESULTS: int = 10
    TORRENT_MIN_SEEDERS: int = 1

    @field_validator("PORT")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return value

    @field_validator("ADAPTER_TIMEOUT_SECONDS")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value < 1:
            raise ValueError("Adapter timeout must be at least 1 second")
        return value

    @field_validator("MAX_CONCURRENT_REQUESTS")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Max concurrent requests must be at least 1")
        return value

    @field_validator("TORRENT_MAX_RESULTS", "TORRENT_MIN_SEEDERS", "CACHE_MAX_ENTRIES")
    @classmethod
    def _check_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Value must not be negative")
        return value

    @property
    def enabled_scrapers(self) -> list[str]:
        return _split_names(self.SCRAPERS_ENABLED)

    @property
    def enabled_torrent_sources(self) -> list[str]:
        return _split_names(self.TORRENT_SOURCES)


def _split_names(raw: str) -> list[str]:
    return [name.strip().lower() for name in raw.split(",") if name.strip()]


settings = Settings()

APP_VERSION = __version__
