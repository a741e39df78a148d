import re
from dataclasses import dataclass
from urllib.parse import unquote

from app.core.constants import IMDB_ID_PREFIX, SCRAPED_ID_PREFIX

_EPISODE_SUFFIX = re.compile(r"^(?P<base>.+?):(?P<season>\d+):(?P<episode>\d+)$")


@dataclass(frozen=True)
class ContentRef:
    """A parsed content id. ``adapter`` is None for external (IMDb) ids."""

    raw: str
    adapter: str | None
    key: str
    season: int | None = None
    episode: int | None = None

    @property
    def is_external(self) -> bool:
        return self.adapter is None

    @property
    def base_id(self) -> str:
        """The id without any season/episode suffix."""
        if self.adapter is None:
            return self.key
        return build_content_id(self.adapter, self.key)


def build_content_id(adapter: str, key: str) -> str:
    """Encode the owning adapter and its local key into one opaque id."""
    return f"{SCRAPED_ID_PREFIX}:{adapter.lower()}:{key}"


def slugify_key(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9-]+", "", value.replace(" ", "-")).lower()


def parse_content_id(identifier: str) -> ContentRef | None:
    """Parse a content id into its routing parts.

    Accepts ``scraped:<adapter>:<key>`` and IMDb ids (``tt123``), both optionally
    followed by ``:<season>:<episode>`` as Stremio sends for episodes.
    Returns None for anything unroutable.
    """
    if not identifier:
        return None

    decoded = unquote(identifier).strip()
    season = episode = None
    match = _EPISODE_SUFFIX.match(decoded)
    if match:
        decoded = match.group("base")
        season = int(match.group("season"))
        episode = int(match.group("episode"))

    if decoded.startswith(IMDB_ID_PREFIX) and decoded[len(IMDB_ID_PREFIX) :].isdigit():  # noqa
        return ContentRef(raw=identifier, adapter=None, key=decoded, season=season, episode=episode)

    parts = decoded.split(":", 2)
    if len(parts) < 3 or parts[0] != SCRAPED_ID_PREFIX:
        return None
    adapter, key = parts[1].strip().lower(), parts[2].strip()
    if not adapter or not key:
        return None
    return ContentRef(raw=identifier, adapter=adapter, key=key, season=season, episode=episode)
