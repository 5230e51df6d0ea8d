"""Core enums and type definitions."""

from enum import StrEnum


class ContentType(StrEnum):
    """Content types a stream can be requested for."""

    MOVIE = "movie"
    SERIES = "series"
    TV = "tv"
    CHANNEL = "channel"
    OTHER = "other"

    @property
    def is_episodic(self) -> bool:
        """Whether metadata lookups should prefer TV results."""
        return self in (ContentType.SERIES, ContentType.TV)


class StreamSource(StrEnum):
    """Where the streams returned for a resolution came from."""

    CACHE = "cache"
    ADDONS = "addons"
    DEMO = "demo"
    EMPTY = "empty"


class ProviderCategory(StrEnum):
    """Categories a registered provider can be filed under."""

    STREAMS = "streams"
    CATALOG = "catalog"
    META = "meta"
    SUBTITLES = "subtitles"
    OTHER = "other"


class ProviderStatus(StrEnum):
    """Outcome of querying a single provider."""

    SUCCESS = "success"
    EMPTY = "empty"
    UNREACHABLE = "unreachable"
    MALFORMED = "malformed"
    ERROR = "error"


class EventType(StrEnum):
    """Event log entry types."""

    REQUEST = "request"
    CACHE_HIT = "cache-hit"
    CACHE_STORE = "cache-store"
    CACHE_REMOVE = "cache-remove"
    STREAM_REQUEST = "stream-request"
    STREAMS_MISS = "streams-miss"
    ADDON_STREAMS = "addon-streams"
    ADDON_ERROR = "addon-error"
    ADDON_ADD = "addon-add"
    ADDON_EXISTS = "addon-exists"
    ADDON_REMOVE = "addon-remove"
    CONFIG_UPDATE = "config-update"
