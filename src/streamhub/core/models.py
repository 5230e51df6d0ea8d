"""Domain models for streams, cache entries, providers and telemetry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .identifiers import ContentKey
from .types import ProviderCategory


def to_camel_case(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """
    Base for everything persisted to a JSON document.

    Attributes are snake_case in Python and camelCase on disk.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict using on-disk field names."""
        return self.model_dump(mode="json", by_alias=True)


class StreamDescriptor(BaseModel):
    """
    A playable source entry as returned by a provider.

    Only a title and one locator are required; every other field a provider
    sends is kept verbatim so it can be handed back to clients unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        extra="allow",
    )

    title: str = Field(..., min_length=1, description="Human-readable label")
    url: str | None = Field(default=None, description="Direct media URL")
    yt_id: str | None = Field(default=None, description="YouTube video id")
    info_hash: str | None = Field(default=None, description="BitTorrent info hash")
    file_idx: int | None = Field(default=None, description="File index within a torrent")
    external_url: str | None = Field(default=None, description="URL opened outside the player")
    name: str | None = Field(default=None, description="Provider-side short name")
    description: str | None = Field(default=None, description="Secondary label")
    behavior_hints: dict[str, Any] | None = Field(default=None)

    LOCATOR_FIELDS: ClassVar[tuple[str, ...]] = ("url", "yt_id", "info_hash", "external_url")

    @model_validator(mode="before")
    @classmethod
    def fill_title(cls, data: Any) -> Any:
        """Fall back to ``name`` or ``description`` when ``title`` is missing."""
        if isinstance(data, dict) and not data.get("title"):
            label = data.get("name") or data.get("description")
            if isinstance(label, str) and label.strip():
                data = {**data, "title": label.strip()}
        return data

    @model_validator(mode="after")
    def require_locator(self) -> StreamDescriptor:
        if not any(getattr(self, field) for field in self.LOCATOR_FIELDS):
            raise ValueError("Stream has no locator (url, ytId, infoHash, externalUrl)")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Wire representation, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MetaSummary(DocumentModel):
    """Title and poster attached to cache entries and stats."""

    title: str = ""
    poster: str = ""


class MetaDetail(DocumentModel):
    """Full metadata descriptor for meta lookups."""

    id: str
    type: str
    name: str = ""
    poster: str | None = None
    background: str | None = None
    description: str = ""
    release_info: str = ""
    runtime: int | None = None
    imdb_rating: float | None = None


class CacheEntry(DocumentModel):
    """Cached streams for one content key. Never stored with an empty list."""

    external_id: str
    type: str
    content_id: str
    streams: list[StreamDescriptor] = Field(..., min_length=1)
    updated_at: datetime = Field(default_factory=utcnow)
    meta: MetaSummary | None = None

    @property
    def key(self) -> ContentKey:
        return ContentKey(type=self.type, id=self.content_id)


class ProviderDescriptor(DocumentModel):
    """A registered upstream provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    manifest_url: str
    category: ProviderCategory = ProviderCategory.STREAMS

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Any:
        """Unknown or missing categories are filed under ``streams``."""
        try:
            return ProviderCategory(v)
        except ValueError:
            return ProviderCategory.STREAMS


class RequestStatsEntry(DocumentModel):
    """Per-key request counters."""

    external_id: str
    type: str
    content_id: str
    count: int = 0
    last_requested_at: datetime | None = None
    source: str = ""
    meta: MetaSummary | None = None


class ErrorEvent(DocumentModel):
    """A failed HTTP request kept in the stats error ring buffer."""

    timestamp: datetime = Field(default_factory=utcnow)
    address: str | None = None
    method: str
    path: str
    status: int


class StatsDocument(DocumentModel):
    """Whole stats store as persisted."""

    items: dict[str, RequestStatsEntry] = Field(default_factory=dict)
    address_counts: dict[str, int] = Field(default_factory=dict)
    total_requests: int = 0
    total_errors: int = 0
    total_response_time: float = 0.0
    response_samples: int = 0
    errors: list[ErrorEvent] = Field(default_factory=list)


class LogEntry(DocumentModel):
    """One event log record."""

    id: str
    type: str
    message: str
    meta: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


class Credentials(DocumentModel):
    """Third-party credentials editable from the administrative surface."""

    tmdb_api_key: str = ""
    trakt_client_id: str = ""
    trakt_client_secret: str = ""
    trakt_access_token: str = ""
    opensubtitles_api_key: str = ""
