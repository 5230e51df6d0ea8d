"""Response schemas for API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from streamhub.api.schemas.base import APIBaseSchema
from streamhub.core.models import CacheEntry, RequestStatsEntry
from streamhub.core.types import ProviderCategory


# Health
class HealthResponse(APIBaseSchema):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    services: dict[str, Literal["up", "down", "unknown"]] = Field(default_factory=dict)


# Metadata
class MetaSummaryResponse(APIBaseSchema):
    """Title and poster attached to cache entries and stats."""

    title: str = ""
    poster: str = ""


# Providers
class ProviderResponse(APIBaseSchema):
    """A registered provider."""

    id: str
    name: str
    manifest_url: str
    category: ProviderCategory


class ProviderListResponse(APIBaseSchema):
    providers: list[ProviderResponse]


class AddProviderResponse(APIBaseSchema):
    provider: ProviderResponse
    created: bool


# Cache
class CacheEntrySummary(APIBaseSchema):
    """Cache listing row."""

    key: str
    id: str
    type: str
    content_id: str
    streams_count: int
    updated_at: datetime
    meta: MetaSummaryResponse | None = None

    @classmethod
    def from_entry(cls, entry: CacheEntry) -> "CacheEntrySummary":
        return cls(
            key=entry.key.cache_key,
            id=entry.external_id,
            type=entry.type,
            content_id=entry.content_id,
            streams_count=len(entry.streams),
            updated_at=entry.updated_at,
            meta=MetaSummaryResponse.model_validate(entry.meta) if entry.meta else None,
        )


class CacheListResponse(APIBaseSchema):
    cache: list[CacheEntrySummary]


class CacheEntryResponse(APIBaseSchema):
    """A cache entry with its full stream list."""

    id: str
    type: str
    content_id: str
    updated_at: datetime
    meta: MetaSummaryResponse | None = None
    streams: list[dict[str, Any]]

    @classmethod
    def from_entry(cls, entry: CacheEntry) -> "CacheEntryResponse":
        return cls(
            id=entry.external_id,
            type=entry.type,
            content_id=entry.content_id,
            updated_at=entry.updated_at,
            meta=MetaSummaryResponse.model_validate(entry.meta) if entry.meta else None,
            streams=[stream.to_payload() for stream in entry.streams],
        )


# Telemetry
class RecentItemResponse(APIBaseSchema):
    """Per-key request counters."""

    external_id: str
    type: str
    content_id: str
    count: int
    last_requested_at: datetime | None = None
    source: str
    meta: MetaSummaryResponse | None = None

    @classmethod
    def from_entry(cls, entry: RequestStatsEntry) -> "RecentItemResponse":
        return cls(
            external_id=entry.external_id,
            type=entry.type,
            content_id=entry.content_id,
            count=entry.count,
            last_requested_at=entry.last_requested_at,
            source=entry.source,
            meta=MetaSummaryResponse.model_validate(entry.meta) if entry.meta else None,
        )


class StatsSummaryResponse(APIBaseSchema):
    unique_addresses: int
    total_requests: int
    total_errors: int
    avg_response_time: int


class ErrorEventResponse(APIBaseSchema):
    timestamp: datetime
    address: str | None = None
    method: str
    path: str
    status: int


class RecentResponse(APIBaseSchema):
    """Recent requests, aggregate counters and the latest errors."""

    recent: list[RecentItemResponse]
    summary: StatsSummaryResponse
    errors: list[ErrorEventResponse]


class LogEntryResponse(APIBaseSchema):
    id: str
    type: str
    message: str
    meta: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime


class LogsResponse(APIBaseSchema):
    logs: list[LogEntryResponse]


# Credentials
class CredentialsSchema(APIBaseSchema):
    tmdb_api_key: str = ""
    trakt_client_id: str = ""
    trakt_client_secret: str = ""
    trakt_access_token: str = ""
    opensubtitles_api_key: str = ""


class CredentialsResponse(APIBaseSchema):
    config: CredentialsSchema
