"""API schema definitions."""

from streamhub.api.schemas.base import APIBaseSchema, ErrorDetail
from streamhub.api.schemas.requests import AddProviderRequest, UpdateCredentialsRequest
from streamhub.api.schemas.responses import (
    AddProviderResponse,
    CacheEntryResponse,
    CacheEntrySummary,
    CacheListResponse,
    CredentialsResponse,
    CredentialsSchema,
    ErrorEventResponse,
    HealthResponse,
    LogEntryResponse,
    LogsResponse,
    MetaSummaryResponse,
    ProviderListResponse,
    ProviderResponse,
    RecentItemResponse,
    RecentResponse,
    StatsSummaryResponse,
)

__all__ = [
    # Base
    "APIBaseSchema",
    "ErrorDetail",
    # Requests
    "AddProviderRequest",
    "UpdateCredentialsRequest",
    # Responses
    "AddProviderResponse",
    "CacheEntryResponse",
    "CacheEntrySummary",
    "CacheListResponse",
    "CredentialsResponse",
    "CredentialsSchema",
    "ErrorEventResponse",
    "HealthResponse",
    "LogEntryResponse",
    "LogsResponse",
    "MetaSummaryResponse",
    "ProviderListResponse",
    "ProviderResponse",
    "RecentItemResponse",
    "RecentResponse",
    "StatsSummaryResponse",
]
