"""Core types, models, and utilities."""

from .exceptions import (
    MetadataUnavailableError,
    NotFoundError,
    PersistenceWriteError,
    ProviderError,
    ProviderMalformedError,
    ProviderUnreachableError,
    StreamhubError,
    ValidationError,
)
from .identifiers import (
    ContentKey,
    ManifestUrl,
    MetaReference,
    derive_external_id,
    normalize,
)
from .models import (
    CacheEntry,
    Credentials,
    ErrorEvent,
    LogEntry,
    MetaDetail,
    MetaSummary,
    ProviderDescriptor,
    RequestStatsEntry,
    StatsDocument,
    StreamDescriptor,
)
from .types import (
    ContentType,
    EventType,
    ProviderCategory,
    ProviderStatus,
    StreamSource,
)

__all__ = [
    # Types
    "ContentType",
    "EventType",
    "ProviderCategory",
    "ProviderStatus",
    "StreamSource",
    # Identifiers
    "ContentKey",
    "ManifestUrl",
    "MetaReference",
    "derive_external_id",
    "normalize",
    # Models
    "CacheEntry",
    "Credentials",
    "ErrorEvent",
    "LogEntry",
    "MetaDetail",
    "MetaSummary",
    "ProviderDescriptor",
    "RequestStatsEntry",
    "StatsDocument",
    "StreamDescriptor",
    # Exceptions
    "MetadataUnavailableError",
    "NotFoundError",
    "PersistenceWriteError",
    "ProviderError",
    "ProviderMalformedError",
    "ProviderUnreachableError",
    "StreamhubError",
    "ValidationError",
]
