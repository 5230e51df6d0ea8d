"""Streamhub - stream resolution and aggregation cache."""

__version__ = "0.1.0"

from streamhub.client import StreamhubClient, resolve_streams  # noqa: E402
from streamhub.core.identifiers import ContentKey, normalize  # noqa: E402
from streamhub.core.models import (  # noqa: E402
    CacheEntry,
    MetaSummary,
    ProviderDescriptor,
    StreamDescriptor,
)
from streamhub.core.types import ContentType, ProviderCategory, StreamSource  # noqa: E402
from streamhub.services.resolution import StreamResolution  # noqa: E402

__all__ = [
    # Client
    "StreamhubClient",
    "resolve_streams",
    # Types
    "ContentType",
    "ProviderCategory",
    "StreamSource",
    # Identifiers
    "ContentKey",
    "normalize",
    # Models
    "CacheEntry",
    "MetaSummary",
    "ProviderDescriptor",
    "StreamDescriptor",
    # Results
    "StreamResolution",
    # Version
    "__version__",
]
