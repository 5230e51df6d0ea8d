"""Service layer for orchestrating business logic."""

from streamhub.services.admin import AdminService
from streamhub.services.resolution import StreamResolution, StreamResolutionService

__all__ = [
    "AdminService",
    "StreamResolution",
    "StreamResolutionService",
]
