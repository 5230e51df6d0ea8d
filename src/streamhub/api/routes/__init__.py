"""API route modules."""

from streamhub.api.routes.cache import router as cache_router
from streamhub.api.routes.config import router as config_router
from streamhub.api.routes.health import router as health_router
from streamhub.api.routes.providers import router as providers_router
from streamhub.api.routes.streams import router as streams_router
from streamhub.api.routes.telemetry import router as telemetry_router

__all__ = [
    "cache_router",
    "config_router",
    "health_router",
    "providers_router",
    "streams_router",
    "telemetry_router",
]
