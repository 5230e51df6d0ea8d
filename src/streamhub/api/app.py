"""FastAPI application factory."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from streamhub import __version__
from streamhub.api.dependencies import client_address
from streamhub.api.routes import (
    cache_router,
    config_router,
    health_router,
    providers_router,
    streams_router,
    telemetry_router,
)
from streamhub.config import StreamhubSettings, configure_logging, get_settings
from streamhub.container import StreamhubContainer
from streamhub.core.types import EventType

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Loads every store from disk on startup and releases HTTP clients on
    shutdown.
    """
    settings: StreamhubSettings = app.state.settings

    logger.info(f"Loading stores from {settings.data_dir}...")
    app.state.container = await StreamhubContainer.create(settings)
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    await app.state.container.close()
    logger.info("Application shutdown complete")


async def record_request(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log every incoming request and count failed responses."""
    container: StreamhubContainer | None = getattr(request.app.state, "container", None)
    if container is None:
        return await call_next(request)

    start = time.monotonic()
    await container.events.append(
        EventType.REQUEST,
        "Incoming request",
        {"method": request.method, "url": str(request.url.path)},
    )
    try:
        response = await call_next(request)
    except Exception:
        await container.stats.record_error(
            client_address(request), request.method, request.url.path, 500
        )
        raise

    if response.status_code >= 400:
        await container.stats.record_error(
            client_address(request),
            request.method,
            request.url.path,
            response.status_code,
        )
    logger.debug(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {(time.monotonic() - start) * 1000:.0f}ms"
    )
    return response


def create_app(
    *,
    settings: StreamhubSettings | None = None,
    title: str = "Streamhub API",
    description: str = "Stream resolution and aggregation cache",
    version: str = __version__,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (loaded from the environment if omitted)
        title: API title for OpenAPI docs
        description: API description for OpenAPI docs
        version: API version

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.settings = settings

    app.middleware("http")(record_request)

    # Configure CORS; players call the stream routes cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(streams_router)
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(providers_router, prefix="/api/v1")
    app.include_router(cache_router, prefix="/api/v1")
    app.include_router(telemetry_router, prefix="/api/v1")
    app.include_router(config_router, prefix="/api/v1")

    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
