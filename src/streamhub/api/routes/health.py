"""Health check endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Request

from streamhub import __version__
from streamhub.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
    description="Check the health status of the API and its stores.",
)
async def health_check(request: Request) -> HealthResponse:
    """Check API health status."""
    services: dict[str, Literal["up", "down", "unknown"]] = {}
    overall_status: Literal["healthy", "degraded", "unhealthy"] = "healthy"

    container = getattr(request.app.state, "container", None)
    if container is None:
        return HealthResponse(status="unhealthy", version=__version__, services={"storage": "down"})

    if container.loaded:
        services["storage"] = "up"
    else:
        services["storage"] = "down"
        overall_status = "unhealthy"

    services["providers"] = "up" if len(container.registry) else "unknown"

    if container.enricher.available:
        services["metadata"] = "up"
    else:
        services["metadata"] = "unknown"
        if overall_status == "healthy":
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )


@router.get(
    "/ready",
    operation_id="getReady",
    summary="Readiness check",
    description="Check if the API is ready to serve traffic.",
)
async def readiness_check(request: Request) -> dict[str, bool]:
    """Check if API is ready to serve traffic."""
    container = getattr(request.app.state, "container", None)
    return {"ready": container is not None and container.loaded}
