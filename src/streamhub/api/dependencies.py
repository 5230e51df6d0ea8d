"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from streamhub.container import StreamhubContainer
from streamhub.services.admin import AdminService
from streamhub.services.resolution import StreamResolutionService


async def get_container(request: Request) -> StreamhubContainer:
    """Get the component container from app state."""
    return request.app.state.container


async def get_resolution_service(
    container: StreamhubContainer = Depends(get_container),
) -> StreamResolutionService:
    return container.resolution


async def get_admin_service(
    container: StreamhubContainer = Depends(get_container),
) -> AdminService:
    return container.admin


def client_address(request: Request) -> str | None:
    """Remote address of the caller, when the server exposes it."""
    return request.client.host if request.client else None


# Type aliases for cleaner dependency injection
Container = Annotated[StreamhubContainer, Depends(get_container)]
ResolveService = Annotated[StreamResolutionService, Depends(get_resolution_service)]
Admin = Annotated[AdminService, Depends(get_admin_service)]
