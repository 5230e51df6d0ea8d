"""Stream and metadata resolution endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from streamhub.api.dependencies import ResolveService, client_address

router = APIRouter(tags=["streams"])


@router.get(
    "/stream/{content_type}/{content_id}.json",
    operation_id="getStreams",
    summary="Resolve streams",
    description="Resolve playable streams for a content key from cache, providers or fallback.",
)
async def get_streams(
    content_type: str,
    content_id: str,
    request: Request,
    resolution_service: ResolveService,
) -> dict[str, Any]:
    """Never fails; the worst case is an empty stream list."""
    resolution = await resolution_service.resolve(
        content_type,
        content_id,
        client_address=client_address(request),
    )
    return resolution.to_payload()


@router.get(
    "/meta/{content_type}/{content_id}.json",
    operation_id="getMeta",
    summary="Resolve metadata",
    description="Metadata for a content key, or an Unknown placeholder.",
)
async def get_meta(
    content_type: str,
    content_id: str,
    resolution_service: ResolveService,
) -> dict[str, Any]:
    return {"meta": await resolution_service.describe(content_type, content_id)}
