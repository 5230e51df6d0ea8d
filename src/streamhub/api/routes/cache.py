"""Stream cache administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from streamhub.api.dependencies import Admin
from streamhub.api.errors import http_error
from streamhub.api.schemas import CacheEntryResponse, CacheEntrySummary, CacheListResponse
from streamhub.core.exceptions import StreamhubError

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get(
    "",
    response_model=CacheListResponse,
    operation_id="listCache",
    summary="List cache entries",
)
async def list_cache(admin: Admin) -> CacheListResponse:
    return CacheListResponse(
        cache=[CacheEntrySummary.from_entry(entry) for entry in admin.list_cache()]
    )


@router.get(
    "/{external_id}",
    response_model=CacheEntryResponse,
    operation_id="getCacheEntry",
    summary="Inspect a cache entry",
)
async def get_cache_entry(external_id: str, admin: Admin) -> CacheEntryResponse:
    try:
        entry = await admin.inspect_cache(external_id)
    except StreamhubError as e:
        raise http_error(e) from e
    return CacheEntryResponse.from_entry(entry)


@router.delete(
    "/{external_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="deleteCacheEntry",
    summary="Delete a cache entry",
)
async def delete_cache_entry(external_id: str, admin: Admin) -> None:
    try:
        await admin.delete_cache_entry(external_id)
    except StreamhubError as e:
        raise http_error(e) from e


@router.delete(
    "/{external_id}/streams/{index}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="deleteCachedStream",
    summary="Delete one cached stream",
    description="Remove a stream by position. Removing the last stream removes the entry.",
)
async def delete_cached_stream(external_id: str, index: int, admin: Admin) -> None:
    try:
        await admin.delete_cached_stream(external_id, index)
    except StreamhubError as e:
        raise http_error(e) from e
