"""Request statistics and event log endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from streamhub.api.dependencies import Admin
from streamhub.api.schemas import (
    ErrorEventResponse,
    LogEntryResponse,
    LogsResponse,
    RecentItemResponse,
    RecentResponse,
    StatsSummaryResponse,
)

router = APIRouter(tags=["telemetry"])


@router.get(
    "/recent",
    response_model=RecentResponse,
    operation_id="getRecent",
    summary="Recent requests",
    description="Recently requested keys, aggregate counters and the latest 50 errors.",
)
async def get_recent(
    admin: Admin,
    limit: int = Query(default=100, ge=1, description="Maximum items (capped at 300)"),
) -> RecentResponse:
    return RecentResponse(
        recent=[RecentItemResponse.from_entry(item) for item in admin.recent(limit)],
        summary=StatsSummaryResponse.model_validate(admin.stats_summary()),
        errors=[ErrorEventResponse.model_validate(e) for e in admin.recent_errors()],
    )


@router.delete(
    "/recent",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="clearRecent",
    summary="Reset request statistics",
)
async def clear_recent(admin: Admin) -> None:
    await admin.clear_recent()


@router.get(
    "/logs",
    response_model=LogsResponse,
    operation_id="getLogs",
    summary="Event log",
    description="Most recent events first.",
)
async def get_logs(
    admin: Admin,
    limit: int = Query(default=200, ge=1, le=500),
) -> LogsResponse:
    return LogsResponse(logs=[LogEntryResponse.model_validate(entry) for entry in admin.logs(limit)])


@router.delete(
    "/logs",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="clearLogs",
    summary="Clear the event log",
)
async def clear_logs(admin: Admin) -> None:
    await admin.clear_logs()
