"""Credential configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from streamhub.api.dependencies import Admin
from streamhub.api.schemas import CredentialsResponse, CredentialsSchema, UpdateCredentialsRequest

router = APIRouter(prefix="/config", tags=["config"])


@router.get(
    "",
    response_model=CredentialsResponse,
    operation_id="getConfig",
    summary="Read credentials",
)
async def get_config(admin: Admin) -> CredentialsResponse:
    return CredentialsResponse(config=CredentialsSchema.model_validate(admin.get_credentials()))


@router.post(
    "",
    response_model=CredentialsResponse,
    operation_id="updateConfig",
    summary="Update credentials",
    description="Store third-party credentials. Omitted fields are left unchanged.",
)
async def update_config(body: UpdateCredentialsRequest, admin: Admin) -> CredentialsResponse:
    credentials = await admin.update_credentials(**body.model_dump(exclude_unset=True))
    return CredentialsResponse(config=CredentialsSchema.model_validate(credentials))
