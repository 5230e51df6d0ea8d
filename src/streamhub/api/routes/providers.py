"""Provider registration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from streamhub.api.dependencies import Admin
from streamhub.api.errors import http_error
from streamhub.api.schemas import (
    AddProviderRequest,
    AddProviderResponse,
    ProviderListResponse,
    ProviderResponse,
)
from streamhub.core.exceptions import StreamhubError

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get(
    "",
    response_model=ProviderListResponse,
    operation_id="listProviders",
    summary="List providers",
)
async def list_providers(admin: Admin) -> ProviderListResponse:
    return ProviderListResponse(
        providers=[ProviderResponse.model_validate(p) for p in admin.list_providers()]
    )


@router.post(
    "",
    response_model=AddProviderResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="addProvider",
    summary="Register a provider",
    description="Register a provider by manifest URL. Re-adding a known URL updates it and returns 200.",
)
async def add_provider(
    body: AddProviderRequest,
    response: Response,
    admin: Admin,
) -> AddProviderResponse:
    try:
        provider, created = await admin.add_provider(body.url, name=body.name, category=body.category)
    except StreamhubError as e:
        raise http_error(e) from e

    if not created:
        response.status_code = status.HTTP_200_OK
    return AddProviderResponse(provider=ProviderResponse.model_validate(provider), created=created)


@router.delete(
    "/{provider_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="removeProvider",
    summary="Remove a provider",
)
async def remove_provider(provider_id: str, admin: Admin) -> None:
    try:
        await admin.remove_provider(provider_id)
    except StreamhubError as e:
        raise http_error(e) from e
