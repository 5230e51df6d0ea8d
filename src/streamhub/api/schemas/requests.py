"""Request schemas for API endpoints."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from streamhub.api.schemas.base import APIBaseSchema


class AddProviderRequest(APIBaseSchema):
    """Request to register a provider by manifest URL."""

    url: Annotated[
        str,
        Field(
            min_length=1,
            max_length=2048,
            description="Manifest URL (http, https or stremio scheme).",
        ),
    ]

    name: Annotated[
        str | None,
        Field(
            default=None,
            max_length=200,
            description="Display name. Defaults to the manifest URL.",
        ),
    ]

    category: Annotated[
        str | None,
        Field(
            default=None,
            description="One of streams, catalog, meta, subtitles, other. Unknown values become streams.",
        ),
    ]


class UpdateCredentialsRequest(APIBaseSchema):
    """Credentials to store. Omitted fields are left unchanged."""

    tmdb_api_key: str | None = None
    trakt_client_id: str | None = None
    trakt_client_secret: str | None = None
    trakt_access_token: str | None = None
    opensubtitles_api_key: str | None = None
