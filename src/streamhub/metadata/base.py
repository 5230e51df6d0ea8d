"""Abstract metadata provider with HTTP client management."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, ClassVar

import httpx

from streamhub.core.exceptions import MetadataUnavailableError
from streamhub.core.models import MetaDetail, MetaSummary


class AbstractMetadataProvider(ABC):
    """
    Base class for metadata lookups keyed by (type, id).

    Provides:
    - Lazily created HTTP client with connection pooling
    - Translation of transport failures into MetadataUnavailableError
    """

    SOURCE_NAME: ClassVar[str]
    BASE_URL: ClassVar[str]

    def __init__(self, *, base_url: str | None = None, timeout: float = 6.0) -> None:
        self._base_url = base_url or self.BASE_URL
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def source_name(self) -> str:
        return self.SOURCE_NAME

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether the provider is configured well enough to be queried."""
        ...

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create HTTP client with proper lifecycle."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )

        try:
            yield self._client
        except httpx.HTTPError as e:
            raise MetadataUnavailableError(
                f"{self.source_name} request failed: {e}",
                {"source": self.source_name},
            ) from e

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """
        GET a JSON object. Returns None on 404.

        Raises:
            MetadataUnavailableError: Transport error, other HTTP errors,
                or a body that is not a JSON object.
        """
        async with self._get_client() as client:
            response = await client.get(path, params=params)

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise MetadataUnavailableError(
                f"{self.source_name} returned HTTP {response.status_code}",
                {"source": self.source_name, "path": path},
            )
        try:
            data = response.json()
        except ValueError as e:
            raise MetadataUnavailableError(
                f"{self.source_name} returned invalid JSON", {"path": path}
            ) from e
        if not isinstance(data, dict):
            raise MetadataUnavailableError(
                f"{self.source_name} returned unexpected payload", {"path": path}
            )
        return data

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def summary(self, content_type: str, content_id: str) -> MetaSummary | None:
        """
        Title and poster for a content id.

        Returns:
            The summary, or None when the id has no known shape or no match.

        Raises:
            MetadataUnavailableError: Not configured or the lookup failed.
        """
        ...

    @abstractmethod
    async def details(self, content_type: str, content_id: str) -> MetaDetail | None:
        """Full descriptor for a content id; same contract as ``summary``."""
        ...

    async def __aenter__(self) -> "AbstractMetadataProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
