"""HTTP client for the provider stream capability."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError as PydanticValidationError

from streamhub.core.exceptions import (
    ProviderError,
    ProviderMalformedError,
    ProviderUnreachableError,
)
from streamhub.core.identifiers import ContentKey, ManifestUrl
from streamhub.core.models import ProviderDescriptor, StreamDescriptor

logger = logging.getLogger(__name__)


class ProviderClient:
    """
    Fetches stream lists from registered providers.

    One pooled HTTP client is shared across providers. For each provider the
    ``.json`` endpoint is tried first and the bare endpoint second; each
    attempt carries its own deadline covering connect, headers and body.
    """

    DEFAULT_TIMEOUT = 8.0
    DEFAULT_USER_AGENT = "streamhub/1.0"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
        }

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create HTTP client with proper lifecycle."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self._get_default_headers(),
                follow_redirects=True,
                transport=self._transport,
            )
        yield self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_streams(
        self,
        provider: ProviderDescriptor,
        key: ContentKey,
    ) -> list[StreamDescriptor]:
        """
        Query one provider for ``key``.

        Returns:
            Valid stream descriptors (possibly empty) in provider order.

        Raises:
            ProviderUnreachableError: Every endpoint variant failed at the
                transport or HTTP level.
            ProviderMalformedError: An endpoint answered but no variant
                returned a usable stream list.
        """
        manifest = ManifestUrl.parse(provider.manifest_url)
        errors: list[ProviderError] = []

        for suffix in (True, False):
            url = manifest.stream_url(key.type, key.id, suffix=suffix)
            try:
                payload = await self._get_json(provider, url)
                return self._parse_streams(provider, url, payload)
            except (ProviderMalformedError, ProviderUnreachableError) as e:
                logger.debug(f"{provider.id} failed at {url}: {e.message}")
                errors.append(e)

        # Report a malformed answer over a network failure
        malformed = [e for e in errors if isinstance(e, ProviderMalformedError)]
        raise (malformed or errors)[-1]

    async def _get_json(self, provider: ProviderDescriptor, url: str) -> Any:
        try:
            async with asyncio.timeout(self.timeout):
                async with self._get_client() as client:
                    response = await client.get(url)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise ProviderUnreachableError(
                f"Timed out after {self.timeout}s", provider_id=provider.id, url=url
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnreachableError(
                f"HTTP error: {e}", provider_id=provider.id, url=url
            ) from e

        if not response.is_success:
            raise ProviderUnreachableError(
                f"HTTP {response.status_code}",
                provider_id=provider.id,
                url=url,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ProviderMalformedError(
                "Response is not JSON", provider_id=provider.id, url=url
            ) from e

    @staticmethod
    def _parse_streams(provider: ProviderDescriptor, url: str, payload: Any) -> list[StreamDescriptor]:
        if not isinstance(payload, dict) or not isinstance(payload.get("streams"), list):
            raise ProviderMalformedError(
                "Response has no streams list", provider_id=provider.id, url=url
            )

        raw_streams = payload["streams"]
        streams: list[StreamDescriptor] = []
        for position, raw in enumerate(raw_streams):
            try:
                streams.append(StreamDescriptor.model_validate(raw))
            except PydanticValidationError:
                logger.warning(f"Dropping invalid stream #{position} from {provider.id}")

        if raw_streams and not streams:
            raise ProviderMalformedError(
                "Every stream entry was invalid",
                provider_id=provider.id,
                url=url,
                details={"count": len(raw_streams)},
            )
        return streams

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
