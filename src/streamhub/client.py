"""Main library client for standalone usage."""

from __future__ import annotations

import logging

import httpx

from streamhub.config import StreamhubSettings
from streamhub.container import StreamhubContainer
from streamhub.core.identifiers import normalize
from streamhub.core.models import MetaDetail, ProviderDescriptor
from streamhub.services.resolution import StreamResolution

logger = logging.getLogger(__name__)


class StreamhubClient:
    """
    Main client for the streamhub library.

    Resolves streams against the same stores and providers as the API,
    without running the web server.

    Usage:
        async with StreamhubClient() as client:
            await client.add_provider("https://example.org/manifest.json")
            resolution = await client.resolve("movie", "tt0111161")
            print(resolution.source, len(resolution.streams))

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: StreamhubSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            transport: Optional httpx transport for provider requests.
        """
        self._settings = settings or StreamhubSettings()
        self._transport = transport
        self._container: StreamhubContainer | None = None

    async def __aenter__(self) -> StreamhubClient:
        """Load stores on context entry."""
        self._container = await StreamhubContainer.create(self._settings, transport=self._transport)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def close(self) -> None:
        """Wait for pending enrichment, then release HTTP clients."""
        if self._container:
            await self._container.enricher.drain()
            await self._container.close()
            self._container = None

    def _ensure_initialized(self) -> StreamhubContainer:
        """Ensure client is initialized."""
        if self._container is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with StreamhubClient() as client:'"
            )
        return self._container

    @property
    def providers(self) -> tuple[ProviderDescriptor, ...]:
        return self._ensure_initialized().registry.snapshot()

    async def resolve(self, content_type: str, content_id: str) -> StreamResolution:
        """
        Resolve streams for a content key.

        Args:
            content_type: movie, series, tv, channel, ...
            content_id: Opaque content id, e.g. ``tt0111161`` or ``tt0944947:1:1``

        Returns:
            Streams tagged with their source (cache, addons, demo or empty)
        """
        container = self._ensure_initialized()
        return await container.resolution.resolve(content_type, content_id)

    async def describe(self, content_type: str, content_id: str) -> MetaDetail | None:
        """Full metadata for a content key, when a metadata provider is configured."""
        container = self._ensure_initialized()
        return await container.enricher.details(normalize(content_type, content_id))

    async def add_provider(
        self,
        url: str,
        name: str | None = None,
        category: str | None = None,
    ) -> ProviderDescriptor:
        """Register a provider by manifest URL; re-adding a known URL updates it."""
        container = self._ensure_initialized()
        provider, _ = await container.registry.add(url, name=name, category=category)
        return provider

    async def remove_provider(self, provider_id: str) -> ProviderDescriptor:
        """
        Raises:
            NotFoundError: No provider with that id.
        """
        container = self._ensure_initialized()
        return await container.registry.remove(provider_id)


# Convenience function for one-off resolutions
async def resolve_streams(
    content_type: str,
    content_id: str,
    *,
    settings: StreamhubSettings | None = None,
) -> StreamResolution:
    """
    Resolve streams (convenience function).

    For multiple resolutions, use StreamhubClient for better performance.
    """
    async with StreamhubClient(settings) as client:
        return await client.resolve(content_type, content_id)
