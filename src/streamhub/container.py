"""Component wiring shared by the API process and the standalone client."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from streamhub.cache.store import StreamCacheStore
from streamhub.config import StreamhubSettings
from streamhub.config_store import CredentialStore
from streamhub.metadata.enricher import MetadataEnricher
from streamhub.metadata.tmdb import TmdbMetadataProvider
from streamhub.resolution.aggregator import FanOutAggregator
from streamhub.resolution.provider import ProviderClient
from streamhub.resolution.registry import ProviderRegistry
from streamhub.services.admin import AdminService
from streamhub.services.resolution import StreamResolutionService
from streamhub.telemetry.events import EventLog
from streamhub.telemetry.stats import StatsRecorder

logger = logging.getLogger(__name__)


@dataclass
class StreamhubContainer:
    """Every long-lived component, built from settings and loaded from disk."""

    settings: StreamhubSettings
    events: EventLog
    cache: StreamCacheStore
    stats: StatsRecorder
    registry: ProviderRegistry
    credentials: CredentialStore
    provider_client: ProviderClient
    enricher: MetadataEnricher
    resolution: StreamResolutionService
    admin: AdminService

    @classmethod
    async def create(
        cls,
        settings: StreamhubSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "StreamhubContainer":
        """
        Build and load every store.

        Args:
            settings: Application settings
            transport: Optional transport for provider requests (tests)
        """
        events = EventLog(settings.logs_path, capacity=settings.log_capacity)
        credentials = CredentialStore(settings.credentials_path, events=events)

        def tmdb_api_key() -> str | None:
            return credentials.tmdb_api_key or settings.tmdb_api_key

        enricher = MetadataEnricher(
            TmdbMetadataProvider(
                tmdb_api_key,
                base_url=settings.tmdb_base_url,
                image_base=settings.tmdb_image_base,
                backdrop_base=settings.tmdb_backdrop_base,
                timeout=settings.metadata_timeout,
            )
        )
        cache = StreamCacheStore(settings.streams_path)
        stats = StatsRecorder(
            settings.stats_path,
            enricher=enricher,
            error_capacity=settings.error_capacity,
        )
        registry = ProviderRegistry(settings.providers_path, events=events)
        provider_client = ProviderClient(
            timeout=settings.provider_timeout,
            user_agent=settings.user_agent,
            transport=transport,
        )

        for store in (events, credentials, cache, stats, registry):
            await store.load()

        container = cls(
            settings=settings,
            events=events,
            cache=cache,
            stats=stats,
            registry=registry,
            credentials=credentials,
            provider_client=provider_client,
            enricher=enricher,
            resolution=StreamResolutionService(
                cache=cache,
                registry=registry,
                aggregator=FanOutAggregator(provider_client, events=events),
                stats=stats,
                events=events,
                enricher=enricher,
                generic_fallback_enabled=settings.generic_fallback_enabled,
            ),
            admin=AdminService(
                cache=cache,
                stats=stats,
                events=events,
                registry=registry,
                credentials=credentials,
                enricher=enricher,
            ),
        )
        logger.info(
            f"Streamhub ready: {len(registry)} providers, {len(cache)} cached keys "
            f"in {settings.data_dir}"
        )
        return container

    @property
    def loaded(self) -> bool:
        return all(
            store.is_loaded
            for store in (self.events, self.credentials, self.cache, self.stats, self.registry)
        )

    async def close(self) -> None:
        """Finish background work and release HTTP clients."""
        await self.enricher.close()
        await self.provider_client.close()
