"""Administrative operations over the cache, telemetry, providers and credentials."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from streamhub.core.identifiers import normalize
from streamhub.core.models import (
    CacheEntry,
    Credentials,
    ErrorEvent,
    LogEntry,
    ProviderDescriptor,
    RequestStatsEntry,
)
from streamhub.core.types import EventType

if TYPE_CHECKING:
    from streamhub.cache.store import StreamCacheStore
    from streamhub.config_store import CredentialStore
    from streamhub.metadata.enricher import MetadataEnricher
    from streamhub.resolution.registry import ProviderRegistry
    from streamhub.telemetry.events import EventLog
    from streamhub.telemetry.stats import StatsRecorder

logger = logging.getLogger(__name__)


class AdminService:
    """
    Operations behind the administrative surface.

    Every mutation goes through the owning store, so it is serialized with
    the writes made by resolutions. Missing resources raise NotFoundError.
    """

    def __init__(
        self,
        cache: "StreamCacheStore",
        stats: "StatsRecorder",
        events: "EventLog",
        registry: "ProviderRegistry",
        credentials: "CredentialStore",
        enricher: "MetadataEnricher",
    ) -> None:
        self._cache = cache
        self._stats = stats
        self._events = events
        self._registry = registry
        self._credentials = credentials
        self._enricher = enricher

    # Providers

    def list_providers(self) -> tuple[ProviderDescriptor, ...]:
        return self._registry.snapshot()

    async def add_provider(
        self,
        url: str,
        name: str | None = None,
        category: str | None = None,
    ) -> tuple[ProviderDescriptor, bool]:
        return await self._registry.add(url, name=name, category=category)

    async def remove_provider(self, provider_id: str) -> ProviderDescriptor:
        return await self._registry.remove(provider_id)

    # Cache

    def list_cache(self) -> list[CacheEntry]:
        """All cache entries; entries without a title get enriched in the background."""
        entries = self._cache.entries()
        for entry in entries:
            if entry.meta is None or not entry.meta.title:
                self._enricher.enrich_later(entry.key, partial(self._cache.attach_meta, entry.key))
        return entries

    async def inspect_cache(self, external_id: str) -> CacheEntry:
        """
        One cache entry, enriched inline when it has no metadata yet.

        Raises:
            NotFoundError: No entry with that external id.
        """
        entry = self._cache.find(external_id)
        if entry.meta is None or not entry.meta.title:
            meta = await self._enricher.lookup(entry.key)
            if meta is not None and await self._cache.attach_meta(entry.key, meta):
                entry = self._cache.find(external_id)
        return entry

    async def delete_cache_entry(self, external_id: str) -> CacheEntry:
        """
        Raises:
            NotFoundError: No entry with that external id.
        """
        entry = self._cache.find(external_id)
        removed = await self._cache.delete(entry.key)
        await self._events.append(
            EventType.CACHE_REMOVE,
            "Removed cache entry",
            {"id": external_id, "key": removed.key.cache_key},
        )
        return removed

    async def delete_cached_stream(self, external_id: str, index: int) -> CacheEntry | None:
        """
        Remove one stream by position; returns None when the entry went away.

        Raises:
            ValidationError: Negative index.
            NotFoundError: No such entry or index out of range.
        """
        entry = self._cache.find(external_id)
        updated = await self._cache.delete_stream(entry.key, index)
        await self._events.append(
            EventType.CACHE_REMOVE,
            "Removed cached stream",
            {"id": external_id, "index": index, "remaining": len(updated.streams) if updated else 0},
        )
        return updated

    # Telemetry

    def recent(self, limit: int = 100) -> list[RequestStatsEntry]:
        """Recently requested keys; untitled ones get enriched in the background."""
        items = self._stats.recent(limit)
        for item in items:
            if item.meta is None or not item.meta.title:
                key = normalize(item.type, item.content_id)
                self._enricher.enrich_later(key, partial(self._stats.attach_meta, key))
        return items

    def stats_summary(self) -> dict[str, int]:
        return self._stats.summary()

    def recent_errors(self) -> list[ErrorEvent]:
        return self._stats.recent_errors()

    async def clear_recent(self) -> None:
        await self._stats.clear()

    def logs(self, limit: int = 200) -> list[LogEntry]:
        return self._events.entries(limit)

    async def clear_logs(self) -> None:
        await self._events.clear()

    # Credentials

    def get_credentials(self) -> Credentials:
        return self._credentials.get()

    async def update_credentials(self, **changes: str | None) -> Credentials:
        return await self._credentials.update(**changes)
