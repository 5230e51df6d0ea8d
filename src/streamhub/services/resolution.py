"""Resolution service for the cache → providers → fallback flow."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any

from streamhub.core.identifiers import ContentKey, normalize
from streamhub.core.models import MetaDetail, StreamDescriptor
from streamhub.core.types import EventType, StreamSource
from streamhub.resolution.aggregator import ProviderResult
from streamhub.resolution.fallback import fallback_streams

if TYPE_CHECKING:
    from streamhub.cache.store import StreamCacheStore
    from streamhub.metadata.enricher import MetadataEnricher
    from streamhub.resolution.aggregator import FanOutAggregator
    from streamhub.resolution.registry import ProviderRegistry
    from streamhub.telemetry.events import EventLog
    from streamhub.telemetry.stats import StatsRecorder

logger = logging.getLogger(__name__)


@dataclass
class StreamResolution:
    """Streams returned for one request and where they came from."""

    key: ContentKey
    streams: list[StreamDescriptor]
    source: StreamSource
    providers: list[ProviderResult] = field(default_factory=list)
    duration_ms: float = 0.0

    def to_payload(self) -> dict[str, Any]:
        return {"streams": [stream.to_payload() for stream in self.streams]}


class StreamResolutionService:
    """
    Resolves a (type, id) pair to streams.

    Policy, in strict order:
    1. Cached entry → cached streams, no provider is called
    2. Non-empty fan-out → cached as a full replacement and returned
    3. Otherwise → static fallback (demo set or generic sample)

    Cached and live results are never merged. A resolution never raises;
    the worst outcome is an empty stream list.
    """

    def __init__(
        self,
        cache: "StreamCacheStore",
        registry: "ProviderRegistry",
        aggregator: "FanOutAggregator",
        stats: "StatsRecorder",
        events: "EventLog",
        enricher: "MetadataEnricher",
        generic_fallback_enabled: bool = True,
    ) -> None:
        self._cache = cache
        self._registry = registry
        self._aggregator = aggregator
        self._stats = stats
        self._events = events
        self._enricher = enricher
        self._generic_fallback_enabled = generic_fallback_enabled

    async def resolve(
        self,
        content_type: str,
        content_id: str,
        client_address: str | None = None,
    ) -> StreamResolution:
        """
        Resolve streams for a content key.

        Args:
            content_type: Content type (movie, series, tv, ...)
            content_id: Opaque external id
            client_address: Caller address for per-address statistics

        Returns:
            The streams (possibly empty) tagged with their source
        """
        start = time.monotonic()
        key = normalize(content_type, content_id)

        resolution = await self._from_cache(key)
        if resolution is None:
            resolution = await self._from_providers(key)
        if resolution is None:
            resolution = await self._from_fallback(key)

        resolution.duration_ms = (time.monotonic() - start) * 1000
        await self._stats.record(
            key,
            resolution.source,
            client_address=client_address,
            duration_ms=resolution.duration_ms,
        )
        logger.info(
            f"Resolved {key} from {resolution.source} "
            f"({len(resolution.streams)} streams) in {resolution.duration_ms:.0f}ms"
        )
        return resolution

    async def _from_cache(self, key: ContentKey) -> StreamResolution | None:
        entry = self._cache.get(key)
        if entry is None:
            return None

        logger.debug(f"Cache hit for {key}")
        await self._events.append(
            EventType.CACHE_HIT,
            "Serving cached streams",
            {"type": key.type, "id": key.id, "streams": len(entry.streams)},
        )
        return StreamResolution(key=key, streams=list(entry.streams), source=StreamSource.CACHE)

    async def _from_providers(self, key: ContentKey) -> StreamResolution | None:
        providers = self._registry.snapshot()
        await self._events.append(
            EventType.STREAM_REQUEST,
            "Fetching streams from providers",
            {"type": key.type, "id": key.id, "providers": len(providers)},
        )

        result = await self._aggregator.resolve(key, providers)
        if not result.success:
            return None

        await self._cache.put(key, result.streams)
        await self._events.append(
            EventType.CACHE_STORE,
            "Caching streams",
            {"type": key.type, "id": key.id, "streams": len(result.streams)},
        )
        self._enricher.enrich_later(key, partial(self._cache.attach_meta, key))
        return StreamResolution(
            key=key,
            streams=result.streams,
            source=StreamSource.ADDONS,
            providers=result.results,
        )

    async def _from_fallback(self, key: ContentKey) -> StreamResolution:
        streams = fallback_streams(key, self._generic_fallback_enabled)
        source = StreamSource.DEMO if streams else StreamSource.EMPTY
        await self._events.append(
            EventType.STREAMS_MISS,
            "No provider streams found",
            {"type": key.type, "id": key.id, "fallback": len(streams)},
        )
        return StreamResolution(key=key, streams=streams, source=source)

    async def describe(self, content_type: str, content_id: str) -> dict[str, Any]:
        """Metadata for a content key, with a placeholder when nothing is known."""
        key = normalize(content_type, content_id)
        detail: MetaDetail | None = await self._enricher.details(key)
        if detail is None:
            return {"id": key.id, "type": key.type, "name": "Unknown", "poster": None}
        return detail.to_document()
