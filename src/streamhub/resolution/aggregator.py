"""Parallel fan-out across every registered provider."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from streamhub.core.exceptions import (
    ProviderError,
    ProviderMalformedError,
    ProviderUnreachableError,
)
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import ProviderDescriptor, StreamDescriptor
from streamhub.core.types import EventType, ProviderStatus
from streamhub.resolution.provider import ProviderClient
from streamhub.telemetry.events import EventLog

logger = logging.getLogger(__name__)


@dataclass
class ProviderResult:
    """Outcome of querying a single provider."""

    provider_id: str
    name: str
    status: ProviderStatus
    streams: list[StreamDescriptor] = field(default_factory=list)
    error_message: str | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == ProviderStatus.SUCCESS and len(self.streams) > 0


@dataclass
class AggregationResult:
    """Merged streams plus per-provider outcomes, in registration order."""

    streams: list[StreamDescriptor] = field(default_factory=list)
    results: list[ProviderResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.streams) > 0

    @property
    def sources_tried(self) -> list[str]:
        return [r.provider_id for r in self.results]


class FanOutAggregator:
    """
    Queries every provider concurrently and concatenates their streams.

    All calls settle before the merge. A failing provider contributes
    nothing and never affects the others; the merged list follows provider
    registration order, then each provider's own order. No deduplication.
    """

    def __init__(self, client: ProviderClient, events: EventLog | None = None) -> None:
        self._client = client
        self._events = events

    async def resolve(
        self,
        key: ContentKey,
        providers: Sequence[ProviderDescriptor],
    ) -> AggregationResult:
        if not providers:
            logger.debug(f"No providers registered for {key}")
            return AggregationResult()

        tasks = [self._try_provider(provider, key) for provider in providers]
        results = await asyncio.gather(*tasks)

        merged: list[StreamDescriptor] = []
        for result in results:
            merged.extend(result.streams)

        return AggregationResult(streams=merged, results=list(results))

    async def _try_provider(self, provider: ProviderDescriptor, key: ContentKey) -> ProviderResult:
        """Query a single provider, folding every failure into the result."""
        start = time.monotonic()
        try:
            streams = await self._client.fetch_streams(provider, key)
            status = ProviderStatus.SUCCESS if streams else ProviderStatus.EMPTY
            error_message = None
        except ProviderError as e:
            streams = []
            status = self._status_for(e)
            error_message = e.message
        except Exception as e:
            logger.exception(f"Provider {provider.id} failed: {e}")
            streams = []
            status = ProviderStatus.ERROR
            error_message = str(e)

        result = ProviderResult(
            provider_id=provider.id,
            name=provider.name,
            status=status,
            streams=streams,
            error_message=error_message,
            duration_ms=(time.monotonic() - start) * 1000,
        )
        await self._log_result(result, key)
        return result

    @staticmethod
    def _status_for(error: ProviderError) -> ProviderStatus:
        if isinstance(error, ProviderUnreachableError):
            return ProviderStatus.UNREACHABLE
        if isinstance(error, ProviderMalformedError):
            return ProviderStatus.MALFORMED
        return ProviderStatus.ERROR

    async def _log_result(self, result: ProviderResult, key: ContentKey) -> None:
        if result.error_message is None:
            logger.debug(f"{result.provider_id} returned {len(result.streams)} streams for {key}")
        else:
            logger.warning(f"{result.provider_id} failed for {key}: {result.error_message}")

        if self._events is None:
            return
        if result.error_message is None:
            await self._events.append(
                EventType.ADDON_STREAMS,
                f"{result.name} returned {len(result.streams)} streams",
                {"addon": result.provider_id, "key": key.cache_key, "count": len(result.streams)},
            )
        else:
            await self._events.append(
                EventType.ADDON_ERROR,
                f"{result.name} failed",
                {
                    "addon": result.provider_id,
                    "key": key.cache_key,
                    "status": str(result.status),
                    "error": result.error_message,
                },
            )
