"""Best-effort metadata enrichment with background scheduling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from streamhub.core.exceptions import MetadataUnavailableError
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import MetaDetail, MetaSummary
from streamhub.metadata.base import AbstractMetadataProvider

logger = logging.getLogger(__name__)

MetaCallback = Callable[[MetaSummary], Awaitable[Any]]


class MetadataEnricher:
    """
    Wraps a metadata provider so that lookups never fail the caller.

    Lookups return None when no provider is configured, the id has no known
    shape, or the provider fails. ``enrich_later`` runs a lookup off the
    request path and hands the result to a callback; pending tasks are
    tracked so they can be awaited or cancelled on shutdown.
    """

    def __init__(self, provider: AbstractMetadataProvider | None = None) -> None:
        self._provider = provider
        self._tasks: set[asyncio.Task] = set()

    @property
    def available(self) -> bool:
        return self._provider is not None and self._provider.available

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def lookup(self, key: ContentKey) -> MetaSummary | None:
        """Title and poster for ``key``, or None."""
        if not self.available:
            return None
        try:
            return await self._provider.summary(key.type, key.id)
        except MetadataUnavailableError as e:
            logger.debug(f"Metadata lookup failed for {key}: {e.message}")
            return None

    async def details(self, key: ContentKey) -> MetaDetail | None:
        """Full metadata for ``key``, or None."""
        if not self.available:
            return None
        try:
            return await self._provider.details(key.type, key.id)
        except MetadataUnavailableError as e:
            logger.debug(f"Metadata details failed for {key}: {e.message}")
            return None

    def enrich_later(self, key: ContentKey, *callbacks: MetaCallback) -> asyncio.Task | None:
        """
        Look up ``key`` in the background and pass the result to ``callbacks``.

        Returns the scheduled task, or None when enrichment is unavailable.
        """
        if not self.available or not callbacks:
            return None
        return self.schedule(self._enrich(key, callbacks))

    def schedule(self, coro: Awaitable[Any]) -> asyncio.Task:
        """Run ``coro`` as a tracked background task."""
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background enrichment failed", exc_info=task.exception())

    async def _enrich(self, key: ContentKey, callbacks: tuple[MetaCallback, ...]) -> None:
        meta = await self.lookup(key)
        if meta is None or not (meta.title or meta.poster):
            return
        for callback in callbacks:
            await callback(meta)

    async def drain(self) -> None:
        """Wait for every pending background task."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel pending work and release the provider."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._provider is not None:
            await self._provider.close()
