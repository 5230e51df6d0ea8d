"""Per-key request statistics and HTTP error tracking."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from streamhub.cache.document import DocumentStore
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import (
    ErrorEvent,
    MetaSummary,
    RequestStatsEntry,
    StatsDocument,
    utcnow,
)
from streamhub.metadata.enricher import MetadataEnricher

logger = logging.getLogger(__name__)


class StatsRecorder(DocumentStore):
    """
    Request counters persisted to a single document.

    Recording is best-effort: failures are logged and never propagate into
    the resolution that triggered them.
    """

    DEFAULT_ERROR_CAPACITY = 200
    RECENT_LIMIT = 300
    RECENT_ERRORS = 50

    def __init__(
        self,
        path,
        enricher: MetadataEnricher | None = None,
        error_capacity: int = DEFAULT_ERROR_CAPACITY,
    ) -> None:
        super().__init__(path)
        self._enricher = enricher
        self._error_capacity = error_capacity
        self._doc = StatsDocument()

    def __len__(self) -> int:
        return len(self._doc.items)

    def get(self, key: ContentKey) -> RequestStatsEntry | None:
        return self._doc.items.get(key.cache_key)

    async def record(
        self,
        key: ContentKey,
        source: str,
        *,
        client_address: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Count one resolution of ``key`` served from ``source``."""
        try:
            needs_meta = await self._record(key, source, client_address, duration_ms)
        except Exception:
            logger.exception(f"Failed to record stats for {key}")
            return

        if needs_meta and self._enricher is not None:
            self._enricher.enrich_later(key, partial(self.attach_meta, key))

    async def _record(
        self,
        key: ContentKey,
        source: str,
        client_address: str | None,
        duration_ms: float | None,
    ) -> bool:
        async with self._lock:
            doc = self._doc
            entry = doc.items.get(key.cache_key) or RequestStatsEntry(
                external_id=key.external_id,
                type=key.type,
                content_id=key.id,
            )
            entry.count += 1
            entry.last_requested_at = utcnow()
            entry.source = str(source)
            doc.items[key.cache_key] = entry

            doc.total_requests += 1
            if client_address:
                doc.address_counts[client_address] = doc.address_counts.get(client_address, 0) + 1
            if duration_ms is not None:
                doc.total_response_time += duration_ms
                doc.response_samples += 1

            await self._persist()
            return entry.meta is None or not entry.meta.title

    async def record_error(
        self,
        address: str | None,
        method: str,
        path: str,
        status: int,
    ) -> None:
        """Count one failed HTTP request and keep it in the error ring."""
        try:
            async with self._lock:
                self._doc.total_errors += 1
                self._doc.errors.append(
                    ErrorEvent(address=address, method=method, path=path, status=status)
                )
                if len(self._doc.errors) > self._error_capacity:
                    del self._doc.errors[: len(self._doc.errors) - self._error_capacity]
                await self._persist()
        except Exception:
            logger.exception(f"Failed to record error for {method} {path}")

    async def attach_meta(self, key: ContentKey, meta: MetaSummary) -> bool:
        """Attach metadata to an existing entry that has no title yet."""
        async with self._lock:
            entry = self._doc.items.get(key.cache_key)
            if entry is None or (entry.meta and entry.meta.title):
                return False
            entry.meta = meta
            await self._persist()
        return True

    def summary(self) -> dict[str, Any]:
        doc = self._doc
        average = doc.total_response_time / doc.response_samples if doc.response_samples else 0
        return {
            "uniqueAddresses": len(doc.address_counts),
            "totalRequests": doc.total_requests,
            "totalErrors": doc.total_errors,
            "avgResponseTime": round(average),
        }

    def recent(self, limit: int = 100) -> list[RequestStatsEntry]:
        """Entries by most recent request first."""
        limit = max(0, min(limit, self.RECENT_LIMIT))
        ordered = sorted(
            self._doc.items.values(),
            key=lambda entry: entry.last_requested_at.timestamp() if entry.last_requested_at else 0.0,
            reverse=True,
        )
        return ordered[:limit]

    def recent_errors(self, limit: int = RECENT_ERRORS) -> list[ErrorEvent]:
        """Most recent errors first."""
        if limit <= 0:
            return []
        return list(reversed(self._doc.errors[-limit:]))

    async def clear(self) -> None:
        async with self._lock:
            self._doc = StatsDocument()
            await self._persist()

    def _serialize(self) -> dict[str, Any]:
        return self._doc.to_document()

    def _restore(self, raw: Any | None) -> None:
        self._doc = StatsDocument()
        if not isinstance(raw, dict):
            return
        try:
            self._doc = StatsDocument.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Resetting stats document: {e.error_count()} invalid fields")
