"""Bounded append-only event log."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from streamhub.cache.document import DocumentStore
from streamhub.core.models import LogEntry

logger = logging.getLogger(__name__)


class EventLog(DocumentStore):
    """
    Ring buffer of diagnostic events.

    Holds at most ``capacity`` entries; the oldest are evicted first. The
    buffer is persisted after every append.
    """

    DEFAULT_CAPACITY = 500

    def __init__(self, path, capacity: int = DEFAULT_CAPACITY) -> None:
        super().__init__(path)
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    async def append(
        self,
        event_type: str,
        message: str,
        meta: dict[str, Any] | None = None,
    ) -> LogEntry:
        """Record an event and persist the buffer."""
        entry = LogEntry(
            id=str(uuid4()),
            type=str(event_type),
            message=message,
            meta=meta or {},
        )
        logger.debug(f"[{entry.type}] {message} {entry.meta}")
        async with self._lock:
            self._entries.append(entry)
            await self._persist()
        return entry

    def entries(self, limit: int | None = None) -> list[LogEntry]:
        """Most recent entries first."""
        limit = self._capacity if limit is None else max(0, min(limit, self._capacity))
        newest_first = list(reversed(self._entries))
        return newest_first[:limit]

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            await self._persist()

    def _serialize(self) -> list[dict[str, Any]]:
        return [entry.to_document() for entry in self._entries]

    def _restore(self, raw: Any | None) -> None:
        self._entries = deque(maxlen=self._capacity)
        if not isinstance(raw, list):
            return
        for value in raw:
            try:
                self._entries.append(LogEntry.model_validate(value))
            except PydanticValidationError:
                logger.warning("Dropping invalid log entry")
