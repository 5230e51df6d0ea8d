"""Durable key -> CacheEntry store for resolved streams."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from streamhub.cache.document import DocumentStore
from streamhub.core.exceptions import NotFoundError, ValidationError
from streamhub.core.identifiers import ContentKey, derive_external_id, normalize
from streamhub.core.models import CacheEntry, MetaSummary, StreamDescriptor, utcnow

logger = logging.getLogger(__name__)


class StreamCacheStore(DocumentStore):
    """
    Cached stream lists keyed by ``type:id``.

    Entries are only ever created or fully replaced with a non-empty stream
    list; there is no incremental merge and no expiry. The whole mapping is
    rewritten to disk after every mutation.
    """

    def __init__(self, path) -> None:
        super().__init__(path)
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: ContentKey) -> bool:
        return key.cache_key in self._entries

    # Reads

    def get(self, key: ContentKey) -> CacheEntry | None:
        """Return the cached entry for ``key``, if any."""
        return self._entries.get(key.cache_key)

    def entries(self) -> list[CacheEntry]:
        """All entries in insertion order."""
        return list(self._entries.values())

    def find(self, external_id: str) -> CacheEntry:
        """
        Look up an entry by its external id.

        Raises:
            NotFoundError: No entry carries that external id.
        """
        cache_key = self._match_external_id(external_id)
        if cache_key is None:
            raise NotFoundError("Cache entry not found", {"external_id": external_id})
        return self._entries[cache_key]

    def _match_external_id(self, external_id: str) -> str | None:
        for cache_key, entry in self._entries.items():
            if entry.external_id == external_id or derive_external_id(entry.key) == external_id:
                return cache_key
        return None

    # Mutations

    async def put(
        self,
        key: ContentKey,
        streams: Sequence[StreamDescriptor],
        meta: MetaSummary | None = None,
    ) -> CacheEntry:
        """
        Create or fully replace the entry for ``key``.

        Raises:
            ValidationError: ``streams`` is empty.
        """
        if not streams:
            raise ValidationError("Refusing to cache an empty stream list", {"key": key.cache_key})

        entry = CacheEntry(
            external_id=key.external_id,
            type=key.type,
            content_id=key.id,
            streams=list(streams),
            updated_at=utcnow(),
            meta=meta,
        )
        async with self._lock:
            self._entries[key.cache_key] = entry
            await self._persist()
        logger.debug(f"Cached {len(entry.streams)} streams for {key}")
        return entry

    async def delete(self, key: ContentKey) -> CacheEntry:
        """
        Remove the entry for ``key``.

        Raises:
            NotFoundError: Nothing is cached for ``key``.
        """
        async with self._lock:
            entry = self._entries.pop(key.cache_key, None)
            if entry is None:
                raise NotFoundError("Cache entry not found", {"key": key.cache_key})
            await self._persist()
        return entry

    async def delete_stream(self, key: ContentKey, index: int) -> CacheEntry | None:
        """
        Remove one stream from an entry by position.

        Removing the last remaining stream removes the entry, since an entry
        is never kept with an empty list. Returns the updated entry, or None
        when the entry was removed.

        Raises:
            ValidationError: ``index`` is negative.
            NotFoundError: No entry for ``key`` or ``index`` is out of range.
        """
        if index < 0:
            raise ValidationError("Invalid stream index", {"index": index})

        async with self._lock:
            entry = self._entries.get(key.cache_key)
            if entry is None:
                raise NotFoundError("Cache entry not found", {"key": key.cache_key})
            if index >= len(entry.streams):
                raise NotFoundError(
                    "Stream not found",
                    {"key": key.cache_key, "index": index, "count": len(entry.streams)},
                )

            remaining = entry.streams[:index] + entry.streams[index + 1 :]
            updated: CacheEntry | None
            if remaining:
                updated = entry.model_copy(update={"streams": remaining, "updated_at": utcnow()})
                self._entries[key.cache_key] = updated
            else:
                updated = None
                del self._entries[key.cache_key]
            await self._persist()
        return updated

    async def attach_meta(self, key: ContentKey, meta: MetaSummary) -> bool:
        """
        Attach metadata to an existing entry that has none.

        Used by background enrichment; a no-op when the entry has been
        removed or already carries a title in the meantime.
        """
        async with self._lock:
            entry = self._entries.get(key.cache_key)
            if entry is None or (entry.meta and entry.meta.title):
                return False
            self._entries[key.cache_key] = entry.model_copy(update={"meta": meta})
            await self._persist()
        return True

    # Persistence

    def _serialize(self) -> dict[str, Any]:
        return {cache_key: entry.to_document() for cache_key, entry in self._entries.items()}

    def _restore(self, raw: Any | None) -> None:
        self._entries = {}
        if not isinstance(raw, dict):
            return
        for cache_key, value in raw.items():
            try:
                entry = CacheEntry.model_validate(value)
            except PydanticValidationError as e:
                logger.warning(f"Dropping invalid cache entry {cache_key!r}: {e.error_count()} errors")
                continue
            self._entries[normalize(entry.type, entry.content_id).cache_key] = entry
