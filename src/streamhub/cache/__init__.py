"""Durable JSON-document caching layer."""

from .document import DocumentStore, JsonDocument
from .keys import CacheKeys
from .store import StreamCacheStore

__all__ = [
    "CacheKeys",
    "DocumentStore",
    "JsonDocument",
    "StreamCacheStore",
]
