"""Tests for the stream resolution service."""

from __future__ import annotations

import pytest

from streamhub.config import StreamhubSettings
from streamhub.container import StreamhubContainer
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import StreamDescriptor
from streamhub.core.types import StreamSource
from streamhub.resolution.fallback import SAMPLE_HLS_URL, SAMPLE_MP4_URL

A_STREAMS = "https://a.example.com/stream/movie/tt0111161.json"
B_STREAMS = "https://b.example.com/stream/movie/tt0111161.json"


def _event_types(container: StreamhubContainer) -> list[str]:
    return [entry.type for entry in reversed(container.events.entries())]


# ============================================================================
# Cache Policy Tests
# ============================================================================


class TestCachePolicy:
    """Tests for cache-first resolution."""

    async def test_cache_hit_skips_providers(
        self,
        container: StreamhubContainer,
        provider_stub,
        movie_key: ContentKey,
        sample_streams: list[StreamDescriptor],
    ):
        await container.registry.add("https://a.example.com")
        await container.cache.put(movie_key, sample_streams)

        resolution = await container.resolution.resolve("movie", movie_key.id)

        assert resolution.source == StreamSource.CACHE
        assert resolution.streams == sample_streams
        assert provider_stub.requests == []
        assert "cache-hit" in _event_types(container)

    async def test_provider_streams_cached(
        self,
        container: StreamhubContainer,
        provider_stub,
        movie_key: ContentKey,
    ):
        provider_stub.add(A_STREAMS, {"title": "s1", "url": "https://x/1.mp4"})
        await container.registry.add("https://a.example.com")

        first = await container.resolution.resolve("movie", movie_key.id)
        requests_after_first = len(provider_stub.requests)
        second = await container.resolution.resolve("movie", movie_key.id)

        assert first.source == StreamSource.ADDONS
        assert second.source == StreamSource.CACHE
        assert [s.title for s in second.streams] == ["s1"]
        assert len(provider_stub.requests) == requests_after_first
        assert container.cache.get(movie_key).streams == first.streams

    async def test_type_is_normalized(
        self,
        container: StreamhubContainer,
        movie_key: ContentKey,
        sample_stream: StreamDescriptor,
    ):
        await container.cache.put(movie_key, [sample_stream])

        resolution = await container.resolution.resolve(" Movie ", movie_key.id)
        assert resolution.source == StreamSource.CACHE


# ============================================================================
# Provider Fan-out Tests
# ============================================================================


class TestProviderResolution:
    async def test_merges_in_registration_order(
        self,
        container: StreamhubContainer,
        provider_stub,
    ):
        provider_stub.add(A_STREAMS, {"title": "a1", "url": "https://x/a1.mp4"})
        provider_stub.add(B_STREAMS, {"title": "b1", "url": "https://x/b1.mp4"}, {"title": "b2", "ytId": "abc"})
        await container.registry.add("https://b.example.com")
        await container.registry.add("https://a.example.com")

        resolution = await container.resolution.resolve("movie", "tt0111161")

        assert [s.title for s in resolution.streams] == ["b1", "b2", "a1"]
        assert [r.name for r in resolution.providers] == [
            "https://b.example.com/manifest.json",
            "https://a.example.com/manifest.json",
        ]

    async def test_failing_provider_ignored(self, container: StreamhubContainer, provider_stub):
        provider_stub.add(B_STREAMS, {"title": "b1", "url": "https://x/b1.mp4"})
        await container.registry.add("https://a.example.com")
        await container.registry.add("https://b.example.com")

        resolution = await container.resolution.resolve("movie", "tt0111161")

        assert resolution.source == StreamSource.ADDONS
        assert [s.title for s in resolution.streams] == ["b1"]
        assert "addon-error" in _event_types(container)

    async def test_request_and_store_events(self, container: StreamhubContainer, provider_stub):
        provider_stub.add(A_STREAMS, {"title": "a1", "url": "https://x/a1.mp4"})
        await container.registry.add("https://a.example.com")

        await container.resolution.resolve("movie", "tt0111161")

        types = _event_types(container)
        assert types.index("stream-request") < types.index("cache-store")


# ============================================================================
# Fallback Tests
# ============================================================================


class TestFallback:
    async def test_demo_key(self, container: StreamhubContainer):
        resolution = await container.resolution.resolve("movie", "streamhub:sample-movie")

        assert resolution.source == StreamSource.DEMO
        assert [s.url for s in resolution.streams] == [SAMPLE_MP4_URL]

    async def test_generic_fallback_not_cached(
        self,
        container: StreamhubContainer,
        movie_key: ContentKey,
    ):
        await container.registry.add("https://a.example.com")

        resolution = await container.resolution.resolve("movie", movie_key.id)

        assert resolution.source == StreamSource.DEMO
        assert [s.url for s in resolution.streams] == [SAMPLE_HLS_URL]
        assert container.cache.get(movie_key) is None
        assert "streams-miss" in _event_types(container)

    async def test_fallback_disabled_returns_empty(self, mock_settings: StreamhubSettings, provider_stub):
        settings = mock_settings.model_copy(update={"generic_fallback_enabled": False})
        wired = await StreamhubContainer.create(settings, transport=provider_stub.transport)
        try:
            resolution = await wired.resolution.resolve("movie", "tt0111161")
        finally:
            await wired.close()

        assert resolution.source == StreamSource.EMPTY
        assert resolution.streams == []
        assert resolution.to_payload() == {"streams": []}


# ============================================================================
# Stats and Metadata Tests
# ============================================================================


class TestResolutionStats:
    async def test_each_resolution_counted_once(
        self,
        container: StreamhubContainer,
        movie_key: ContentKey,
    ):
        await container.resolution.resolve("movie", movie_key.id, client_address="10.0.0.1")
        await container.resolution.resolve("movie", movie_key.id, client_address="10.0.0.2")

        entry = container.stats.get(movie_key)
        assert entry.count == 2
        assert entry.source == "demo"
        summary = container.stats.summary()
        assert summary["totalRequests"] == 2
        assert summary["uniqueAddresses"] == 2

    async def test_payload_shape(self, container: StreamhubContainer):
        resolution = await container.resolution.resolve("movie", "streamhub:sample-movie")

        assert resolution.to_payload() == {
            "streams": [{"title": "Streamhub Sample (MP4)", "url": SAMPLE_MP4_URL}]
        }
        assert resolution.duration_ms >= 0

    async def test_describe_without_metadata(self, container: StreamhubContainer):
        assert await container.resolution.describe("movie", "tt0111161") == {
            "id": "tt0111161",
            "type": "movie",
            "name": "Unknown",
            "poster": None,
        }


@pytest.mark.parametrize("content_id", ["tt0111161", "streamhub:sample-hls", "tmdb:278"])
async def test_resolution_never_empty_with_generic_fallback(container: StreamhubContainer, content_id: str):
    resolution = await container.resolution.resolve("movie", content_id)
    assert resolution.streams
