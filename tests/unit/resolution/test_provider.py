"""Tests for the provider stream client."""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest
import respx
from httpx import Response

from streamhub.core.exceptions import ProviderMalformedError, ProviderUnreachableError
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import ProviderDescriptor
from streamhub.resolution.provider import ProviderClient

SUFFIXED_URL = "https://a.example.com/stream/movie/tt0111161.json"
BARE_URL = "https://a.example.com/stream/movie/tt0111161"


@pytest.fixture
async def client():
    """Create a provider client and close it afterwards."""
    provider_client = ProviderClient(timeout=1.0)
    yield provider_client
    await provider_client.close()


# ============================================================================
# Endpoint Variant Tests
# ============================================================================


class TestEndpointVariants:
    """Tests for the .json then bare endpoint order."""

    @respx.mock
    async def test_suffixed_endpoint_success(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
    ):
        """A good .json answer should be used without trying the bare URL."""
        route = respx.get(SUFFIXED_URL).mock(
            return_value=Response(200, json={"streams": [{"title": "s1", "url": "https://x/1.mp4"}]})
        )

        streams = await client.fetch_streams(provider_a, movie_key)

        assert [s.title for s in streams] == ["s1"]
        assert route.call_count == 1

    async def test_falls_back_to_bare_endpoint(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        """A failing .json endpoint should be followed by the bare endpoint."""
        suffixed = respx_mock.get(SUFFIXED_URL).mock(return_value=Response(404))
        bare = respx_mock.get(BARE_URL).mock(
            return_value=Response(200, json={"streams": [{"title": "s1", "url": "https://x/1.mp4"}]})
        )

        streams = await client.fetch_streams(provider_a, movie_key)

        assert [s.title for s in streams] == ["s1"]
        assert suffixed.call_count == 1
        assert bare.call_count == 1

    @respx.mock
    async def test_request_headers(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
    ):
        route = respx.get(SUFFIXED_URL).mock(return_value=Response(200, json={"streams": []}))

        await client.fetch_streams(provider_a, movie_key)

        request = route.calls.last.request
        assert request.headers["User-Agent"] == "streamhub/1.0"
        assert request.headers["Accept"] == "application/json"

    @respx.mock
    async def test_id_is_percent_encoded(self, client: ProviderClient, provider_a: ProviderDescriptor):
        route = respx.get("https://a.example.com/stream/series/tt0944947%3A1%3A1.json").mock(
            return_value=Response(200, json={"streams": []})
        )

        await client.fetch_streams(provider_a, ContentKey(type="series", id="tt0944947:1:1"))
        assert route.called


# ============================================================================
# Payload Tests
# ============================================================================


class TestPayloads:
    """Tests for stream list validation."""

    @respx.mock
    async def test_empty_list_is_valid(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
    ):
        respx.get(SUFFIXED_URL).mock(return_value=Response(200, json={"streams": []}))
        assert await client.fetch_streams(provider_a, movie_key) == []

    @respx.mock
    async def test_invalid_entries_dropped(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
    ):
        """Entries without a title or locator are skipped individually."""
        respx.get(SUFFIXED_URL).mock(
            return_value=Response(
                200,
                json={
                    "streams": [
                        {"title": "good", "url": "https://x/1.mp4"},
                        {"title": "no locator"},
                        "not an object",
                        {"name": "Torrent", "infoHash": "abc", "seeders": 12},
                    ]
                },
            )
        )

        streams = await client.fetch_streams(provider_a, movie_key)

        assert [s.title for s in streams] == ["good", "Torrent"]
        assert streams[1].to_payload()["seeders"] == 12

    async def test_all_entries_invalid_is_malformed(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(return_value=Response(200, json={"streams": [{"title": "x"}]}))
        respx_mock.get(BARE_URL).mock(return_value=Response(200, json={"streams": [{}]}))

        with pytest.raises(ProviderMalformedError):
            await client.fetch_streams(provider_a, movie_key)

    @pytest.mark.parametrize(
        "payload",
        [{"metas": []}, {"streams": "nope"}, ["streams"], None],
    )
    async def test_missing_streams_list_is_malformed(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
        payload,
    ):
        respx_mock.get(SUFFIXED_URL).mock(return_value=Response(200, json=payload))
        respx_mock.get(BARE_URL).mock(return_value=Response(200, json=payload))

        with pytest.raises(ProviderMalformedError) as exc_info:
            await client.fetch_streams(provider_a, movie_key)
        assert exc_info.value.provider_id == provider_a.id

    async def test_non_json_is_malformed(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(return_value=Response(200, text="<html>"))
        respx_mock.get(BARE_URL).mock(return_value=Response(200, text="<html>"))

        with pytest.raises(ProviderMalformedError):
            await client.fetch_streams(provider_a, movie_key)

    async def test_malformed_reported_over_later_network_error(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(return_value=Response(200, json={"oops": True}))
        respx_mock.get(BARE_URL).mock(return_value=Response(502))

        with pytest.raises(ProviderMalformedError):
            await client.fetch_streams(provider_a, movie_key)


# ============================================================================
# Failure Tests
# ============================================================================


class TestFailures:
    """Tests for transport and HTTP failures."""

    async def test_timeout_is_unreachable(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
        respx_mock.get(BARE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(ProviderUnreachableError) as exc_info:
            await client.fetch_streams(provider_a, movie_key)
        assert "Timed out" in exc_info.value.message

    async def test_connection_error_is_unreachable(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(side_effect=httpx.ConnectError("refused"))
        respx_mock.get(BARE_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ProviderUnreachableError):
            await client.fetch_streams(provider_a, movie_key)

    async def test_server_error_is_unreachable(
        self,
        client: ProviderClient,
        provider_a: ProviderDescriptor,
        movie_key: ContentKey,
        respx_mock,
    ):
        respx_mock.get(SUFFIXED_URL).mock(return_value=Response(500))
        respx_mock.get(BARE_URL).mock(return_value=Response(500))

        with pytest.raises(ProviderUnreachableError) as exc_info:
            await client.fetch_streams(provider_a, movie_key)
        assert exc_info.value.status_code == 500
        assert exc_info.value.url == BARE_URL

    async def test_slow_body_hits_deadline(self, provider_a: ProviderDescriptor, movie_key: ContentKey):
        """A body trickling in under the read timeout is still cut off."""

        class TrickleStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                yield b'{"streams": ['
                for _ in range(100):
                    await asyncio.sleep(0.05)
                    yield b" "

        def handler(request: httpx.Request) -> Response:
            return Response(200, headers={"Content-Type": "application/json"}, stream=TrickleStream())

        started = time.monotonic()
        async with ProviderClient(timeout=0.3, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ProviderUnreachableError) as exc_info:
                await client.fetch_streams(provider_a, movie_key)

        assert "Timed out" in exc_info.value.message
        assert time.monotonic() - started < 2.0


class TestLifecycle:
    async def test_context_manager_closes_client(self, provider_a: ProviderDescriptor, movie_key: ContentKey):
        with respx.mock:
            respx.get(SUFFIXED_URL).mock(return_value=Response(200, json={"streams": []}))
            async with ProviderClient() as client:
                await client.fetch_streams(provider_a, movie_key)
                assert client._client is not None
            assert client._client is None

    async def test_custom_transport(self, provider_a: ProviderDescriptor, movie_key: ContentKey):
        def handler(request: httpx.Request) -> Response:
            return Response(200, json={"streams": [{"title": "local", "url": str(request.url)}]})

        async with ProviderClient(transport=httpx.MockTransport(handler)) as client:
            streams = await client.fetch_streams(provider_a, movie_key)

        assert streams[0].url == SUFFIXED_URL
