"""Unit test fixtures with HTTP mocking and isolated stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest
import respx
from httpx import Response

from streamhub.cache.keys import CacheKeys
from streamhub.cache.store import StreamCacheStore
from streamhub.config import StreamhubSettings
from streamhub.container import StreamhubContainer
from streamhub.telemetry.events import EventLog
from streamhub.telemetry.stats import StatsRecorder

# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock():
    """Provide a respx mock router for HTTP mocking.

    Use this when you need fine-grained control over mocked responses.
    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


class ProviderStub:
    """Answers provider stream requests from a URL table, 404 otherwise."""

    def __init__(self) -> None:
        self.routes: dict[str, Response] = {}
        self.requests: list[str] = []

    def add(self, url: str, *streams: dict[str, Any]) -> None:
        self.routes[url] = Response(200, json={"streams": list(streams)})

    def __call__(self, request: httpx.Request) -> Response:
        self.requests.append(str(request.url))
        return self.routes.get(str(request.url), Response(404))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def provider_stub() -> ProviderStub:
    return ProviderStub()


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
async def event_log(data_dir: Path) -> EventLog:
    log = EventLog(data_dir / CacheKeys.LOGS_DOCUMENT)
    await log.load()
    return log


@pytest.fixture
async def cache_store(data_dir: Path) -> StreamCacheStore:
    store = StreamCacheStore(data_dir / CacheKeys.STREAMS_DOCUMENT)
    await store.load()
    return store


@pytest.fixture
async def stats_recorder(data_dir: Path) -> StatsRecorder:
    recorder = StatsRecorder(data_dir / CacheKeys.STATS_DOCUMENT)
    await recorder.load()
    return recorder


@pytest.fixture
async def container(mock_settings: StreamhubSettings, provider_stub: ProviderStub):
    """Fully wired components over an isolated data directory."""
    wired = await StreamhubContainer.create(mock_settings, transport=provider_stub.transport)
    yield wired
    await wired.close()


# ============================================================================
# Mock Response Helpers
# ============================================================================


def mock_json_response(data: Any, status_code: int = 200) -> Response:
    """Create a mock JSON response."""
    return Response(
        status_code=status_code,
        json=data,
        headers={"Content-Type": "application/json"},
    )


def mock_streams_response(*streams: dict[str, Any]) -> Response:
    """Create a provider stream-list response."""
    return mock_json_response({"streams": list(streams)})


def mock_error_response(status_code: int, message: str = "Error") -> Response:
    """Create a mock error response."""
    return Response(
        status_code=status_code,
        json={"error": message},
        headers={"Content-Type": "application/json"},
    )


@pytest.fixture
def mock_responses():
    """Provide helper functions for creating mock responses."""
    return {
        "json": mock_json_response,
        "streams": mock_streams_response,
        "error": mock_error_response,
    }
