"""Integration test fixtures for the HTTP application."""

from __future__ import annotations

from typing import Any, AsyncIterator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient, Response

from streamhub.api.app import create_app
from streamhub.config import StreamhubSettings
from streamhub.container import StreamhubContainer


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ============================================================================
# Provider Fixtures
# ============================================================================


class UpstreamProviders:
    """In-process stand-in for remote providers, keyed by full URL."""

    def __init__(self) -> None:
        self.routes: dict[str, Response] = {}
        self.hits: list[str] = []

    def serve(self, url: str, *streams: dict[str, Any]) -> None:
        self.routes[url] = Response(200, json={"streams": list(streams)})

    def __call__(self, request: httpx.Request) -> Response:
        self.hits.append(str(request.url))
        return self.routes.get(str(request.url), Response(404))


@pytest.fixture
def upstream() -> UpstreamProviders:
    return UpstreamProviders()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app_container(
    mock_settings: StreamhubSettings,
    upstream: UpstreamProviders,
) -> AsyncIterator[StreamhubContainer]:
    container = await StreamhubContainer.create(mock_settings, transport=httpx.MockTransport(upstream))
    yield container
    await container.close()


@pytest.fixture
def app(mock_settings: StreamhubSettings, app_container: StreamhubContainer):
    """
    Application with its container installed up front.

    ASGITransport does not run the lifespan, so the container the lifespan
    would build is attached directly.
    """
    application = create_app(settings=mock_settings)
    application.state.container = app_container
    return application


@pytest.fixture
async def test_client(app) -> AsyncIterator[AsyncClient]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
