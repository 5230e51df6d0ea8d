"""Shared test fixtures for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from streamhub.config import StreamhubSettings
from streamhub.core.identifiers import ContentKey, ManifestUrl, normalize
from streamhub.core.models import MetaSummary, ProviderDescriptor, StreamDescriptor

# ============================================================================
# Test Data Constants
# ============================================================================


PROVIDER_A_MANIFEST = "https://a.example.com/manifest.json"
PROVIDER_B_MANIFEST = "https://b.example.com/manifest.json"
PROVIDER_C_MANIFEST = "https://c.example.com/manifest.json"

MOVIE_ID = "tt0111161"  # The Shawshank Redemption
EPISODE_ID = "tt0944947:1:1"  # Game of Thrones S01E01


def make_provider(manifest: str, name: str | None = None) -> ProviderDescriptor:
    """Build a provider descriptor the way the registry would."""
    url = ManifestUrl.parse(manifest)
    return ProviderDescriptor(id=url.provider_id, name=name or url.value, manifest_url=url.value)


def stream_url(manifest: str, content_type: str, content_id: str, *, suffix: bool = True) -> str:
    """Stream endpoint a provider is queried at."""
    return ManifestUrl.parse(manifest).stream_url(content_type, content_id, suffix=suffix)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def movie_key() -> ContentKey:
    return normalize("movie", MOVIE_ID)


@pytest.fixture
def episode_key() -> ContentKey:
    return normalize("series", EPISODE_ID)


@pytest.fixture
def sample_stream() -> StreamDescriptor:
    """A direct-URL stream."""
    return StreamDescriptor(title="1080p WEB", url="https://cdn.example.com/movie.mp4")


@pytest.fixture
def sample_streams() -> list[StreamDescriptor]:
    """Streams using different locator kinds."""
    return [
        StreamDescriptor(title="1080p WEB", url="https://cdn.example.com/movie.mp4"),
        StreamDescriptor.model_validate(
            {"name": "Torrent", "infoHash": "c9e15763f722f23e98a29decdfae341b98d53056", "fileIdx": 0}
        ),
        StreamDescriptor.model_validate({"title": "Trailer", "ytId": "6hB3S9bIaco"}),
    ]


@pytest.fixture
def sample_meta() -> MetaSummary:
    return MetaSummary(
        title="The Shawshank Redemption",
        poster="https://image.tmdb.org/t/p/w342/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg",
    )


@pytest.fixture
def provider_a() -> ProviderDescriptor:
    return make_provider(PROVIDER_A_MANIFEST, "Provider A")


@pytest.fixture
def provider_b() -> ProviderDescriptor:
    return make_provider(PROVIDER_B_MANIFEST, "Provider B")


@pytest.fixture
def provider_c() -> ProviderDescriptor:
    return make_provider(PROVIDER_C_MANIFEST, "Provider C")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def mock_settings(data_dir: Path) -> StreamhubSettings:
    """Settings with an isolated data directory and no metadata key."""
    return StreamhubSettings(
        _env_file=None,
        data_dir=data_dir,
        provider_timeout=2.0,
        metadata_timeout=2.0,
        tmdb_api_key=None,
        debug=True,
        log_level="DEBUG",
    )


@pytest.fixture
def mock_settings_with_tmdb(data_dir: Path) -> StreamhubSettings:
    """Settings with a TMDB key configured."""
    return StreamhubSettings(
        _env_file=None,
        data_dir=data_dir,
        provider_timeout=2.0,
        metadata_timeout=2.0,
        tmdb_api_key="test-tmdb-key",
    )


@pytest.fixture
def stream_url_for():
    """Factory for the stream endpoint of a manifest URL."""
    return stream_url
