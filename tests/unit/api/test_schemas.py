"""Tests for API request/response schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from streamhub.api.schemas import (
    AddProviderRequest,
    CacheEntryResponse,
    CacheEntrySummary,
    CredentialsSchema,
    ErrorDetail,
    RecentItemResponse,
    UpdateCredentialsRequest,
)
from streamhub.core.identifiers import ContentKey
from streamhub.core.models import CacheEntry, MetaSummary, RequestStatsEntry, StreamDescriptor

# ============================================================================
# Request Schema Tests
# ============================================================================


class TestAddProviderRequest:
    """Tests for AddProviderRequest schema."""

    def test_url_only(self):
        request = AddProviderRequest(url="https://a.example.com")
        assert request.name is None
        assert request.category is None

    def test_empty_url_invalid(self):
        with pytest.raises(ValidationError):
            AddProviderRequest(url="")

    def test_name_too_long(self):
        with pytest.raises(ValidationError):
            AddProviderRequest(url="https://a.example.com", name="x" * 201)


class TestUpdateCredentialsRequest:
    def test_camel_case_input(self):
        request = UpdateCredentialsRequest.model_validate({"tmdbApiKey": "k"})
        assert request.tmdb_api_key == "k"
        assert request.model_dump(exclude_unset=True) == {"tmdb_api_key": "k"}

    def test_empty_request(self):
        assert UpdateCredentialsRequest().model_dump(exclude_unset=True) == {}


# ============================================================================
# Response Schema Tests
# ============================================================================


class TestCacheSchemas:
    """Tests for cache entry serialization."""

    @pytest.fixture
    def entry(
        self,
        movie_key: ContentKey,
        sample_streams: list[StreamDescriptor],
        sample_meta: MetaSummary,
    ) -> CacheEntry:
        return CacheEntry(
            external_id=movie_key.external_id,
            type=movie_key.type,
            content_id=movie_key.id,
            streams=sample_streams,
            meta=sample_meta,
        )

    def test_summary_from_entry(self, entry: CacheEntry):
        summary = CacheEntrySummary.from_entry(entry)
        data = summary.model_dump(by_alias=True)

        assert data["key"] == "movie:tt0111161"
        assert data["id"] == entry.external_id
        assert data["contentId"] == "tt0111161"
        assert data["streamsCount"] == 3
        assert data["meta"]["title"] == "The Shawshank Redemption"

    def test_full_entry_keeps_wire_streams(self, entry: CacheEntry):
        data = CacheEntryResponse.from_entry(entry).model_dump(by_alias=True)

        assert data["streams"][1] == {
            "title": "Torrent",
            "name": "Torrent",
            "infoHash": "c9e15763f722f23e98a29decdfae341b98d53056",
            "fileIdx": 0,
        }

    def test_missing_meta(self, entry: CacheEntry):
        entry = entry.model_copy(update={"meta": None})
        assert CacheEntrySummary.from_entry(entry).meta is None


class TestRecentItemResponse:
    def test_from_entry(self, movie_key: ContentKey):
        stats = RequestStatsEntry(
            external_id=movie_key.external_id,
            type="movie",
            content_id=movie_key.id,
            count=3,
            source="cache",
        )

        data = RecentItemResponse.from_entry(stats).model_dump(by_alias=True)

        assert data["count"] == 3
        assert data["externalId"] == movie_key.external_id
        assert data["lastRequestedAt"] is None
        assert data["meta"] is None


class TestMiscSchemas:
    def test_credentials_defaults(self):
        assert CredentialsSchema().model_dump(by_alias=True) == {
            "tmdbApiKey": "",
            "traktClientId": "",
            "traktClientSecret": "",
            "traktAccessToken": "",
            "opensubtitlesApiKey": "",
        }

    def test_error_detail(self):
        detail = ErrorDetail(code="NotFoundError", message="Provider not found")
        assert detail.details is None
