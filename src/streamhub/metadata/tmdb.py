"""TMDB metadata provider."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import ValidationError as PydanticValidationError

from streamhub.core.exceptions import MetadataUnavailableError
from streamhub.core.identifiers import MetaReference
from streamhub.core.models import MetaDetail, MetaSummary
from streamhub.core.types import ContentType
from streamhub.metadata.base import AbstractMetadataProvider

logger = logging.getLogger(__name__)

# Raised while reading a response whose shape differs from the documented one
PAYLOAD_ERRORS = (PydanticValidationError, AttributeError, TypeError, KeyError, IndexError)


def _is_episodic(content_type: str) -> bool:
    try:
        return ContentType(content_type).is_episodic
    except ValueError:
        return False


class TmdbMetadataProvider(AbstractMetadataProvider):
    """
    Metadata lookups against The Movie Database v3 API.

    IMDb ids go through ``/find`` first; TMDB ids are fetched directly
    from ``/movie/{id}`` or ``/tv/{id}``.
    """

    SOURCE_NAME: ClassVar[str] = "tmdb"
    BASE_URL: ClassVar[str] = "https://api.themoviedb.org/3"
    IMAGE_BASE: ClassVar[str] = "https://image.tmdb.org/t/p/w342"
    BACKDROP_BASE: ClassVar[str] = "https://image.tmdb.org/t/p/original"

    def __init__(
        self,
        api_key: str | Callable[[], str | None] | None = None,
        *,
        base_url: str | None = None,
        image_base: str | None = None,
        backdrop_base: str | None = None,
        timeout: float = 6.0,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout)
        self._api_key = api_key
        self._image_base = image_base or self.IMAGE_BASE
        self._backdrop_base = backdrop_base or self.BACKDROP_BASE

    @property
    def api_key(self) -> str | None:
        """Current key; a callable source is consulted on every access."""
        key = self._api_key() if callable(self._api_key) else self._api_key
        return key or None

    @property
    def available(self) -> bool:
        return self.api_key is not None

    def _params(self, **extra: str) -> dict[str, str]:
        api_key = self.api_key
        if api_key is None:
            raise MetadataUnavailableError("TMDB API key is not configured")
        return {"api_key": api_key, **extra}

    def _image(self, path: str | None, base: str | None = None) -> str | None:
        return f"{base or self._image_base}{path}" if path else None

    async def _find_by_imdb(self, imdb_id: str, episodic: bool) -> tuple[str, dict[str, Any]] | None:
        """Return (kind, result) for an IMDb id, preferring tv results for episodic types."""
        data = await self._get_json(
            f"/find/{imdb_id}", params=self._params(external_source="imdb_id")
        )
        if not data:
            return None

        movies = data.get("movie_results") or []
        shows = data.get("tv_results") or []
        candidates = [("tv", shows), ("movie", movies)] if episodic else [("movie", movies), ("tv", shows)]
        for kind, results in candidates:
            if results and isinstance(results[0], dict):
                return kind, results[0]
        return None

    async def _fetch(self, kind: str, tmdb_id: str) -> dict[str, Any] | None:
        return await self._get_json(f"/{kind}/{tmdb_id}", params=self._params())

    async def summary(self, content_type: str, content_id: str) -> MetaSummary | None:
        try:
            return await self._summary(content_type, content_id)
        except PAYLOAD_ERRORS as e:
            raise MetadataUnavailableError(
                "Unexpected TMDB payload", {"id": content_id, "error": str(e)}
            ) from e

    async def details(self, content_type: str, content_id: str) -> MetaDetail | None:
        try:
            return await self._details(content_type, content_id)
        except PAYLOAD_ERRORS as e:
            raise MetadataUnavailableError(
                "Unexpected TMDB payload", {"id": content_id, "error": str(e)}
            ) from e

    async def _summary(self, content_type: str, content_id: str) -> MetaSummary | None:
        ref = MetaReference.parse(content_id)
        if ref is None:
            return None
        episodic = _is_episodic(content_type)

        if ref.kind == "imdb":
            found = await self._find_by_imdb(ref.value, episodic)
            if found is None:
                return None
            data = found[1]
        else:
            data = await self._fetch("tv" if episodic else "movie", ref.value)
            if data is None:
                return None

        return MetaSummary(
            title=data.get("title") or data.get("name") or "",
            poster=self._image(data.get("poster_path")) or "",
        )

    async def _details(self, content_type: str, content_id: str) -> MetaDetail | None:
        ref = MetaReference.parse(content_id)
        if ref is None:
            return None
        episodic = _is_episodic(content_type)

        if ref.kind == "imdb":
            found = await self._find_by_imdb(ref.value, episodic)
            if found is None:
                return None
            kind, pick = found
            tmdb_id = str(pick.get("id", ""))
            if not tmdb_id:
                return None
        else:
            kind, tmdb_id = ("tv" if episodic else "movie"), ref.value

        data = await self._fetch(kind, tmdb_id)
        if data is None:
            return None

        released = data.get("release_date") or data.get("first_air_date") or ""
        runtime = data.get("runtime")
        if runtime is None and data.get("episode_run_time"):
            runtime = data["episode_run_time"][0]

        return MetaDetail(
            id=content_id,
            type=content_type,
            name=data.get("title") or data.get("name") or "",
            poster=self._image(data.get("poster_path")),
            background=self._image(data.get("backdrop_path"), self._backdrop_base),
            description=data.get("overview") or "",
            release_info=released[:4],
            runtime=runtime,
            imdb_rating=data.get("vote_average"),
        )
