"""Identifier value objects with validation and normalization."""

from __future__ import annotations

import base64
import hashlib
import re
from dataclasses import dataclass
from typing import ClassVar, Literal
from urllib.parse import quote, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ValidationError

MANIFEST_FILENAME = "manifest.json"


def _urlsafe_digest(data: bytes) -> str:
    """Unpadded URL-safe base64, stable across platforms."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class ContentKey(BaseModel):
    """A (type, id) pair identifying content to resolve streams for."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Content type (movie, series, tv, ...)")
    id: str = Field(..., description="Opaque external content identifier")

    @property
    def cache_key(self) -> str:
        """Canonical ``type:id`` key string."""
        return f"{self.type}:{self.id}"

    @property
    def external_id(self) -> str:
        """Digest used to reference this key without exposing the raw id."""
        return derive_external_id(self)

    def __str__(self) -> str:
        return self.cache_key


def normalize(content_type: str, content_id: str) -> ContentKey:
    """Build a ContentKey; the type is trimmed and lowercased, the id kept as-is."""
    return ContentKey(type=str(content_type).strip().lower(), id=str(content_id))


def derive_external_id(key: ContentKey) -> str:
    """SHA-1 of the canonical key, unpadded URL-safe base64 (27 chars)."""
    return _urlsafe_digest(hashlib.sha1(key.cache_key.encode("utf-8")).digest())


class MetaReference(BaseModel):
    """A content id mapped onto a metadata lookup strategy."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["imdb", "tmdb"]
    value: str

    IMDB_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^tt\d+$", re.IGNORECASE)
    TMDB_NAMESPACED_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^tmdb:(\d+)(?::.*)?$", re.IGNORECASE
    )
    NUMERIC_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^\d+$")

    @classmethod
    def parse(cls, content_id: str | None) -> MetaReference | None:
        """
        Pick a lookup strategy for a content id.

        Handles ``tmdb:123`` (optionally followed by ``:season:episode``),
        then the token before the first ``:`` as either an IMDb id
        (``tt123``, also covers ``tt123:1:2``) or a bare TMDB id.
        """
        if not content_id:
            return None
        raw = str(content_id).strip()

        namespaced = cls.TMDB_NAMESPACED_PATTERN.match(raw)
        if namespaced:
            return cls(kind="tmdb", value=namespaced.group(1))

        base = raw.split(":", 1)[0]
        if cls.IMDB_PATTERN.match(base):
            return cls(kind="imdb", value=base.lower())
        if cls.NUMERIC_PATTERN.match(base):
            return cls(kind="tmdb", value=base)
        return None


@dataclass(frozen=True)
class ManifestUrl:
    """Normalized provider manifest locator."""

    value: str

    CUSTOM_SCHEME: ClassVar[str] = "stremio://"
    # Characters encodeURIComponent leaves alone on top of quote()'s defaults
    _ID_SAFE: ClassVar[str] = "!*'()"

    @classmethod
    def parse(cls, raw: str | None) -> ManifestUrl:
        """
        Normalize a manifest locator.

        ``stremio://`` is rewritten to ``https://`` and the path is made to
        point at ``manifest.json``.

        Raises:
            ValidationError: Empty or unparsable input, unsupported
                scheme or missing host.
        """
        text = str(raw or "").strip()
        if not text:
            raise ValidationError("Empty URL")

        if text.lower().startswith(cls.CUSTOM_SCHEME):
            text = "https://" + text[len(cls.CUSTOM_SCHEME) :]

        try:
            parts = urlsplit(text)
        except ValueError as e:
            raise ValidationError("Invalid URL", {"url": text}) from e
        if parts.scheme not in ("http", "https"):
            raise ValidationError("Unsupported protocol", {"url": text})
        if not parts.netloc:
            raise ValidationError("Missing host", {"url": text})

        netloc = parts.netloc if "@" in parts.netloc else parts.netloc.lower()
        path = cls._ensure_manifest_path(parts.path)
        return cls(urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment)))

    @staticmethod
    def _ensure_manifest_path(path: str) -> str:
        if not path or path == "/":
            return f"/{MANIFEST_FILENAME}"
        if MANIFEST_FILENAME in path:
            return path
        return f"{path.rstrip('/')}/{MANIFEST_FILENAME}"

    @property
    def provider_id(self) -> str:
        """Deterministic provider id derived from the normalized locator."""
        return f"addon-{_urlsafe_digest(self.value.encode('utf-8'))}"

    @property
    def base(self) -> str:
        """Everything before ``manifest.json``, always ending in a slash."""
        idx = self.value.find(MANIFEST_FILENAME)
        if idx >= 0:
            return self.value[:idx]
        return self.value if self.value.endswith("/") else f"{self.value}/"

    def stream_url(self, content_type: str, content_id: str, *, suffix: bool = True) -> str:
        """Stream endpoint for a content key, with or without ``.json``."""
        url = f"{self.base}stream/{content_type}/{quote(content_id, safe=self._ID_SAFE)}"
        return f"{url}.json" if suffix else url

    def __str__(self) -> str:
        return self.value
