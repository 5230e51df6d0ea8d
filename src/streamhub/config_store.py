"""Runtime-editable third-party credentials."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from streamhub.cache.document import DocumentStore
from streamhub.core.models import Credentials
from streamhub.core.types import EventType
from streamhub.telemetry.events import EventLog

logger = logging.getLogger(__name__)


class CredentialStore(DocumentStore):
    """Credentials persisted to their own document, editable at runtime."""

    def __init__(self, path, events: EventLog | None = None) -> None:
        super().__init__(path)
        self._events = events
        self._credentials = Credentials()

    def get(self) -> Credentials:
        return self._credentials

    @property
    def tmdb_api_key(self) -> str | None:
        return self._credentials.tmdb_api_key or None

    async def update(self, **changes: str | None) -> Credentials:
        """
        Replace the given fields; ``None`` leaves a field untouched.

        Unknown field names are ignored.
        """
        fields = {
            name: (value or "").strip()
            for name, value in changes.items()
            if value is not None and name in Credentials.model_fields
        }
        async with self._lock:
            self._credentials = self._credentials.model_copy(update=fields)
            await self._persist()

        if self._events is not None:
            # Only record which credentials are set, never their values
            await self._events.append(
                EventType.CONFIG_UPDATE,
                "Credentials updated",
                {name: bool(value) for name, value in self._credentials.model_dump().items()},
            )
        return self._credentials

    def _serialize(self) -> dict[str, Any]:
        return self._credentials.to_document()

    def _restore(self, raw: Any | None) -> None:
        self._credentials = Credentials()
        if not isinstance(raw, dict):
            return
        try:
            self._credentials = Credentials.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Ignoring invalid credentials document")
