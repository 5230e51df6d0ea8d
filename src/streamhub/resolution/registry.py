"""Registry of upstream providers, persisted as a JSON list."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from streamhub.cache.document import DocumentStore
from streamhub.core.exceptions import NotFoundError, ValidationError
from streamhub.core.identifiers import ManifestUrl
from streamhub.core.models import ProviderDescriptor
from streamhub.core.types import EventType, ProviderCategory
from streamhub.telemetry.events import EventLog

logger = logging.getLogger(__name__)


def normalize_manifest_url(raw: str | None) -> str:
    """Canonical manifest URL string; see ``ManifestUrl.parse``."""
    return ManifestUrl.parse(raw).value


def _coerce_category(category: str | None) -> ProviderCategory:
    try:
        return ProviderCategory(category)
    except ValueError:
        return ProviderCategory.STREAMS


class ProviderRegistry(DocumentStore):
    """
    Ordered set of registered providers.

    Providers are unique by normalized manifest URL, which also determines
    their id. Readers get immutable snapshots, so a fan-out in progress is
    unaffected by concurrent additions or removals.
    """

    def __init__(self, path, events: EventLog | None = None) -> None:
        super().__init__(path)
        self._events = events
        self._providers: list[ProviderDescriptor] = []

    def __len__(self) -> int:
        return len(self._providers)

    def snapshot(self) -> tuple[ProviderDescriptor, ...]:
        """Current providers in registration order."""
        return tuple(self._providers)

    def get(self, provider_id: str) -> ProviderDescriptor:
        """
        Raises:
            NotFoundError: No provider with that id.
        """
        for provider in self._providers:
            if provider.id == provider_id:
                return provider
        raise NotFoundError("Provider not found", {"id": provider_id})

    async def add(
        self,
        url: str | None,
        name: str | None = None,
        category: str | None = None,
    ) -> tuple[ProviderDescriptor, bool]:
        """
        Register a provider, or update the one already at that URL.

        Returns:
            The stored descriptor and whether it was newly created.

        Raises:
            ValidationError: The URL cannot be normalized.
        """
        try:
            manifest = ManifestUrl.parse(url)
        except ValidationError as e:
            await self._log(EventType.ADDON_ERROR, "Failed to add provider", {"error": e.message})
            raise

        resolved_category = _coerce_category(category)
        async with self._lock:
            for position, existing in enumerate(self._providers):
                if existing.manifest_url != manifest.value:
                    continue
                updated = existing.model_copy(
                    update={"name": name or existing.name, "category": resolved_category}
                )
                self._providers[position] = updated
                await self._persist()
                created = False
                break
            else:
                updated = ProviderDescriptor(
                    id=manifest.provider_id,
                    name=name or manifest.value,
                    manifest_url=manifest.value,
                    category=resolved_category,
                )
                self._providers.append(updated)
                await self._persist()
                created = True

        if created:
            logger.info(f"Registered provider {updated.id} ({updated.manifest_url})")
            await self._log(EventType.ADDON_ADD, "Provider added", self._event_meta(updated))
        else:
            await self._log(EventType.ADDON_EXISTS, "Provider already present", self._event_meta(updated))
        return updated, created

    async def remove(self, provider_id: str) -> ProviderDescriptor:
        """
        Unregister a provider.

        Raises:
            NotFoundError: No provider with that id.
        """
        async with self._lock:
            for position, provider in enumerate(self._providers):
                if provider.id == provider_id:
                    del self._providers[position]
                    await self._persist()
                    break
            else:
                raise NotFoundError("Provider not found", {"id": provider_id})

        logger.info(f"Removed provider {provider.id}")
        await self._log(
            EventType.ADDON_REMOVE,
            "Provider removed",
            {"id": provider.id, "manifestUrl": provider.manifest_url},
        )
        return provider

    @staticmethod
    def _event_meta(provider: ProviderDescriptor) -> dict[str, Any]:
        return {
            "manifestUrl": provider.manifest_url,
            "name": provider.name,
            "category": str(provider.category),
        }

    async def _log(self, event_type: EventType, message: str, meta: dict[str, Any]) -> None:
        if self._events is not None:
            await self._events.append(event_type, message, meta)

    def _serialize(self) -> list[dict[str, Any]]:
        return [provider.to_document() for provider in self._providers]

    def _restore(self, raw: Any | None) -> None:
        self._providers = []
        if not isinstance(raw, list):
            return
        seen: set[str] = set()
        for value in raw:
            try:
                provider = ProviderDescriptor.model_validate(value)
            except PydanticValidationError:
                logger.warning("Dropping invalid provider record")
                continue
            if provider.manifest_url in seen:
                continue
            seen.add(provider.manifest_url)
            self._providers.append(provider)
