"""Custom exception hierarchy for streamhub."""

from pathlib import Path
from typing import Any


class StreamhubError(Exception):
    """Base exception for all streamhub errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StreamhubError):
    """Input validation failed."""

    pass


class NotFoundError(StreamhubError):
    """Resource not found."""

    pass


class ProviderError(StreamhubError):
    """A single upstream provider could not supply streams."""

    def __init__(
        self,
        message: str,
        provider_id: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.provider_id = provider_id
        self.url = url
        self.status_code = status_code


class ProviderUnreachableError(ProviderError):
    """Network failure, timeout or non-success HTTP status from a provider."""

    pass


class ProviderMalformedError(ProviderError):
    """Provider answered with a payload that is not a stream list."""

    pass


class PersistenceWriteError(StreamhubError):
    """A backing document could not be written."""

    def __init__(
        self,
        message: str,
        path: Path,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class MetadataUnavailableError(StreamhubError):
    """No metadata capability is configured or the lookup failed."""

    pass
