"""Translation of domain errors into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from streamhub.api.schemas import ErrorDetail
from streamhub.core.exceptions import NotFoundError, StreamhubError, ValidationError


def http_error(exc: StreamhubError) -> HTTPException:
    """NotFoundError → 404, ValidationError → 400, anything else → 500."""
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    detail = ErrorDetail(
        code=type(exc).__name__,
        message=exc.message,
        details=exc.details or None,
    )
    return HTTPException(status_code=status_code, detail=detail.model_dump(by_alias=True))
