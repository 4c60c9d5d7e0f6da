"""Mapping of business exceptions onto HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder

from ..exceptions import (
    BusinessException,
    InvalidTransitionException,
    NotFoundException,
    OverrideNotPermittedException,
    StaleStateException,
    StoreUnavailableException,
    ValidationException,
)

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION: list[tuple[type[BusinessException], int]] = [
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidTransitionException, status.HTTP_409_CONFLICT),
    (StaleStateException, status.HTTP_409_CONFLICT),
    (OverrideNotPermittedException, status.HTTP_403_FORBIDDEN),
    (StoreUnavailableException, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(exc: BusinessException) -> int:
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(exc: BusinessException) -> HTTPException:
    """Build the HTTP error for a business exception; the body carries code, message and details."""
    code = status_code_for(exc)
    if code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    return HTTPException(
        status_code=code,
        detail={"code": exc.code, "message": exc.message, "details": jsonable_encoder(exc.details)},
    )


def internal_error(action: str, exc: Exception) -> HTTPException:
    logger.exception(f"Error trying to {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": "INTERNAL_ERROR", "message": f"Failed to {action}", "details": {}},
    )
