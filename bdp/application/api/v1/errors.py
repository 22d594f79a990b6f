"""Centralized error transformation for API routes.

Maps portal errors (domain, data-integrity and infrastructure) to
HTTPException responses.
"""

import logging
from typing import Any

from fastapi import HTTPException

from bdp.domain.shared.error import (
    AuthorizationError,
    ConflictError,
    CycleDetectedError,
    DataIntegrityError,
    DomainError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    PortalError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    CycleDetectedError: 400,
    InvalidStateError: 409,
    ConflictError: 409,
    AuthorizationError: 403,
}


def _status_for(error: DomainError) -> int:
    # Most specific registered class wins (InsufficientRoleError -> AuthorizationError)
    for cls in type(error).__mro__:
        if cls in DOMAIN_ERROR_STATUS_MAP:
            return DOMAIN_ERROR_STATUS_MAP[cls]
    return 400


def map_portal_error(error: PortalError) -> HTTPException:
    """Map a portal error to an HTTPException.

    Args:
        error: The portal error to map.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        # Infrastructure errors → 503 Service Unavailable
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        # Distinguish 401 (unauthenticated) from 403 (unauthorized)
        if isinstance(error, AuthorizationError) and error.code == "missing_token":
            return HTTPException(
                status_code=401,
                detail=detail,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return HTTPException(status_code=_status_for(error), detail=detail)

    if isinstance(error, DataIntegrityError):
        logger.error("Data integrity error: %s (%s)", error.message, error.code)
        # Never expose which role, capability or company was unknown
        return HTTPException(
            status_code=500,
            detail={"code": error.code, "message": "Internal server error"},
        )

    # ConfigurationError and unknown PortalError subclasses
    return HTTPException(status_code=500, detail=detail)
