"""
Django Rest Framework integration

Maps domain exceptions onto HTTP responses:
- ValidationError -> 400
- ConflictError   -> 409 (with the machine-readable `reason`)
- NotFoundError   -> 404
"""

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
)


def domain_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER that understands domain errors"""
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    http_status = next(
        (code for error_type, code in STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    body = {'detail': exc.message}
    if isinstance(exc, ConflictError):
        body['reason'] = exc.reason

    view = context.get('view')
    logger.info(
        f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'view'}: {exc.message}"
    )
    return Response(body, status=http_status)
