"""DRF exception handler translating booking core errors into HTTP responses."""

from __future__ import annotations

import structlog
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import BookingError, TransactionAborted

logger = structlog.get_logger(__name__)

RETRY_AFTER_SECONDS = 1

STATUS_BY_KIND = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "identity_role_conflict": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "booking_conflict": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "transaction_aborted": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def booking_exception_handler(exc, context):
    """
    Body for core errors: {"success": false, "kind", "message", "data"}.

    Anything else (serializer validation, auth, 404 from get_object) keeps
    DRF's default handling and payload shape.
    """
    if not isinstance(exc, BookingError):
        return exception_handler(exc, context)

    status_code = STATUS_BY_KIND.get(exc.kind, exc.status_code)
    view = context.get("view")
    logger.info(
        "booking.error",
        kind=exc.kind,
        status_code=status_code,
        view=view.__class__.__name__ if view is not None else None,
    )

    body = {
        "success": False,
        "kind": exc.kind,
        "message": exc.message,
        "data": exc.data,
    }
    headers = {}
    if isinstance(exc, TransactionAborted):
        headers["Retry-After"] = str(RETRY_AFTER_SECONDS)
    return Response(body, status=status_code, headers=headers)
