"""
API exception handlers.

Every error leaves the API as ``{"ok": false, "error": <code>, "msg": <message>}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticityError,
    ConflictError,
    DomainException,
    InvalidLicenseKeyError,
    LockedError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
    WebhookMisconfiguredError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Most specific first: InvalidLicenseKeyError is a ValidationError.
DOMAIN_STATUS_CODES = (
    (InvalidLicenseKeyError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticityError, status.HTTP_400_BAD_REQUEST),
    (LockedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (WebhookMisconfiguredError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def error_body(code: str, message: str) -> Dict[str, Any]:
    return {"ok": False, "error": code, "msg": message}


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception."""
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = getattr(exc, "default_code", "api_error")
        detail = response.data.get("detail", exc.default_detail) if response else exc.default_detail
        if response is None:
            response = Response(status=exc.status_code)
        response.data = error_body(code, str(detail))
    elif isinstance(exc, Http404):
        response = Response(
            error_body("not_found", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else "unknown"


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Domain exception: %s - %s",
        exc.code,
        exc.message,
        extra={"trace_id": trace_id, "status_code": status_code},
    )
    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
    return Response(error_body(exc.code, exc.message), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    return Response(
        error_body("internal_error", "An internal error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
