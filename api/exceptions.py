"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error body has the shape
``{"success": false, "message": ..., "error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DeviceMismatchError,
    DomainException,
    InvalidKeyError,
    KeyExpiredError,
    KeyNotFoundError,
    KeyRevokedError,
    KeyValidationError,
    MissingDeviceIdError,
    MissingKeyError,
    StoreError,
    UnauthorizedError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"

_STATUS_BY_EXCEPTION = (
    ((KeyValidationError, MissingKeyError, MissingDeviceIdError), status.HTTP_400_BAD_REQUEST),
    ((UnauthorizedError, InvalidKeyError), status.HTTP_401_UNAUTHORIZED),
    ((KeyRevokedError, KeyExpiredError, DeviceMismatchError), status.HTTP_403_FORBIDDEN),
    ((KeyNotFoundError,), status.HTTP_404_NOT_FOUND),
    ((StoreError,), status.HTTP_503_SERVICE_UNAVAILABLE),
)


def error_body(code: str, message: str, **extra) -> Dict[str, Any]:
    """Build the error response body."""
    body = {"success": False, "message": message, "error": {"code": code, "message": message}}
    body.update(extra)
    return body


def validation_error_response(errors) -> Response:
    """Build a 400 response from serializer errors."""
    return Response(
        error_body("VALIDATION_ERROR", _first_validation_message(errors), details=errors),
        status=status.HTTP_400_BAD_REQUEST,
    )


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, ValidationError):
        response = validation_error_response(exc.detail)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = (
            exc.default_code.upper().replace("-", "_")
            if hasattr(exc, "default_code")
            else "API_ERROR"
        )
        response.data = error_body(code, str(response.data.get("detail", exc.default_detail)))
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        return _handle_unexpected_exception(exc, context, trace_id)

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


def _first_validation_message(detail) -> str:
    """Flatten DRF validation detail into one readable message."""
    if isinstance(detail, dict):
        for field, errors in detail.items():
            message = _first_validation_message(errors)
            return message if field == "non_field_errors" else f"{field}: {message}"
    if isinstance(detail, list) and detail:
        return _first_validation_message(detail[0])
    return str(detail) or "Invalid request"


def _status_for(exc: DomainException) -> int:
    for exception_types, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = _status_for(exc)

    if isinstance(exc, StoreError):
        errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
        logger.error(
            "Key store failure: %s - %s",
            exc.code,
            exc.message,
            extra={"trace_id": trace_id, "retryable": exc.retryable},
            exc_info=exc,
        )
        return Response(
            error_body(exc.code, "Key store temporarily unavailable, please retry"),
            status=status_code,
        )

    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
        logger.error(
            "Domain failure: %s - %s",
            exc.code,
            exc.message,
            extra={"trace_id": trace_id},
            exc_info=exc,
        )
        return Response(error_body("INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE), status=status_code)

    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    if isinstance(exc, DeviceMismatchError):
        return Response(
            error_body(exc.code, exc.message, device_name=exc.device_name), status=status_code
        )
    return Response(error_body(exc.code, exc.message), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    response = Response(
        error_body("INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response
