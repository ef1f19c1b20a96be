"""DRF exception handler rendering every error in the ``{"error": {...}}`` envelope."""
from __future__ import annotations

from typing import Any, Dict, NamedTuple, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    RequestDataTooBig,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    UnsupportedMediaType,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import ERROR_STATUS_MAP, error_response
from apps.carts.exceptions import CartPayloadError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

SERVER_ERROR_MESSAGE = "Something went wrong"


class ErrorRule(NamedTuple):
    types: Tuple[type, ...]
    code: str
    message: str
    keep_details: bool = False
    hint: Optional[str] = None


# First match wins.
RULES = (
    ErrorRule((ValidationError,), "VALIDATION_ERROR", "Validation failed", keep_details=True),
    ErrorRule((ParseError,), "VALIDATION_ERROR", "Malformed request", keep_details=True),
    ErrorRule((NotAuthenticated,), "UNAUTHORIZED", "Authentication required", hint="Log in again"),
    ErrorRule((AuthenticationFailed,), "UNAUTHORIZED", "Authentication failed", hint="Log in again"),
    ErrorRule(
        (PermissionDenied, DjangoPermissionDenied),
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    ErrorRule((NotFound, Http404), "NOT_FOUND", "Resource not found"),
    ErrorRule((MethodNotAllowed,), "METHOD_NOT_ALLOWED", "Method not allowed"),
    ErrorRule(
        (UnsupportedMediaType,),
        "UNSUPPORTED_MEDIA_TYPE",
        "Unsupported media type",
        hint="Send JSON or multipart/form-data",
    ),
)

_CODE_BY_STATUS = {code_status: code for code, code_status in ERROR_STATUS_MAP.items()}


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Central exception handler for DRF views returning structured JSON errors."""
    log = _bind_logger(context)

    if isinstance(exc, CartPayloadError):
        log.warning("Rejected malformed cart payload", errors=exc.errors)
        return error_response("UNPROCESSABLE_ENTITY", str(exc), exc.errors or None)

    if isinstance(exc, RequestDataTooBig):
        log.warning("Request body exceeded upload limit")
        return error_response("PAYLOAD_TOO_LARGE", "Uploaded data is too large")

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_django_validation_detail(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            SERVER_ERROR_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details, hint = _describe(exc, response, context.get("view"))
    if response.status_code >= 500:
        log.error("Converted server error", code=code, status=response.status_code)
    else:
        log.info("Converted API exception", code=code, status=response.status_code)
    return error_response(
        code,
        message,
        details,
        http_status=response.status_code,
        hint=hint,
        headers=dict(response.headers) if getattr(response, "headers", None) else None,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _describe(exc: Exception, response: Response, view: Any = None):
    status_code = response.status_code
    payload = response.data
    if status_code >= 500:
        return "SERVER_ERROR", SERVER_ERROR_MESSAGE, None, None

    for rule in RULES:
        if isinstance(exc, rule.types):
            details = payload if rule.keep_details else None
            if isinstance(exc, MethodNotAllowed):
                allowed = getattr(view, "allowed_methods", None)
                details = {"allowedMethods": list(allowed)} if allowed else None
            return rule.code, _message(payload, rule.message), details, rule.hint

    code = _CODE_BY_STATUS.get(status_code, "UNKNOWN_ERROR")
    details = payload if isinstance(payload, (dict, list)) and payload else None
    return code, _message(payload, "Request failed"), details, None


def _django_validation_detail(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


def _message(payload: Any, fallback: str) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["global_exception_handler"]
