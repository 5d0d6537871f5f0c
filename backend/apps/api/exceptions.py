from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
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
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

GENERIC_SERVER_MESSAGE = "Something went wrong"


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    OPERATION_INVALID = "OPERATION_INVALID"
    REMOTE_FAILURE = "REMOTE_FAILURE"
    UNEXPECTED = "UNEXPECTED"


KIND_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.OPERATION_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.REMOTE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Kinds whose message is safe to show to API clients.
CLIENT_VISIBLE_KINDS = frozenset({ErrorKind.NOT_FOUND, ErrorKind.OPERATION_INVALID})


def status_for_kind(kind: ErrorKind) -> int:
    try:
        return KIND_STATUS[kind]
    except KeyError:
        raise ValueError(f"Unmapped error kind: {kind!r}") from None


class ApplicationError(Exception):
    """
    Base class of every error raised by the service layer.

    Subclasses pin ``kind``; the boundary layer turns the kind into an HTTP
    status and decides whether ``message`` may reach the client.

    Args:
        message: Human readable explanation of the error.
        details: Optional structured context, only ever logged.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def status_code(self) -> int:
        return status_for_kind(self.kind)

    @property
    def is_client_visible(self) -> bool:
        return self.kind in CLIENT_VISIBLE_KINDS

    def public_message(self, fallback: str = GENERIC_SERVER_MESSAGE) -> str:
        return self.message if self.is_client_visible else fallback

    def to_response(self, fallback: str = GENERIC_SERVER_MESSAGE) -> Response:
        return error_response(self.public_message(fallback), self.status_code)


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    Central exception handler for DRF views returning the uniform envelope.
    """

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        if exc.is_client_visible:
            bound_logger.info(
                "Handled application error",
                kind=exc.kind,
                status=exc.status_code,
            )
        else:
            bound_logger.exception(
                "Application error surfaced as server error",
                kind=exc.kind,
                status=exc.status_code,
            )
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        GENERIC_SERVER_MESSAGE,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view:
        view_name = getattr(view, "__class__", type(view)).__name__
        log = log.bind(view=view_name)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _from_drf_exception(
    exc: Exception, response: Response, bound_logger
) -> Response:
    status_code = response.status_code
    message = _message_for(exc, response.data, status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None

    if status_code >= 500:
        bound_logger.error("Converted server error", status=status_code)
    else:
        bound_logger.info("Converted API exception", status=status_code)

    return error_response(message, status_code, headers=headers)


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list[str]]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    if hasattr(exc, "messages"):
        return list(exc.messages)
    return {"detail": getattr(exc, "message", "Validation failed")}


def _message_for(exc: Exception, payload: Any, status_code: int) -> str:
    if isinstance(exc, ValidationError):
        return _extract_message(payload, "Validation failed", status_code)
    if isinstance(exc, ParseError):
        return _extract_message(payload, "Malformed request", status_code)
    if isinstance(exc, AuthenticationFailed):
        return _extract_message(payload, "Authentication failed", status_code)
    if isinstance(exc, NotAuthenticated):
        return _extract_message(payload, "Authentication required", status_code)
    if isinstance(exc, (PermissionDenied, DjangoPermissionDenied)):
        return _extract_message(
            payload, "You do not have permission to perform this action", status_code
        )
    if isinstance(exc, (NotFound, Http404)):
        return _extract_message(payload, "Resource not found", status_code)
    if isinstance(exc, MethodNotAllowed):
        return _extract_message(payload, "Method not allowed", status_code)
    if isinstance(exc, Throttled):
        return _extract_message(payload, "Request was throttled", status_code)
    return _extract_message(payload, "Request failed", status_code)


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return GENERIC_SERVER_MESSAGE
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
        # First field error, e.g. {"quantity": ["A valid integer is required."]}
        for field, errors in payload.items():
            if isinstance(errors, list) and errors and isinstance(errors[0], str):
                return f"{field}: {errors[0]}"
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = [
    "ApplicationError",
    "ErrorKind",
    "KIND_STATUS",
    "global_exception_handler",
    "status_for_kind",
]
