from collections.abc import Mapping
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.response import Response

STATUS_SUCCESS = "SUCCESS"
STATUS_ERROR = "ERROR"

ENVELOPE_STATUSES = (STATUS_SUCCESS, STATUS_ERROR)


def envelope_response(
    envelope_status: str,
    message: str,
    data: Optional[Any] = None,
    http_status: int = status.HTTP_200_OK,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Return a response wrapped in the uniform ``{status, message, data}`` envelope.

    Args:
        envelope_status: Either ``SUCCESS`` or ``ERROR``.
        message: Human-readable outcome of the request.
        data: Optional payload; ``None`` is rendered as JSON ``null``.
        http_status: HTTP status code of the response.
        headers: Optional response headers to include alongside the payload.
    """

    if envelope_status not in ENVELOPE_STATUSES:
        raise ValueError(
            f"envelope status must be one of {', '.join(ENVELOPE_STATUSES)}"
        )
    if not isinstance(message, str):
        raise TypeError("envelope_response requires message to be a string")
    message = message.strip()
    if not message:
        raise ValueError("envelope_response requires a non-empty message")
    if headers is not None and not isinstance(headers, Mapping):
        raise TypeError("envelope_response headers must be a mapping if provided")

    status_code = int(http_status)
    if not 100 <= status_code <= 599:
        raise ValueError("envelope_response status must be a valid HTTP status code")

    payload: Dict[str, Any] = {
        "status": envelope_status,
        "message": message,
        "data": data,
    }
    headers_dict = (
        {str(key): str(value) for key, value in headers.items()} if headers else None
    )
    return Response(payload, status=status_code, headers=headers_dict)


def success_response(
    message: str, data: Optional[Any] = None, http_status: int = status.HTTP_200_OK
) -> Response:
    return envelope_response(STATUS_SUCCESS, message, data, http_status)


def error_response(
    message: str,
    http_status: int = status.HTTP_400_BAD_REQUEST,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    return envelope_response(STATUS_ERROR, message, None, http_status, headers=headers)
