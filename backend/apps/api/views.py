from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.exceptions import ApplicationError
from apps.api.identity import CurrentUser, build_identity_resolver
from apps.api.utils import error_response


class EnvelopeAPIView(APIView):
    """
    Base class for controller views.

    Resolves the caller identity once per request and translates service
    errors into the uniform envelope.
    """

    identity = build_identity_resolver()

    def current_user(self, request) -> CurrentUser:
        return self.identity.resolve(request)

    @staticmethod
    def service_error(exc: ApplicationError, log, operation: str, fallback: str) -> Response:
        if exc.is_client_visible:
            log.warning(
                f"{operation} failed",
                kind=exc.kind,
                error=exc.message,
            )
        else:
            log.exception(
                f"{operation} failed",
                kind=exc.kind,
                error=exc.message,
                **exc.details,
            )
        return exc.to_response(fallback)

    @staticmethod
    def unexpected_error(log, operation: str, message: str, **context) -> Response:
        log.exception(f"Unexpected error during {operation}", **context)
        return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
