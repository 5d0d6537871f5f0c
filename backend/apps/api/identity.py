from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from django.conf import settings

from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="identity")

HEADER_EMAIL = "X-USER-EMAIL"
HEADER_ROLE = "X-USER-ROLE"
HEADER_USER_ID = "X-USER-ID"


@dataclass(frozen=True)
class CurrentUser:
    email: Optional[str]
    role: Optional[str]
    user_id: Optional[int]

    @property
    def is_identified(self) -> bool:
        return self.user_id is not None


class IdentityResolverProtocol(Protocol):
    def resolve(self, request) -> CurrentUser:
        ...


def _parse_user_id(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric user id", raw_user_id=raw)
        return None


def _claim(token: Any, name: str) -> Any:
    if token is None:
        return None
    getter = getattr(token, "get", None)
    if getter is None:
        return None
    return getter(name)


class RequestIdentityResolver:
    """
    Build the ``CurrentUser`` for a request.

    A verified JWT always wins. The gateway headers are only consulted when
    ``trust_headers`` is enabled, and then only for fields the token lacks.
    """

    def __init__(self, trust_headers: bool = False, user_id_claim: str = "user_id"):
        self.trust_headers = trust_headers
        self.user_id_claim = user_id_claim
        self.logger = logger.bind(resolver="RequestIdentityResolver")

    def resolve(self, request) -> CurrentUser:
        email, role, user_id = self._from_token(request)
        if self.trust_headers:
            headers = getattr(request, "headers", {}) or {}
            email = email or headers.get(HEADER_EMAIL)
            role = role or headers.get(HEADER_ROLE)
            if user_id is None:
                user_id = _parse_user_id(headers.get(HEADER_USER_ID))
        current = CurrentUser(email=email, role=role, user_id=user_id)
        self.logger.debug(
            "Built CurrentUser",
            email=current.email,
            role=current.role,
            user_id=current.user_id,
        )
        return current

    def _from_token(self, request):
        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None, None, None
        token = getattr(request, "auth", None)
        email = _claim(token, "email") or getattr(user, "username", None) or None
        role = _claim(token, "role")
        if role is None:
            roles = _claim(token, "roles") or _claim(token, "authorities")
            if isinstance(roles, (list, tuple)) and roles:
                role = roles[0]
        user_id = _parse_user_id(_claim(token, self.user_id_claim))
        return email, role, user_id


def build_identity_resolver() -> RequestIdentityResolver:
    jwt_settings = getattr(settings, "SIMPLE_JWT", {}) or {}
    return RequestIdentityResolver(
        trust_headers=bool(getattr(settings, "TRUST_IDENTITY_HEADERS", False)),
        user_id_claim=jwt_settings.get("USER_ID_CLAIM", "user_id"),
    )
