"""
Per-request authentication: bearer token -> stored user -> request principal.

The gate only establishes identity. It never rejects a request; endpoints that
need a user depend on get_current_principal (401) or require_admin (403).
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from fastapi import Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from app.repositories.users import UserRepository

if TYPE_CHECKING:
    from app.core.tokens import TokenService
    from app.models.user import User

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "
ROLE_PREFIX = "ROLE_"


class UserLookup(Protocol):
    def find_by_username(self, username: str) -> "User | None": ...


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity attached to request.state.principal for downstream authorization."""

    username: str
    authorities: tuple[str, ...]
    user_id: str | None = None

    @classmethod
    def for_user(cls, user: "User") -> "AuthenticatedPrincipal":
        role = getattr(user.role, "value", user.role)
        return cls(
            username=user.username,
            authorities=(f"{ROLE_PREFIX}{role}",),
            user_id=str(user.id),
        )

    @property
    def role(self) -> str | None:
        for authority in self.authorities:
            if authority.startswith(ROLE_PREFIX):
                return authority[len(ROLE_PREFIX):]
        return None

    def has_role(self, role: str) -> bool:
        return f"{ROLE_PREFIX}{getattr(role, 'value', role)}" in self.authorities


def extract_bearer_token(authorization: str | None) -> str | None:
    """Token part of an `Authorization: Bearer <token>` header, else None."""
    if not authorization or not authorization.strip():
        return None
    if not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token or None


class AuthenticationGate:
    """Turns an Authorization header into a principal, or leaves the request anonymous."""

    def __init__(self, token_service: "TokenService") -> None:
        self.token_service = token_service

    def authenticate(
        self,
        authorization: str | None,
        users: UserLookup,
        current: AuthenticatedPrincipal | None = None,
    ) -> AuthenticatedPrincipal | None:
        """
        Return the principal for this request.

        `current` is whatever is already attached to the request; it is returned
        unchanged when the header is missing, the token is not a valid access
        token, a principal is already attached, or anything fails.
        """
        try:
            token = extract_bearer_token(authorization)
            if token is None:
                return current
            # Rejects refresh tokens and invalid tokens alike.
            if not self.token_service.is_access_token(token):
                return current
            username = self.token_service.extract_username(token)
            if not username or current is not None:
                return current
            user = users.find_by_username(username)
            if user is None:
                logger.warning("User not found: %s", username)
                return current
            principal = AuthenticatedPrincipal.for_user(user)
            logger.debug("Set authentication for user: %s", username)
            return principal
        except Exception:
            logger.exception("Could not set user authentication in request context")
            return current


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Runs the gate once per request and stores the result in request.state.principal."""

    def __init__(
        self,
        app: ASGIApp,
        gate: AuthenticationGate,
        session_factory: Callable[[], Session],
    ) -> None:
        super().__init__(app)
        self.gate = gate
        self.session_factory = session_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        current = getattr(request.state, "principal", None)
        authorization = request.headers.get(AUTHORIZATION_HEADER)
        try:
            # The user lookup is a blocking DB round-trip.
            principal = await run_in_threadpool(self._authenticate, authorization, current)
        except Exception:
            logger.exception("Could not set user authentication in request context")
            principal = current
        request.state.principal = principal
        return await call_next(request)

    def _authenticate(
        self,
        authorization: str | None,
        current: AuthenticatedPrincipal | None,
    ) -> AuthenticatedPrincipal | None:
        if extract_bearer_token(authorization) is None:
            return current
        db = self.session_factory()
        try:
            return self.gate.authenticate(authorization, UserRepository(db), current)
        finally:
            db.close()
