"""Register/login/refresh endpoints and auth dependencies (get_current_principal, require_admin)."""

import logging
from functools import partial
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.gate import AuthenticatedPrincipal
from app.core.security import hash_password
from app.core.tokens import TokenService
from app.models.user import UserRole
from app.repositories.users import UserRepository
from app.schemas.auth import (
    AuthenticationResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)
from app.services.auth import AuthenticationService, LoginCommand, RegisterUserCommand

logger = logging.getLogger(__name__)

router = APIRouter()
# Only documents the bearer scheme in OpenAPI; the middleware does the actual work.
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthenticationService:
    rounds = request.app.state.settings.BCRYPT_ROUNDS
    return AuthenticationService(
        UserRepository(db), tokens, hasher=partial(hash_password, rounds=rounds)
    )


def get_optional_principal(request: Request) -> AuthenticatedPrincipal | None:
    """Principal attached by the authentication middleware, if any."""
    return getattr(request.state, "principal", None)


def get_current_principal(
    principal: Annotated[AuthenticatedPrincipal | None, Depends(get_optional_principal)],
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedPrincipal:
    """Dependency: require an authenticated principal. Raises 401 if none is attached."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_admin(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
) -> AuthenticatedPrincipal:
    """Dependency: require role ADMIN. Raises 403 for everyone else."""
    if not principal.has_role(UserRole.ADMIN.value):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal


@router.post(
    "/register",
    response_model=AuthenticationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> AuthenticationResponse:
    """Create a USER account and return access and refresh tokens."""
    logger.info("Received registration request for username: %s", body.username)
    user = service.register(
        RegisterUserCommand(
            username=body.username,
            email=str(body.email),
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
        )
    )
    return service.issue_tokens(user)


@router.post("/login", response_model=AuthenticationResponse)
def login(
    body: LoginRequest,
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> AuthenticationResponse:
    """
    Authenticate with username and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    user = service.login(LoginCommand(username=body.username, password=body.password))
    return service.issue_tokens(user)


@router.post("/refresh", response_model=AuthenticationResponse)
def refresh(
    body: RefreshTokenRequest,
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> AuthenticationResponse:
    """Exchange a refresh token for a new token pair. Access tokens are rejected."""
    user = service.refresh(body.refresh_token)
    return service.issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def me(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> UserResponse:
    """Profile of the authenticated user."""
    return UserResponse.model_validate(service.get_user_by_username(principal.username))


@router.post("/logout")
def logout(
    principal: Annotated[AuthenticatedPrincipal | None, Depends(get_optional_principal)],
) -> dict[str, str]:
    """
    Stateless logout: the client discards its tokens.

    Issued tokens are not revoked and remain valid until they expire.
    """
    if principal is not None:
        logger.info("User logged out: %s", principal.username)
    return {"message": "Logged out"}
