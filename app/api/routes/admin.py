"""Admin-only user management (RBAC by role string)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.routes.auth import get_auth_service, require_admin
from app.core.gate import AuthenticatedPrincipal
from app.schemas.auth import UserResponse
from app.services.auth import AuthenticationService

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
def list_users(
    _admin: Annotated[AuthenticatedPrincipal, Depends(require_admin)],
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> list[UserResponse]:
    """List all users (admin only)."""
    return [UserResponse.model_validate(u) for u in service.list_users()]


@router.post("/users/{user_id}/promote", response_model=UserResponse)
def promote_user(
    user_id: str,
    _admin: Annotated[AuthenticatedPrincipal, Depends(require_admin)],
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> UserResponse:
    """
    Grant ADMIN to a user. Tokens already issued keep their old role claim,
    but the gate reads the role from the database, so it applies on the next request.
    """
    return UserResponse.model_validate(service.promote_to_admin(user_id))
