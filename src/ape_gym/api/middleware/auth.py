"""Authentication middleware for FastAPI.

Provides the dependencies routes use to require a logged-in user and, for
the staff screens, a particular role.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...db.database import GymDatabase
from ...db.repositories.user_repository import UserRepository
from ...services.auth_service import (
    AuthService,
    InvalidTokenError,
    TokenExpiredError,
    get_auth_service,
)
from ..deps import get_database


# Security scheme for Bearer token authentication
security = HTTPBearer(auto_error=False)

STAFF_ROLES = ("admin", "professor")


@dataclass
class CurrentUser:
    """Represents the currently authenticated user.

    Loaded from the database on every request, so a role change or a
    deleted account takes effect before the token expires.
    """

    id: str
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    db: GymDatabase = Depends(get_database),
) -> CurrentUser:
    """FastAPI dependency to get the current authenticated user.

    Returns:
        CurrentUser built from the database row of the token's subject.

    Raises:
        HTTPException (401): If no token is provided, the token is invalid
            or expired, or its user no longer exists.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = auth_service.verify_access_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidTokenError:
        raise _unauthorized("Invalid token")

    user = UserRepository(db).get_by_id(payload["sub"])
    if user is None:
        raise _unauthorized("Not authenticated")

    current = CurrentUser(id=user.id, name=user.name, email=user.email, role=user.role)
    # Exposed for the rate-limit key function
    request.state.user = current
    return current


def require_role(*roles: str):
    """Create a dependency that only lets the given roles through.

    Example:
        @router.get("/reports")
        def reports(current_user: CurrentUser = Depends(require_role("admin"))):
            ...
    """

    def dependency(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return current_user

    return dependency


require_staff = require_role(*STAFF_ROLES)
require_admin = require_role("admin")
