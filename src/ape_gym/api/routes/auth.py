"""Authentication API routes.

Public endpoints for sign-up, login and the password reset flow. All of
them are rate limited per client.
"""

from fastapi import APIRouter, Depends, Request, status

from ..deps import get_password_reset_service, get_user_service
from ..middleware.rate_limit import (
    limiter,
    login_limit,
    password_reset_limit,
    register_limit,
)
from ..schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    OkResponse,
    PublicUser,
    RegisterRequest,
    ResetPasswordRequest,
)
from ...services.auth_service import AuthService, get_auth_service
from ...services.password_reset_service import PasswordResetService
from ...services.user_service import UserService


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(register_limit)
def register(
    request: Request,
    register_request: RegisterRequest,
    users: UserService = Depends(get_user_service),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new student account and log it in."""
    user = users.register(
        name=register_request.name,
        email=register_request.email,
        password=register_request.password,
    )
    return AuthResponse(
        token=auth_service.create_access_token(user.id, user.role),
        user=PublicUser(**user.to_public_dict()),
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(login_limit)
def login(
    request: Request,
    login_request: LoginRequest,
    users: UserService = Depends(get_user_service),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Exchange email and password for an access token."""
    user = users.authenticate(login_request.email, login_request.password)
    return AuthResponse(
        token=auth_service.create_access_token(user.id, user.role),
        user=PublicUser(**user.to_public_dict()),
    )


@router.post("/forgot-password", response_model=OkResponse)
@limiter.limit(password_reset_limit)
def forgot_password(
    request: Request,
    forgot_request: ForgotPasswordRequest,
    resets: PasswordResetService = Depends(get_password_reset_service),
) -> OkResponse:
    """Email a reset link if the account exists.

    The answer is the same whether or not the email is registered.
    """
    resets.request_reset(forgot_request.email)
    return OkResponse()


@router.post("/reset-password", response_model=OkResponse)
@limiter.limit(password_reset_limit)
def reset_password(
    request: Request,
    reset_request: ResetPasswordRequest,
    resets: PasswordResetService = Depends(get_password_reset_service),
) -> OkResponse:
    """Set a new password using the token from the reset email."""
    resets.reset_password(
        token=reset_request.token,
        password=reset_request.password,
        password_confirm=reset_request.password_confirm,
    )
    return OkResponse()
