"""Services for the Ape Gym API."""

from .auth_service import (
    AuthService,
    AuthServiceError,
    InvalidTokenError,
    TokenExpiredError,
    get_auth_service,
    hash_password,
    verify_password,
)
from .base import BaseService
from .challenge_service import ChallengeService, CompletionResult
from .email_service import EmailService, get_email_service
from .password_reset_service import PasswordResetService
from .user_service import UserService
from .workout_service import WorkoutService

__all__ = [
    # Auth
    "AuthService",
    "AuthServiceError",
    "InvalidTokenError",
    "TokenExpiredError",
    "get_auth_service",
    "hash_password",
    "verify_password",
    # Domain services
    "BaseService",
    "ChallengeService",
    "CompletionResult",
    "EmailService",
    "get_email_service",
    "PasswordResetService",
    "UserService",
    "WorkoutService",
]
