"""
Custom exceptions for the Ape Gym API.

Every error raised by the domain layer derives from ApeGymError and carries:
- A human-readable message
- An error code for API responses
- The HTTP status code it maps to
- Optional details for debugging
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"

    # Auth errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"

    # Domain errors
    USER_NOT_FOUND = "USER_NOT_FOUND"
    WORKOUT_NOT_FOUND = "WORKOUT_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    CHALLENGE_NOT_FOUND = "CHALLENGE_NOT_FOUND"

    # Data/Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    MIGRATION_ERROR = "MIGRATION_ERROR"


class ApeGymError(Exception):
    """
    Base exception for all Ape Gym errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(ApeGymError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


class InvalidResetTokenError(ValidationError):
    """Raised when a password-reset token is unknown, used or expired."""

    def __init__(self) -> None:
        super().__init__(message="Invalid or expired token", field="token")
        self.code = ErrorCode.INVALID_RESET_TOKEN


# ============================================================================
# Auth Errors (401/403)
# ============================================================================

class AuthenticationError(ApeGymError):
    """Raised when the caller cannot be authenticated."""

    def __init__(
        self,
        message: str = "Not authenticated",
        code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(message=message, code=code, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match."""

    def __init__(self) -> None:
        super().__init__(message="Invalid credentials", code=ErrorCode.INVALID_CREDENTIALS)


class PermissionDeniedError(ApeGymError):
    """Raised when the authenticated user lacks the required role."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message=message, code=ErrorCode.FORBIDDEN, status_code=403)


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(ApeGymError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} not found"
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class UserNotFoundError(NotFoundError):
    """Raised when a user (or a student, when a student is required) is not found."""

    def __init__(self, user_id: str, resource_type: str = "User") -> None:
        super().__init__(resource_type=resource_type, resource_id=user_id)
        self.code = ErrorCode.USER_NOT_FOUND


class WorkoutNotFoundError(NotFoundError):
    """Raised when a workout is not found or not visible to the caller."""

    def __init__(self, workout_id: str) -> None:
        super().__init__(resource_type="Workout", resource_id=workout_id)
        self.code = ErrorCode.WORKOUT_NOT_FOUND


class TemplateNotFoundError(NotFoundError):
    """Raised when a workout id does not point at a template."""

    def __init__(self, workout_id: str) -> None:
        super().__init__(resource_type="Workout template", resource_id=workout_id)
        self.code = ErrorCode.TEMPLATE_NOT_FOUND


class ChallengeNotFoundError(NotFoundError):
    """Raised when a challenge is not found or not visible to the caller."""

    def __init__(self, challenge_id: str) -> None:
        super().__init__(resource_type="Challenge", resource_id=challenge_id)
        self.code = ErrorCode.CHALLENGE_NOT_FOUND


# ============================================================================
# Conflict Errors (409)
# ============================================================================

class ConflictError(ApeGymError):
    """Raised when there's a resource conflict."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            status_code=409,
            details=details,
        )


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when an email address is already taken."""

    def __init__(self) -> None:
        super().__init__(
            message="Email already registered",
            code=ErrorCode.EMAIL_ALREADY_REGISTERED,
        )


# ============================================================================
# Database Errors (500)
# ============================================================================

class DatabaseError(ApeGymError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        message: str = "Database operation failed",
        code: ErrorCode = ErrorCode.DATABASE_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=500, details=details)


class MigrationError(DatabaseError):
    """Raised when a schema migration cannot be applied."""

    def __init__(self, migration: str, reason: str) -> None:
        super().__init__(
            message=f"Migration {migration} failed: {reason}",
            code=ErrorCode.MIGRATION_ERROR,
            details={"migration": migration},
        )
