"""Authentication service for JWT token management and password hashing.

Access tokens are HS256 JWTs carrying the user id (``sub``) and role. There
are no refresh tokens: a token simply expires after
``ACCESS_TOKEN_EXPIRE_DAYS`` and the user logs in again.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from ..config import get_settings
from ..db.schema import USER_ROLES

# bcrypt only reads this many bytes of a password; newer releases raise past it
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class AuthServiceError(Exception):
    """Base exception for auth service errors."""

    pass


class TokenExpiredError(AuthServiceError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(AuthServiceError):
    """Raised when a token is invalid."""

    pass


class AuthService:
    """Service for handling authentication operations.

    Provides JWT token creation/validation and password hashing.
    """

    def __init__(self) -> None:
        """Initialize auth service with settings."""
        settings = get_settings()
        self._secret_key = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._access_token_expire_days = settings.access_token_expire_days

    def create_access_token(self, user_id: str, role: str) -> str:
        """Create a JWT access token.

        Args:
            user_id: The user's unique identifier.
            role: The user's role at the time of login.

        Returns:
            Encoded JWT access token string.
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(days=self._access_token_expire_days)

        payload = {
            "sub": user_id,
            "role": role,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> dict[str, Any]:
        """Verify and decode an access token.

        Args:
            token: The JWT token string to verify.

        Returns:
            Decoded token payload with string ``sub`` and a known ``role``.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or its claims are malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        if not isinstance(payload.get("sub"), str) or not payload["sub"]:
            raise InvalidTokenError("Invalid token: missing subject")
        if payload.get("role") not in USER_ROLES:
            raise InvalidTokenError("Invalid token: unknown role")

        return payload

    @staticmethod
    def hash_password(password: str, rounds: int | None = None) -> str:
        """Hash a password using bcrypt.

        Passwords longer than 72 UTF-8 bytes are cut to their first 72
        bytes, which is all bcrypt ever compares.

        Args:
            password: The plaintext password to hash.
            rounds: bcrypt cost factor; defaults to ``BCRYPT_ROUNDS``.

        Returns:
            The bcrypt hash as a string.
        """
        salt = bcrypt.gensalt(rounds=rounds or get_settings().bcrypt_rounds)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns:
            True if the password matches, False otherwise (including when
            the stored hash is malformed).
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(password),
                hashed_password.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False


# Module-level convenience functions
_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get or create the auth service singleton."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service


def reset_auth_service() -> None:
    """Drop the singleton so the next call re-reads settings."""
    global _auth_service
    _auth_service = None


def create_access_token(user_id: str, role: str) -> str:
    """Create an access token using the default auth service."""
    return get_auth_service().create_access_token(user_id, role)


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify an access token using the default auth service."""
    return get_auth_service().verify_access_token(token)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return AuthService.hash_password(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return AuthService.verify_password(password, hashed_password)
