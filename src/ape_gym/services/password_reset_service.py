"""Password reset by emailed single-use link.

Issuing a reset stores only the SHA-256 of a random URL-safe token and mails
``{APP_BASE_URL}/reset-password?token=<raw token>``. Redeeming the token
checks it is known, unused and unexpired, then sets the new password and
marks the token used in one transaction.
"""

import hashlib
import secrets
import smtplib
from datetime import datetime, timedelta
from typing import Optional

from ..config import Settings, get_settings
from ..db.database import GymDatabase
from ..db.repositories.password_reset_repository import PasswordResetRepository
from ..db.repositories.user_repository import User, UserRepository
from ..exceptions import InvalidResetTokenError, UserNotFoundError, ValidationError
from ..utils.timeutils import parse_iso, to_iso, utc_now
from .auth_service import hash_password
from .base import BaseService
from .email_service import EmailService, get_email_service

TOKEN_BYTES = 32
MIN_PASSWORD_LENGTH = 6


def hash_token(token: str) -> str:
    """SHA-256 hex digest under which a raw reset token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


class PasswordResetService(BaseService):
    """Issues and redeems password reset tokens."""

    def __init__(
        self,
        db: GymDatabase,
        email_service: Optional[EmailService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__(db)
        self._settings = settings or get_settings()
        self._email = email_service or get_email_service()
        self._users = UserRepository(db)
        self._tokens = PasswordResetRepository(db)

    def reset_link(self, token: str) -> str:
        base = self._settings.app_base_url.rstrip("/")
        return f"{base}/reset-password?token={token}"

    def _issue(self, user: User, now: Optional[datetime] = None) -> str:
        now = now or utc_now()
        token = generate_token()
        expires_at = now + timedelta(minutes=self._settings.password_reset_expire_minutes)
        self._tokens.create_token(user.id, hash_token(token), to_iso(expires_at))

        minutes = self._settings.password_reset_expire_minutes
        self._email.send(
            to=user.email,
            subject="Ape Gym - password reset",
            text=(
                f"Hi {user.name},\n\n"
                "We received a request to reset your Ape Gym password.\n"
                f"Open the link below to choose a new one (valid for {minutes} minutes):\n\n"
                f"{self.reset_link(token)}\n\n"
                "If you did not ask for this, you can ignore this email.\n"
            ),
        )
        self.logger.info(f"Issued password reset token for user {user.id}")
        return token

    def request_reset(self, email: str, now: Optional[datetime] = None) -> Optional[str]:
        """
        Start a reset for the account with this email, if there is one.

        The caller answers the same way whether or not the account exists, so
        a failed delivery is logged and swallowed here; the token that could
        not be sent is invalidated.

        Returns:
            The raw token when one was issued and sent, None otherwise
        """
        user = self._users.get_by_email(email.strip().lower())
        if user is None:
            self.logger.info("Password reset requested for an unknown email")
            return None
        try:
            return self._issue(user, now)
        except (smtplib.SMTPException, OSError):
            self.logger.exception(f"Could not send password reset email to user {user.id}")
            self._tokens.invalidate_for_user(user.id)
            return None

    def issue_for_user(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Start a reset on behalf of a user (admin action).

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return self._issue(user, now)

    def reset_password(
        self,
        token: str,
        password: str,
        password_confirm: str,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Redeem a reset token and set the new password.

        Raises:
            ValidationError: If the password is too short or the confirmation differs
            InvalidResetTokenError: If the token is unknown, used or expired
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        if password != password_confirm:
            raise ValidationError("Passwords do not match", field="password_confirm")

        record = self._tokens.get_by_hash(hash_token(token))
        now = now or utc_now()
        if record is None or record.is_used or parse_iso(record.expires_at) <= now:
            raise InvalidResetTokenError()

        if not self._tokens.consume(record.id, record.user_id, hash_password(password)):
            raise InvalidResetTokenError()

        self.logger.info(f"Password reset completed for user {record.user_id}")
