"""Tests for PasswordResetService - issuing, emailing and redeeming reset tokens."""

from datetime import timedelta
from smtplib import SMTPException
from unittest.mock import MagicMock

import pytest

from ape_gym.db.repositories.password_reset_repository import PasswordResetRepository
from ape_gym.exceptions import InvalidResetTokenError, UserNotFoundError, ValidationError
from ape_gym.services.auth_service import verify_password
from ape_gym.services.password_reset_service import PasswordResetService, hash_token
from ape_gym.services.user_service import UserService
from ape_gym.utils.timeutils import utc_now


@pytest.fixture
def email_service():
    return MagicMock()


@pytest.fixture
def service(db, email_service):
    return PasswordResetService(db, email_service=email_service)


class TestRequestReset:
    """Tests for starting a reset."""

    def test_unknown_email_issues_nothing(self, service, email_service):
        assert service.request_reset("nobody@example.com") is None
        email_service.send.assert_not_called()

    def test_token_stored_hashed_and_emailed(self, db, service, email_service, student):
        token = service.request_reset(student.email)

        stored = PasswordResetRepository(db).get_by_hash(hash_token(token))
        assert stored is not None
        assert stored.user_id == student.id
        assert stored.token_hash != token

        email_service.send.assert_called_once()
        kwargs = email_service.send.call_args.kwargs
        assert kwargs["to"] == student.email
        assert f"/reset-password?token={token}" in kwargs["text"]

    def test_email_lookup_is_case_insensitive(self, service, student):
        assert service.request_reset(student.email.upper()) is not None

    def test_new_token_invalidates_previous(self, service, student):
        first = service.request_reset(student.email)
        service.request_reset(student.email)

        with pytest.raises(InvalidResetTokenError):
            service.reset_password(first, "newpass1", "newpass1")

    def test_failed_delivery_returns_nothing_and_voids_token(self, db, service, email_service, student):
        email_service.send.side_effect = SMTPException("relay down")

        assert service.request_reset(student.email) is None

        with db.get_connection() as conn:
            rows = conn.execute(
                "SELECT used_at FROM password_reset_tokens WHERE user_id = ?", (student.id,)
            ).fetchall()
        assert len(rows) == 1
        assert rows[0]["used_at"] is not None

    def test_admin_issue_surfaces_delivery_errors(self, service, email_service, student):
        email_service.send.side_effect = OSError("connection refused")

        with pytest.raises(OSError):
            service.issue_for_user(student.id)

    def test_issue_for_unknown_user(self, service):
        with pytest.raises(UserNotFoundError):
            service.issue_for_user("00000000-0000-4000-8000-000000000000")


class TestResetPassword:
    """Tests for redeeming a token."""

    def test_reset_changes_password(self, db, service, student):
        token = service.request_reset(student.email)

        service.reset_password(token, "brand-new", "brand-new")

        user = UserService(db).authenticate(student.email, "brand-new")
        assert user.id == student.id

    def test_token_is_single_use(self, service, student):
        token = service.request_reset(student.email)
        service.reset_password(token, "brand-new", "brand-new")

        with pytest.raises(InvalidResetTokenError):
            service.reset_password(token, "another1", "another1")

    def test_expired_token_rejected(self, db, service, student):
        token = service.request_reset(student.email, now=utc_now() - timedelta(hours=2))

        with pytest.raises(InvalidResetTokenError):
            service.reset_password(token, "brand-new", "brand-new")

        with db.get_connection() as conn:
            row = conn.execute("SELECT password_hash FROM users WHERE id = ?", (student.id,)).fetchone()
        assert verify_password("secret123", row["password_hash"])

    def test_unknown_token_rejected(self, service):
        with pytest.raises(InvalidResetTokenError) as exc_info:
            service.reset_password("made-up", "brand-new", "brand-new")

        assert exc_info.value.message == "Invalid or expired token"
        assert exc_info.value.status_code == 400

    def test_mismatched_confirmation(self, service, student):
        token = service.request_reset(student.email)

        with pytest.raises(ValidationError):
            service.reset_password(token, "brand-new", "brand-old")

    def test_short_password(self, service, student):
        token = service.request_reset(student.email)

        with pytest.raises(ValidationError):
            service.reset_password(token, "abc", "abc")
