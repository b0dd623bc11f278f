"""Tests for AuthService - JWT token generation, validation, and password hashing.

This module tests:
1. Access token creation and claims
2. Token expiration handling
3. Rejection of tampered or malformed tokens
4. Password hashing with bcrypt
5. Password verification
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, MagicMock

import jwt

from ape_gym.services.auth_service import (
    AuthService,
    InvalidTokenError,
    TokenExpiredError,
)


SECRET = "test-secret-key-for-unit-testing-only-32chars"


@pytest.fixture
def mock_settings():
    """Create mock settings for testing."""
    settings = MagicMock()
    settings.jwt_secret = SECRET
    settings.jwt_algorithm = "HS256"
    settings.access_token_expire_days = 7
    settings.bcrypt_rounds = 4
    return settings


@pytest.fixture
def auth_service(mock_settings):
    """Create AuthService with mock settings."""
    with patch("ape_gym.services.auth_service.get_settings", return_value=mock_settings):
        return AuthService()


class TestAuthServiceInit:
    """Tests for AuthService initialization."""

    def test_init_with_settings(self, mock_settings):
        """Should initialize with settings values."""
        with patch("ape_gym.services.auth_service.get_settings", return_value=mock_settings):
            service = AuthService()

            assert service._secret_key == SECRET
            assert service._algorithm == "HS256"
            assert service._access_token_expire_days == 7


class TestAccessTokenCreation:
    """Tests for access token creation."""

    def test_access_token_contains_claims(self, auth_service):
        """Access token should carry sub, role, iat and exp."""
        token = auth_service.create_access_token(user_id="user-123", role="aluno")

        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload["sub"] == "user-123"
        assert payload["role"] == "aluno"
        assert "iat" in payload
        assert "exp" in payload

    def test_access_token_expires_after_seven_days(self, auth_service):
        """exp should be seven days after iat."""
        token = auth_service.create_access_token(user_id="user-123", role="admin")

        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60

    def test_access_token_uses_hs256(self, auth_service):
        token = auth_service.create_access_token(user_id="user-123", role="admin")

        assert jwt.get_unverified_header(token)["alg"] == "HS256"


class TestTokenVerification:
    """Tests for token verification."""

    def test_verify_valid_token(self, auth_service):
        token = auth_service.create_access_token(user_id="user-123", role="professor")

        payload = auth_service.verify_access_token(token)

        assert payload["sub"] == "user-123"
        assert payload["role"] == "professor"

    def test_verify_expired_token(self, auth_service):
        """Expired tokens should raise TokenExpiredError."""
        past = datetime.now(timezone.utc) - timedelta(days=8)
        token = jwt.encode(
            {"sub": "user-123", "role": "aluno", "iat": past, "exp": past + timedelta(days=7)},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            auth_service.verify_access_token(token)

    def test_verify_token_signed_with_other_secret(self, auth_service):
        token = jwt.encode(
            {"sub": "user-123", "role": "aluno", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            "another-secret-key-that-is-long-enough-000",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            auth_service.verify_access_token(token)

    def test_verify_garbage_token(self, auth_service):
        with pytest.raises(InvalidTokenError):
            auth_service.verify_access_token("not-a-jwt")

    def test_verify_token_with_unknown_role(self, auth_service):
        token = jwt.encode(
            {"sub": "user-123", "role": "superuser", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            auth_service.verify_access_token(token)

    def test_verify_token_with_non_string_subject(self, auth_service):
        token = jwt.encode(
            {"sub": 42, "role": "aluno", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            auth_service.verify_access_token(token)


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_is_bcrypt(self):
        hashed = AuthService.hash_password("secret123", rounds=4)

        assert hashed.startswith("$2b$04$")
        assert hashed != "secret123"

    def test_same_password_different_hashes(self):
        """Each hash should use its own salt."""
        assert AuthService.hash_password("secret123", rounds=4) != AuthService.hash_password(
            "secret123", rounds=4
        )

    def test_default_cost_comes_from_settings(self, mock_settings):
        mock_settings.bcrypt_rounds = 5
        with patch("ape_gym.services.auth_service.get_settings", return_value=mock_settings):
            hashed = AuthService.hash_password("secret123")

        assert hashed.startswith("$2b$05$")

    def test_verify_correct_password(self):
        hashed = AuthService.hash_password("secret123", rounds=4)

        assert AuthService.verify_password("secret123", hashed) is True

    def test_verify_wrong_password(self):
        hashed = AuthService.hash_password("secret123", rounds=4)

        assert AuthService.verify_password("wrong", hashed) is False

    def test_verify_against_malformed_hash(self):
        """A corrupt stored hash should fail verification, not raise."""
        assert AuthService.verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_long_password_hashes_and_verifies(self):
        """Passwords past bcrypt's 72-byte limit are cut, not rejected."""
        password = "long-password-" * 8
        hashed = AuthService.hash_password(password, rounds=4)

        assert AuthService.verify_password(password, hashed) is True
        assert AuthService.verify_password(password[:72], hashed) is True
        assert AuthService.verify_password(password[:71], hashed) is False

    def test_multibyte_password_over_limit(self):
        password = "ç" * 40
        hashed = AuthService.hash_password(password, rounds=4)

        assert AuthService.verify_password(password, hashed) is True
