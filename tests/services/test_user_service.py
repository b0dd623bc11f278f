"""Tests for UserService - registration, login and partial updates."""

import pytest

from ape_gym.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from ape_gym.services.user_service import UserService


@pytest.fixture
def service(db):
    return UserService(db)


class TestRegister:
    """Tests for self-registration."""

    def test_register_creates_student_with_normalized_email(self, service):
        user = service.register("  Ana  ", "  Ana@Example.COM ", "secret123")

        assert user.role == "aluno"
        assert user.name == "Ana"
        assert user.email == "ana@example.com"
        assert user.password_hash != "secret123"

    def test_duplicate_email_any_case(self, service):
        service.register("Ana", "ana@example.com", "secret123")

        with pytest.raises(EmailAlreadyRegisteredError):
            service.register("Ana 2", "ANA@example.com", "secret123")

    def test_unknown_role_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_user("X", "x@example.com", "secret123", role="owner")


class TestAuthenticate:
    """Tests for the email/password check."""

    def test_valid_credentials(self, service, student):
        assert service.authenticate(student.email.upper(), "secret123").id == student.id

    def test_wrong_password(self, service, student):
        with pytest.raises(InvalidCredentialsError):
            service.authenticate(student.email, "wrong-one")

    def test_unknown_email_fails_the_same_way(self, service):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            service.authenticate("ghost@example.com", "secret123")

        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.status_code == 401


class TestLookup:
    """Tests for fetching users."""

    def test_get_student_rejects_staff(self, service, professor):
        with pytest.raises(UserNotFoundError) as exc_info:
            service.get_student(professor.id)

        assert exc_info.value.message == "Student not found"

    def test_list_students(self, service, admin, student):
        assert [u.id for u in service.list_students()] == [student.id]


class TestUpdateUser:
    """Tests for partial updates."""

    def test_only_sent_fields_change(self, service, make_user):
        user = make_user("aluno", city="Recife", phone="555-0101")

        updated = service.update_user(user.id, {"city": None, "name": "Renamed"})

        assert updated.city is None
        assert updated.phone == "555-0101"
        assert updated.name == "Renamed"

    def test_password_is_hashed(self, service, student):
        service.update_user(student.id, {"password": "changed1"})

        assert service.authenticate(student.email, "changed1").id == student.id

    def test_role_change(self, service, student):
        assert service.update_user(student.id, {"role": "professor"}).role == "professor"

    @pytest.mark.parametrize("field", ["name", "email", "role", "password"])
    def test_required_fields_cannot_be_cleared(self, service, student, field):
        with pytest.raises(ValidationError):
            service.update_user(student.id, {field: None})

    def test_missing_user(self, service):
        with pytest.raises(UserNotFoundError):
            service.update_user("00000000-0000-4000-8000-000000000000", {"name": "X"})
