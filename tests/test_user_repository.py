"""Tests for UserRepository - User CRUD and profile fields.

This module tests:
1. User creation with and without profile fields
2. User retrieval by ID and email
3. Partial updates, including clearing profile fields
4. Email uniqueness
5. Role filtering
"""

import pytest

from ape_gym.db.repositories.user_repository import User, UserRepository
from ape_gym.exceptions import EmailAlreadyRegisteredError


@pytest.fixture
def user_repo(db):
    """Create a UserRepository with a temporary database."""
    return UserRepository(db)


@pytest.fixture
def sample_user(user_repo):
    """Create a sample user for testing."""
    return user_repo.create_user(
        user_id="test-user-123",
        name="Test User",
        email="test@example.com",
        role="aluno",
        password_hash="hashed_password_here",
        city="Porto Alegre",
    )


class TestCreateUser:
    """Tests for user creation."""

    def test_create_user(self, user_repo, sample_user):
        stored = user_repo.get_by_id("test-user-123")

        assert isinstance(stored, User)
        assert stored.name == "Test User"
        assert stored.role == "aluno"
        assert stored.city == "Porto Alegre"
        assert stored.phone is None
        assert stored.created_at.endswith("Z")

    def test_generated_id_is_uuid(self, user_repo):
        user = user_repo.create_user("A", "a@example.com", "aluno", "h")

        assert len(user.id) == 36

    def test_duplicate_email_rejected(self, user_repo, sample_user):
        with pytest.raises(EmailAlreadyRegisteredError):
            user_repo.create_user("Other", "test@example.com", "aluno", "h")

    def test_unknown_profile_field_rejected(self, user_repo):
        with pytest.raises(ValueError):
            user_repo.create_user("A", "a@example.com", "aluno", "h", nickname="x")


class TestGetUser:
    """Tests for user retrieval."""

    def test_get_by_email(self, user_repo, sample_user):
        assert user_repo.get_by_email("test@example.com").id == sample_user.id

    def test_get_missing(self, user_repo):
        assert user_repo.get_by_id("missing") is None
        assert user_repo.get_by_email("missing@example.com") is None

    def test_get_student_only_for_alunos(self, user_repo, sample_user):
        staff = user_repo.create_user("Prof", "prof@example.com", "professor", "h")

        assert user_repo.get_student(sample_user.id) is not None
        assert user_repo.get_student(staff.id) is None

    def test_public_dict_has_no_hash(self, sample_user):
        assert sample_user.to_public_dict() == {
            "id": "test-user-123",
            "name": "Test User",
            "email": "test@example.com",
            "role": "aluno",
        }
        assert "password_hash" not in sample_user.to_dict()


class TestUpdateUser:
    """Tests for partial updates."""

    def test_update_sets_fields_and_updated_at(self, user_repo, sample_user):
        updated = user_repo.update(sample_user.id, name="New Name", phone="555-0100")

        assert updated.name == "New Name"
        assert updated.phone == "555-0100"
        assert updated.city == "Porto Alegre"
        assert updated.updated_at is not None

    def test_none_clears_profile_field(self, user_repo, sample_user):
        updated = user_repo.update(sample_user.id, city=None)

        assert updated.city is None

    def test_update_missing_user(self, user_repo):
        assert user_repo.update("missing", name="X") is None

    def test_update_to_taken_email(self, user_repo, sample_user):
        other = user_repo.create_user("Other", "other@example.com", "aluno", "h")

        with pytest.raises(EmailAlreadyRegisteredError):
            user_repo.update(other.id, email="test@example.com")

    def test_set_password_hash(self, user_repo, sample_user):
        assert user_repo.set_password_hash(sample_user.id, "new-hash") is True
        assert user_repo.get_by_id(sample_user.id).password_hash == "new-hash"


class TestListUsers:
    """Tests for listing and counting."""

    def test_filter_by_role(self, user_repo, sample_user):
        user_repo.create_user("Admin", "admin@example.com", "admin", "h")

        assert [u.role for u in user_repo.list_users("admin")] == ["admin"]
        assert len(user_repo.list_users()) == 2
        assert user_repo.count() == 2
        assert user_repo.count("aluno") == 1

    def test_first_admin(self, user_repo, sample_user):
        assert user_repo.first_admin() is None
        admin = user_repo.create_user("Admin", "admin@example.com", "admin", "h")

        assert user_repo.first_admin().id == admin.id
