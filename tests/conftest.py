"""Shared fixtures: a fresh SQLite database per test and an API client bound to it."""

import os

# Settings are cached on first use, so the test environment is set before
# anything from ape_gym is imported.
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-testing-only-32chars")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEED_ADMIN", "false")
os.environ.setdefault("SMTP_HOST", "")

import pytest
from fastapi.testclient import TestClient

from ape_gym.api.deps import get_database
from ape_gym.api.middleware.rate_limit import limiter
from ape_gym.db.database import GymDatabase
from ape_gym.main import create_app
from ape_gym.services.auth_service import create_access_token
from ape_gym.services.user_service import UserService


@pytest.fixture
def db(tmp_path):
    """A migrated database in a temporary directory."""
    return GymDatabase(str(tmp_path / "test.sqlite"))


@pytest.fixture
def app(db):
    application = create_app()
    application.dependency_overrides[get_database] = lambda: db
    limiter.enabled = False
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory creating users through the service (hashed password, normalized email)."""
    service = UserService(db)
    counter = {"n": 0}

    def _make(role="aluno", name=None, email=None, password="secret123", **profile):
        counter["n"] += 1
        n = counter["n"]
        return service.create_user(
            name=name or f"{role.title()} {n}",
            email=email or f"{role}{n}@example.com",
            password=password,
            role=role,
            **profile,
        )

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def headers_for():
    """Build Authorization headers for any user."""
    return auth_headers


@pytest.fixture
def admin(make_user):
    return make_user("admin", name="Admin")


@pytest.fixture
def professor(make_user):
    return make_user("professor", name="Professor")


@pytest.fixture
def student(make_user):
    return make_user("aluno", name="Student")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def professor_headers(professor):
    return auth_headers(professor)


@pytest.fixture
def student_headers(student):
    return auth_headers(student)
