"""User accounts: self-registration, login and admin user management."""

from typing import Any, Dict, List, Optional

from ..db.database import GymDatabase
from ..db.repositories.user_repository import PROFILE_FIELDS, User, UserRepository
from ..db.schema import USER_ROLES
from ..exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from .auth_service import hash_password, verify_password
from .base import BaseService


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService(BaseService):
    """Business rules around users; every email is stored trimmed and lower-cased."""

    def __init__(self, db: GymDatabase) -> None:
        super().__init__(db)
        self._users = UserRepository(db)

    def _check_role(self, role: str) -> None:
        if role not in USER_ROLES:
            raise ValidationError(f"Unknown role: {role}", field="role")

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: str = "aluno",
        **profile: Optional[str],
    ) -> User:
        """
        Create an account with a hashed password.

        Raises:
            ValidationError: If the role is unknown
            EmailAlreadyRegisteredError: If the email is taken
        """
        self._check_role(role)
        email = normalize_email(email)
        if self._users.email_exists(email):
            raise EmailAlreadyRegisteredError()

        user = self._users.create_user(
            name=name.strip(),
            email=email,
            role=role,
            password_hash=hash_password(password),
            **{k: v for k, v in profile.items() if v is not None},
        )
        self.logger.info(f"Created {role} account {user.id}")
        return user

    def register(self, name: str, email: str, password: str) -> User:
        """Public sign-up; the role is always aluno."""
        return self.create_user(name=name, email=email, password=password, role="aluno")

    def authenticate(self, email: str, password: str) -> User:
        """
        Check an email/password pair.

        Unknown email and wrong password fail the same way.

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        user = self._users.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_student(self, user_id: str) -> User:
        """Raises UserNotFoundError unless the user exists and is an aluno."""
        user = self._users.get_student(user_id)
        if user is None:
            raise UserNotFoundError(user_id, resource_type="Student")
        return user

    def list_users(self, role: Optional[str] = None) -> List[User]:
        if role is not None:
            self._check_role(role)
        return self._users.list_users(role)

    def list_students(self) -> List[User]:
        return self._users.list_users("aluno")

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> User:
        """
        Apply a partial update.

        ``changes`` holds only the fields the caller sent. A profile field sent
        as None is cleared; name, email and role cannot be cleared. A
        ``password`` entry is hashed before it is stored.

        Raises:
            UserNotFoundError: If the user does not exist
            ValidationError: If a required field is cleared or the role is unknown
            EmailAlreadyRegisteredError: If the new email belongs to another user
        """
        updates: Dict[str, Any] = {}

        for field in ("name", "email", "role", "password"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty", field=field)

        if "name" in changes:
            updates["name"] = changes["name"].strip()
        if "email" in changes:
            updates["email"] = normalize_email(changes["email"])
        if "role" in changes:
            self._check_role(changes["role"])
            updates["role"] = changes["role"]
        if "password" in changes:
            updates["password_hash"] = hash_password(changes["password"])
        for field in PROFILE_FIELDS:
            if field in changes:
                updates[field] = changes[field]

        user = self._users.update(user_id, **updates)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
