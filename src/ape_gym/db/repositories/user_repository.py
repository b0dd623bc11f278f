"""SQLite-backed repository for users.

Provides CRUD operations for students (aluno) and staff (professor, admin),
including the optional profile fields edited from the admin screens.
"""

import sqlite3
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from ...exceptions import EmailAlreadyRegisteredError
from ...utils.timeutils import utc_now_iso
from .base import SQLiteRepository

PROFILE_FIELDS = (
    "phone",
    "birthdate",
    "avatar_url",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip",
    "country",
)

UPDATABLE_FIELDS = ("name", "email", "role", "password_hash") + PROFILE_FIELDS


@dataclass
class User:
    """User entity representing a student or staff member."""

    id: str
    name: str
    email: str
    role: str
    password_hash: str
    created_at: str
    phone: Optional[str] = None
    birthdate: Optional[str] = None
    avatar_url: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in ("admin", "professor")

    def to_public_dict(self) -> Dict[str, Any]:
        """The fields returned by login/register and /app/me."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Every field except the password hash."""
        data = asdict(self)
        data.pop("password_hash")
        return data


class UserRepository(SQLiteRepository):
    """SQLite-backed repository for User entities."""

    def _row_to_user(self, row: sqlite3.Row) -> User:
        keys = row.keys()
        profile = {field: row[field] for field in PROFILE_FIELDS if field in keys}
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=row["role"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"] if "updated_at" in keys else None,
            **profile,
        )

    def create_user(
        self,
        name: str,
        email: str,
        role: str,
        password_hash: str,
        user_id: Optional[str] = None,
        **profile: Optional[str],
    ) -> User:
        """
        Create a new user.

        Args:
            name: Display name
            email: Email address (must be unique)
            role: One of aluno, professor, admin
            password_hash: Bcrypt hash of the password
            user_id: Optional id; a UUID4 is generated when omitted
            **profile: Optional profile fields (phone, birthdate, ...)

        Returns:
            The created User entity

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken
        """
        unknown = set(profile) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        user = User(
            id=user_id or self._new_id(),
            name=name,
            email=email,
            role=role,
            password_hash=password_hash,
            created_at=utc_now_iso(),
            **profile,
        )

        columns = ["id", "name", "email", "role", "password_hash", "created_at"]
        columns += [field for field in PROFILE_FIELDS if profile.get(field) is not None]
        values = [getattr(user, column) for column in columns]
        placeholders = ", ".join("?" for _ in columns)

        try:
            with self._get_connection() as conn:
                conn.execute(
                    f"INSERT INTO users ({', '.join(columns)}) VALUES ({placeholders})",
                    values,
                )
        except sqlite3.IntegrityError as e:
            if "users.email" in str(e):
                raise EmailAlreadyRegisteredError() from e
            raise

        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ? LIMIT 1",
                (user_id,)
            ).fetchone()
            return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ? LIMIT 1",
                (email,)
            ).fetchone()
            return self._row_to_user(row) if row else None

    def get_student(self, user_id: str) -> Optional[User]:
        """Retrieve a user only if their role is aluno."""
        user = self.get_by_id(user_id)
        if user is None or user.role != "aluno":
            return None
        return user

    def email_exists(self, email: str) -> bool:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM users WHERE email = ? LIMIT 1",
                (email,)
            ).fetchone()
            return row is not None

    def list_users(self, role: Optional[str] = None) -> List[User]:
        """List users, newest first, optionally filtered by role."""
        query = "SELECT * FROM users"
        params: list = []
        if role:
            query += " WHERE role = ?"
            params.append(role)
        query += " ORDER BY created_at DESC"

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_user(row) for row in rows]

    def first_admin(self) -> Optional[User]:
        """The oldest admin account, if any."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE role = 'admin' ORDER BY created_at ASC LIMIT 1"
            ).fetchone()
            return self._row_to_user(row) if row else None

    def update(self, user_id: str, **changes: Any) -> Optional[User]:
        """
        Update the given fields of a user.

        Unlike a create, a field passed as None is written as NULL, which is
        how profile fields are cleared. Fields not passed are left alone.

        Returns:
            The updated User entity if found, None otherwise

        Raises:
            EmailAlreadyRegisteredError: If the new email belongs to someone else
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        if not changes:
            return self.get_by_id(user_id)

        assignments = [f"{field} = ?" for field in changes]
        params = list(changes.values())
        assignments.append("updated_at = ?")
        params.append(utc_now_iso())
        params.append(user_id)

        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    f"UPDATE users SET {', '.join(assignments)} WHERE id = ?",
                    params,
                )
                if cursor.rowcount == 0:
                    return None
        except sqlite3.IntegrityError as e:
            if "users.email" in str(e):
                raise EmailAlreadyRegisteredError() from e
            raise

        return self.get_by_id(user_id)

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self.update(user_id, password_hash=password_hash) is not None

    def count(self, role: Optional[str] = None) -> int:
        query = "SELECT COUNT(*) AS cnt FROM users"
        params: list = []
        if role:
            query += " WHERE role = ?"
            params.append(role)

        with self._get_connection() as conn:
            return conn.execute(query, params).fetchone()["cnt"]
