"""SQLite-backed repository for password reset tokens.

Only the SHA-256 hex digest of a token is ever stored; the raw value lives
in the emailed link alone.
"""

import sqlite3
from dataclasses import dataclass
from typing import Optional

from ...utils.timeutils import utc_now_iso
from .base import SQLiteRepository


@dataclass
class PasswordResetToken:
    id: str
    user_id: str
    token_hash: str
    expires_at: str
    created_at: str
    used_at: Optional[str] = None

    @property
    def is_used(self) -> bool:
        return self.used_at is not None


class PasswordResetRepository(SQLiteRepository):
    """Persistence for single-use password reset tokens."""

    @staticmethod
    def _row_to_token(row: sqlite3.Row) -> PasswordResetToken:
        return PasswordResetToken(
            id=row["id"],
            user_id=row["user_id"],
            token_hash=row["token_hash"],
            expires_at=row["expires_at"],
            used_at=row["used_at"],
            created_at=row["created_at"],
        )

    def create_token(
        self,
        user_id: str,
        token_hash: str,
        expires_at: str,
        invalidate_previous: bool = True,
    ) -> PasswordResetToken:
        """
        Store a new token hash for the user.

        Args:
            user_id: Owner of the token
            token_hash: SHA-256 hex digest of the raw token
            expires_at: Expiry timestamp (UTC ISO string)
            invalidate_previous: Mark the user's other unused tokens as used
                                 in the same transaction

        Returns:
            The stored PasswordResetToken
        """
        now = utc_now_iso()
        token = PasswordResetToken(
            id=self._new_id(),
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=now,
        )

        with self._get_connection() as conn:
            if invalidate_previous:
                conn.execute(
                    "UPDATE password_reset_tokens SET used_at = ? "
                    "WHERE user_id = ? AND used_at IS NULL",
                    (now, user_id),
                )
            conn.execute(
                """
                INSERT INTO password_reset_tokens
                    (id, user_id, token_hash, expires_at, used_at, created_at)
                VALUES (?, ?, ?, ?, NULL, ?)
                """,
                (token.id, token.user_id, token.token_hash, token.expires_at, token.created_at),
            )

        return token

    def get_by_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM password_reset_tokens WHERE token_hash = ? LIMIT 1",
                (token_hash,),
            ).fetchone()
            return self._row_to_token(row) if row else None

    def invalidate_for_user(self, user_id: str) -> int:
        """Mark every unused token of the user as used; returns how many."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE password_reset_tokens SET used_at = ? "
                "WHERE user_id = ? AND used_at IS NULL",
                (utc_now_iso(), user_id),
            )
            return cursor.rowcount

    def consume(self, token_id: str, user_id: str, password_hash: str) -> bool:
        """
        Mark the token used and set the user's new password hash, atomically.

        The token is only consumed while ``used_at`` is still NULL, so two
        concurrent resets with the same token cannot both succeed.

        Returns:
            True if the token was consumed and the password changed
        """
        now = utc_now_iso()
        with self._get_connection() as conn:
            cursor = conn.execute(
                "UPDATE password_reset_tokens SET used_at = ? "
                "WHERE id = ? AND used_at IS NULL",
                (now, token_id),
            )
            if cursor.rowcount == 0:
                return False
            conn.execute(
                "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                (password_hash, now, user_id),
            )
        return True
