"""SQLite-backed repository for challenges, completions and the leaderboard."""

import sqlite3
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from ...utils.timeutils import utc_now_iso
from .base import SQLiteRepository

CHALLENGE_COLUMNS = (
    "id, title, points, frequency, active_from, active_to, user_id, created_by, created_at"
)


@dataclass
class Challenge:
    """A point-earning challenge; ``user_id`` None means every student."""

    id: str
    title: str
    points: int
    frequency: str
    created_by: str
    created_at: str
    active_from: Optional[str] = None
    active_to: Optional[str] = None
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LeaderboardEntry:
    user_id: str
    name: str
    email: str
    points: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ChallengeRepository(SQLiteRepository):
    """SQLite-backed repository for Challenge entities and their completions."""

    @staticmethod
    def _row_to_challenge(row: sqlite3.Row) -> Challenge:
        return Challenge(
            id=row["id"],
            title=row["title"],
            points=row["points"],
            frequency=row["frequency"],
            active_from=row["active_from"],
            active_to=row["active_to"],
            user_id=row["user_id"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )

    def create_challenge(
        self,
        title: str,
        points: int,
        frequency: str,
        created_by: str,
        active_from: Optional[str] = None,
        active_to: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Challenge:
        challenge = Challenge(
            id=self._new_id(),
            title=title,
            points=points,
            frequency=frequency,
            active_from=active_from,
            active_to=active_to,
            user_id=user_id,
            created_by=created_by,
            created_at=utc_now_iso(),
        )

        with self._get_connection() as conn:
            conn.execute(
                f"INSERT INTO challenges ({CHALLENGE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    challenge.id,
                    challenge.title,
                    challenge.points,
                    challenge.frequency,
                    challenge.active_from,
                    challenge.active_to,
                    challenge.user_id,
                    challenge.created_by,
                    challenge.created_at,
                ),
            )

        return challenge

    def list_all(self) -> List[Challenge]:
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT {CHALLENGE_COLUMNS} FROM challenges ORDER BY created_at DESC"
            ).fetchall()
            return [self._row_to_challenge(row) for row in rows]

    def list_active_for_user(self, user_id: str, now_iso: str) -> List[Challenge]:
        """
        Challenges a student can currently see, newest first.

        A challenge is visible when it is global or targeted at the user, and
        active when ``now_iso`` falls inside its (open-ended when NULL)
        ``[active_from, active_to]`` window.
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {CHALLENGE_COLUMNS} FROM challenges
                WHERE (user_id IS NULL OR user_id = ?)
                  AND (active_from IS NULL OR active_from <= ?)
                  AND (active_to IS NULL OR active_to >= ?)
                ORDER BY created_at DESC
                """,
                (user_id, now_iso, now_iso),
            ).fetchall()
            return [self._row_to_challenge(row) for row in rows]

    def get_visible(self, challenge_id: str, user_id: str) -> Optional[Challenge]:
        """Retrieve a challenge if it is global or targeted at the user.

        The activity window is not checked here.
        """
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT {CHALLENGE_COLUMNS} FROM challenges "
                "WHERE id = ? AND (user_id IS NULL OR user_id = ?) LIMIT 1",
                (challenge_id, user_id),
            ).fetchone()
            return self._row_to_challenge(row) if row else None

    def completed_ids(self, user_id: str, key: str, challenge_ids: List[str]) -> set[str]:
        """Ids among ``challenge_ids`` the user completed for period ``key``."""
        if not challenge_ids:
            return set()

        placeholders = ", ".join("?" for _ in challenge_ids)
        with self._get_connection() as conn:
            rows = conn.execute(
                f"""
                SELECT challenge_id FROM challenge_completions
                WHERE user_id = ? AND completed_at = ? AND challenge_id IN ({placeholders})
                """,
                (user_id, key, *challenge_ids),
            ).fetchall()
            return {row["challenge_id"] for row in rows}

    def add_completion(self, user_id: str, challenge_id: str, key: str) -> bool:
        """Record a completion for the period; returns False if it already existed."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO challenge_completions (id, user_id, challenge_id, completed_at)
                VALUES (?, ?, ?, ?)
                """,
                (self._new_id(), user_id, challenge_id, key),
            )
            return cursor.rowcount > 0

    def remove_completion(self, user_id: str, challenge_id: str, key: str) -> bool:
        """Remove the completion for the period; returns False if there was none."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                DELETE FROM challenge_completions
                WHERE user_id = ? AND challenge_id = ? AND completed_at = ?
                """,
                (user_id, challenge_id, key),
            )
            return cursor.rowcount > 0

    def leaderboard(self, since_iso: str, limit: int = 50) -> List[LeaderboardEntry]:
        """
        Rank students by points earned from completions keyed at or after ``since_iso``.

        Students without completions still appear with zero points. Ties are
        broken by the earliest signup.
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT
                    u.id AS user_id,
                    u.name AS name,
                    u.email AS email,
                    COALESCE(SUM(c.points), 0) AS points
                FROM users u
                LEFT JOIN challenge_completions cc
                    ON cc.user_id = u.id AND cc.completed_at >= ?
                LEFT JOIN challenges c ON c.id = cc.challenge_id
                WHERE u.role = 'aluno'
                GROUP BY u.id
                ORDER BY points DESC, u.created_at ASC
                LIMIT ?
                """,
                (since_iso, limit),
            ).fetchall()
            return [
                LeaderboardEntry(
                    user_id=row["user_id"],
                    name=row["name"],
                    email=row["email"],
                    points=row["points"],
                )
                for row in rows
            ]
