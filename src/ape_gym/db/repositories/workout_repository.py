"""SQLite-backed repository for workouts and their exercise items.

A workout is either a template (no owner, reusable) or belongs to one
student. Assigning a template makes a full copy for the student, so later
edits to the template never change workouts already handed out.
"""

import sqlite3
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ...exceptions import TemplateNotFoundError
from ...utils.timeutils import utc_now_iso
from .base import SQLiteRepository

WORKOUT_COLUMNS = (
    "id, title, objective, week_start, user_id, is_template, "
    "parent_workout_id, assigned_at, created_by, created_at"
)
ITEM_COLUMNS = "id, workout_id, name, sets, reps, weight, rest_seconds, notes, order_index"

# Global templates plus the student's own workouts
VISIBLE_TO_USER = "((is_template = 1 AND user_id IS NULL) OR user_id = ?)"


@dataclass
class WorkoutItem:
    """One exercise row of a workout."""

    id: str
    workout_id: str
    name: str
    order_index: int
    sets: Optional[int] = None
    reps: Optional[str] = None
    weight: Optional[str] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Workout:
    """Workout entity: a template or a student's workout."""

    id: str
    title: str
    objective: str
    created_by: str
    created_at: str
    week_start: Optional[str] = None
    user_id: Optional[str] = None
    is_template: bool = False
    parent_workout_id: Optional[str] = None
    assigned_at: Optional[str] = None
    items: List[WorkoutItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("items")
        return data


class WorkoutRepository(SQLiteRepository):
    """SQLite-backed repository for Workout entities."""

    @staticmethod
    def _row_to_workout(row: sqlite3.Row) -> Workout:
        return Workout(
            id=row["id"],
            title=row["title"],
            objective=row["objective"],
            week_start=row["week_start"],
            user_id=row["user_id"],
            is_template=bool(row["is_template"]),
            parent_workout_id=row["parent_workout_id"],
            assigned_at=row["assigned_at"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> WorkoutItem:
        return WorkoutItem(
            id=row["id"],
            workout_id=row["workout_id"],
            name=row["name"],
            sets=row["sets"],
            reps=row["reps"],
            weight=row["weight"],
            rest_seconds=row["rest_seconds"],
            notes=row["notes"],
            order_index=row["order_index"],
        )

    def _insert_workout(self, conn: sqlite3.Connection, workout: Workout) -> None:
        conn.execute(
            f"INSERT INTO workouts ({WORKOUT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                workout.id,
                workout.title,
                workout.objective,
                workout.week_start,
                workout.user_id,
                1 if workout.is_template else 0,
                workout.parent_workout_id,
                workout.assigned_at,
                workout.created_by,
                workout.created_at,
            ),
        )

    def _insert_items(self, conn: sqlite3.Connection, items: Iterable[WorkoutItem]) -> None:
        conn.executemany(
            f"INSERT INTO workout_items ({ITEM_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    item.id,
                    item.workout_id,
                    item.name,
                    item.sets,
                    item.reps,
                    item.weight,
                    item.rest_seconds,
                    item.notes,
                    item.order_index,
                )
                for item in items
            ],
        )

    def create_workout(
        self,
        title: str,
        objective: str,
        created_by: str,
        week_start: Optional[str] = None,
        user_id: Optional[str] = None,
        is_template: bool = False,
        items: Optional[List[Dict[str, Any]]] = None,
    ) -> Workout:
        """
        Create a workout and its items in one transaction.

        Items are stored in the order given; ``order_index`` is their
        position in the list. A workout created for a user is stamped with
        ``assigned_at`` at creation time.

        Args:
            items: Dicts with ``name`` and optional sets, reps, weight,
                   rest_seconds, notes
        """
        now = utc_now_iso()
        workout = Workout(
            id=self._new_id(),
            title=title,
            objective=objective,
            week_start=week_start,
            user_id=user_id,
            is_template=is_template,
            parent_workout_id=None,
            assigned_at=now if user_id else None,
            created_by=created_by,
            created_at=now,
        )
        workout.items = [
            WorkoutItem(
                id=self._new_id(),
                workout_id=workout.id,
                name=item["name"],
                sets=item.get("sets"),
                reps=item.get("reps"),
                weight=item.get("weight"),
                rest_seconds=item.get("rest_seconds"),
                notes=item.get("notes"),
                order_index=index,
            )
            for index, item in enumerate(items or [])
        ]

        with self._get_connection() as conn:
            self._insert_workout(conn, workout)
            self._insert_items(conn, workout.items)

        return workout

    def assign_template(
        self,
        template_id: str,
        user_id: str,
        assigned_by: str,
        week_start: Optional[str] = None,
    ) -> Workout:
        """
        Copy a template into a new workout owned by ``user_id``.

        The copy keeps the template's title, objective and every item with
        its ``order_index``, points back at the template through
        ``parent_workout_id`` and is stamped with ``assigned_at``. Reading the
        template and writing the copy happen in one transaction.

        Raises:
            TemplateNotFoundError: If ``template_id`` is not a template
        """
        now = utc_now_iso()

        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts "
                "WHERE id = ? AND is_template = 1 AND user_id IS NULL LIMIT 1",
                (template_id,),
            ).fetchone()
            if row is None:
                raise TemplateNotFoundError(template_id)
            template = self._row_to_workout(row)

            item_rows = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM workout_items "
                "WHERE workout_id = ? ORDER BY order_index ASC",
                (template_id,),
            ).fetchall()

            copy = Workout(
                id=self._new_id(),
                title=template.title,
                objective=template.objective,
                week_start=week_start,
                user_id=user_id,
                is_template=False,
                parent_workout_id=template.id,
                assigned_at=now,
                created_by=assigned_by,
                created_at=now,
            )
            copy.items = [
                WorkoutItem(
                    id=self._new_id(),
                    workout_id=copy.id,
                    name=item["name"],
                    sets=item["sets"],
                    reps=item["reps"],
                    weight=item["weight"],
                    rest_seconds=item["rest_seconds"],
                    notes=item["notes"],
                    order_index=item["order_index"],
                )
                for item in item_rows
            ]

            self._insert_workout(conn, copy)
            self._insert_items(conn, copy.items)

        return copy

    def get_workout(self, workout_id: str) -> Optional[Workout]:
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts WHERE id = ? LIMIT 1",
                (workout_id,),
            ).fetchone()
            return self._row_to_workout(row) if row else None

    def get_template(self, workout_id: str) -> Optional[Workout]:
        workout = self.get_workout(workout_id)
        if workout is None or not workout.is_template or workout.user_id is not None:
            return None
        return workout

    def get_visible_workout(self, workout_id: str, user_id: str) -> Optional[Workout]:
        """Retrieve a workout only if it is a global template or the user's own."""
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts "
                f"WHERE id = ? AND {VISIBLE_TO_USER} LIMIT 1",
                (workout_id, user_id),
            ).fetchone()
            return self._row_to_workout(row) if row else None

    def get_items(self, workout_id: str) -> List[WorkoutItem]:
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT {ITEM_COLUMNS} FROM workout_items "
                "WHERE workout_id = ? ORDER BY order_index ASC",
                (workout_id,),
            ).fetchall()
            return [self._row_to_item(row) for row in rows]

    def list_all(self) -> List[Workout]:
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts ORDER BY created_at DESC"
            ).fetchall()
            return [self._row_to_workout(row) for row in rows]

    def list_visible_to(self, user_id: str) -> List[Workout]:
        """Global templates plus the user's workouts, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts "
                f"WHERE {VISIBLE_TO_USER} ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
            return [self._row_to_workout(row) for row in rows]

    def list_for_user(self, user_id: str) -> List[Workout]:
        """Only the workouts owned by the user, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT {WORKOUT_COLUMNS} FROM workouts "
                "WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
            return [self._row_to_workout(row) for row in rows]

    def template_titles(self) -> set[str]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT title FROM workouts WHERE is_template = 1 AND user_id IS NULL"
            ).fetchall()
            return {row["title"] for row in rows}
