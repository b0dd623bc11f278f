"""
Migration 001: Workout templates and assignment tracking

Databases created before templates existed have a workouts table without
the columns that distinguish a template from an assigned copy. This adds:
- workouts.is_template (0/1)
- workouts.parent_workout_id (template a copy was made from)
- workouts.assigned_at (when the copy was handed to the student)
"""

import sqlite3

from .helpers import add_column_if_not_exists

MIGRATION_VERSION = "001"
MIGRATION_NAME = "workout_templates"

COLUMNS = [
    ("is_template", "INTEGER NOT NULL", "0"),
    ("parent_workout_id", "TEXT", None),
    ("assigned_at", "TEXT", None),
]


def migrate(conn: sqlite3.Connection) -> dict:
    results = {
        "success": True,
        "migration": f"{MIGRATION_VERSION}_{MIGRATION_NAME}",
        "columns_added": [],
        "tables_rebuilt": [],
        "errors": [],
    }

    for column, column_type, default in COLUMNS:
        if add_column_if_not_exists(conn, "workouts", column, column_type, default):
            results["columns_added"].append(f"workouts.{column}")

    return results
