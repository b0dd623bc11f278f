"""
Migration 003: Optional profile fields on users

Adds contact and address columns staff fill in from the user details
screen, plus updated_at. All of them are nullable.
"""

import sqlite3

from .helpers import add_column_if_not_exists

MIGRATION_VERSION = "003"
MIGRATION_NAME = "user_profile"

PROFILE_COLUMNS = [
    "phone",
    "birthdate",
    "avatar_url",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip",
    "country",
    "updated_at",
]


def migrate(conn: sqlite3.Connection) -> dict:
    results = {
        "success": True,
        "migration": f"{MIGRATION_VERSION}_{MIGRATION_NAME}",
        "columns_added": [],
        "tables_rebuilt": [],
        "errors": [],
    }

    for column in PROFILE_COLUMNS:
        if add_column_if_not_exists(conn, "users", column, "TEXT"):
            results["columns_added"].append(f"users.{column}")

    return results
