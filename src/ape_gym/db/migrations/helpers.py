"""Schema inspection and rebuild helpers shared by the migrations."""

import re
import sqlite3
from typing import Optional

_CREATE_TABLE_NAME = re.compile(
    r'^\s*CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?:"[^"]+"|\[[^\]]+\]|`[^`]+`|\w+)',
    re.IGNORECASE,
)


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Check if a table exists."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,)
    )
    return cursor.fetchone() is not None


def column_names(conn: sqlite3.Connection, table: str) -> list[str]:
    cursor = conn.execute(f'PRAGMA table_info("{table}")')
    return [row[1] for row in cursor.fetchall()]


def column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    """Check if a column exists in a table."""
    return column in column_names(conn, table)


def add_column_if_not_exists(
    conn: sqlite3.Connection,
    table: str,
    column: str,
    column_type: str,
    default: Optional[str] = None
) -> bool:
    """Add a column to a table if it doesn't exist."""
    if not table_exists(conn, table):
        return False
    if column_exists(conn, table, column):
        return False

    default_clause = f" DEFAULT {default}" if default is not None else ""
    conn.execute(f'ALTER TABLE "{table}" ADD COLUMN {column} {column_type}{default_clause}')
    return True


def get_table_sql(conn: sqlite3.Connection, table: str) -> Optional[str]:
    """Return the CREATE statement SQLite stored for a table."""
    row = conn.execute(
        "SELECT sql FROM sqlite_master WHERE type='table' AND name=?",
        (table,)
    ).fetchone()
    return row[0] if row else None


def rebuild_table(conn: sqlite3.Connection, table: str, create_sql: str) -> int:
    """
    Recreate ``table`` from ``create_sql``, keeping every row.

    Follows SQLite's recommended procedure for schema changes ALTER TABLE
    cannot express: create the new definition under a scratch name, copy the
    shared columns, drop the old table and rename the new one into place.
    Foreign-key enforcement must be off on ``conn`` while this runs; indexes
    on the table are dropped with it and must be recreated by the caller.

    Returns:
        Number of rows copied.
    """
    scratch = f"{table}__rebuild"
    scratch_sql = _CREATE_TABLE_NAME.sub(f'CREATE TABLE "{scratch}"', create_sql, count=1)

    conn.execute(f'DROP TABLE IF EXISTS "{scratch}"')
    conn.execute(scratch_sql)

    new_columns = set(column_names(conn, scratch))
    shared = [c for c in column_names(conn, table) if c in new_columns]
    cols = ", ".join(f'"{c}"' for c in shared)

    cursor = conn.execute(f'INSERT INTO "{scratch}" ({cols}) SELECT {cols} FROM "{table}"')
    copied = cursor.rowcount

    conn.execute(f'DROP TABLE "{table}"')
    conn.execute(f'ALTER TABLE "{scratch}" RENAME TO "{table}"')
    return copied
