"""
Migration 002: Professor role and users_old repair

The first releases created users with CHECK(role IN ('aluno','admin')).
SQLite cannot alter a CHECK constraint, so the table is rebuilt with the
widened constraint.

An earlier attempt at this migration renamed users to users_old before
copying the rows over. SQLite rewrites foreign keys on rename, so every
table pointing at users ended up pointing at users_old, and once users_old
was dropped those references dangled. This migration also cleans that up:
- a leftover users_old table is renamed back or merged into users
- every table whose stored CREATE statement mentions users_old is rebuilt
  with the reference pointing at users again
"""

import logging
import re
import sqlite3

from .helpers import (
    column_names,
    get_table_sql,
    rebuild_table,
    table_exists,
)

logger = logging.getLogger(__name__)

MIGRATION_VERSION = "002"
MIGRATION_NAME = "professor_role"

ROLE_CHECK = "CHECK(role IN ('aluno','professor','admin'))"

_ROLE_CHECK_PATTERN = re.compile(r"CHECK\s*\(\s*role\s+IN\s*\([^)]*\)\s*\)", re.IGNORECASE)
_USERS_OLD_REFERENCE = re.compile(r'"users_old"|`users_old`|\[users_old\]|\busers_old\b')


def users_allows_professor(conn: sqlite3.Connection) -> bool:
    """True when the stored users definition already accepts 'professor'."""
    sql = get_table_sql(conn, "users")
    if sql is None:
        return True
    match = _ROLE_CHECK_PATTERN.search(sql)
    return match is None or "'professor'" in match.group(0)


def widen_role_check(conn: sqlite3.Connection) -> int:
    """Rebuild users with the three-role CHECK constraint; returns rows copied."""
    sql = get_table_sql(conn, "users")
    widened = _ROLE_CHECK_PATTERN.sub(ROLE_CHECK, sql, count=1)
    return rebuild_table(conn, "users", widened)


def tables_referencing_users_old(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute(
        "SELECT name, sql FROM sqlite_master "
        "WHERE type='table' AND name != 'users_old' AND sql LIKE '%users_old%'"
    ).fetchall()
    return [name for name, sql in rows if _USERS_OLD_REFERENCE.search(sql)]


def repair_users_old_references(conn: sqlite3.Connection) -> list[str]:
    """Rebuild every table whose foreign keys still name users_old."""
    repaired = []
    for table in tables_referencing_users_old(conn):
        sql = get_table_sql(conn, table)
        fixed = _USERS_OLD_REFERENCE.sub("users", sql)
        rebuild_table(conn, table, fixed)
        repaired.append(table)
    return repaired


def merge_users_old(conn: sqlite3.Connection) -> int:
    """Copy rows only present in users_old into users, then drop users_old."""
    target = set(column_names(conn, "users"))
    shared = [c for c in column_names(conn, "users_old") if c in target]
    cols = ", ".join(f'"{c}"' for c in shared)
    cursor = conn.execute(
        f'INSERT OR IGNORE INTO users ({cols}) SELECT {cols} FROM users_old'
    )
    conn.execute("DROP TABLE users_old")
    return cursor.rowcount


def migrate(conn: sqlite3.Connection) -> dict:
    """
    Apply the migration on a connection with foreign keys disabled.

    Returns:
        dict with migration results (success, tables_rebuilt, errors, ...)
    """
    results = {
        "success": True,
        "migration": f"{MIGRATION_VERSION}_{MIGRATION_NAME}",
        "columns_added": [],
        "tables_rebuilt": [],
        "users_old_restored": False,
        "users_old_merged": 0,
        "errors": [],
    }

    if table_exists(conn, "users_old") and not table_exists(conn, "users"):
        conn.execute("ALTER TABLE users_old RENAME TO users")
        results["users_old_restored"] = True
        logger.warning("Restored users table from leftover users_old")

    if table_exists(conn, "users") and not users_allows_professor(conn):
        copied = widen_role_check(conn)
        results["tables_rebuilt"].append("users")
        logger.info(f"Rebuilt users with professor role ({copied} rows copied)")

    # Widen first so professors kept in users_old survive the CHECK on merge
    if table_exists(conn, "users_old"):
        results["users_old_merged"] = merge_users_old(conn)
        logger.warning(
            f"Merged {results['users_old_merged']} rows from leftover users_old"
        )

    for table in repair_users_old_references(conn):
        results["tables_rebuilt"].append(table)
        logger.warning(f"Repaired foreign keys of {table} that referenced users_old")

    return results
