"""Idempotent schema migrations, applied in order at every startup.

Each migration module exposes ``migrate(conn) -> dict`` and checks the live
schema before changing anything, so running the full list against an
up-to-date database is a no-op.
"""

import logging
import sqlite3

from ...exceptions import MigrationError
from . import (
    migration_001_workout_templates,
    migration_002_professor_role,
    migration_003_user_profile,
)

logger = logging.getLogger(__name__)

MIGRATIONS = [
    migration_001_workout_templates,
    migration_002_professor_role,
    migration_003_user_profile,
]


def run_migrations(conn: sqlite3.Connection) -> list[dict]:
    """
    Apply every migration, one transaction each.

    ``conn`` must be in autocommit mode (``isolation_level=None``) so that
    foreign-key enforcement can be switched off around the table rebuilds;
    SQLite ignores that pragma inside a transaction.

    Raises:
        MigrationError: if a migration fails; its transaction is rolled back.
    """
    results = []
    conn.execute("PRAGMA foreign_keys = OFF")
    try:
        for module in MIGRATIONS:
            name = f"{module.MIGRATION_VERSION}_{module.MIGRATION_NAME}"
            conn.execute("BEGIN")
            try:
                result = module.migrate(conn)
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                conn.execute("ROLLBACK")
                logger.error(f"Migration {name} failed: {e}")
                raise MigrationError(name, str(e)) from e

            if result["columns_added"] or result["tables_rebuilt"]:
                logger.info(
                    f"Migration {name}: added {result['columns_added'] or 'no columns'}, "
                    f"rebuilt {result['tables_rebuilt'] or 'no tables'}"
                )
            else:
                logger.debug(f"Migration {name}: no changes needed")
            results.append(result)
    finally:
        conn.execute("PRAGMA foreign_keys = ON")

    return results


__all__ = ["MIGRATIONS", "run_migrations"]
