"""SQLite database for the Ape Gym store."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..config import get_settings
from .migrations import run_migrations
from .schema import INDEXES, TABLES, USERS_TABLE

logger = logging.getLogger(__name__)


def get_default_db_path() -> Path:
    """Get the configured database path (``DB_PATH``, default ./data.sqlite)."""
    return get_settings().db_path


class GymDatabase:
    """SQLite database manager: schema, migrations and connections."""

    def __init__(self, db_path: Optional[str] = None):
        """
        Open (creating if needed) and migrate the database.

        Args:
            db_path: Path to SQLite database file. If not provided,
                     uses the DB_PATH setting.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            self.db_path = get_default_db_path()

        self.migration_results: list[dict] = []
        self._init_db()

    def _init_db(self):
        """Create tables, run migrations, then create users and the indexes."""
        conn = sqlite3.connect(str(self.db_path), isolation_level=None)
        try:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.executescript(TABLES)
            self.migration_results = run_migrations(conn)
            conn.executescript(USERS_TABLE)
            conn.executescript(INDEXES)

            violations = conn.execute("PRAGMA foreign_key_check").fetchall()
            for table, rowid, parent, _ in violations:
                logger.warning(
                    f"Foreign key violation: {table} row {rowid} references missing {parent}"
                )
        finally:
            conn.close()

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Get a database connection with context manager.

        Every statement executed inside the block belongs to one transaction:
        committed when the block exits normally, rolled back on error.
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_tables(self) -> list[str]:
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
            ).fetchall()
            return [row["name"] for row in rows]
