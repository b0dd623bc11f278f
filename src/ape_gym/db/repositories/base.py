"""Base class for the SQLite-backed repositories."""

import sqlite3
import uuid
from contextlib import AbstractContextManager

from ..database import GymDatabase


class SQLiteRepository:
    """
    Repository over one aggregate stored in a GymDatabase.

    Each public method opens its own connection, so each call is one
    transaction. Methods that write several rows do so inside a single
    ``with self._get_connection()`` block.
    """

    def __init__(self, db: GymDatabase):
        self.db = db

    def _get_connection(self) -> AbstractContextManager[sqlite3.Connection]:
        return self.db.get_connection()

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())
