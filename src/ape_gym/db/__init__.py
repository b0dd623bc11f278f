"""Persistence layer: SQLite schema, migrations, repositories and seeding."""

from .database import GymDatabase, get_default_db_path

__all__ = ["GymDatabase", "get_default_db_path"]
