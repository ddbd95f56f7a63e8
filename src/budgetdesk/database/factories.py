"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from budgetdesk.database.memory import InMemoryDatabase
from budgetdesk.database.sqlalchemy_db import SQLAlchemyDatabase


def default_database_path() -> str:
    """Return ~/.budgetdesk/budgetdesk.db, creating the directory if needed."""
    db_dir = Path.home() / ".budgetdesk"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "budgetdesk.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BUDGETDESK_DB_PATH
            environment variable, then defaults to ~/.budgetdesk/budgetdesk.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BUDGETDESK_DB_PATH")

    if database_path is None:
        database_path = default_database_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(database_url: Optional[str] = None, database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create the authoritative database from a URL, falling back to SQLite.

    Args:
        database_url: Any SQLAlchemy URL (e.g. a PostgreSQL server). Takes
            precedence over ``database_path``.
        database_path: SQLite file path used when no URL is given
    """
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)


def create_local_database(snapshot_path: Optional[str] = None) -> InMemoryDatabase:
    """Create the offline local mirror, loading a snapshot file if one exists."""
    if snapshot_path is None:
        return InMemoryDatabase()
    return InMemoryDatabase.load(Path(snapshot_path))
