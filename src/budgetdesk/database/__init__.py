"""Database layer for budgetdesk application."""

from budgetdesk.database.base import Database
from budgetdesk.database.factories import (
    create_database,
    create_local_database,
    create_sqlite_database,
)
from budgetdesk.database.memory import InMemoryDatabase

__all__ = [
    "Database",
    "InMemoryDatabase",
    "create_database",
    "create_local_database",
    "create_sqlite_database",
]
