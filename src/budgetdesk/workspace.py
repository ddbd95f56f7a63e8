"""Offline-capable application state.

A ``Workspace`` pairs the authoritative database with an in-memory local
mirror. The same domain services run against whichever store is active, so
budget status, ledger aggregation and dashboard metrics behave identically
online and offline.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from budgetdesk.database.base import Database
from budgetdesk.database.memory import InMemoryDatabase
from budgetdesk.domain.budget import BudgetService
from budgetdesk.domain.category import CategoryService
from budgetdesk.domain.dashboard import DashboardService
from budgetdesk.domain.entities import (
    Budget,
    BudgetAlert,
    Category,
    DashboardMetrics,
    Expense,
    Page,
    Transaction,
    User,
)
from budgetdesk.domain.expense import ExpenseService
from budgetdesk.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESOURCES = ("budgets", "expenses", "categories", "transactions")

_LISTERS: dict[str, Callable[[Database], Page[Any]]] = {
    "budgets": lambda db: db.list_budgets(),
    "expenses": lambda db: db.list_expenses(),
    "categories": lambda db: db.list_categories(),
    "transactions": lambda db: db.list_transactions(),
}


class Workspace:
    """Budgets, expenses, categories and transactions with offline fallback.

    Args:
        remote: Authoritative database
        local: Local mirror used while offline
        online: Whether to start against the remote store
    """

    def __init__(self, remote: Database, local: Optional[InMemoryDatabase] = None, online: bool = True):
        self.remote = remote
        self.local = local if local is not None else InMemoryDatabase()
        self.online = online

    @property
    def db(self) -> Database:
        """The store operations currently run against."""
        return self.remote if self.online else self.local

    def go_offline(self) -> None:
        self.online = False

    def go_online(self, refresh: bool = True) -> dict[str, bool]:
        """Switch back to the remote store, optionally re-syncing the mirror."""
        self.online = True
        if refresh:
            return self.refresh()
        return {}

    def _run(self, operation: Callable[[Database], T], touches: Iterable[str] = ()) -> T:
        """Run an operation on the active store, falling back to the mirror.

        After a successful remote write the touched resources are re-copied
        into the mirror. An operation that loses the connection after part of
        it was committed remotely is not replayed; the error is re-raised.
        """
        if self.online:
            commits = self.remote.commit_count
            try:
                result = operation(self.remote)
            except OperationalError as e:
                self.online = False
                if self.remote.commit_count != commits:
                    logger.error("Remote store lost mid-write, not replaying offline: %s", e.orig or e)
                    raise
                logger.warning("Remote store unreachable, continuing offline: %s", e.orig or e)
            else:
                if touches:
                    self.refresh(touches)
                return result
        return operation(self.local)

    def refresh(self, resources: Iterable[str] = RESOURCES) -> dict[str, bool]:
        """Copy resources from the remote store into the local mirror.

        Each resource is fetched independently; one that fails keeps its
        previously cached contents.

        Returns:
            Mapping of resource name to whether it was refreshed
        """
        results = {}
        for name in resources:
            try:
                items = _LISTERS[name](self.remote).items
            except SQLAlchemyError as e:
                logger.warning("Could not refresh %s, keeping cached copy: %s", name, e)
                results[name] = False
                continue
            self.local.replace_collection(name, items)
            results[name] = True
        return results

    def save(self, path: Path) -> None:
        """Persist the local mirror to a snapshot file."""
        self.local.save(path)

    # Budgets
    def list_budgets(self, **filters) -> Page[Budget]:
        return self._run(lambda db: BudgetService(db).list_budgets(**filters))

    def create_budget(self, name: str, category: str, allocated, period="monthly") -> Budget:
        return self._run(
            lambda db: BudgetService(db).create_budget(name, category, allocated, period),
            touches=("budgets",),
        )

    def update_budget(self, budget_id: int, changes: dict[str, Any]) -> Budget:
        return self._run(
            lambda db: BudgetService(db).update_budget(budget_id, changes),
            touches=("budgets",),
        )

    def delete_budget(self, budget_id: int) -> None:
        self._run(lambda db: BudgetService(db).delete_budget(budget_id), touches=("budgets",))

    # Expenses
    def list_expenses(self, **filters) -> Page[Expense]:
        return self._run(lambda db: ExpenseService(db).list_expenses(**filters))

    def create_expense(self, **fields) -> Expense:
        return self._run(
            lambda db: ExpenseService(db).create_expense(**fields),
            touches=("expenses", "budgets"),
        )

    def update_expense(self, expense_id: int, changes: dict[str, Any]) -> Expense:
        return self._run(
            lambda db: ExpenseService(db).update_expense(expense_id, changes),
            touches=("expenses", "budgets"),
        )

    def approve_expense(self, expense_id: int, actor: User | str) -> Expense:
        return self._run(
            lambda db: ExpenseService(db).approve_expense(expense_id, actor),
            touches=("expenses", "budgets"),
        )

    def reject_expense(self, expense_id: int, actor: User | str) -> Expense:
        return self._run(
            lambda db: ExpenseService(db).reject_expense(expense_id, actor),
            touches=("expenses", "budgets"),
        )

    def delete_expense(self, expense_id: int) -> None:
        self._run(
            lambda db: ExpenseService(db).delete_expense(expense_id),
            touches=("expenses", "budgets"),
        )

    # Categories
    def list_categories(self, **filters) -> Page[Category]:
        return self._run(lambda db: CategoryService(db).list_categories(**filters))

    def create_category(self, name: str, color: str, **fields) -> Category:
        return self._run(
            lambda db: CategoryService(db).create_category(name, color, **fields),
            touches=("categories",),
        )

    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category:
        return self._run(
            lambda db: CategoryService(db).update_category(category_id, changes),
            touches=("categories",),
        )

    def delete_category(self, category_id: int) -> None:
        self._run(
            lambda db: CategoryService(db).delete_category(category_id),
            touches=("categories",),
        )

    # Transactions
    def list_transactions(self, **filters) -> Page[Transaction]:
        return self._run(lambda db: TransactionService(db).list_transactions(**filters))

    def create_transaction(self, **fields) -> Transaction:
        return self._run(
            lambda db: TransactionService(db).create_transaction(**fields),
            touches=("transactions",),
        )

    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> Transaction:
        return self._run(
            lambda db: TransactionService(db).update_transaction(transaction_id, changes),
            touches=("transactions",),
        )

    def delete_transaction(self, transaction_id: int) -> None:
        self._run(
            lambda db: TransactionService(db).delete_transaction(transaction_id),
            touches=("transactions",),
        )

    # Dashboard
    def metrics(self, now: Optional[datetime] = None) -> DashboardMetrics:
        return self._run(lambda db: DashboardService(db).metrics(now))

    def alerts(self) -> list[BudgetAlert]:
        return self._run(lambda db: DashboardService(db).alerts())
