"""Dashboard domain service."""

from datetime import datetime, timezone
from typing import Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import BudgetAlert, DashboardMetrics, Expense, ExpenseStatus, Transaction
from budgetdesk.domain.metrics import build_budget_alerts, compute_dashboard_metrics


class DashboardService:
    """Read-only portfolio views built from the full budget and expense sets."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def metrics(self, now: Optional[datetime] = None) -> DashboardMetrics:
        """Compute portfolio metrics.

        Args:
            now: Reference time for the burn-rate windows (defaults to now, UTC)

        Returns:
            DashboardMetrics
        """
        return compute_dashboard_metrics(
            budgets=self.db.list_budgets().items,
            expenses=self.db.list_expenses().items,
            categories=self.db.list_categories().items,
            now=now or datetime.now(timezone.utc),
        )

    def alerts(self) -> list[BudgetAlert]:
        return build_budget_alerts(self.db.list_budgets().items)

    def recent_transactions(self, limit: int = 10) -> list[Transaction]:
        return self.db.list_transactions(limit=limit).items

    def pending_expenses(self, limit: int = 10) -> list[Expense]:
        return self.db.list_expenses(status=ExpenseStatus.PENDING, limit=limit).items
