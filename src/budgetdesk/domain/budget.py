"""Budget domain service."""

from decimal import Decimal
from typing import Any, Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.aggregation import ExpenseLedger
from budgetdesk.domain.entities import (
    Budget,
    BudgetHealth,
    BudgetPeriod,
    BudgetStatus,
    ExpenseStatus,
    Page,
)
from budgetdesk.domain.errors import NotFoundError, budget_not_found
from budgetdesk.domain.ledger import (
    ZERO,
    budget_status,
    budget_usage,
    display_spend,
    round_percentage,
    soft_linked_expenses,
    utilization,
)
from budgetdesk.domain.validation import (
    check_allowed,
    coerce_enum,
    require_money,
    require_text,
)

EDITABLE_FIELDS = ("name", "category", "allocated", "period")


class BudgetService:
    """Service for managing budgets.

    Only name, category, allocated and period are client-editable; spent,
    remaining and status are always derived from approved expenses.
    """

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger = ExpenseLedger(db)

    def create_budget(
        self,
        name: str,
        category: str,
        allocated: Decimal,
        period: BudgetPeriod | str = BudgetPeriod.MONTHLY,
    ) -> Budget:
        """Create a budget with nothing spent yet.

        Args:
            name: Budget name
            category: Category name the budget covers
            allocated: Amount allocated (>= 0)
            period: monthly, quarterly or yearly

        Returns:
            The created budget

        Raises:
            ValidationError: If a field is missing or invalid
        """
        name = require_text(name, "Budget name", max_length=100)
        category = require_text(category, "Category")
        allocated = require_money(allocated, "Allocated amount")
        period = coerce_enum(BudgetPeriod, period, "period")

        usage = budget_usage(allocated, ZERO)
        budget_id = self.db.create_budget(
            name=name,
            category=category,
            allocated=allocated,
            period=period,
            spent=usage.spent,
            remaining=usage.remaining,
            status=usage.status,
        )
        return self.db.get_budget(budget_id)

    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID.

        Args:
            budget_id: Budget ID

        Returns:
            Budget or None if not found
        """
        return self.db.get_budget(budget_id)

    def require_budget(self, budget_id: int) -> Budget:
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def list_budgets(
        self,
        category: Optional[str] = None,
        period: Optional[BudgetPeriod | str] = None,
        status: Optional[BudgetStatus | str] = None,
        page: int = 1,
        limit: Optional[int] = 10,
    ) -> Page[Budget]:
        """List budgets, newest first.

        Args:
            category: Optional category filter
            period: Optional period filter
            status: Optional status filter
            page: 1-based page number
            limit: Page size, or None for everything

        Returns:
            Page of budgets
        """
        if period is not None:
            period = coerce_enum(BudgetPeriod, period, "period")
        if status is not None:
            status = coerce_enum(BudgetStatus, status, "status")
        return self.db.list_budgets(
            category=category, period=period, status=status, page=page, limit=limit
        )

    def update_budget(self, budget_id: int, changes: dict[str, Any]) -> Budget:
        """Apply client edits to a budget.

        Args:
            budget_id: Budget ID
            changes: Mapping restricted to name, category, allocated, period

        Returns:
            The updated budget

        Raises:
            ValidationError: If a derived or unknown field is present
            NotFoundError: If the budget doesn't exist
        """
        check_allowed(changes, EDITABLE_FIELDS)
        self.require_budget(budget_id)

        values: dict[str, Any] = {}
        if changes.get("name") is not None:
            values["name"] = require_text(changes["name"], "Budget name", max_length=100)
        if changes.get("category") is not None:
            values["category"] = require_text(changes["category"], "Category")
        if changes.get("allocated") is not None:
            values["allocated"] = require_money(changes["allocated"], "Allocated amount")
        if changes.get("period") is not None:
            values["period"] = coerce_enum(BudgetPeriod, changes["period"], "period")

        self.db.update_budget(budget_id, **values)
        if "allocated" in values:
            self.ledger.recalculate(budget_id)
        return self.db.get_budget(budget_id)

    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget. Linked expenses keep their (now dangling) reference.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        self.require_budget(budget_id)
        self.db.delete_budget(budget_id)

    def recalculate(self, budget_id: int) -> Optional[Budget]:
        """Re-derive spent, remaining and status from approved expenses."""
        return self.ledger.recalculate(budget_id)

    def health(self, budget_id: int) -> BudgetHealth:
        """Display view of a budget that also counts unlinked same-category expenses.

        The soft-linked amount is never written back to the budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        budget = self.require_budget(budget_id)
        approved = self.db.list_expenses(status=ExpenseStatus.APPROVED).items
        spent = display_spend(approved, budget)
        remaining = budget.allocated - spent
        return BudgetHealth(
            budget_id=budget.id,
            actual_spent=spent,
            remaining=remaining if remaining > ZERO else ZERO,
            utilization=round_percentage(utilization(budget.allocated, spent)),
            status=budget_status(budget.allocated, spent),
            expense_count=len(soft_linked_expenses(approved, budget)),
        )
