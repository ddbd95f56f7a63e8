"""Expense domain service and approval state machine."""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Iterable, Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.aggregation import ExpenseLedger
from budgetdesk.domain.entities import Expense, ExpenseStatus, Page, User
from budgetdesk.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    expense_not_found,
)
from budgetdesk.domain.ledger import affected_budget_ids
from budgetdesk.domain.validation import (
    check_allowed,
    coerce_enum,
    normalize_tags,
    optional_url,
    require_money,
    require_text,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "description",
    "amount",
    "category",
    "budget_id",
    "date",
    "vendor",
    "department",
    "status",
    "receipt_url",
    "tags",
)


def actor_label(actor: User | str) -> str:
    """Name recorded as the approver: the user's name, falling back to email."""
    if isinstance(actor, User):
        return actor.display_name
    return require_text(actor, "Actor")


class ExpenseService:
    """Service for managing expenses.

    Every mutation compares the stored expense before and after the change
    and re-aggregates the affected budgets, old budget first.
    """

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger = ExpenseLedger(db)

    def _require_budget_reference(self, budget_id: Optional[int]) -> None:
        if budget_id is not None and self.db.get_budget(budget_id) is None:
            raise ValidationError(budget_not_found(budget_id))

    def _require_expense(self, expense_id: int) -> Expense:
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def _reaggregate(self, before: Optional[Expense], after: Optional[Expense]) -> None:
        self.ledger.recalculate_many(affected_budget_ids(before, after))

    def create_expense(
        self,
        description: str,
        amount: Decimal,
        category: str,
        vendor: str,
        department: str,
        date: Optional[date_type] = None,
        budget_id: Optional[int] = None,
        status: ExpenseStatus | str = ExpenseStatus.PENDING,
        receipt_url: Optional[str] = None,
        tags: Iterable[str] = (),
        created_by: Optional[int] = None,
    ) -> Expense:
        """Create an expense.

        Args:
            description: What was bought
            amount: Amount (> 0)
            category: Category name
            vendor: Vendor name
            department: Department charged
            date: Expense date (defaults to today)
            budget_id: Optional budget the expense debits once approved
            status: Initial status (pending unless stated)
            receipt_url: Optional receipt link
            tags: Optional free-form tags
            created_by: ID of the submitting user

        Returns:
            The created expense

        Raises:
            ValidationError: If a field is invalid or the budget doesn't exist
        """
        description = require_text(description, "Description", max_length=500)
        amount = require_money(amount, "Amount", positive=True)
        category = require_text(category, "Category")
        vendor = require_text(vendor, "Vendor", max_length=100)
        department = require_text(department, "Department", max_length=100)
        status = coerce_enum(ExpenseStatus, status, "status")
        receipt_url = optional_url(receipt_url, "Receipt URL")
        self._require_budget_reference(budget_id)

        expense_id = self.db.create_expense(
            description=description,
            amount=amount,
            category=category,
            date=date or date_type.today(),
            vendor=vendor,
            department=department,
            status=status,
            budget_id=budget_id,
            receipt_url=receipt_url,
            tags=normalize_tags(tags),
            created_by=created_by,
        )
        created = self.db.get_expense(expense_id)
        self._reaggregate(None, created)
        return created

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID.

        Args:
            expense_id: Expense ID

        Returns:
            Expense or None if not found
        """
        return self.db.get_expense(expense_id)

    def list_expenses(
        self,
        category: Optional[str] = None,
        status: Optional[ExpenseStatus | str] = None,
        department: Optional[str] = None,
        budget_id: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = 10,
    ) -> Page[Expense]:
        """List expenses, newest first."""
        if status is not None:
            status = coerce_enum(ExpenseStatus, status, "status")
        return self.db.list_expenses(
            category=category,
            status=status,
            department=department,
            budget_id=budget_id,
            page=page,
            limit=limit,
        )

    def update_expense(self, expense_id: int, changes: dict[str, Any]) -> Expense:
        """Apply edits to an expense.

        A ``budget_id`` of None in ``changes`` unlinks the expense. Setting the
        status here follows the same aggregation rules as approve/reject.

        Args:
            expense_id: Expense ID
            changes: Mapping of editable fields to new values

        Returns:
            The updated expense

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the expense doesn't exist
        """
        check_allowed(changes, EDITABLE_FIELDS)
        before = self._require_expense(expense_id)

        values: dict[str, Any] = {}
        if changes.get("description") is not None:
            values["description"] = require_text(
                changes["description"], "Description", max_length=500
            )
        if changes.get("amount") is not None:
            values["amount"] = require_money(changes["amount"], "Amount", positive=True)
        if changes.get("category") is not None:
            values["category"] = require_text(changes["category"], "Category")
        if changes.get("vendor") is not None:
            values["vendor"] = require_text(changes["vendor"], "Vendor", max_length=100)
        if changes.get("department") is not None:
            values["department"] = require_text(
                changes["department"], "Department", max_length=100
            )
        if changes.get("date") is not None:
            values["date"] = changes["date"]
        if changes.get("status") is not None:
            values["status"] = coerce_enum(ExpenseStatus, changes["status"], "status")
        if "receipt_url" in changes:
            values["receipt_url"] = optional_url(changes["receipt_url"], "Receipt URL")
        if changes.get("tags") is not None:
            values["tags"] = normalize_tags(changes["tags"])
        if "budget_id" in changes:
            if changes["budget_id"] is None:
                values["clear_budget"] = True
            else:
                # A link kept from before may point at a deleted budget.
                if changes["budget_id"] != before.budget_id:
                    self._require_budget_reference(changes["budget_id"])
                values["budget_id"] = changes["budget_id"]

        self.db.update_expense(expense_id, **values)
        after = self.db.get_expense(expense_id)
        self._reaggregate(before, after)
        return after

    def approve_expense(self, expense_id: int, actor: User | str) -> Expense:
        """Approve an expense and charge it to its budget.

        Args:
            expense_id: Expense ID
            actor: Approving user, or a name for CLI use

        Returns:
            The approved expense

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        return self._decide(expense_id, ExpenseStatus.APPROVED, actor)

    def reject_expense(self, expense_id: int, actor: User | str) -> Expense:
        """Reject an expense, releasing any amount charged to its budget.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        return self._decide(expense_id, ExpenseStatus.REJECTED, actor)

    def _decide(self, expense_id: int, status: ExpenseStatus, actor: User | str) -> Expense:
        self._require_expense(expense_id)
        label = actor_label(actor)
        self.db.update_expense(expense_id, status=status, approved_by=label)
        after = self.db.get_expense(expense_id)
        logger.info("Expense %s %s by %s", expense_id, status.value, label)
        if after.budget_id is not None:
            self.ledger.recalculate(after.budget_id)
        return after

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense, releasing its amount if it was approved.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        before = self._require_expense(expense_id)
        self.db.delete_expense(expense_id)
        self._reaggregate(before, None)
