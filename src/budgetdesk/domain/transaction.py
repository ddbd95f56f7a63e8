"""Transaction domain service."""

from datetime import date as date_type
from decimal import Decimal
from typing import Any, Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import Page, Transaction, TransactionStatus, TransactionType
from budgetdesk.domain.errors import NotFoundError, ValidationError, transaction_not_found
from budgetdesk.domain.validation import (
    check_allowed,
    coerce_enum,
    optional_text,
    require_money,
    require_text,
)

EDITABLE_FIELDS = (
    "type",
    "amount",
    "description",
    "category",
    "date",
    "account",
    "status",
    "reference",
)


class TransactionService:
    """Service for cash-flow transactions. They never touch budgets."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        type: TransactionType | str,
        amount: Decimal,
        description: str,
        category: str,
        account: str,
        date: Optional[date_type] = None,
        status: TransactionStatus | str = TransactionStatus.PENDING,
        reference: Optional[str] = None,
    ) -> Transaction:
        """Record a transaction.

        Args:
            type: income or expense
            amount: Amount (> 0)
            description: Description
            category: Category name
            account: Account name
            date: Transaction date (defaults to today)
            status: completed, pending or failed
            reference: Optional external reference

        Returns:
            The created transaction

        Raises:
            ValidationError: If a field is invalid
        """
        transaction_id = self.db.create_transaction(
            type=coerce_enum(TransactionType, type, "type"),
            amount=require_money(amount, "Amount", positive=True),
            description=require_text(description, "Description", max_length=500),
            category=require_text(category, "Category"),
            date=date or date_type.today(),
            account=require_text(account, "Account", max_length=100),
            status=coerce_enum(TransactionStatus, status, "status"),
            reference=optional_text(reference, "Reference", max_length=50),
        )
        return self.db.get_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        type: Optional[TransactionType | str] = None,
        status: Optional[TransactionStatus | str] = None,
        category: Optional[str] = None,
        account: Optional[str] = None,
        start_date: Optional[date_type] = None,
        end_date: Optional[date_type] = None,
        page: int = 1,
        limit: Optional[int] = 10,
    ) -> Page[Transaction]:
        """List transactions, newest first.

        Raises:
            ValidationError: If the date range is inverted or a filter is invalid
        """
        if type is not None:
            type = coerce_enum(TransactionType, type, "type")
        if status is not None:
            status = coerce_enum(TransactionStatus, status, "status")
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be before end date")
        return self.db.list_transactions(
            type=type,
            status=status,
            category=category,
            account=account,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )

    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> Transaction:
        """Apply edits to a transaction.

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the transaction doesn't exist
        """
        check_allowed(changes, EDITABLE_FIELDS)
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        values: dict[str, Any] = {}
        if changes.get("type") is not None:
            values["type"] = coerce_enum(TransactionType, changes["type"], "type")
        if changes.get("amount") is not None:
            values["amount"] = require_money(changes["amount"], "Amount", positive=True)
        if changes.get("description") is not None:
            values["description"] = require_text(
                changes["description"], "Description", max_length=500
            )
        if changes.get("category") is not None:
            values["category"] = require_text(changes["category"], "Category")
        if changes.get("date") is not None:
            values["date"] = changes["date"]
        if changes.get("account") is not None:
            values["account"] = require_text(changes["account"], "Account", max_length=100)
        if changes.get("status") is not None:
            values["status"] = coerce_enum(TransactionStatus, changes["status"], "status")
        if changes.get("reference") is not None:
            values["reference"] = optional_text(changes["reference"], "Reference", max_length=50)

        self.db.update_transaction(transaction_id, **values)
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
