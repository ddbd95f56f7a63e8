"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from budgetdesk.domain.entities import (
    Budget,
    BudgetPeriod,
    BudgetStatus,
    Category,
    Expense,
    ExpenseStatus,
    Page,
    Transaction,
    TransactionStatus,
    TransactionType,
    User,
    UserRole,
)


class Database(ABC):
    """Abstract database interface for budgetdesk.

    List operations return a ``Page``; a ``limit`` of None returns every
    matching row on a single page.
    """

    # Writes committed so far; lets callers tell whether a failed
    # operation already changed the store.
    commit_count: int = 0

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(
        self,
        name: str,
        category: str,
        allocated: Decimal,
        period: BudgetPeriod,
        spent: Decimal,
        remaining: Decimal,
        status: BudgetStatus,
    ) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(
        self,
        category: Optional[str] = None,
        period: Optional[BudgetPeriod] = None,
        status: Optional[BudgetStatus] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[Budget]:
        """List budgets, newest first."""
        pass

    @abstractmethod
    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        allocated: Optional[Decimal] = None,
        period: Optional[BudgetPeriod] = None,
    ) -> None:
        """Update the client-editable budget fields."""
        pass

    @abstractmethod
    def apply_budget_usage(
        self,
        budget_id: int,
        spent: Decimal,
        remaining: Decimal,
        status: BudgetStatus,
        expected_version: int,
    ) -> bool:
        """Write derived budget fields if the stored version still matches.

        Returns:
            True if the write happened, False on a version conflict or when
            the budget no longer exists
        """
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        description: str,
        amount: Decimal,
        category: str,
        date: date,
        vendor: str,
        department: str,
        status: ExpenseStatus = ExpenseStatus.PENDING,
        budget_id: Optional[int] = None,
        approved_by: Optional[str] = None,
        receipt_url: Optional[str] = None,
        tags: tuple[str, ...] = (),
        created_by: Optional[int] = None,
    ) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        category: Optional[str] = None,
        status: Optional[ExpenseStatus] = None,
        department: Optional[str] = None,
        budget_id: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[Expense]:
        """List expenses, newest first."""
        pass

    @abstractmethod
    def update_expense(
        self,
        expense_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        budget_id: Optional[int] = None,
        date: Optional[date] = None,
        vendor: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[ExpenseStatus] = None,
        approved_by: Optional[str] = None,
        receipt_url: Optional[str] = None,
        tags: Optional[tuple[str, ...]] = None,
        clear_budget: bool = False,
    ) -> None:
        """Update expense fields.

        Args:
            clear_budget: If True, unlink the expense from its budget
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        color: str,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
        budget: Optional[Decimal] = None,
        is_active: bool = True,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by its unique name."""
        pass

    @abstractmethod
    def list_categories(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[Category]:
        """List categories ordered by name.

        Args:
            search: Case-insensitive substring match on the name
            is_active: Optional activity filter
        """
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
        budget: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update category fields."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: TransactionType,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
        account: str,
        status: TransactionStatus = TransactionStatus.PENDING,
        reference: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        category: Optional[str] = None,
        account: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[Transaction]:
        """List transactions, most recently recorded first."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        type: Optional[TransactionType] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
        account: Optional[str] = None,
        status: Optional[TransactionStatus] = None,
        reference: Optional[str] = None,
    ) -> None:
        """Update transaction fields."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    # User operations
    @abstractmethod
    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        department: str,
        role: UserRole = UserRole.USER,
        permissions: frozenset[str] = frozenset(),
        avatar: Optional[str] = None,
    ) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by (lowercased) email."""
        pass

    @abstractmethod
    def list_users(
        self,
        role: Optional[UserRole] = None,
        department: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[User]:
        """List users, newest first. ``search`` matches name or email."""
        pass

    @abstractmethod
    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        department: Optional[str] = None,
        role: Optional[UserRole] = None,
        permissions: Optional[frozenset[str]] = None,
        avatar: Optional[str] = None,
        is_active: Optional[bool] = None,
        password_hash: Optional[str] = None,
        last_login: Optional[datetime] = None,
    ) -> None:
        """Update user fields."""
        pass

    @abstractmethod
    def increment_token_version(self, user_id: int) -> None:
        """Invalidate every session token previously issued to the user."""
        pass
