"""Domain model entities for budgetdesk.

These are pure data classes representing business concepts, independent of
database schema. Services and the local mirror exchange these objects, so the
business rules never see an ORM row.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BudgetStatus(str, Enum):
    ON_TRACK = "on-track"
    WARNING = "warning"
    OVER_BUDGET = "over-budget"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


@dataclass(frozen=True)
class Budget:
    """Allocation envelope for a category over a period."""

    id: int
    name: str
    category: str
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    period: BudgetPeriod
    status: BudgetStatus
    created_at: datetime
    updated_at: datetime
    version: int = 1


@dataclass(frozen=True)
class Expense:
    """Cost claim that debits a budget once approved."""

    id: int
    description: str
    amount: Decimal
    category: str
    date: date
    vendor: str
    department: str
    status: ExpenseStatus
    created_at: datetime
    updated_at: datetime
    budget_id: Optional[int] = None
    approved_by: Optional[str] = None
    receipt_url: Optional[str] = None
    tags: tuple[str, ...] = ()
    created_by: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Independent cash-flow record, not tied to the budget lifecycle."""

    id: int
    type: TransactionType
    amount: Decimal
    description: str
    category: str
    date: date
    account: str
    status: TransactionStatus
    created_at: datetime
    updated_at: datetime
    reference: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity with optional parent."""

    id: int
    name: str
    color: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    parent_id: Optional[int] = None
    budget: Optional[Decimal] = None


@dataclass(frozen=True)
class User:
    """Application user. The password hash never leaves the domain layer."""

    id: int
    name: str
    email: str
    password_hash: str
    role: UserRole
    department: str
    is_active: bool
    token_version: int
    created_at: datetime
    updated_at: datetime
    permissions: frozenset[str] = frozenset()
    avatar: Optional[str] = None
    last_login: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def has_permission(self, permission: str) -> bool:
        """Admins hold every permission implicitly."""
        return self.role == UserRole.ADMIN or permission in self.permissions


@dataclass(frozen=True)
class CategoryShare:
    """One row of the dashboard category breakdown."""

    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class DashboardMetrics:
    """Portfolio-wide totals derived from budgets and expenses."""

    total_budget: Decimal
    total_expenses: Decimal
    remaining_budget: Decimal
    savings_goal: Decimal
    monthly_burn_rate: Decimal
    budget_utilization: Decimal
    expense_growth: Decimal
    category_breakdown: tuple[CategoryShare, ...] = ()


@dataclass(frozen=True)
class BudgetAlert:
    """Dashboard alert about a budget or the overall portfolio."""

    type: str
    title: str
    message: str
    budget: str
    utilization: int


@dataclass(frozen=True)
class BudgetHealth:
    """Display-oriented view of a budget including soft-linked expenses."""

    budget_id: int
    actual_spent: Decimal
    remaining: Decimal
    utilization: Decimal
    status: BudgetStatus
    expense_count: int


T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a filtered listing."""

    items: list[T] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
