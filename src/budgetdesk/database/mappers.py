"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so string columns become domain
enums and JSON columns become immutable tuples and sets in one place.
"""

from decimal import Decimal

from budgetdesk.domain import entities as domain
from budgetdesk.database.models import (
    Budget as ORMBudget,
    Category as ORMCategory,
    Expense as ORMExpense,
    Transaction as ORMTransaction,
    User as ORMUser,
)


def _money(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        name=orm_budget.name,
        category=orm_budget.category,
        allocated=_money(orm_budget.allocated),
        spent=_money(orm_budget.spent),
        remaining=_money(orm_budget.remaining),
        period=domain.BudgetPeriod(orm_budget.period),
        status=domain.BudgetStatus(orm_budget.status),
        created_at=orm_budget.created_at,
        updated_at=orm_budget.updated_at,
        version=orm_budget.version,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        description=orm_expense.description,
        amount=_money(orm_expense.amount),
        category=orm_expense.category,
        date=orm_expense.date,
        vendor=orm_expense.vendor,
        department=orm_expense.department,
        status=domain.ExpenseStatus(orm_expense.status),
        created_at=orm_expense.created_at,
        updated_at=orm_expense.updated_at,
        budget_id=orm_expense.budget_id,
        approved_by=orm_expense.approved_by,
        receipt_url=orm_expense.receipt_url,
        tags=tuple(orm_expense.tags or ()),
        created_by=orm_expense.created_by,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        color=orm_category.color,
        is_active=orm_category.is_active,
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
        description=orm_category.description,
        parent_id=orm_category.parent_id,
        budget=Decimal(orm_category.budget) if orm_category.budget is not None else None,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=domain.TransactionType(orm_transaction.type),
        amount=_money(orm_transaction.amount),
        description=orm_transaction.description,
        category=orm_transaction.category,
        date=orm_transaction.date,
        account=orm_transaction.account,
        status=domain.TransactionStatus(orm_transaction.status),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        reference=orm_transaction.reference,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        password_hash=orm_user.password_hash,
        role=domain.UserRole(orm_user.role),
        department=orm_user.department,
        is_active=orm_user.is_active,
        token_version=orm_user.token_version,
        created_at=orm_user.created_at,
        updated_at=orm_user.updated_at,
        permissions=frozenset(orm_user.permissions or ()),
        avatar=orm_user.avatar,
        last_login=orm_user.last_login,
    )
