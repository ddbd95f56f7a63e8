"""In-memory database used as the offline local mirror.

Holds domain entities directly. The whole mirror can be written to and read
back from a JSON snapshot so a workspace survives restarts without a server.
"""

import dataclasses
import json
from datetime import date, datetime, UTC
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, TypeVar

from budgetdesk.database.base import Database
from budgetdesk.domain import entities as domain
from budgetdesk.domain.errors import (
    NotFoundError,
    budget_not_found,
    category_not_found,
    expense_not_found,
    transaction_not_found,
    user_not_found,
)

T = TypeVar("T")

SNAPSHOT_VERSION = 1

_COLLECTIONS: dict[str, type] = {
    "budgets": domain.Budget,
    "expenses": domain.Expense,
    "categories": domain.Category,
    "transactions": domain.Transaction,
    "users": domain.User,
}


def _now() -> datetime:
    return datetime.now(UTC)


def _newest_first(items: Iterable[Any]) -> list[Any]:
    # IDs are allocated monotonically, so they order by creation.
    return sorted(items, key=lambda item: item.id, reverse=True)


def _page(items: list[T], page: int, limit: Optional[int]) -> domain.Page[T]:
    total = len(items)
    if limit is None:
        return domain.Page(items=items, page=1, limit=max(total, 1), total=total)
    page = max(page, 1)
    start = (page - 1) * limit
    return domain.Page(items=items[start:start + limit], page=page, limit=limit, total=total)


def _changes(**fields: Any) -> dict[str, Any]:
    """Drop fields left at None, matching the SQL implementation's semantics."""
    return {key: value for key, value in fields.items() if value is not None}


class InMemoryDatabase(Database):
    """Dictionary-backed implementation of the Database interface."""

    def __init__(self):
        self._tables: dict[str, dict[int, Any]] = {name: {} for name in _COLLECTIONS}
        self._next_ids: dict[str, int] = {name: 1 for name in _COLLECTIONS}

    def _insert(self, table: str, factory: Callable[[int], Any]) -> int:
        entity_id = self._next_ids[table]
        self._next_ids[table] = entity_id + 1
        self._tables[table][entity_id] = factory(entity_id)
        return entity_id

    def _replace(self, table: str, entity_id: int, missing: Callable[[int], str], **changes: Any) -> None:
        current = self._tables[table].get(entity_id)
        if current is None:
            raise NotFoundError(missing(entity_id))
        self._tables[table][entity_id] = dataclasses.replace(current, updated_at=_now(), **changes)

    def _remove(self, table: str, entity_id: int, missing: Callable[[int], str]) -> None:
        if self._tables[table].pop(entity_id, None) is None:
            raise NotFoundError(missing(entity_id))

    def connect(self) -> None:
        """Connect to the database."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Mirror maintenance
    def replace_collection(self, name: str, items: Iterable[Any]) -> None:
        """Replace one collection wholesale with entities fetched elsewhere."""
        table = {item.id: item for item in items}
        self._tables[name] = table
        self._next_ids[name] = max(table, default=0) + 1

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serializable copy of the mirror."""
        return {
            "version": SNAPSHOT_VERSION,
            "collections": {
                name: [_encode(dataclasses.asdict(item)) for item in table.values()]
                for name, table in self._tables.items()
            },
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Load a snapshot produced by ``snapshot``."""
        collections = data.get("collections", {})
        for name, entity_type in _COLLECTIONS.items():
            rows = collections.get(name, [])
            self.replace_collection(name, [_decode(entity_type, row) for row in rows])

    def save(self, path: Path) -> None:
        """Persist the mirror to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.snapshot(), indent=2))

    @classmethod
    def load(cls, path: Path) -> "InMemoryDatabase":
        """Create a mirror from a JSON file; missing files give an empty mirror."""
        db = cls()
        path = Path(path)
        if path.exists():
            db.restore(json.loads(path.read_text()))
        return db

    # Budget operations
    def create_budget(
        self,
        name: str,
        category: str,
        allocated: Decimal,
        period: domain.BudgetPeriod,
        spent: Decimal,
        remaining: Decimal,
        status: domain.BudgetStatus,
    ) -> int:
        """Create a budget. Returns budget ID."""
        now = _now()
        return self._insert(
            "budgets",
            lambda budget_id: domain.Budget(
                id=budget_id,
                name=name,
                category=category,
                allocated=allocated,
                spent=spent,
                remaining=remaining,
                period=domain.BudgetPeriod(period),
                status=domain.BudgetStatus(status),
                created_at=now,
                updated_at=now,
            ),
        )

    def get_budget(self, budget_id: int) -> Optional[domain.Budget]:
        """Get budget by ID."""
        return self._tables["budgets"].get(budget_id)

    def list_budgets(
        self,
        category: Optional[str] = None,
        period: Optional[domain.BudgetPeriod] = None,
        status: Optional[domain.BudgetStatus] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> domain.Page[domain.Budget]:
        """List budgets, newest first."""
        items = [
            b
            for b in self._tables["budgets"].values()
            if (category is None or b.category == category)
            and (period is None or b.period == period)
            and (status is None or b.status == status)
        ]
        return _page(_newest_first(items), page, limit)

    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        allocated: Optional[Decimal] = None,
        period: Optional[domain.BudgetPeriod] = None,
    ) -> None:
        """Update the client-editable budget fields."""
        current = self.get_budget(budget_id)
        if current is None:
            raise NotFoundError(budget_not_found(budget_id))
        self._replace(
            "budgets",
            budget_id,
            budget_not_found,
            version=current.version + 1,
            **_changes(name=name, category=category, allocated=allocated, period=period),
        )

    def apply_budget_usage(
        self,
        budget_id: int,
        spent: Decimal,
        remaining: Decimal,
        status: domain.BudgetStatus,
        expected_version: int,
    ) -> bool:
        """Conditionally write derived budget fields."""
        current = self.get_budget(budget_id)
        if current is None or current.version != expected_version:
            return False
        self._replace(
            "budgets",
            budget_id,
            budget_not_found,
            spent=spent,
            remaining=remaining,
            status=status,
            version=current.version + 1,
        )
        return True

    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        self._remove("budgets", budget_id, budget_not_found)

    # Expense operations
    def create_expense(
        self,
        description: str,
        amount: Decimal,
        category: str,
        date: date,
        vendor: str,
        department: str,
        status: domain.ExpenseStatus = domain.ExpenseStatus.PENDING,
        budget_id: Optional[int] = None,
        approved_by: Optional[str] = None,
        receipt_url: Optional[str] = None,
        tags: tuple[str, ...] = (),
        created_by: Optional[int] = None,
    ) -> int:
        """Create an expense. Returns expense ID."""
        now = _now()
        return self._insert(
            "expenses",
            lambda expense_id: domain.Expense(
                id=expense_id,
                description=description,
                amount=amount,
                category=category,
                date=date,
                vendor=vendor,
                department=department,
                status=domain.ExpenseStatus(status),
                created_at=now,
                updated_at=now,
                budget_id=budget_id,
                approved_by=approved_by,
                receipt_url=receipt_url,
                tags=tuple(tags),
                created_by=created_by,
            ),
        )

    def get_expense(self, expense_id: int) -> Optional[domain.Expense]:
        """Get expense by ID."""
        return self._tables["expenses"].get(expense_id)

    def list_expenses(
        self,
        category: Optional[str] = None,
        status: Optional[domain.ExpenseStatus] = None,
        department: Optional[str] = None,
        budget_id: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> domain.Page[domain.Expense]:
        """List expenses, newest first."""
        items = [
            e
            for e in self._tables["expenses"].values()
            if (category is None or e.category == category)
            and (status is None or e.status == status)
            and (department is None or e.department == department)
            and (budget_id is None or e.budget_id == budget_id)
        ]
        return _page(_newest_first(items), page, limit)

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
        status: Optional[domain.ExpenseStatus] = None,
        approved_by: Optional[str] = None,
        receipt_url: Optional[str] = None,
        tags: Optional[tuple[str, ...]] = None,
        clear_budget: bool = False,
    ) -> None:
        """Update expense fields."""
        changes = _changes(
            description=description,
            amount=amount,
            category=category,
            budget_id=budget_id,
            date=date,
            vendor=vendor,
            department=department,
            status=status,
            approved_by=approved_by,
            receipt_url=receipt_url,
            tags=tuple(tags) if tags is not None else None,
        )
        if clear_budget:
            changes["budget_id"] = None
        self._replace("expenses", expense_id, expense_not_found, **changes)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        self._remove("expenses", expense_id, expense_not_found)

    # Category operations
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
        now = _now()
        return self._insert(
            "categories",
            lambda category_id: domain.Category(
                id=category_id,
                name=name,
                color=color,
                is_active=is_active,
                created_at=now,
                updated_at=now,
                description=description,
                parent_id=parent_id,
                budget=budget,
            ),
        )

    def get_category(self, category_id: int) -> Optional[domain.Category]:
        """Get category by ID."""
        return self._tables["categories"].get(category_id)

    def get_category_by_name(self, name: str) -> Optional[domain.Category]:
        """Get category by its unique name."""
        for category in self._tables["categories"].values():
            if category.name == name:
                return category
        return None

    def list_categories(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> domain.Page[domain.Category]:
        """List categories ordered by name."""
        needle = search.lower() if search else None
        items = [
            c
            for c in self._tables["categories"].values()
            if (needle is None or needle in c.name.lower())
            and (is_active is None or c.is_active == is_active)
        ]
        return _page(sorted(items, key=lambda c: c.name), page, limit)

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
        self._replace(
            "categories",
            category_id,
            category_not_found,
            **_changes(
                name=name,
                color=color,
                description=description,
                parent_id=parent_id,
                budget=budget,
                is_active=is_active,
            ),
        )

    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        self._remove("categories", category_id, category_not_found)

    # Transaction operations
    def create_transaction(
        self,
        type: domain.TransactionType,
        amount: Decimal,
        description: str,
        category: str,
        date: date,
        account: str,
        status: domain.TransactionStatus = domain.TransactionStatus.PENDING,
        reference: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        now = _now()
        return self._insert(
            "transactions",
            lambda transaction_id: domain.Transaction(
                id=transaction_id,
                type=domain.TransactionType(type),
                amount=amount,
                description=description,
                category=category,
                date=date,
                account=account,
                status=domain.TransactionStatus(status),
                created_at=now,
                updated_at=now,
                reference=reference,
            ),
        )

    def get_transaction(self, transaction_id: int) -> Optional[domain.Transaction]:
        """Get transaction by ID."""
        return self._tables["transactions"].get(transaction_id)

    def list_transactions(
        self,
        type: Optional[domain.TransactionType] = None,
        status: Optional[domain.TransactionStatus] = None,
        category: Optional[str] = None,
        account: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> domain.Page[domain.Transaction]:
        """List transactions, most recently recorded first."""
        items = [
            t
            for t in self._tables["transactions"].values()
            if (type is None or t.type == type)
            and (status is None or t.status == status)
            and (category is None or t.category == category)
            and (account is None or t.account == account)
            and (start_date is None or t.date >= start_date)
            and (end_date is None or t.date <= end_date)
        ]
        return _page(_newest_first(items), page, limit)

    def update_transaction(
        self,
        transaction_id: int,
        type: Optional[domain.TransactionType] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
        account: Optional[str] = None,
        status: Optional[domain.TransactionStatus] = None,
        reference: Optional[str] = None,
    ) -> None:
        """Update transaction fields."""
        self._replace(
            "transactions",
            transaction_id,
            transaction_not_found,
            **_changes(
                type=type,
                amount=amount,
                description=description,
                category=category,
                date=date,
                account=account,
                status=status,
                reference=reference,
            ),
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        self._remove("transactions", transaction_id, transaction_not_found)

    # User operations
    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        department: str,
        role: domain.UserRole = domain.UserRole.USER,
        permissions: frozenset[str] = frozenset(),
        avatar: Optional[str] = None,
    ) -> int:
        """Create a user. Returns user ID."""
        now = _now()
        return self._insert(
            "users",
            lambda user_id: domain.User(
                id=user_id,
                name=name,
                email=email.lower(),
                password_hash=password_hash,
                role=domain.UserRole(role),
                department=department,
                is_active=True,
                token_version=0,
                created_at=now,
                updated_at=now,
                permissions=frozenset(permissions),
                avatar=avatar,
            ),
        )

    def get_user(self, user_id: int) -> Optional[domain.User]:
        """Get user by ID."""
        return self._tables["users"].get(user_id)

    def get_user_by_email(self, email: str) -> Optional[domain.User]:
        """Get user by (lowercased) email."""
        email = email.lower()
        for user in self._tables["users"].values():
            if user.email == email:
                return user
        return None

    def list_users(
        self,
        role: Optional[domain.UserRole] = None,
        department: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> domain.Page[domain.User]:
        """List users, newest first."""
        needle = search.lower() if search else None
        items = [
            u
            for u in self._tables["users"].values()
            if (role is None or u.role == role)
            and (department is None or u.department == department)
            and (is_active is None or u.is_active == is_active)
            and (needle is None or needle in u.name.lower() or needle in u.email)
        ]
        return _page(_newest_first(items), page, limit)

    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        department: Optional[str] = None,
        role: Optional[domain.UserRole] = None,
        permissions: Optional[frozenset[str]] = None,
        avatar: Optional[str] = None,
        is_active: Optional[bool] = None,
        password_hash: Optional[str] = None,
        last_login: Optional[datetime] = None,
    ) -> None:
        """Update user fields."""
        self._replace(
            "users",
            user_id,
            user_not_found,
            **_changes(
                name=name,
                department=department,
                role=role,
                permissions=frozenset(permissions) if permissions is not None else None,
                avatar=avatar,
                is_active=is_active,
                password_hash=password_hash,
                last_login=last_login,
            ),
        )

    def increment_token_version(self, user_id: int) -> None:
        """Invalidate every session token previously issued to the user."""
        current = self.get_user(user_id)
        if current is None:
            raise NotFoundError(user_not_found(user_id))
        self._replace("users", user_id, user_not_found, token_version=current.token_version + 1)


def _encode(value: Any) -> Any:
    """Convert entity field values to JSON-friendly primitives."""
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(_encode(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


_DECIMAL_FIELDS = {"allocated", "spent", "remaining", "amount", "budget"}
_DATETIME_FIELDS = {"created_at", "updated_at", "last_login"}
_ENUM_FIELDS: dict[tuple[type, str], type[Enum]] = {
    (domain.Budget, "period"): domain.BudgetPeriod,
    (domain.Budget, "status"): domain.BudgetStatus,
    (domain.Expense, "status"): domain.ExpenseStatus,
    (domain.Transaction, "type"): domain.TransactionType,
    (domain.Transaction, "status"): domain.TransactionStatus,
    (domain.User, "role"): domain.UserRole,
}


def _decode(entity_type: type, row: dict[str, Any]) -> Any:
    """Rebuild an entity from its snapshot row."""
    kwargs = {}
    for field in dataclasses.fields(entity_type):
        if field.name in row:
            kwargs[field.name] = _decode_field(entity_type, field.name, row[field.name])
    return entity_type(**kwargs)


def _decode_field(entity_type: type, name: str, value: Any) -> Any:
    if value is None:
        return None
    enum_type = _ENUM_FIELDS.get((entity_type, name))
    if enum_type is not None:
        return enum_type(value)
    if name in _DECIMAL_FIELDS:
        return Decimal(value)
    if name in _DATETIME_FIELDS:
        return datetime.fromisoformat(value)
    if name == "date":
        return date.fromisoformat(value)
    if name == "tags":
        return tuple(value)
    if name == "permissions":
        return frozenset(value)
    return value
