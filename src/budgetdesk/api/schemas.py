"""Request body schemas.

Bodies use camelCase keys. Update schemas forbid unknown keys, so a client
sending a derived field such as ``spent`` or ``remaining`` gets a 400 rather
than having it silently dropped.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from budgetdesk.domain.entities import (
    BudgetPeriod,
    ExpenseStatus,
    TransactionStatus,
    TransactionType,
    UserRole,
)

S = TypeVar("S", bound=BaseModel)

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class UpdateSchema(RequestSchema):
    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, by attribute name."""
        return self.model_dump(exclude_unset=True)


def parse_body(schema: type[S], payload: Optional[dict]) -> S:
    """Validate a JSON body; raises pydantic.ValidationError on bad input."""
    return schema.model_validate(payload if payload is not None else {})


# Auth
class RegisterRequest(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    department: str = Field(min_length=1, max_length=100)


class LoginRequest(RequestSchema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdate(UpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar: Optional[str] = None


class PasswordChange(UpdateSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


# Budgets
class BudgetCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1)
    allocated: Decimal = Field(ge=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY


class BudgetUpdate(UpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1)
    allocated: Optional[Decimal] = Field(default=None, ge=0)
    period: Optional[BudgetPeriod] = None


# Expenses
class ExpenseCreate(RequestSchema):
    description: str = Field(min_length=1, max_length=500)
    amount: Decimal = Field(gt=0)
    category: str = Field(min_length=1)
    vendor: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=100)
    budget_id: Optional[int] = None
    date: Optional[dt.date] = None
    receipt_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class ExpenseUpdate(UpdateSchema):
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, min_length=1)
    vendor: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    budget_id: Optional[int] = None
    date: Optional[dt.date] = None
    status: Optional[ExpenseStatus] = None
    receipt_url: Optional[str] = None
    tags: Optional[list[str]] = None


# Categories
class CategoryCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(pattern=HEX_COLOR)
    description: Optional[str] = Field(default=None, max_length=500)
    parent_id: Optional[int] = None
    budget: Optional[Decimal] = Field(default=None, ge=0)
    is_active: bool = True


class CategoryUpdate(UpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    description: Optional[str] = Field(default=None, max_length=500)
    parent_id: Optional[int] = None
    budget: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


# Transactions
class TransactionCreate(RequestSchema):
    type: TransactionType
    amount: Decimal = Field(gt=0)
    description: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1)
    account: str = Field(min_length=1, max_length=100)
    date: Optional[dt.date] = None
    status: TransactionStatus = TransactionStatus.PENDING
    reference: Optional[str] = Field(default=None, max_length=50)


class TransactionUpdate(UpdateSchema):
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    category: Optional[str] = Field(default=None, min_length=1)
    account: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date: Optional[dt.date] = None
    status: Optional[TransactionStatus] = None
    reference: Optional[str] = Field(default=None, max_length=50)


# Users
class UserCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    department: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.USER
    permissions: list[str] = Field(default_factory=list)
    avatar: Optional[str] = None


class UserUpdate(UpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    permissions: Optional[list[str]] = None
    avatar: Optional[str] = None
    is_active: Optional[bool] = None


class PasswordReset(UpdateSchema):
    new_password: str = Field(min_length=6)
