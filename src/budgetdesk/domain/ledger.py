"""Budget status rule and expense ledger folds.

Everything in this module is pure: no database access, no clock. Both the
authoritative services and the offline local mirror derive budget state
through these functions, so the two can never disagree.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP
from typing import Iterable, Optional

from budgetdesk.domain.entities import Budget, BudgetStatus, Expense, ExpenseStatus

ZERO = Decimal("0")
HUNDRED = Decimal("100")

OVER_BUDGET_THRESHOLD = Decimal("90")
WARNING_THRESHOLD = Decimal("75")


@dataclass(frozen=True)
class BudgetUsage:
    """Derived budget fields for a given allocation and spend."""

    spent: Decimal
    remaining: Decimal
    status: BudgetStatus
    utilization: Decimal


def to_money(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_ceiling(value: Decimal, exponent: str = "1") -> Decimal:
    """Round with halves going toward positive infinity (-12.25 -> -12.2)."""
    rounding = ROUND_HALF_UP if value >= ZERO else ROUND_HALF_DOWN
    return value.quantize(Decimal(exponent), rounding=rounding)


def round_percentage(value: Decimal) -> Decimal:
    """Round a percentage to one decimal place."""
    return round_half_ceiling(value, "0.1")


def utilization(allocated: Decimal, spent: Decimal) -> Decimal:
    """Return spent as a percentage of allocated; 0 when nothing is allocated."""
    allocated = to_money(allocated)
    if allocated <= ZERO:
        return ZERO
    return to_money(spent) / allocated * HUNDRED


def status_for_utilization(percent: Decimal) -> BudgetStatus:
    if percent >= OVER_BUDGET_THRESHOLD:
        return BudgetStatus.OVER_BUDGET
    if percent >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.ON_TRACK


def budget_status(allocated: Decimal, spent: Decimal) -> BudgetStatus:
    """Classify a budget as on-track, warning or over-budget."""
    return status_for_utilization(utilization(allocated, spent))


def budget_usage(allocated: Decimal, spent: Decimal) -> BudgetUsage:
    """Derive remaining, status and utilization from allocation and spend.

    Remaining may be negative; clamping is a presentation concern.
    """
    allocated = to_money(allocated)
    spent = to_money(spent)
    percent = utilization(allocated, spent)
    return BudgetUsage(
        spent=spent,
        remaining=allocated - spent,
        status=status_for_utilization(percent),
        utilization=percent,
    )


def is_chargeable(expense: Expense, budget_id: int) -> bool:
    """True when the expense counts toward the budget's authoritative spend."""
    return expense.status == ExpenseStatus.APPROVED and expense.budget_id == budget_id


def approved_spend(expenses: Iterable[Expense], budget_id: int) -> Decimal:
    """Sum approved expenses explicitly linked to the budget."""
    return sum(
        (to_money(e.amount) for e in expenses if is_chargeable(e, budget_id)),
        ZERO,
    )


def soft_linked_expenses(expenses: Iterable[Expense], budget: Budget) -> list[Expense]:
    """Approved expenses linked to the budget, plus unlinked ones in its category.

    The category match is for display only and never feeds the stored spend.
    """
    return [
        e
        for e in expenses
        if e.status == ExpenseStatus.APPROVED
        and (
            e.budget_id == budget.id
            or (e.budget_id is None and e.category == budget.category)
        )
    ]


def display_spend(expenses: Iterable[Expense], budget: Budget) -> Decimal:
    """Spend shown in health views, including soft-linked expenses."""
    return sum((to_money(e.amount) for e in soft_linked_expenses(expenses, budget)), ZERO)


def affected_budget_ids(before: Optional[Expense], after: Optional[Expense]) -> list[int]:
    """Return the budgets whose spend must be recomputed, old budget first.

    ``before`` is the stored expense prior to the mutation (None on create) and
    ``after`` the stored expense afterwards (None on delete).
    """
    if before is None and after is None:
        return []

    if before is None:
        if after.budget_id is not None and after.status == ExpenseStatus.APPROVED:
            return [after.budget_id]
        return []

    if after is None:
        if before.budget_id is not None and before.status == ExpenseStatus.APPROVED:
            return [before.budget_id]
        return []

    status_changed = before.status != after.status
    budget_changed = before.budget_id != after.budget_id
    amount_changed = (
        to_money(before.amount) != to_money(after.amount)
        and ExpenseStatus.APPROVED in (before.status, after.status)
    )
    if not (status_changed or budget_changed or amount_changed):
        return []

    ids = []
    for budget_id in (before.budget_id, after.budget_id):
        if budget_id is not None and budget_id not in ids:
            ids.append(budget_id)
    return ids
