"""Dashboard metrics aggregation.

Pure folds over budgets, expenses and categories. ``now`` is always passed in
so the server and the local mirror produce identical figures for the same
entity sets.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from budgetdesk.domain.entities import (
    Budget,
    BudgetAlert,
    Category,
    CategoryShare,
    DashboardMetrics,
    Expense,
    ExpenseStatus,
)
from budgetdesk.domain.ledger import (
    HUNDRED,
    ZERO,
    round_half_ceiling,
    round_percentage,
    to_money,
    utilization,
)

BURN_WINDOW = timedelta(days=30)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _total(expenses: Iterable[Expense]) -> Decimal:
    return sum((to_money(e.amount) for e in expenses), ZERO)


def _percent_of(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


def build_category_breakdown(
    approved: Sequence[Expense], categories: Iterable[Category], total_expenses: Decimal
) -> tuple[CategoryShare, ...]:
    """Share of approved spend per active category, zero-amount rows dropped."""
    shares = []
    for category in categories:
        if not category.is_active:
            continue
        amount = _total(e for e in approved if e.category == category.name)
        if amount <= ZERO:
            continue
        shares.append(
            CategoryShare(
                category=category.name,
                amount=amount,
                percentage=round_percentage(_percent_of(amount, total_expenses)),
            )
        )
    return tuple(shares)


def compute_dashboard_metrics(
    budgets: Sequence[Budget],
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    now: date | datetime,
) -> DashboardMetrics:
    """Fold the current budget and expense sets into portfolio metrics.

    Args:
        budgets: All budgets
        expenses: All expenses (only approved ones are counted)
        categories: All categories (only active ones appear in the breakdown)
        now: Reference point for the burn-rate windows

    Returns:
        DashboardMetrics with percentages rounded to one decimal
    """
    today = _as_date(now)
    window_start = today - BURN_WINDOW
    previous_start = today - 2 * BURN_WINDOW

    total_budget = sum((to_money(b.allocated) for b in budgets), ZERO)
    approved = [e for e in expenses if e.status == ExpenseStatus.APPROVED]
    total_expenses = _total(approved)
    remaining_budget = total_budget - total_expenses

    # Future-dated approvals count toward the current window.
    monthly_burn_rate = _total(e for e in approved if _as_date(e.date) >= window_start)
    previous_month_total = _total(
        e for e in approved if previous_start <= _as_date(e.date) < window_start
    )

    if previous_month_total > ZERO:
        growth = (monthly_burn_rate - previous_month_total) / previous_month_total * HUNDRED
    else:
        growth = ZERO

    return DashboardMetrics(
        total_budget=total_budget,
        total_expenses=total_expenses,
        remaining_budget=remaining_budget,
        savings_goal=remaining_budget,
        monthly_burn_rate=monthly_burn_rate,
        budget_utilization=round_percentage(_percent_of(total_expenses, total_budget)),
        expense_growth=round_percentage(growth),
        category_breakdown=build_category_breakdown(approved, categories, total_expenses),
    )


def _whole_percent(value: Decimal) -> int:
    return int(round_half_ceiling(value))


def build_budget_alerts(budgets: Sequence[Budget]) -> list[BudgetAlert]:
    """Warn about nearly exhausted budgets and flag comfortably under-used ones."""
    alerts = []
    for budget in budgets:
        percent = utilization(budget.allocated, budget.spent)
        if percent >= Decimal("90"):
            alerts.append(
                BudgetAlert(
                    type="warning",
                    title=f"{budget.name} 90% Used",
                    message="Consider reallocating funds from other categories",
                    budget=budget.name,
                    utilization=_whole_percent(percent),
                )
            )
        elif percent < Decimal("50"):
            alerts.append(
                BudgetAlert(
                    type="info",
                    title=f"{budget.name} Under Budget",
                    message=f"{to_money(budget.remaining):,.2f} remaining in {budget.name.lower()} budget",
                    budget=budget.name,
                    utilization=_whole_percent(percent),
                )
            )

    total_budget = sum((to_money(b.allocated) for b in budgets), ZERO)
    total_spent = sum((to_money(b.spent) for b in budgets), ZERO)
    remaining = total_budget - total_spent
    if remaining > ZERO:
        savings = _percent_of(remaining, total_budget)
        alerts.append(
            BudgetAlert(
                type="success",
                title="Savings Goal on Track",
                message=f"{_whole_percent(savings)}% remaining with budget allocation",
                budget="Overall",
                utilization=_whole_percent(HUNDRED - savings),
            )
        )
    return alerts
