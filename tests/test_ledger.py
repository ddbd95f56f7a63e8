"""Tests for the budget status rule and expense folds."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from budgetdesk.domain.entities import Budget, BudgetPeriod, BudgetStatus, Expense, ExpenseStatus
from budgetdesk.domain.ledger import (
    affected_budget_ids,
    approved_spend,
    budget_status,
    budget_usage,
    display_spend,
    round_percentage,
    utilization,
)

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _expense(id=1, amount="100", status=ExpenseStatus.APPROVED, budget_id=1, category="Marketing"):
    return Expense(
        id=id,
        description="x",
        amount=Decimal(amount),
        category=category,
        date=date(2024, 3, 1),
        vendor="v",
        department="d",
        status=status,
        created_at=NOW,
        updated_at=NOW,
        budget_id=budget_id,
    )


def _budget(id=1, allocated="1000", category="Marketing"):
    return Budget(
        id=id,
        name="B",
        category=category,
        allocated=Decimal(allocated),
        spent=Decimal("0"),
        remaining=Decimal(allocated),
        period=BudgetPeriod.MONTHLY,
        status=BudgetStatus.ON_TRACK,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.mark.parametrize(
    "spent, expected",
    [
        ("0", BudgetStatus.ON_TRACK),
        ("749.99", BudgetStatus.ON_TRACK),
        ("750", BudgetStatus.WARNING),
        ("899.99", BudgetStatus.WARNING),
        ("900", BudgetStatus.OVER_BUDGET),
        ("1500", BudgetStatus.OVER_BUDGET),
    ],
)
def test_status_thresholds(spent, expected):
    """Status boundaries sit exactly at 75% and 90%."""
    assert budget_status(Decimal("1000"), Decimal(spent)) == expected


def test_zero_allocation_is_on_track():
    assert utilization(Decimal("0"), Decimal("50")) == Decimal("0")
    assert budget_status(Decimal("0"), Decimal("50")) == BudgetStatus.ON_TRACK


def test_budget_usage_does_not_clamp_remaining():
    usage = budget_usage(Decimal("100"), Decimal("150"))

    assert usage.remaining == Decimal("-50")
    assert usage.spent == Decimal("150")
    assert usage.status == BudgetStatus.OVER_BUDGET


def test_round_percentage_half_up():
    assert round_percentage(Decimal("33.35")) == Decimal("33.4")
    assert round_percentage(Decimal("33.349")) == Decimal("33.3")


def test_negative_halves_round_toward_positive():
    assert round_percentage(Decimal("-12.25")) == Decimal("-12.2")
    assert round_percentage(Decimal("-12.26")) == Decimal("-12.3")
    assert round_percentage(Decimal("-0.05")) == Decimal("0.0")


def test_approved_spend_counts_only_linked_approved():
    expenses = [
        _expense(id=1, amount="300"),
        _expense(id=2, amount="200", status=ExpenseStatus.PENDING),
        _expense(id=3, amount="100", status=ExpenseStatus.REJECTED),
        _expense(id=4, amount="50", budget_id=2),
        _expense(id=5, amount="25", budget_id=None),
    ]

    assert approved_spend(expenses, 1) == Decimal("300")
    assert approved_spend(expenses, 2) == Decimal("50")
    assert approved_spend([], 1) == Decimal("0")


def test_display_spend_includes_unlinked_same_category():
    budget = _budget()
    expenses = [
        _expense(id=1, amount="300"),
        _expense(id=2, amount="40", budget_id=None),
        _expense(id=3, amount="60", budget_id=None, category="Travel"),
        _expense(id=4, amount="500", budget_id=7),
    ]

    assert display_spend(expenses, budget) == Decimal("340")
    assert approved_spend(expenses, budget.id) == Decimal("300")


class TestAffectedBudgetIds:
    def test_create_pending_triggers_nothing(self):
        assert affected_budget_ids(None, _expense(status=ExpenseStatus.PENDING)) == []

    def test_create_approved_linked(self):
        assert affected_budget_ids(None, _expense()) == [1]

    def test_create_approved_unlinked(self):
        assert affected_budget_ids(None, _expense(budget_id=None)) == []

    def test_delete_approved_linked(self):
        assert affected_budget_ids(_expense(), None) == [1]

    def test_delete_pending(self):
        assert affected_budget_ids(_expense(status=ExpenseStatus.PENDING), None) == []

    def test_reassignment_old_budget_first(self):
        before = _expense(budget_id=1)
        after = _expense(budget_id=2)

        assert affected_budget_ids(before, after) == [1, 2]

    def test_status_change(self):
        before = _expense(status=ExpenseStatus.PENDING)
        after = _expense(status=ExpenseStatus.APPROVED)

        assert affected_budget_ids(before, after) == [1]

    def test_amount_change_on_approved(self):
        assert affected_budget_ids(_expense(amount="100"), _expense(amount="250")) == [1]

    def test_amount_change_on_pending_is_ignored(self):
        before = _expense(amount="100", status=ExpenseStatus.PENDING)
        after = _expense(amount="250", status=ExpenseStatus.PENDING)

        assert affected_budget_ids(before, after) == []

    def test_description_change_is_ignored(self):
        before = _expense()
        after = _expense()

        assert affected_budget_ids(before, after) == []
