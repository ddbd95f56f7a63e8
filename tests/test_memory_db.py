"""Tests for the in-memory local mirror."""

import json
from datetime import date
from decimal import Decimal

import pytest

from budgetdesk.database import create_local_database
from budgetdesk.database.memory import InMemoryDatabase
from budgetdesk.domain.entities import BudgetPeriod, BudgetStatus, ExpenseStatus, UserRole
from budgetdesk.domain.errors import NotFoundError


def _budget(db, allocated="500"):
    return db.create_budget(
        name="Ops",
        category="Operations",
        allocated=Decimal(allocated),
        period=BudgetPeriod.MONTHLY,
        spent=Decimal("0"),
        remaining=Decimal(allocated),
        status=BudgetStatus.ON_TRACK,
    )


def test_usage_write_requires_current_version(memory_db):
    budget_id = _budget(memory_db)

    assert memory_db.apply_budget_usage(
        budget_id, Decimal("100"), Decimal("400"), BudgetStatus.ON_TRACK, expected_version=1
    )
    # A writer holding the old version loses
    assert not memory_db.apply_budget_usage(
        budget_id, Decimal("999"), Decimal("-499"), BudgetStatus.OVER_BUDGET, expected_version=1
    )

    budget = memory_db.get_budget(budget_id)
    assert budget.spent == Decimal("100")
    assert budget.version == 2


def test_usage_write_on_missing_budget(memory_db):
    assert not memory_db.apply_budget_usage(
        7, Decimal("0"), Decimal("0"), BudgetStatus.ON_TRACK, expected_version=1
    )


def test_editable_update_bumps_version(memory_db):
    budget_id = _budget(memory_db)

    memory_db.update_budget(budget_id, allocated=Decimal("600"))

    assert memory_db.get_budget(budget_id).version == 2
    with pytest.raises(NotFoundError):
        memory_db.update_budget(99, name="x")


def test_snapshot_round_trip(memory_db, tmp_path):
    budget_id = _budget(memory_db)
    memory_db.create_expense(
        description="Printer paper",
        amount=Decimal("12.50"),
        category="Operations",
        date=date(2024, 5, 1),
        vendor="PaperCo",
        department="Admin",
        status=ExpenseStatus.APPROVED,
        budget_id=budget_id,
        tags=("office", "supplies"),
    )
    memory_db.create_user(
        name="Ada",
        email="ada@example.com",
        password_hash="hash",
        department="Finance",
        role=UserRole.MANAGER,
        permissions=frozenset({"approve_expenses"}),
    )
    path = tmp_path / "nested" / "mirror.json"

    memory_db.save(path)
    restored = InMemoryDatabase.load(path)

    assert json.loads(path.read_text())["version"] == 1
    assert restored.snapshot() == memory_db.snapshot()
    expense = restored.get_expense(1)
    assert expense.amount == Decimal("12.50")
    assert expense.date == date(2024, 5, 1)
    assert expense.tags == ("office", "supplies")
    assert restored.get_user(1).permissions == frozenset({"approve_expenses"})


def test_ids_continue_after_restore(memory_db, tmp_path):
    _budget(memory_db)
    _budget(memory_db)
    path = tmp_path / "mirror.json"
    memory_db.save(path)

    restored = InMemoryDatabase.load(path)

    assert _budget(restored) == 3


def test_load_missing_file_is_empty(tmp_path):
    db = InMemoryDatabase.load(tmp_path / "absent.json")

    assert db.list_budgets().total == 0


def test_local_database_factory(memory_db, tmp_path):
    _budget(memory_db)
    path = tmp_path / "mirror.json"
    memory_db.save(path)

    assert create_local_database().list_budgets().total == 0
    assert create_local_database(str(path)).list_budgets().total == 1
