"""Tests for TransactionService."""

from datetime import date
from decimal import Decimal

import pytest

from budgetdesk.domain.entities import TransactionStatus, TransactionType
from budgetdesk.domain.errors import NotFoundError, ValidationError


def _create(service, **overrides):
    fields = dict(
        type="expense",
        amount=Decimal("250"),
        description="Office rent",
        category="Administration",
        account="Operating",
        date=date(2024, 2, 1),
    )
    fields.update(overrides)
    return service.create_transaction(**fields)


def test_create_transaction(transaction_service):
    txn = _create(transaction_service, reference="INV-001")

    assert txn.type == TransactionType.EXPENSE
    assert txn.status == TransactionStatus.PENDING
    assert txn.amount == Decimal("250")
    assert txn.reference == "INV-001"


def test_transactions_do_not_touch_budgets(transaction_service, budget_service, sample_budget):
    _create(transaction_service, category="Marketing", status="completed")

    assert budget_service.get_budget(sample_budget.id).spent == Decimal("0")


def test_invalid_type(transaction_service):
    with pytest.raises(ValidationError, match="type"):
        _create(transaction_service, type="transfer")


def test_list_date_range(transaction_service):
    _create(transaction_service, date=date(2024, 1, 15))
    _create(transaction_service, date=date(2024, 2, 15))
    _create(transaction_service, date=date(2024, 3, 15), type="income")

    in_range = transaction_service.list_transactions(
        start_date=date(2024, 2, 1), end_date=date(2024, 3, 31)
    )
    assert in_range.total == 2
    assert transaction_service.list_transactions(type="income").total == 1

    with pytest.raises(ValidationError):
        transaction_service.list_transactions(start_date=date(2024, 3, 1), end_date=date(2024, 1, 1))


def test_update_and_delete(transaction_service):
    txn = _create(transaction_service)

    updated = transaction_service.update_transaction(txn.id, {"status": "completed"})
    assert updated.status == TransactionStatus.COMPLETED

    transaction_service.delete_transaction(txn.id)
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(txn.id, {"status": "failed"})
