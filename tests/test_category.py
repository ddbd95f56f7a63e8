"""Tests for CategoryService."""

from decimal import Decimal

import pytest

from budgetdesk.domain.category import DEFAULT_CATEGORIES
from budgetdesk.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError


def test_create_category(category_service):
    category = category_service.create_category(
        name="Research", color="#123ABC", description="R&D", budget=Decimal("2500")
    )

    assert category.name == "Research"
    assert category.color == "#123ABC"
    assert category.is_active is True
    assert category.budget == Decimal("2500")


def test_duplicate_name_conflicts(category_service):
    category_service.create_category(name="Research", color="#123ABC")

    with pytest.raises(ConflictError, match="already exists"):
        category_service.create_category(name="Research", color="#FFFFFF")


def test_invalid_color(category_service):
    with pytest.raises(ValidationError, match="hex color"):
        category_service.create_category(name="Research", color="blue")


def test_parent_must_exist(category_service):
    with pytest.raises(ValidationError, match="Parent"):
        category_service.create_category(name="Child", color="#000000", parent_id=42)

    parent = category_service.create_category(name="Parent", color="#000000")
    child = category_service.create_category(name="Child", color="#000000", parent_id=parent.id)
    assert child.parent_id == parent.id


def test_rename_to_taken_name_conflicts(category_service):
    category_service.create_category(name="A", color="#000000")
    b = category_service.create_category(name="B", color="#000000")

    with pytest.raises(ConflictError):
        category_service.update_category(b.id, {"name": "A"})

    # Renaming to its own name is fine
    assert category_service.update_category(b.id, {"name": "B"}).name == "B"


def test_delete_blocked_while_referenced(
    category_service, budget_service, expense_service, make_expense
):
    category = category_service.create_category(name="Marketing", color="#10B981")
    budget = budget_service.create_budget(name="Ads", category="Marketing", allocated=Decimal("100"))
    expense = make_expense("10", category="Marketing")

    with pytest.raises(DependencyError, match="1 budget and 1 expense"):
        category_service.delete_category(category.id)

    budget_service.delete_budget(budget.id)
    expense_service.delete_expense(expense.id)
    category_service.delete_category(category.id)

    assert category_service.get_category(category.id) is None


def test_delete_missing(category_service):
    with pytest.raises(NotFoundError):
        category_service.delete_category(7)


def test_seed_defaults_is_idempotent(category_service):
    assert category_service.seed_defaults() == len(DEFAULT_CATEGORIES)
    assert category_service.seed_defaults() == 0

    names = [c.name for c in category_service.list_categories(limit=None).items]
    assert names == sorted(name for name, _, _ in DEFAULT_CATEGORIES)


def test_list_search_and_active_filter(category_service):
    category_service.seed_defaults()
    travel = category_service.list_categories(search="trav").items[0]
    category_service.update_category(travel.id, {"is_active": False})

    assert [c.name for c in category_service.list_categories(search="TRAV").items] == ["Travel"]
    assert category_service.list_categories(is_active=False).total == 1
    assert category_service.list_categories(is_active=True).total == len(DEFAULT_CATEGORIES) - 1
