"""Shared pytest fixtures for budgetdesk tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from budgetdesk.api import create_app
from budgetdesk.api.context import EXTENSION_KEY
from budgetdesk.config import Config
from budgetdesk.database.factories import create_sqlite_database
from budgetdesk.database.memory import InMemoryDatabase
from budgetdesk.domain.budget import BudgetService
from budgetdesk.domain.category import CategoryService
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.expense import ExpenseService
from budgetdesk.domain.transaction import TransactionService
from budgetdesk.domain.user import APPROVE_EXPENSES, CREATE_EXPENSES, EDIT_BUDGETS, UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an empty local mirror."""
    return InMemoryDatabase()


@pytest.fixture(params=["sql", "memory"])
def any_db(request):
    """Run a test against both the SQL store and the local mirror."""
    if request.param == "memory":
        yield InMemoryDatabase()
        return
    yield request.getfixturevalue("temp_db")


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def sample_budget(budget_service):
    """A monthly Marketing budget of 1000."""
    return budget_service.create_budget(
        name="Marketing Q1", category="Marketing", allocated=Decimal("1000")
    )


@pytest.fixture
def make_expense(expense_service):
    """Factory for pending expenses with sensible defaults."""

    def _make(amount="100", budget_id=None, category="Marketing", **overrides):
        fields = dict(
            description="Ad campaign",
            amount=Decimal(amount),
            category=category,
            vendor="AdCo",
            department="Sales",
            date=date(2024, 3, 10),
            budget_id=budget_id,
        )
        fields.update(overrides)
        return expense_service.create_expense(**fields)

    return _make


@pytest.fixture
def config(temp_db):
    """API settings pointing at the temporary database."""
    return Config(
        database_path=temp_db.database_path,
        secret_key="test-secret",
        log_level="WARNING",
        testing=True,
    )


@pytest.fixture
def app(config, temp_db):
    """Create the Flask app over the temporary database."""
    return create_app(config=config, db=temp_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_user(user_service):
    return user_service.create_user(
        name="Ada Admin",
        email="ada@example.com",
        password="secret123",
        department="Finance",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def manager_user(user_service):
    return user_service.create_user(
        name="Max Manager",
        email="max@example.com",
        password="secret123",
        department="Marketing",
        role=UserRole.MANAGER,
        permissions=[EDIT_BUDGETS, CREATE_EXPENSES, APPROVE_EXPENSES],
    )


@pytest.fixture
def plain_user(user_service):
    return user_service.create_user(
        name="Uma User",
        email="uma@example.com",
        password="secret123",
        department="Sales",
        permissions=[CREATE_EXPENSES],
    )


@pytest.fixture
def headers_for(app):
    """Return a function building bearer-token headers for a user."""
    auth = app.extensions[EXTENSION_KEY]["auth"]

    def _headers(user):
        return {"Authorization": f"Bearer {auth.issue_token(user)}"}

    return _headers


@pytest.fixture
def admin_headers(headers_for, admin_user):
    return headers_for(admin_user)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
