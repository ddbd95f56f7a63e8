"""End-to-end tests for the command-line interface."""

from decimal import Decimal

from budgetdesk.cli.main import cli
from budgetdesk.domain.budget import BudgetService
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.user import UserService


def _run(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_init_categories_is_idempotent(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "init-categories")
    assert result.exit_code == 0
    assert "Created 6 of 6 default categories." in result.output

    result = _run(cli_runner, temp_db, "init-categories")
    assert result.exit_code == 0
    assert "Default categories already exist." in result.output


def test_budget_and_expense_workflow(cli_runner, temp_db):
    """Create a budget, record an expense against it, approve it and check the dashboard."""
    assert _run(cli_runner, temp_db, "init-categories").exit_code == 0

    result = _run(
        cli_runner,
        temp_db,
        "budget",
        "create",
        "Campaigns",
        "--category",
        "Marketing",
        "--allocated",
        "$1,000",
    )
    assert result.exit_code == 0
    assert "Created budget 'Campaigns' (ID: 1)" in result.output

    result = _run(
        cli_runner,
        temp_db,
        "expense",
        "add",
        "Trade show booth",
        "--amount",
        "250",
        "--category",
        "Marketing",
        "--vendor",
        "ExpoCo",
        "--department",
        "Sales",
        "--date",
        "2024-03-10",
        "--budget-id",
        "1",
        "--tag",
        "events",
    )
    assert result.exit_code == 0
    assert "Status: pending" in result.output

    result = _run(cli_runner, temp_db, "expense", "approve", "1", "--actor", "Ada")
    assert result.exit_code == 0
    assert "Expense 1 approved by Ada" in result.output

    budget = BudgetService(temp_db).get_budget(1)
    assert budget.spent == Decimal("250")

    result = _run(cli_runner, temp_db, "budget", "list")
    assert result.exit_code == 0
    assert "$750.00" in result.output

    result = _run(cli_runner, temp_db, "budget", "show", "1")
    assert result.exit_code == 0
    assert "25.0% used" in result.output

    result = _run(cli_runner, temp_db, "dashboard", "--as-of", "2024-03-31")
    assert result.exit_code == 0
    assert "25.0%" in result.output
    assert "By category:" in result.output
    assert "[info] Campaigns Under Budget" in result.output


def test_expense_against_missing_budget(cli_runner, temp_db):
    result = _run(
        cli_runner,
        temp_db,
        "expense",
        "add",
        "Lost",
        "--amount",
        "5",
        "--category",
        "Travel",
        "--vendor",
        "Air",
        "--department",
        "Sales",
        "--budget-id",
        "9",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_bad_amount(cli_runner, temp_db):
    result = _run(
        cli_runner, temp_db, "budget", "create", "X", "--category", "Ops", "--allocated", "lots"
    )

    assert result.exit_code == 1
    assert "Could not parse amount" in result.output


def test_approve_missing_expense(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "expense", "reject", "42", "--actor", "Ada")

    assert result.exit_code == 1


def test_expense_list_filters(cli_runner, temp_db, make_expense, expense_service):
    approved = make_expense("10", description="Approved one")
    make_expense("20", description="Still pending")
    expense_service.approve_expense(approved.id, "Ada")

    result = _run(cli_runner, temp_db, "expense", "list", "--status", "approved")

    assert result.exit_code == 0
    assert "Approved one" in result.output
    assert "Still pending" not in result.output


def test_create_admin(cli_runner, temp_db):
    result = _run(
        cli_runner,
        temp_db,
        "user",
        "create-admin",
        "Ada Admin",
        "Ada@Example.com",
        "--department",
        "Finance",
        input="secret123\nsecret123\n",
    )
    assert result.exit_code == 0
    assert "Created admin user ada@example.com" in result.output

    user = UserService(temp_db).get_user(1)
    assert user.role == UserRole.ADMIN

    result = _run(cli_runner, temp_db, "user", "list", "--role", "admin")
    assert "Ada Admin" in result.output


def test_create_admin_duplicate_email(cli_runner, temp_db, admin_user):
    result = _run(
        cli_runner,
        temp_db,
        "user",
        "create-admin",
        "Other",
        "ada@example.com",
        "--department",
        "Finance",
        "--password",
        "secret123",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
