"""Expense commands, including approval."""

import click

from budgetdesk.cli.error_handling import handle_domain_error
from budgetdesk.cli.formatting import money
from budgetdesk.domain.entities import ExpenseStatus
from budgetdesk.domain.errors import DomainError
from budgetdesk.domain.expense import ExpenseService
from budgetdesk.utils.amount_parser import parse_amount
from budgetdesk.utils.date_parser import parse_date


@click.group()
def expense_group():
    """Record and approve expenses."""
    pass


@expense_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in ExpenseStatus]), help="Filter by status")
@click.option("--category", help="Filter by category name")
@click.option("--budget-id", type=int, help="Filter by budget ID")
@click.pass_context
def list_expenses(ctx, status: str | None, category: str | None, budget_id: int | None):
    """List expenses, newest first."""
    service = ExpenseService(ctx.obj["db"])
    expenses = service.list_expenses(
        status=status, category=category, budget_id=budget_id, limit=None
    ).items

    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo(
        f"\n{'ID':<5} {'Date':<12} {'Description':<30} {'Amount':>12} {'Budget':<7} {'Status':<9}"
    )
    click.echo("-" * 80)
    for e in expenses:
        budget = str(e.budget_id) if e.budget_id is not None else "-"
        click.echo(
            f"{e.id:<5} {e.date.isoformat():<12} {e.description[:30]:<30} "
            f"{money(e.amount):>12} {budget:<7} {e.status.value:<9}"
        )


@expense_group.command("add")
@click.argument("description")
@click.option("--amount", required=True, help="Expense amount (e.g., 123.45)")
@click.option("--category", required=True, help="Category name")
@click.option("--vendor", required=True, help="Vendor name")
@click.option("--department", required=True, help="Department charged")
@click.option("--date", "date_str", default="today", help="Expense date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--budget-id", type=int, help="Budget to charge once approved")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add_expense(
    ctx,
    description: str,
    amount: str,
    category: str,
    vendor: str,
    department: str,
    date_str: str,
    budget_id: int | None,
    tags: tuple[str, ...],
):
    """Record a pending expense.

    Examples:
        budgetdesk expense add "Conference booth" --amount 1200 --category Marketing \\
            --vendor EventCo --department Sales --budget-id 1
    """
    service = ExpenseService(ctx.obj["db"])
    try:
        expense = service.create_expense(
            description=description,
            amount=parse_amount(amount),
            category=category,
            vendor=vendor,
            department=department,
            date=parse_date(date_str),
            budget_id=budget_id,
            tags=tags,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created expense {expense.id}")
    click.echo(f"  Amount: {money(expense.amount)}")
    click.echo(f"  Status: {expense.status.value}")


def _decide(ctx, expense_id: int, actor: str, approve: bool) -> None:
    service = ExpenseService(ctx.obj["db"])
    try:
        if approve:
            expense = service.approve_expense(expense_id, actor)
        else:
            expense = service.reject_expense(expense_id, actor)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Expense {expense.id} {expense.status.value} by {expense.approved_by}")


@expense_group.command("approve")
@click.argument("expense_id", type=int)
@click.option("--actor", required=True, help="Name of the approver")
@click.pass_context
def approve_expense(ctx, expense_id: int, actor: str):
    """Approve an expense and charge its budget."""
    _decide(ctx, expense_id, actor, approve=True)


@expense_group.command("reject")
@click.argument("expense_id", type=int)
@click.option("--actor", required=True, help="Name of the reviewer")
@click.pass_context
def reject_expense(ctx, expense_id: int, actor: str):
    """Reject an expense."""
    _decide(ctx, expense_id, actor, approve=False)


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
