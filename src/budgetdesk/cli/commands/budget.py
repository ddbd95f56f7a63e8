"""Budget management commands."""

import click

from budgetdesk.cli.error_handling import handle_domain_error
from budgetdesk.cli.formatting import money, percent
from budgetdesk.domain.budget import BudgetService
from budgetdesk.domain.entities import BudgetPeriod, BudgetStatus
from budgetdesk.domain.errors import DomainError
from budgetdesk.utils.amount_parser import parse_amount


@click.group()
def budget_group():
    """Manage budgets."""
    pass


@budget_group.command("list")
@click.option("--category", help="Filter by category name")
@click.option("--status", type=click.Choice([s.value for s in BudgetStatus]), help="Filter by status")
@click.option("--period", type=click.Choice([p.value for p in BudgetPeriod]), help="Filter by period")
@click.pass_context
def list_budgets(ctx, category: str | None, status: str | None, period: str | None):
    """List budgets with their derived spend and status."""
    service = BudgetService(ctx.obj["db"])
    budgets = service.list_budgets(category=category, status=status, period=period, limit=None).items

    if not budgets:
        click.echo("No budgets found.")
        return

    click.echo(
        f"\n{'ID':<5} {'Name':<25} {'Category':<15} {'Allocated':>14} {'Spent':>14} "
        f"{'Remaining':>14} {'Status':<12}"
    )
    click.echo("-" * 105)
    for b in budgets:
        click.echo(
            f"{b.id:<5} {b.name[:25]:<25} {b.category[:15]:<15} {money(b.allocated):>14} "
            f"{money(b.spent):>14} {money(b.remaining):>14} {b.status.value:<12}"
        )


@budget_group.command("create")
@click.argument("name")
@click.option("--category", required=True, help="Category name")
@click.option("--allocated", required=True, help="Amount allocated (e.g., 5000 or $5,000.00)")
@click.option(
    "--period",
    type=click.Choice([p.value for p in BudgetPeriod]),
    default=BudgetPeriod.MONTHLY.value,
    show_default=True,
    help="Budget period",
)
@click.pass_context
def create_budget(ctx, name: str, category: str, allocated: str, period: str):
    """Create a budget.

    Examples:
        budgetdesk budget create "Q1 Marketing" --category Marketing --allocated 5000 --period quarterly
    """
    service = BudgetService(ctx.obj["db"])
    try:
        budget = service.create_budget(
            name=name, category=category, allocated=parse_amount(allocated), period=period
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created budget '{budget.name}' (ID: {budget.id})")
    click.echo(f"  Allocated: {money(budget.allocated)} ({budget.period.value})")


@budget_group.command("show")
@click.argument("budget_id", type=int)
@click.pass_context
def show_budget(ctx, budget_id: int):
    """Show a budget with its health view."""
    service = BudgetService(ctx.obj["db"])
    try:
        budget = service.require_budget(budget_id)
        health = service.health(budget_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{budget.name} [{budget.category}, {budget.period.value}]")
    click.echo(f"  Allocated:  {money(budget.allocated)}")
    click.echo(f"  Spent:      {money(budget.spent)}")
    click.echo(f"  Remaining:  {money(budget.remaining)}")
    click.echo(f"  Status:     {budget.status.value}")
    click.echo(
        f"  Health:     {money(health.actual_spent)} across {health.expense_count} expense(s), "
        f"{percent(health.utilization)} used"
    )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
