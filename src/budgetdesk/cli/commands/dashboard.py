"""Dashboard command."""

from datetime import datetime, time, timezone

import click

from budgetdesk.cli.formatting import money, percent
from budgetdesk.domain.dashboard import DashboardService
from budgetdesk.utils.date_parser import parse_date


@click.command("dashboard")
@click.option("--as-of", help="Reference date for the burn-rate windows (default: today)")
@click.pass_context
def dashboard(ctx, as_of: str | None):
    """Show portfolio metrics and budget alerts."""
    service = DashboardService(ctx.obj["db"])

    now = None
    if as_of:
        try:
            now = datetime.combine(parse_date(as_of), time.max, tzinfo=timezone.utc)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    m = service.metrics(now)
    click.echo(f"Total budget:       {money(m.total_budget):>16}")
    click.echo(f"Total expenses:     {money(m.total_expenses):>16}")
    click.echo(f"Remaining budget:   {money(m.remaining_budget):>16}")
    click.echo(f"Monthly burn rate:  {money(m.monthly_burn_rate):>16}")
    click.echo(f"Utilization:        {percent(m.budget_utilization):>16}")
    click.echo(f"Expense growth:     {percent(m.expense_growth):>16}")

    if m.category_breakdown:
        click.echo("\nBy category:")
        for share in m.category_breakdown:
            click.echo(f"  {share.category:<20} {money(share.amount):>14} {percent(share.percentage):>7}")

    alerts = service.alerts()
    if alerts:
        click.echo("\nAlerts:")
        for alert in alerts:
            click.echo(f"  [{alert.type}] {alert.title}: {alert.message}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
