"""Initialize default categories."""

import click

from budgetdesk.domain.category import DEFAULT_CATEGORIES, CategoryService


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the default categories that don't exist yet."""
    service = CategoryService(ctx.obj["db"])

    created = service.seed_defaults()
    if created == 0:
        click.echo("Default categories already exist.")
        return

    click.echo(f"Created {created} of {len(DEFAULT_CATEGORIES)} default categories.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
