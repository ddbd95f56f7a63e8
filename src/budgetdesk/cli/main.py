"""Main CLI entry point."""

import click

from budgetdesk.config import Config, configure_logging
from budgetdesk.database.factories import create_database

# Import and register all commands at module level
from budgetdesk.cli.commands import (
    budget,
    dashboard,
    expense,
    init_categories,
    serve,
    user,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETDESK_DB_PATH environment variable)",
    envvar="BUDGETDESK_DB_PATH",
)
@click.pass_context
def cli(ctx, db_path: str | None):
    """Budgetdesk - Budget and expense tracking.

    Manage budgets, record and approve expenses, and serve the REST API.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        config = Config.from_env(database_path=db_path)
        configure_logging(config.log_level)
        db = create_database(database_url=config.database_url, database_path=config.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["config"] = config
        ctx.obj["db"] = db


# Register all commands
serve.register_commands(cli)
init_categories.register_commands(cli)
user.register_commands(cli)
budget.register_commands(cli)
expense.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
