"""User management commands."""

import click

from budgetdesk.cli.error_handling import handle_domain_error
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.errors import DomainError
from budgetdesk.domain.user import PERMISSIONS, UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create-admin")
@click.argument("name")
@click.argument("email")
@click.option("--department", required=True, help="Department name")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted when omitted)",
)
@click.pass_context
def create_admin(ctx, name: str, email: str, department: str, password: str):
    """Create an administrator account.

    Examples:
        budgetdesk user create-admin "Ada Admin" ada@example.com --department Finance
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(
            name=name,
            email=email,
            password=password,
            department=department,
            role=UserRole.ADMIN,
            permissions=PERMISSIONS,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created admin user {user.email} (ID: {user.id})")


@user_group.command("list")
@click.option("--role", type=click.Choice([r.value for r in UserRole]), help="Filter by role")
@click.pass_context
def list_users(ctx, role: str | None):
    """List users."""
    users = UserService(ctx.obj["db"]).list_users(role=role, limit=None).items
    if not users:
        click.echo("No users found.")
        return

    click.echo(f"\n{'ID':<5} {'Name':<25} {'Email':<30} {'Role':<8} {'Active':<6}")
    click.echo("-" * 78)
    for u in users:
        active = "yes" if u.is_active else "no"
        click.echo(f"{u.id:<5} {u.name[:25]:<25} {u.email[:30]:<30} {u.role.value:<8} {active:<6}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
