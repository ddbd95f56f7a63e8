"""Shared output formatting for CLI commands."""

from decimal import Decimal


def money(amount: Decimal) -> str:
    """Format an amount as $1,234.56 (negative amounts as -$1,234.56)."""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def percent(value: Decimal) -> str:
    return f"{value:.1f}%"
