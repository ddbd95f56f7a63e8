"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount typed on the command line.

    Accepts "1234.5" or "$1,234.50". Signs are kept; range checks belong to
    the domain services.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = CURRENCY_SYMBOLS.sub("", amount_str.strip()).replace(",", "").strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
