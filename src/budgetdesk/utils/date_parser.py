"""Date parsing utilities."""

import re
from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DAYS_AGO = re.compile(r"^(\d+)\s+days?\s+ago$")


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse an expense or transaction date.

    Supports:
    - Absolute dates: "2024-01-15", "Jan 15 2024", etc.
    - "today", "yesterday", "tomorrow"
    - "N days ago"
    - "start of month", "last month" (first day of the month)

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
    }
    if text in relative:
        return relative[text]

    match = DAYS_AGO.match(text)
    if match:
        return today - timedelta(days=int(match.group(1)))

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
