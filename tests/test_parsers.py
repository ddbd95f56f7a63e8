"""Tests for the command-line amount and date parsers."""

from datetime import date
from decimal import Decimal

import pytest

from budgetdesk.utils.amount_parser import parse_amount
from budgetdesk.utils.date_parser import parse_date

TODAY = date(2024, 3, 15)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1234.5", Decimal("1234.5")),
        ("$1,234.50", Decimal("1234.50")),
        (" €99 ", Decimal("99")),
        ("-20", Decimal("-20")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "ten dollars", "NaN", "inf"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("Jan 15 2024") == date(2024, 1, 15)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", date(2024, 3, 15)),
        ("Yesterday", date(2024, 3, 14)),
        ("tomorrow", date(2024, 3, 16)),
        ("start of month", date(2024, 3, 1)),
        ("last month", date(2024, 2, 1)),
        ("3 days ago", date(2024, 3, 12)),
        ("1 day ago", date(2024, 3, 14)),
    ],
)
def test_parse_relative_dates(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_last_month_crosses_year():
    assert parse_date("last month", today=date(2024, 1, 20)) == date(2023, 12, 1)


def test_parse_invalid_date():
    """Unparseable input raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
