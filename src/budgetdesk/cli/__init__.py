"""Command-line interface for budgetdesk."""
