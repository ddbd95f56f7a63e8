"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class AuthenticationError(DomainError):
    """Missing, invalid or revoked credentials."""


class PermissionDeniedError(DomainError):
    """Authenticated actor lacks the role or permission required."""


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def duplicate_category_name(name: str) -> str:
    """Return message for duplicate category name."""
    return f"Category with name '{name}' already exists"


def duplicate_user_email(email: str) -> str:
    """Return message for duplicate user email."""
    return f"User already exists with email '{email}'"


def category_delete_blocked(name: str, budget_count: int, expense_count: int) -> str:
    """Return message when a category is still referenced by budgets or expenses."""
    parts = []
    if budget_count > 0:
        parts.append(f"{budget_count} budget{'s' if budget_count != 1 else ''}")
    if expense_count > 0:
        parts.append(f"{expense_count} expense{'s' if expense_count != 1 else ''}")
    return (
        f"Cannot delete category '{name}': it is in use by {' and '.join(parts)}. "
        "Please reassign or delete them first."
    )


def disallowed_fields(fields: list[str]) -> str:
    """Return message for update payloads touching fields outside the allow-list."""
    return f"Invalid updates: {', '.join(sorted(fields))} cannot be modified"
