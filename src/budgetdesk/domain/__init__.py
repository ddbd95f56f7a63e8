"""Domain layer for budgetdesk application."""

_SERVICES = {
    "AuthService": "budgetdesk.domain.auth",
    "BudgetService": "budgetdesk.domain.budget",
    "CategoryService": "budgetdesk.domain.category",
    "DashboardService": "budgetdesk.domain.dashboard",
    "ExpenseService": "budgetdesk.domain.expense",
    "TransactionService": "budgetdesk.domain.transaction",
    "UserService": "budgetdesk.domain.user",
}

__all__ = sorted(_SERVICES)


# Services import the database layer, which imports domain.entities; resolve
# them lazily so importing either package first works.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
