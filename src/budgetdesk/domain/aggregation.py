"""Budget recalculation against a database."""

import logging
from typing import Iterable, Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import Budget, ExpenseStatus
from budgetdesk.domain.ledger import approved_spend, budget_usage

logger = logging.getLogger(__name__)


class ExpenseLedger:
    """Recompute a budget's spent, remaining and status from its expenses.

    Each pass reads the budget, folds its approved expenses and writes the
    result only if the budget's version is unchanged. A concurrent writer
    causes a re-read instead of a lost update.
    """

    MAX_ATTEMPTS = 3

    def __init__(self, db: Database):
        """Initialize ledger aggregator.

        Args:
            db: Database instance
        """
        self.db = db

    def recalculate(self, budget_id: int) -> Optional[Budget]:
        """Recalculate one budget.

        Args:
            budget_id: Budget to recompute

        Returns:
            The updated budget, or None when the budget no longer exists or
            every attempt hit a version conflict
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            budget = self.db.get_budget(budget_id)
            if budget is None:
                logger.warning("Skipping recalculation: budget %s no longer exists", budget_id)
                return None

            approved = self.db.list_expenses(
                budget_id=budget_id, status=ExpenseStatus.APPROVED
            ).items
            usage = budget_usage(budget.allocated, approved_spend(approved, budget_id))

            if self.db.apply_budget_usage(
                budget_id,
                spent=usage.spent,
                remaining=usage.remaining,
                status=usage.status,
                expected_version=budget.version,
            ):
                logger.debug(
                    "Budget %s recalculated: spent=%s remaining=%s status=%s",
                    budget_id,
                    usage.spent,
                    usage.remaining,
                    usage.status.value,
                )
                return self.db.get_budget(budget_id)

            logger.info(
                "Budget %s changed during recalculation (attempt %d/%d), retrying",
                budget_id,
                attempt,
                self.MAX_ATTEMPTS,
            )

        logger.error(
            "Giving up recalculating budget %s after %d attempts; the next pass will correct it",
            budget_id,
            self.MAX_ATTEMPTS,
        )
        return None

    def recalculate_many(self, budget_ids: Iterable[int]) -> None:
        """Recalculate budgets in the given order."""
        for budget_id in budget_ids:
            self.recalculate(budget_id)
