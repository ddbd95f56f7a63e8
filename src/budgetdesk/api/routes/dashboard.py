"""Dashboard endpoints."""

from flask import Blueprint

from budgetdesk.api.auth import login_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import int_arg, ok
from budgetdesk.domain.dashboard import DashboardService

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


def _limit() -> int:
    limit = int_arg("limit")
    return limit if limit is not None and 1 <= limit <= 100 else 10


@bp.get("/metrics")
@login_required
def metrics():
    return ok(DashboardService(get_db()).metrics())


@bp.get("/alerts")
@login_required
def alerts():
    return ok(DashboardService(get_db()).alerts())


@bp.get("/recent-transactions")
@login_required
def recent_transactions():
    return ok(DashboardService(get_db()).recent_transactions(_limit()))


@bp.get("/pending-expenses")
@login_required
def pending_expenses():
    return ok(DashboardService(get_db()).pending_expenses(_limit()))
