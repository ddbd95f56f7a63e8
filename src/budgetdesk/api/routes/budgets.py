"""Budget endpoints."""

from flask import Blueprint, request

from budgetdesk.api.auth import login_required, permission_required, roles_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import ok, page_args, paginated
from budgetdesk.api.schemas import BudgetCreate, BudgetUpdate, parse_body
from budgetdesk.domain.budget import BudgetService
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.user import EDIT_BUDGETS

bp = Blueprint("budgets", __name__, url_prefix="/api/budgets")


@bp.get("/")
@login_required
def list_budgets():
    page, limit = page_args()
    result = BudgetService(get_db()).list_budgets(
        category=request.args.get("category"),
        period=request.args.get("period"),
        status=request.args.get("status"),
        page=page,
        limit=limit,
    )
    return paginated(result)


@bp.get("/<int:budget_id>")
@login_required
def get_budget(budget_id: int):
    return ok(BudgetService(get_db()).require_budget(budget_id))


@bp.get("/<int:budget_id>/health")
@login_required
def budget_health(budget_id: int):
    return ok(BudgetService(get_db()).health(budget_id))


@bp.post("/")
@permission_required(EDIT_BUDGETS)
def create_budget():
    body = parse_body(BudgetCreate, request.get_json(silent=True))
    budget = BudgetService(get_db()).create_budget(
        name=body.name,
        category=body.category,
        allocated=body.allocated,
        period=body.period,
    )
    return ok(budget, "Budget created successfully", 201)


@bp.patch("/<int:budget_id>")
@permission_required(EDIT_BUDGETS)
def update_budget(budget_id: int):
    body = parse_body(BudgetUpdate, request.get_json(silent=True))
    budget = BudgetService(get_db()).update_budget(budget_id, body.changes())
    return ok(budget, "Budget updated successfully")


@bp.delete("/<int:budget_id>")
@roles_required(UserRole.ADMIN, UserRole.MANAGER)
def delete_budget(budget_id: int):
    BudgetService(get_db()).delete_budget(budget_id)
    return ok(message="Budget deleted successfully")
