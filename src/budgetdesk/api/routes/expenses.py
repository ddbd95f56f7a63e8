"""Expense endpoints, including the approval workflow."""

from flask import Blueprint, request

from budgetdesk.api.auth import current_user, login_required, permission_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import int_arg, ok, page_args, paginated
from budgetdesk.api.schemas import ExpenseCreate, ExpenseUpdate, parse_body
from budgetdesk.domain.errors import NotFoundError, expense_not_found
from budgetdesk.domain.expense import ExpenseService
from budgetdesk.domain.user import APPROVE_EXPENSES, CREATE_EXPENSES

bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@bp.get("/")
@login_required
def list_expenses():
    page, limit = page_args()
    result = ExpenseService(get_db()).list_expenses(
        category=request.args.get("category"),
        status=request.args.get("status"),
        department=request.args.get("department"),
        budget_id=int_arg("budgetId"),
        page=page,
        limit=limit,
    )
    return paginated(result)


@bp.get("/<int:expense_id>")
@login_required
def get_expense(expense_id: int):
    expense = ExpenseService(get_db()).get_expense(expense_id)
    if expense is None:
        raise NotFoundError(expense_not_found(expense_id))
    return ok(expense)


@bp.post("/")
@permission_required(CREATE_EXPENSES)
def create_expense():
    body = parse_body(ExpenseCreate, request.get_json(silent=True))
    expense = ExpenseService(get_db()).create_expense(
        description=body.description,
        amount=body.amount,
        category=body.category,
        vendor=body.vendor,
        department=body.department,
        date=body.date,
        budget_id=body.budget_id,
        receipt_url=body.receipt_url,
        tags=body.tags,
        created_by=current_user().id,
    )
    return ok(expense, "Expense created successfully", 201)


@bp.patch("/<int:expense_id>")
@login_required
def update_expense(expense_id: int):
    body = parse_body(ExpenseUpdate, request.get_json(silent=True))
    expense = ExpenseService(get_db()).update_expense(expense_id, body.changes())
    return ok(expense, "Expense updated successfully")


@bp.patch("/<int:expense_id>/approve")
@permission_required(APPROVE_EXPENSES)
def approve_expense(expense_id: int):
    expense = ExpenseService(get_db()).approve_expense(expense_id, current_user())
    return ok(expense, "Expense approved successfully")


@bp.patch("/<int:expense_id>/reject")
@permission_required(APPROVE_EXPENSES)
def reject_expense(expense_id: int):
    expense = ExpenseService(get_db()).reject_expense(expense_id, current_user())
    return ok(expense, "Expense rejected successfully")


@bp.delete("/<int:expense_id>")
@login_required
def delete_expense(expense_id: int):
    ExpenseService(get_db()).delete_expense(expense_id)
    return ok(message="Expense deleted successfully")
