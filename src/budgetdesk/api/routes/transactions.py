"""Transaction endpoints."""

from flask import Blueprint, request

from budgetdesk.api.auth import login_required, roles_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import date_arg, ok, page_args, paginated
from budgetdesk.api.schemas import TransactionCreate, TransactionUpdate, parse_body
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.errors import NotFoundError, transaction_not_found
from budgetdesk.domain.transaction import TransactionService

bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@bp.get("/")
@login_required
def list_transactions():
    page, limit = page_args()
    result = TransactionService(get_db()).list_transactions(
        type=request.args.get("type"),
        status=request.args.get("status"),
        category=request.args.get("category"),
        account=request.args.get("account"),
        start_date=date_arg("startDate"),
        end_date=date_arg("endDate"),
        page=page,
        limit=limit,
    )
    return paginated(result)


@bp.get("/<int:transaction_id>")
@login_required
def get_transaction(transaction_id: int):
    transaction = TransactionService(get_db()).get_transaction(transaction_id)
    if transaction is None:
        raise NotFoundError(transaction_not_found(transaction_id))
    return ok(transaction)


@bp.post("/")
@roles_required(UserRole.ADMIN, UserRole.MANAGER)
def create_transaction():
    body = parse_body(TransactionCreate, request.get_json(silent=True))
    transaction = TransactionService(get_db()).create_transaction(**body.model_dump())
    return ok(transaction, "Transaction created successfully", 201)


@bp.patch("/<int:transaction_id>")
@roles_required(UserRole.ADMIN, UserRole.MANAGER)
def update_transaction(transaction_id: int):
    body = parse_body(TransactionUpdate, request.get_json(silent=True))
    transaction = TransactionService(get_db()).update_transaction(transaction_id, body.changes())
    return ok(transaction, "Transaction updated successfully")


@bp.delete("/<int:transaction_id>")
@roles_required(UserRole.ADMIN)
def delete_transaction(transaction_id: int):
    TransactionService(get_db()).delete_transaction(transaction_id)
    return ok(message="Transaction deleted successfully")
