"""User administration endpoints."""

from flask import Blueprint, request

from budgetdesk.api.auth import current_user, roles_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import bool_arg, ok, page_args, paginated
from budgetdesk.api.schemas import PasswordReset, UserCreate, UserUpdate, parse_body
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.user import UserService

bp = Blueprint("users", __name__, url_prefix="/api/users")

ADMIN = UserRole.ADMIN
MANAGER = UserRole.MANAGER


@bp.get("/")
@roles_required(ADMIN, MANAGER)
def list_users():
    page, limit = page_args()
    result = UserService(get_db()).list_users(
        role=request.args.get("role"),
        department=request.args.get("department"),
        is_active=bool_arg("isActive"),
        search=request.args.get("search"),
        page=page,
        limit=limit,
    )
    return paginated(result)


@bp.get("/<int:user_id>")
@roles_required(ADMIN, MANAGER)
def get_user(user_id: int):
    return ok(UserService(get_db()).require_user(user_id))


@bp.post("/")
@roles_required(ADMIN)
def create_user():
    body = parse_body(UserCreate, request.get_json(silent=True))
    user = UserService(get_db()).create_user(**body.model_dump())
    return ok(user, "User created successfully", 201)


@bp.patch("/<int:user_id>")
@roles_required(ADMIN)
def update_user(user_id: int):
    body = parse_body(UserUpdate, request.get_json(silent=True))
    user = UserService(get_db()).update_user(user_id, body.changes())
    return ok(user, "User updated successfully")


@bp.patch("/<int:user_id>/password")
@roles_required(ADMIN)
def change_user_password(user_id: int):
    body = parse_body(PasswordReset, request.get_json(silent=True))
    UserService(get_db()).change_password(user_id, body.new_password)
    return ok(message="Password updated successfully")


@bp.patch("/<int:user_id>/deactivate")
@roles_required(ADMIN)
def deactivate_user(user_id: int):
    user = UserService(get_db()).deactivate_user(user_id, current_user())
    return ok(user, "User deactivated successfully")


@bp.patch("/<int:user_id>/reactivate")
@roles_required(ADMIN)
def reactivate_user(user_id: int):
    user = UserService(get_db()).reactivate_user(user_id)
    return ok(user, "User reactivated successfully")
