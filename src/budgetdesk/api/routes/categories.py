"""Category endpoints."""

from flask import Blueprint, request

from budgetdesk.api.auth import login_required, roles_required
from budgetdesk.api.context import get_db
from budgetdesk.api.responses import bool_arg, ok, page_args, paginated
from budgetdesk.api.schemas import CategoryCreate, CategoryUpdate, parse_body
from budgetdesk.domain.category import CategoryService
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.errors import NotFoundError, category_not_found

bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@bp.get("/")
@login_required
def list_categories():
    page, limit = page_args(default_limit=20)
    result = CategoryService(get_db()).list_categories(
        search=request.args.get("search"),
        is_active=bool_arg("isActive"),
        page=page,
        limit=limit,
    )
    return paginated(result)


@bp.get("/<int:category_id>")
@login_required
def get_category(category_id: int):
    category = CategoryService(get_db()).get_category(category_id)
    if category is None:
        raise NotFoundError(category_not_found(category_id))
    return ok(category)


@bp.post("/")
@roles_required(UserRole.ADMIN, UserRole.MANAGER)
def create_category():
    body = parse_body(CategoryCreate, request.get_json(silent=True))
    category = CategoryService(get_db()).create_category(**body.model_dump())
    return ok(category, "Category created successfully", 201)


@bp.patch("/<int:category_id>")
@roles_required(UserRole.ADMIN, UserRole.MANAGER)
def update_category(category_id: int):
    body = parse_body(CategoryUpdate, request.get_json(silent=True))
    category = CategoryService(get_db()).update_category(category_id, body.changes())
    return ok(category, "Category updated successfully")


@bp.delete("/<int:category_id>")
@roles_required(UserRole.ADMIN)
def delete_category(category_id: int):
    CategoryService(get_db()).delete_category(category_id)
    return ok(message="Category deleted successfully")
