"""Registration, login and self-service profile endpoints."""

from flask import Blueprint, request

from budgetdesk.api.auth import current_user, login_required
from budgetdesk.api.context import get_auth
from budgetdesk.api.responses import ok
from budgetdesk.api.schemas import (
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    parse_body,
)

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
def register():
    body = parse_body(RegisterRequest, request.get_json(silent=True))
    auth = get_auth()
    user = auth.register(
        name=body.name,
        email=body.email,
        password=body.password,
        department=body.department,
    )
    return ok(
        {"user": user, "token": auth.issue_token(user)},
        "User registered successfully",
        201,
    )


@bp.post("/login")
def login():
    body = parse_body(LoginRequest, request.get_json(silent=True))
    user, token = get_auth().login(body.email, body.password)
    return ok({"user": user, "token": token}, "Login successful")


@bp.get("/profile")
@login_required
def profile():
    return ok(current_user())


@bp.patch("/profile")
@login_required
def update_profile():
    body = parse_body(ProfileUpdate, request.get_json(silent=True))
    user = get_auth().update_profile(current_user(), **body.changes())
    return ok(user, "Profile updated successfully")


@bp.patch("/change-password")
@login_required
def change_password():
    body = parse_body(PasswordChange, request.get_json(silent=True))
    auth = get_auth()
    user = auth.change_own_password(current_user(), body.current_password, body.new_password)
    return ok({"token": auth.issue_token(user)}, "Password changed successfully")
