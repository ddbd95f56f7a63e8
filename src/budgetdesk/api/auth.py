"""Bearer-token authentication and authorization decorators."""

from functools import wraps

from flask import g, request

from budgetdesk.api.context import get_auth
from budgetdesk.domain.entities import User, UserRole
from budgetdesk.domain.errors import AuthenticationError, PermissionDeniedError


def current_user() -> User:
    return g.current_user


def _authenticate() -> User:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access denied. No token provided.")
    user = get_auth().verify_token(token.strip())
    g.current_user = user
    return user


def login_required(view):
    """Reject requests without a valid, unrevoked bearer token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        _authenticate()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: UserRole):
    """Allow only users holding one of the given roles."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _authenticate()
            if user.role not in roles:
                allowed = ", ".join(role.value for role in roles)
                raise PermissionDeniedError(f"Access denied. Required role: {allowed}")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def permission_required(permission: str):
    """Allow users holding the permission; admins always pass."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _authenticate()
            if not user.has_permission(permission):
                raise PermissionDeniedError(f"Access denied. Missing permission: {permission}")
            return view(*args, **kwargs)

        return wrapper

    return decorator
