"""User management domain service."""

import logging
from typing import Any, Iterable, Optional

from werkzeug.security import generate_password_hash

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import Page, User, UserRole
from budgetdesk.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_user_email,
    user_not_found,
)
from budgetdesk.domain.validation import (
    check_allowed,
    coerce_enum,
    optional_url,
    require_email,
    require_password,
    require_text,
)

logger = logging.getLogger(__name__)

EDIT_BUDGETS = "edit_budgets"
CREATE_EXPENSES = "create_expenses"
APPROVE_EXPENSES = "approve_expenses"
PERMISSIONS = frozenset({EDIT_BUDGETS, CREATE_EXPENSES, APPROVE_EXPENSES})

EDITABLE_FIELDS = ("name", "department", "role", "permissions", "avatar", "is_active")


def hash_password(password: str) -> str:
    return generate_password_hash(require_password(password))


def normalize_permissions(permissions: Optional[Iterable[str]]) -> frozenset[str]:
    """Validate permission names against the known set."""
    result = frozenset(permissions or ())
    unknown = result - PERMISSIONS
    if unknown:
        raise ValidationError(
            f"Unknown permission(s): {', '.join(sorted(unknown))}. "
            f"Must be any of: {', '.join(sorted(PERMISSIONS))}"
        )
    return result


class UserService:
    """Administrative user management.

    Deactivating a user, changing their password or reactivating them bumps
    their token version so that previously issued tokens stop working.
    """

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def require_user(self, user_id: int) -> User:
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        department: str,
        role: UserRole | str = UserRole.USER,
        permissions: Iterable[str] = (),
        avatar: Optional[str] = None,
    ) -> User:
        """Create a user.

        Args:
            name: Display name
            email: Email address (stored lowercased, must be unique)
            password: Plain-text password, hashed before storage
            department: Department name
            role: admin, manager or user
            permissions: Subset of the known permissions
            avatar: Optional avatar URL

        Returns:
            The created user

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If the email is already registered
        """
        name = require_text(name, "Name", max_length=100)
        email = require_email(email)
        department = require_text(department, "Department", max_length=100)
        role = coerce_enum(UserRole, role, "role")
        permissions = normalize_permissions(permissions)
        avatar = optional_url(avatar, "Avatar")
        password_hash = hash_password(password)

        if self.db.get_user_by_email(email) is not None:
            raise ConflictError(duplicate_user_email(email))

        user_id = self.db.create_user(
            name=name,
            email=email,
            password_hash=password_hash,
            department=department,
            role=role,
            permissions=permissions,
            avatar=avatar,
        )
        logger.info("Created %s user %s", role.value, email)
        return self.db.get_user(user_id)

    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None if not found
        """
        return self.db.get_user(user_id)

    def list_users(
        self,
        role: Optional[UserRole | str] = None,
        department: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = 10,
    ) -> Page[User]:
        """List users, newest first. ``search`` matches name or email."""
        if role is not None:
            role = coerce_enum(UserRole, role, "role")
        return self.db.list_users(
            role=role,
            department=department,
            is_active=is_active,
            search=search,
            page=page,
            limit=limit,
        )

    def update_user(self, user_id: int, changes: dict[str, Any]) -> User:
        """Apply administrative edits to a user.

        Raises:
            ValidationError: If a field outside the allow-list is present
            NotFoundError: If the user doesn't exist
        """
        check_allowed(changes, EDITABLE_FIELDS)
        self.require_user(user_id)

        values: dict[str, Any] = {}
        if changes.get("name") is not None:
            values["name"] = require_text(changes["name"], "Name", max_length=100)
        if changes.get("department") is not None:
            values["department"] = require_text(
                changes["department"], "Department", max_length=100
            )
        if changes.get("role") is not None:
            values["role"] = coerce_enum(UserRole, changes["role"], "role")
        if changes.get("permissions") is not None:
            values["permissions"] = normalize_permissions(changes["permissions"])
        if changes.get("avatar") is not None:
            values["avatar"] = optional_url(changes["avatar"], "Avatar")
        if changes.get("is_active") is not None:
            values["is_active"] = bool(changes["is_active"])

        self.db.update_user(user_id, **values)
        if values.get("is_active") is False:
            self.db.increment_token_version(user_id)
        return self.db.get_user(user_id)

    def change_password(self, user_id: int, new_password: str) -> None:
        """Set a user's password and revoke their tokens.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        self.require_user(user_id)
        self.db.update_user(user_id, password_hash=hash_password(new_password))
        self.db.increment_token_version(user_id)

    def deactivate_user(self, user_id: int, actor: User) -> User:
        """Deactivate a user and revoke their tokens.

        Raises:
            ValidationError: If the actor tries to deactivate themselves
            NotFoundError: If the user doesn't exist
        """
        if actor.id == user_id:
            raise ValidationError("You cannot deactivate your own account")
        self.require_user(user_id)
        self.db.update_user(user_id, is_active=False)
        self.db.increment_token_version(user_id)
        logger.info("User %s deactivated by %s", user_id, actor.email)
        return self.db.get_user(user_id)

    def reactivate_user(self, user_id: int) -> User:
        """Reactivate a user. Tokens issued before deactivation stay revoked.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        self.require_user(user_id)
        self.db.update_user(user_id, is_active=True)
        self.db.increment_token_version(user_id)
        return self.db.get_user(user_id)
