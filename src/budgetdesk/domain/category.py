"""Category domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from budgetdesk.database.base import Database
from budgetdesk.domain.entities import Category, Page
from budgetdesk.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_not_found,
    duplicate_category_name,
)
from budgetdesk.domain.validation import (
    check_allowed,
    optional_text,
    require_color,
    require_money,
    require_text,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "color", "parent_id", "budget", "is_active")

# (name, color, description)
DEFAULT_CATEGORIES = [
    ("Operations", "#3B82F6", "Day-to-day operational expenses"),
    ("Marketing", "#10B981", "Advertising, campaigns and promotion"),
    ("Development", "#F59E0B", "Software, engineering and R&D"),
    ("Administration", "#8B5CF6", "Office, legal and administrative costs"),
    ("Travel", "#EF4444", "Business travel and accommodation"),
    ("Equipment", "#06B6D4", "Hardware, tools and equipment"),
]


class CategoryService:
    """Service for managing categories.

    Budgets and expenses reference categories by name, so a category cannot
    be deleted while anything still uses its name.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_category(self, category_id: int) -> Category:
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def _require_parent(self, parent_id: Optional[int], category_id: Optional[int] = None) -> None:
        if parent_id is None:
            return
        if category_id is not None and parent_id == category_id:
            raise ValidationError("A category cannot be its own parent")
        if self.db.get_category(parent_id) is None:
            raise ValidationError(f"Parent category {parent_id} not found")

    def create_category(
        self,
        name: str,
        color: str,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
        budget: Optional[Decimal] = None,
        is_active: bool = True,
    ) -> Category:
        """Create a category.

        Args:
            name: Unique category name
            color: Hex color such as #3B82F6
            description: Optional description
            parent_id: Optional parent category ID
            budget: Optional informational budget amount
            is_active: Whether the category shows up in breakdowns

        Returns:
            The created category

        Raises:
            ValidationError: If a field is invalid or the parent doesn't exist
            ConflictError: If the name is already taken
        """
        name = require_text(name, "Category name", max_length=100)
        color = require_color(color)
        description = optional_text(description, "Description", max_length=500)
        if budget is not None:
            budget = require_money(budget, "Budget")
        self._require_parent(parent_id)

        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(duplicate_category_name(name))

        category_id = self.db.create_category(
            name=name,
            color=color,
            description=description,
            parent_id=parent_id,
            budget=budget,
            is_active=is_active,
        )
        return self.db.get_category(category_id)

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category or None if not found
        """
        return self.db.get_category(category_id)

    def list_categories(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: Optional[int] = 20,
    ) -> Page[Category]:
        """List categories ordered by name.

        Args:
            search: Case-insensitive name substring
            is_active: Optional activity filter
            page: 1-based page number
            limit: Page size, or None for everything

        Returns:
            Page of categories
        """
        return self.db.list_categories(search=search, is_active=is_active, page=page, limit=limit)

    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category:
        """Apply edits to a category.

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the category doesn't exist
            ConflictError: If the new name is already taken
        """
        check_allowed(changes, EDITABLE_FIELDS)
        current = self._require_category(category_id)

        values: dict[str, Any] = {}
        if changes.get("name") is not None:
            name = require_text(changes["name"], "Category name", max_length=100)
            existing = self.db.get_category_by_name(name)
            if existing is not None and existing.id != current.id:
                raise ConflictError(duplicate_category_name(name))
            values["name"] = name
        if changes.get("color") is not None:
            values["color"] = require_color(changes["color"])
        if changes.get("description") is not None:
            values["description"] = optional_text(
                changes["description"], "Description", max_length=500
            )
        if changes.get("budget") is not None:
            values["budget"] = require_money(changes["budget"], "Budget")
        if changes.get("parent_id") is not None:
            self._require_parent(changes["parent_id"], category_id)
            values["parent_id"] = changes["parent_id"]
        if changes.get("is_active") is not None:
            values["is_active"] = bool(changes["is_active"])

        self.db.update_category(category_id, **values)
        return self.db.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category that no budget or expense references.

        Raises:
            NotFoundError: If the category doesn't exist
            DependencyError: If budgets or expenses still use the category name
        """
        category = self._require_category(category_id)
        budget_count = self.db.list_budgets(category=category.name, limit=1).total
        expense_count = self.db.list_expenses(category=category.name, limit=1).total
        if budget_count or expense_count:
            raise DependencyError(
                category_delete_blocked(category.name, budget_count, expense_count)
            )
        self.db.delete_category(category_id)

    def seed_defaults(self) -> int:
        """Create the default categories that don't exist yet.

        Returns:
            Number of categories created
        """
        created = 0
        for name, color, description in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is not None:
                continue
            self.db.create_category(name=name, color=color, description=description)
            created += 1
        logger.info("Seeded %d default categories", created)
        return created
