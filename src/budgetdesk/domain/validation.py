"""Field validation shared by the domain services."""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Optional, TypeVar

from budgetdesk.domain.errors import ValidationError, disallowed_fields

E = TypeVar("E", bound=Enum)

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
URL = re.compile(r"^https?://.+")

MIN_PASSWORD_LENGTH = 6


def require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    """Return the stripped value, rejecting blanks and overlong strings."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    value = str(value).strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters")
    return value


def optional_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters")
    return value


def require_money(value: Any, field: str, positive: bool = False) -> Decimal:
    """Parse a money amount; ``positive`` demands > 0, otherwise >= 0."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if positive and amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    if not positive and amount < 0:
        raise ValidationError(f"{field} must be positive")
    return amount


def coerce_enum(enum_type: type[E], value: Any, field: str) -> E:
    """Convert a raw string to the enum, listing the valid choices on failure."""
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ValidationError(f"Invalid {field} '{value}'. Must be one of: {choices}")


def require_color(value: Optional[str]) -> str:
    color = require_text(value, "Color")
    if not HEX_COLOR.match(color):
        raise ValidationError("Color must be a valid hex color (e.g. #3B82F6)")
    return color


def require_email(value: Optional[str]) -> str:
    email = require_text(value, "Email").lower()
    if not EMAIL.match(email):
        raise ValidationError("Please enter a valid email address")
    return email


def require_password(value: Optional[str], field: str = "Password") -> str:
    if value is None or len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"{field} must be at least {MIN_PASSWORD_LENGTH} characters")
    return value


def optional_url(value: Optional[str], field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not URL.match(value):
        raise ValidationError(f"{field} must be a valid URL")
    return value


def normalize_tags(tags: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Strip, de-duplicate and length-check tags, keeping first-seen order."""
    result: list[str] = []
    for tag in tags or ():
        tag = str(tag).strip()
        if not tag:
            continue
        if len(tag) > 50:
            raise ValidationError("Tag cannot exceed 50 characters")
        if tag not in result:
            result.append(tag)
    return tuple(result)


def check_allowed(changes: dict[str, Any], allowed: Iterable[str]) -> None:
    """Reject update payloads that touch fields outside the allow-list."""
    extra = [key for key in changes if key not in set(allowed)]
    if extra:
        raise ValidationError(disallowed_fields(extra))
