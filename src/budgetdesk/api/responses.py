"""JSON response envelopes and entity serialization."""

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from flask import jsonify, request

from budgetdesk.domain.entities import Page
from budgetdesk.domain.errors import ValidationError

MAX_LIMIT = 100

# Never sent to clients.
HIDDEN_FIELDS = {"password_hash", "token_version"}


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_json(value: Any) -> Any:
    """Convert domain entities and values into JSON-ready structures."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            camel_case(f.name): to_json(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.name not in HIDDEN_FIELDS
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (frozenset, set)):
        return sorted(to_json(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


def ok(data: Any = None, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = to_json(data)
    return jsonify(body), status


def paginated(page: Page):
    return jsonify(
        {
            "success": True,
            "data": to_json(page.items),
            "pagination": {"page": page.page, "pages": page.pages, "total": page.total},
        }
    )


def error(message: str, status: int, errors: Optional[list[dict[str, str]]] = None):
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def page_args(default_limit: int = 10) -> tuple[int, int]:
    """Read ``page`` and ``limit`` query parameters; bad values use the defaults."""
    page = _positive_int(request.args.get("page"), 1)
    limit = min(_positive_int(request.args.get("limit"), default_limit), MAX_LIMIT)
    return page, limit


def bool_arg(name: str) -> Optional[bool]:
    raw = request.args.get(name)
    if raw is None:
        return None
    return raw.lower() in ("1", "true", "yes")


def int_arg(name: str) -> Optional[int]:
    try:
        return int(request.args[name])
    except (KeyError, ValueError):
        return None


def date_arg(name: str) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
