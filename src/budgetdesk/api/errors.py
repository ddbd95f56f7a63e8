"""Map exceptions to JSON error responses."""

import logging

from flask import Flask
from pydantic import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from budgetdesk.api.responses import camel_case, error
from budgetdesk.domain.errors import (
    AuthenticationError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
}


def status_for(exc: DomainError) -> int:
    """Validation, conflict and dependency errors are all client errors (400)."""
    for error_type, status in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error(str(exc), status_for(exc))

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(exc: SchemaValidationError):
        errors = [
            {
                "field": ".".join(camel_case(str(part)) for part in item["loc"]),
                "message": item["msg"],
            }
            for item in exc.errors()
        ]
        return error("Validation failed", 400, errors)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return error("Internal server error", 500)
