"""Access to the per-app database and auth service from request handlers."""

from flask import current_app

from budgetdesk.database.base import Database
from budgetdesk.domain.auth import AuthService

EXTENSION_KEY = "budgetdesk"


def get_db() -> Database:
    return current_app.extensions[EXTENSION_KEY]["db"]


def get_auth() -> AuthService:
    return current_app.extensions[EXTENSION_KEY]["auth"]
