"""Tests for UserService and AuthService."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from budgetdesk.domain.auth import AuthService
from budgetdesk.domain.entities import UserRole
from budgetdesk.domain.errors import AuthenticationError, ConflictError, ValidationError


@pytest.fixture
def auth_service(temp_db):
    return AuthService(temp_db, secret_key="test-secret", token_ttl_hours=1)


def test_register_creates_plain_user(auth_service):
    user = auth_service.register(
        name="New Person", email="New@Example.com", password="hunter22", department="Ops"
    )

    assert user.email == "new@example.com"
    assert user.role == UserRole.USER
    assert user.permissions == frozenset()
    assert user.password_hash != "hunter22"


def test_duplicate_email(auth_service, admin_user):
    with pytest.raises(ConflictError):
        auth_service.register(
            name="Copy", email="ADA@example.com", password="secret123", department="Ops"
        )


def test_short_password_rejected(auth_service):
    with pytest.raises(ValidationError, match="at least 6"):
        auth_service.register(name="A", email="a@example.com", password="123", department="Ops")


def test_login_and_verify(auth_service, admin_user):
    user, token = auth_service.login("ada@example.com", "secret123")

    assert user.last_login is not None
    assert auth_service.verify_token(token).id == admin_user.id


def test_login_wrong_password(auth_service, admin_user):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        auth_service.login("ada@example.com", "wrong")


def test_login_inactive_user(auth_service, user_service, admin_user, plain_user):
    user_service.deactivate_user(plain_user.id, admin_user)

    with pytest.raises(AuthenticationError, match="deactivated"):
        auth_service.login("uma@example.com", "secret123")


def test_password_change_revokes_tokens(auth_service, plain_user):
    _, token = auth_service.login("uma@example.com", "secret123")

    auth_service.change_own_password(plain_user, "secret123", "newpass456")

    with pytest.raises(AuthenticationError, match="revoked"):
        auth_service.verify_token(token)
    _, fresh = auth_service.login("uma@example.com", "newpass456")
    assert auth_service.verify_token(fresh).id == plain_user.id


def test_change_own_password_checks_current(auth_service, plain_user):
    with pytest.raises(AuthenticationError, match="incorrect"):
        auth_service.change_own_password(plain_user, "nope", "newpass456")


def test_expired_token(auth_service, plain_user):
    token = auth_service.issue_token(plain_user, now=datetime.now(timezone.utc) - timedelta(hours=2))

    with pytest.raises(AuthenticationError, match="expired"):
        auth_service.verify_token(token)


def test_tampered_token(auth_service, plain_user):
    forged = jwt.encode({"sub": str(plain_user.id), "ver": 0}, "other-key", algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        auth_service.verify_token(forged)


def test_cannot_deactivate_self(user_service, admin_user):
    with pytest.raises(ValidationError, match="your own account"):
        user_service.deactivate_user(admin_user.id, admin_user)


def test_reactivate_keeps_old_tokens_revoked(auth_service, user_service, admin_user, plain_user):
    token = auth_service.issue_token(plain_user)
    user_service.deactivate_user(plain_user.id, admin_user)
    user_service.reactivate_user(plain_user.id)

    with pytest.raises(AuthenticationError):
        auth_service.verify_token(token)


def test_update_user_allow_list(user_service, plain_user):
    updated = user_service.update_user(
        plain_user.id, {"role": "manager", "permissions": ["approve_expenses"]}
    )
    assert updated.role == UserRole.MANAGER
    assert updated.has_permission("approve_expenses")
    assert not updated.has_permission("edit_budgets")

    with pytest.raises(ValidationError, match="email"):
        user_service.update_user(plain_user.id, {"email": "x@example.com"})
    with pytest.raises(ValidationError, match="Unknown permission"):
        user_service.update_user(plain_user.id, {"permissions": ["launch_rockets"]})


def test_admin_has_every_permission(admin_user):
    assert admin_user.permissions == frozenset()
    assert admin_user.has_permission("approve_expenses")


def test_list_users_search(user_service, admin_user, plain_user, manager_user):
    assert user_service.list_users(search="uma").total == 1
    assert user_service.list_users(role="manager").items[0].id == manager_user.id
