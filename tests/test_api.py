"""Tests for the Flask REST API."""

import pytest


@pytest.fixture
def manager_headers(headers_for, manager_user):
    return headers_for(manager_user)


@pytest.fixture
def user_headers(headers_for, plain_user):
    return headers_for(plain_user)


def _create_budget(client, headers, **overrides):
    body = {"name": "Campaigns", "category": "Marketing", "allocated": 1000}
    body.update(overrides)
    response = client.post("/api/budgets", json=body, headers=headers)
    assert response.status_code == 201
    return response.get_json()["data"]


def _create_expense(client, headers, budget_id=None, amount=400):
    body = {
        "description": "Trade show",
        "amount": amount,
        "category": "Marketing",
        "vendor": "ExpoCo",
        "department": "Sales",
        "date": "2024-04-02",
        "budgetId": budget_id,
    }
    response = client.post("/api/expenses", json=body, headers=headers)
    assert response.status_code == 201
    return response.get_json()["data"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "data": {"status": "ok"}}


class TestAuth:
    def test_register_and_profile(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "name": "New Person",
                "email": "new@example.com",
                "password": "hunter22",
                "department": "Ops",
                "role": "admin",
            },
        )
        body = response.get_json()

        assert response.status_code == 201
        assert body["message"] == "User registered successfully"
        # Self-registration never grants elevated roles
        assert body["data"]["user"]["role"] == "user"
        assert "passwordHash" not in body["data"]["user"]
        assert "tokenVersion" not in body["data"]["user"]

        token = body["data"]["token"]
        profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.get_json()["data"]["email"] == "new@example.com"

    def test_login(self, client, admin_user):
        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.get_json()["data"]["user"]["lastLogin"] is not None

    def test_bad_login(self, client, admin_user):
        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.get_json() == {"success": False, "message": "Invalid email or password"}

    def test_missing_token(self, client):
        response = client.get("/api/budgets")

        assert response.status_code == 401
        assert response.get_json()["message"] == "Access denied. No token provided."

    def test_password_change_revokes_old_token(self, client, user_headers):
        response = client.patch(
            "/api/auth/change-password",
            json={"currentPassword": "secret123", "newPassword": "brandnew1"},
            headers=user_headers,
        )
        assert response.status_code == 200
        fresh = response.get_json()["data"]["token"]

        assert client.get("/api/auth/profile", headers=user_headers).status_code == 401
        assert (
            client.get("/api/auth/profile", headers={"Authorization": f"Bearer {fresh}"}).status_code
            == 200
        )


class TestBudgets:
    def test_create_returns_camel_case(self, client, manager_headers):
        budget = _create_budget(client, manager_headers)

        assert budget["allocated"] == 1000
        assert budget["spent"] == 0
        assert budget["remaining"] == 1000
        assert budget["status"] == "on-track"
        assert "createdAt" in budget

    def test_create_requires_permission(self, client, user_headers):
        response = client.post(
            "/api/budgets",
            json={"name": "X", "category": "Ops", "allocated": 10},
            headers=user_headers,
        )

        assert response.status_code == 403

    def test_validation_errors_name_fields(self, client, admin_headers):
        response = client.post(
            "/api/budgets", json={"name": "", "category": "Ops", "allocated": -5}, headers=admin_headers
        )
        body = response.get_json()

        assert response.status_code == 400
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"name", "allocated"}

    def test_derived_fields_cannot_be_patched(self, client, admin_headers):
        budget = _create_budget(client, admin_headers)

        response = client.patch(
            f"/api/budgets/{budget['id']}", json={"spent": 5}, headers=admin_headers
        )

        assert response.status_code == 400
        assert [e["field"] for e in response.get_json()["errors"]] == ["spent"]

    def test_pagination(self, client, admin_headers):
        for i in range(12):
            _create_budget(client, admin_headers, name=f"B{i}")

        body = client.get("/api/budgets?page=2&limit=5", headers=admin_headers).get_json()

        assert body["pagination"] == {"page": 2, "pages": 3, "total": 12}
        assert len(body["data"]) == 5

    def test_bad_paging_values_fall_back(self, client, admin_headers):
        _create_budget(client, admin_headers)

        body = client.get("/api/budgets?page=zero&limit=-3", headers=admin_headers).get_json()

        assert body["pagination"]["page"] == 1
        assert len(body["data"]) == 1

    def test_delete_requires_role(self, client, admin_headers, user_headers):
        budget = _create_budget(client, admin_headers)

        assert client.delete(f"/api/budgets/{budget['id']}", headers=user_headers).status_code == 403
        response = client.delete(f"/api/budgets/{budget['id']}", headers=admin_headers)
        assert response.get_json() == {"success": True, "message": "Budget deleted successfully"}
        assert client.get(f"/api/budgets/{budget['id']}", headers=admin_headers).status_code == 404


class TestExpenses:
    def test_approval_updates_budget(self, client, manager_headers, user_headers):
        budget = _create_budget(client, manager_headers)
        expense = _create_expense(client, user_headers, budget_id=budget["id"], amount=800)

        assert expense["status"] == "pending"
        assert client.patch(
            f"/api/expenses/{expense['id']}/approve", headers=user_headers
        ).status_code == 403

        response = client.patch(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)
        approved = response.get_json()["data"]
        assert approved["status"] == "approved"
        assert approved["approvedBy"] == "Max Manager"

        refreshed = client.get(f"/api/budgets/{budget['id']}", headers=manager_headers).get_json()
        assert refreshed["data"]["spent"] == 800
        assert refreshed["data"]["status"] == "warning"

    def test_unknown_budget_reference(self, client, user_headers):
        response = client.post(
            "/api/expenses",
            json={
                "description": "Lost",
                "amount": 5,
                "category": "Travel",
                "vendor": "Air",
                "department": "Sales",
                "budgetId": 404,
            },
            headers=user_headers,
        )

        assert response.status_code == 400

    def test_filter_by_budget(self, client, admin_headers):
        budget = _create_budget(client, admin_headers)
        _create_expense(client, admin_headers, budget_id=budget["id"])
        _create_expense(client, admin_headers)

        body = client.get(f"/api/expenses?budgetId={budget['id']}", headers=admin_headers).get_json()

        assert body["pagination"]["total"] == 1

    def test_missing_expense(self, client, admin_headers):
        response = client.get("/api/expenses/99", headers=admin_headers)

        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestUsers:
    def test_admin_manages_users(self, client, admin_headers, plain_user):
        response = client.patch(
            f"/api/users/{plain_user.id}/deactivate", headers=admin_headers
        )
        assert response.get_json()["data"]["isActive"] is False

        users = client.get("/api/users?isActive=false", headers=admin_headers).get_json()
        assert [u["email"] for u in users["data"]] == ["uma@example.com"]

    def test_deactivated_user_token_rejected(self, client, admin_headers, user_headers, plain_user):
        client.patch(f"/api/users/{plain_user.id}/deactivate", headers=admin_headers)

        assert client.get("/api/auth/profile", headers=user_headers).status_code == 401

    def test_users_hidden_from_plain_users(self, client, user_headers):
        assert client.get("/api/users", headers=user_headers).status_code == 403


class TestDashboard:
    def test_metrics(self, client, admin_headers):
        budget = _create_budget(client, admin_headers)
        expense = _create_expense(client, admin_headers, budget_id=budget["id"], amount=250)
        client.patch(f"/api/expenses/{expense['id']}/approve", headers=admin_headers)

        metrics = client.get("/api/dashboard/metrics", headers=admin_headers).get_json()["data"]

        assert metrics["totalBudget"] == 1000
        assert metrics["totalExpenses"] == 250
        assert metrics["budgetUtilization"] == 25

    def test_alerts_and_pending(self, client, admin_headers):
        budget = _create_budget(client, admin_headers)
        _create_expense(client, admin_headers, budget_id=budget["id"])

        alerts = client.get("/api/dashboard/alerts", headers=admin_headers).get_json()["data"]
        pending = client.get("/api/dashboard/pending-expenses", headers=admin_headers).get_json()

        assert [a["type"] for a in alerts] == ["info", "success"]
        assert len(pending["data"]) == 1
