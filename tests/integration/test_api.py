"""
Integration tests for API endpoints.
"""

import pytest

from kitcheckout.api.schemas import EquipmentResponse
from kitcheckout.storage.records import Log

pytestmark = pytest.mark.asyncio

PHOTO = "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQ"


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client):
        """Test basic health check endpoint."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "KitCheckout"


class TestAuthEndpoints:
    """Tests for signup, login and sessions."""

    async def test_signup_and_me(self, client, student_headers):
        """Test the issued token resolves to the user."""
        response = await client.get("/api/v1/auth/me", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "jordan@school.edu"
        assert response.json()["role"] == "student"
        assert "password_hash" not in response.json()

    async def test_duplicate_signup(self, client, student_headers):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "JORDAN@school.edu", "password": "goalie123"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_IN_USE"

    async def test_weak_password(self, client):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "sam@school.edu", "password": "password"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "WEAK_PASSWORD"

    async def test_admin_signup_needs_code(self, client):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "coach@school.edu", "password": "whistle42", "role": "admin", "admin_code": "guess"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ADMIN_CODE"

    async def test_bad_login(self, client, student_headers):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "jordan@school.edu", "password": "nope12345"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password."

    async def test_requires_token(self, client):
        response = await client.get("/api/v1/equipment")

        assert response.status_code == 401
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    async def test_logout_revokes_token(self, client, student_headers):
        response = await client.post("/api/v1/auth/logout", headers=student_headers)
        assert response.status_code == 204

        response = await client.get("/api/v1/auth/me", headers=student_headers)
        assert response.status_code == 401

    async def test_malformed_email_signup_rejected(self, client, repository):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": "a..b@x.com", "password": "goalie123"},
        )

        assert response.status_code == 422
        assert repository.get_users() == []

    async def test_forged_token_rejected(self, client):
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    async def test_token_is_signed_jwt(self, client, student_headers):
        """Test the bearer token is a three-part signed JWT."""
        token = student_headers["Authorization"].split(" ", 1)[1]

        assert token.count(".") == 2


class TestEquipmentEndpoints:
    """Tests for equipment CRUD."""

    async def test_student_cannot_create(self, client, student_headers):
        response = await client.post(
            "/api/v1/equipment",
            json={"name": "Ball", "type": "Soccer", "total": 5, "avail": 5},
            headers=student_headers,
        )

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_create_get_update(self, client, admin_headers):
        response = await client.post(
            "/api/v1/equipment",
            json={"name": "Ball", "type": "Soccer", "total": 5, "avail": 5},
            headers=admin_headers,
        )
        assert response.status_code == 201
        item = response.json()
        assert item["photo"].startswith("data:image/svg+xml")

        response = await client.get(f"/api/v1/equipment/{item['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Ball"

        response = await client.put(
            f"/api/v1/equipment/{item['id']}",
            json={"name": "Ball", "type": "Soccer", "total": 3, "avail": 2},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["total"] == 3

    async def test_avail_above_total_rejected(self, client, admin_headers):
        response = await client.post(
            "/api/v1/equipment",
            json={"name": "Ball", "type": "Soccer", "total": 2, "avail": 3},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_AVAILABILITY"

    async def test_get_missing(self, client, admin_headers):
        response = await client.get("/api/v1/equipment/404", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    async def test_delete_requires_confirm(self, client, admin_headers, sample_inventory):
        response = await client.delete("/api/v1/equipment/1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["deleted"] is False

        response = await client.get("/api/v1/equipment", headers=admin_headers)
        assert len(response.json()) == 3

    async def test_delete_and_undo(self, client, admin_headers, sample_inventory):
        response = await client.delete("/api/v1/equipment/1?confirm=true", headers=admin_headers)
        body = response.json()
        assert body["deleted"] is True
        assert body["undo_action_id"]

        response = await client.post(f"/api/v1/undo/{body['undo_action_id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["state"] == "undone"

        response = await client.get("/api/v1/equipment/1", headers=admin_headers)
        assert response.status_code == 200

        response = await client.post(f"/api/v1/undo/{body['undo_action_id']}", headers=admin_headers)
        assert response.status_code == 404

    async def test_bulk_delete(self, client, admin_headers, sample_inventory):
        response = await client.post(
            "/api/v1/equipment/bulk-delete",
            json={"ids": [1, 2], "confirm": True},
            headers=admin_headers,
        )

        assert response.json()["message"] == "2 items deleted."
        response = await client.get("/api/v1/equipment", headers=admin_headers)
        assert [e["id"] for e in response.json()] == [3]


class TestLoanEndpoints:
    """Tests for borrow and return."""

    async def test_borrow_return_cycle(self, client, student_headers, ball):
        response = await client.post(
            "/api/v1/loans/borrow",
            json={"equipment_id": 1, "quantity": 2, "photo": PHOTO},
            headers=student_headers,
        )
        assert response.status_code == 201
        log = response.json()
        assert log["email"] == "jordan@school.edu"
        assert log["return_at"] is None

        response = await client.get("/api/v1/loans/status/1", headers=student_headers)
        assert response.json()["borrowing"] is True

        response = await client.get("/api/v1/loans/active", headers=student_headers)
        assert [loan["id"] for loan in response.json()] == [log["id"]]

        response = await client.get("/api/v1/equipment/1", headers=student_headers)
        assert response.json()["avail"] == 3

        response = await client.post(
            "/api/v1/loans/return",
            json={"equipment_id": 1, "photo": PHOTO},
            headers=student_headers,
        )
        assert response.status_code == 200
        assert response.json()["return_photo"] == PHOTO

        response = await client.get("/api/v1/equipment/1", headers=student_headers)
        assert response.json()["avail"] == 5

    async def test_second_borrow_conflict(self, client, student_headers, ball):
        payload = {"equipment_id": 1, "quantity": 1, "photo": PHOTO}
        await client.post("/api/v1/loans/borrow", json=payload, headers=student_headers)

        response = await client.post("/api/v1/loans/borrow", json=payload, headers=student_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_BORROWING"

    async def test_borrow_without_photo(self, client, student_headers, ball):
        response = await client.post(
            "/api/v1/loans/borrow",
            json={"equipment_id": 1, "quantity": 1},
            headers=student_headers,
        )

        assert response.status_code == 422

    async def test_return_without_loan(self, client, student_headers, ball):
        response = await client.post(
            "/api/v1/loans/return",
            json={"equipment_id": 1, "photo": PHOTO},
            headers=student_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "NO_ACTIVE_LOAN"


class TestSettingsEndpoints:
    """Tests for branding and categories."""

    async def test_settings_public(self, client):
        response = await client.get("/api/v1/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["bg_color"] == "#7C3AED"
        assert data["palette"]["--bg-primary-dark"] == "#4907ba"
        assert len(data["categories"]) == 6

    async def test_category_lifecycle(self, client, admin_headers, ball):
        response = await client.post(
            "/api/v1/settings/categories",
            json={"name": "Tennis"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        category_id = response.json()["id"]

        response = await client.post(
            "/api/v1/settings/categories",
            json={"name": "tennis"},
            headers=admin_headers,
        )
        assert response.status_code == 409

        response = await client.get("/api/v1/settings/categories/2/in-use")
        assert response.json()["in_use"] is True

        response = await client.delete("/api/v1/settings/categories/2?confirm=true", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "CATEGORY_IN_USE"

        response = await client.delete(
            f"/api/v1/settings/categories/{category_id}?confirm=true",
            headers=admin_headers,
        )
        assert response.json()["deleted"] is True

    async def test_replace_settings_validates_colors(self, client, admin_headers):
        current = (await client.get("/api/v1/settings")).json()
        current.pop("palette")
        current["bg_color"] = "purple"

        response = await client.put("/api/v1/settings", json=current, headers=admin_headers)

        assert response.status_code == 422

    async def test_reset_colors(self, client, admin_headers):
        current = (await client.get("/api/v1/settings")).json()
        current.pop("palette")
        current["bg_color"] = "#000000"
        await client.put("/api/v1/settings", json=current, headers=admin_headers)

        response = await client.post("/api/v1/settings/colors/reset", headers=admin_headers)

        assert response.json()["bg_color"] == "#7C3AED"


class TestReportEndpoints:
    """Tests for stats, history and audit."""

    async def test_stats_and_history(self, client, student_headers, admin_headers, ball):
        await client.post(
            "/api/v1/loans/borrow",
            json={"equipment_id": 1, "quantity": 2, "photo": PHOTO},
            headers=student_headers,
        )

        response = await client.get("/api/v1/reports/stats", headers=student_headers)
        assert response.json() == {"total": 5, "avail": 3, "borrowed": 2}

        response = await client.get("/api/v1/reports/history", headers=student_headers)
        assert len(response.json()) == 1

        response = await client.get("/api/v1/reports/history/all", headers=student_headers)
        assert response.status_code == 403

        response = await client.get("/api/v1/reports/recent?limit=5", headers=admin_headers)
        assert [log["quantity"] for log in response.json()] == [2]

    async def test_audit(self, client, admin_headers, repository, ball):
        response = await client.get("/api/v1/reports/audit", headers=admin_headers)
        assert response.json()["ok"] is True

        repository.save_equipment([])
        repository.save_logs([Log(1, "a@x.com", 1, "Ball", 1, "2024-09-02T08:30:00+00:00")])

        response = await client.get("/api/v1/reports/audit", headers=admin_headers)
        data = response.json()
        assert data["ok"] is False
        assert data["orphaned_loans"][0]["equipment_id"] == 1


class TestErrorResponses:
    """Tests for the structured error body."""

    async def test_model_validation_failure_is_structured(self, app, client):
        """Test a pydantic validation failure inside a route maps to 400."""

        @app.get("/broken-model")
        async def broken_model():
            return EquipmentResponse.model_validate({"name": "Ball"})

        response = await client.get("/broken-model")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["error"] == "Validation Error"
        assert "validation error" in body["detail"]

    async def test_timestamp_is_utc_aware(self, client):
        response = await client.get("/api/v1/equipment")

        assert response.json()["timestamp"].endswith("+00:00")
