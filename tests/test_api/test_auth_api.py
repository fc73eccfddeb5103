"""
Tests for /api/v1/auth endpoints
"""
from fastapi.testclient import TestClient

from app.infrastructure.db.models import User


SIGNUP = {"name": "Alice", "email": "Alice@Example.com", "password": "Secret123"}


def _login(client, email, password="Secret123"):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


class TestSignup:
    def test_creates_inactive_user(self, client, db_session):
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "alice@example.com"
        assert body["data"]["isActive"] is False
        assert db_session.query(User).count() == 1

    def test_duplicate_email(self, client):
        client.post("/api/v1/auth/signup", json=SIGNUP)
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

        assert response.status_code == 400
        assert response.json()["message"] == "Email already in use"

    def test_weak_password(self, client):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "short"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation Error"
        assert body["errors"][0]["field"] == "password"

    def test_bad_email(self, client):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "nope"})
        assert response.status_code == 400


class TestLogin:
    def test_sets_cookies(self, client, active_user):
        response = _login(client, "active@test.com")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "active@test.com"
        assert "accessToken" in response.cookies
        assert "refreshToken" in response.cookies
        set_cookie = ",".join(response.headers.get_list("set-cookie"))
        assert "HttpOnly" in set_cookie
        assert "refreshToken" not in response.text

    def test_inactive_user_logs_in(self, client, inactive_user):
        response = _login(client, "inactive@test.com")

        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False

    def test_wrong_password(self, client, active_user):
        response = _login(client, "active@test.com", "Wrong1234")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Invalid credentials",
            "errorType": "auth_error",
        }

    def test_unknown_email(self, client):
        response = _login(client, "ghost@test.com")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestRefresh:
    def test_rotation_rejects_old_token(self, client, active_user):
        _login(client, "active@test.com")
        old_refresh = client.cookies.get("refreshToken")

        response = client.post("/api/v1/auth/refresh")
        assert response.status_code == 200
        new_refresh = client.cookies.get("refreshToken")
        assert new_refresh != old_refresh

        from app.main import app
        with TestClient(app) as replay:
            replay.cookies.set("refreshToken", old_refresh)
            response = replay.post("/api/v1/auth/refresh")

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    def test_without_cookie(self, client):
        response = client.post("/api/v1/auth/refresh")
        assert response.status_code == 401
        assert response.json()["message"] == "Refresh token required"

    def test_garbage_cookie(self, client):
        client.cookies.set("refreshToken", "garbage")
        response = client.post("/api/v1/auth/refresh")
        assert response.status_code == 401


class TestLogout:
    def test_clears_cookies_and_token(self, client, db_session, active_user):
        _login(client, "active@test.com")

        response = client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        set_cookie = ",".join(response.headers.get_list("set-cookie"))
        assert "accessToken=" in set_cookie
        assert "refreshToken=" in set_cookie
        db_session.refresh(active_user)
        assert active_user.refresh_token is None

    def test_without_session(self, client):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        assert response.json()["success"] is True


class TestMe:
    def test_inactive_user_sees_profile(self, client, inactive_user):
        _login(client, "inactive@test.com")

        response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isActive"] is False
        assert "passwordHash" not in data
        assert "refreshToken" not in data

    def test_bearer_header(self, client, active_user):
        token = _login(client, "active@test.com").cookies["accessToken"]
        client.cookies.clear()

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "active@test.com"

    def test_anonymous(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"


class TestProfileAndPassword:
    def test_update_profile(self, client, active_user):
        _login(client, "active@test.com")
        response = client.put("/api/v1/auth/profile", json={"name": "Renamed"})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"

    def test_change_password(self, client, active_user):
        _login(client, "active@test.com")
        response = client.put(
            "/api/v1/auth/password",
            json={"currentPassword": "Secret123", "newPassword": "Another456"},
        )
        assert response.status_code == 200
        assert _login(client, "active@test.com", "Another456").status_code == 200

    def test_inactive_user_cannot_edit_profile(self, client, inactive_user):
        _login(client, "inactive@test.com")
        response = client.put("/api/v1/auth/profile", json={"name": "Renamed"})
        assert response.status_code == 401
        assert response.json()["message"] == "Account inactive"
