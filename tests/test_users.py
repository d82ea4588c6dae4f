"""
Tests for registration, token login and the /api/user endpoint.
"""

import pytest

from app import auth_utils


@pytest.fixture
def registered(client):
    response = client.post(
        "/api/register",
        json={"username": "listener", "email": "listener@example.com", "password": "password123"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _login(client, username="listener", password="password123"):
    return client.post("/api/token", data={"username": username, "password": password})


class TestRegister:

    def test_register_hides_password(self, registered) -> None:
        assert registered["username"] == "listener"
        assert registered["email"] == "listener@example.com"
        assert "password" not in registered
        assert "hashed_password" not in registered

    def test_duplicate_username_conflicts(self, client, registered) -> None:
        response = client.post(
            "/api/register",
            json={"username": "listener", "email": "other@example.com", "password": "password123"},
        )
        assert response.status_code == 409

    def test_duplicate_email_conflicts(self, client, registered) -> None:
        response = client.post(
            "/api/register",
            json={"username": "other", "email": "listener@example.com", "password": "password123"},
        )
        assert response.status_code == 409

    def test_invalid_payloads(self, client) -> None:
        bad_email = {"username": "a", "email": "not-an-email", "password": "password123"}
        short_password = {"username": "a", "email": "a@example.com", "password": "short"}
        assert client.post("/api/register", json=bad_email).status_code == 422
        assert client.post("/api/register", json=short_password).status_code == 422


class TestCurrentUser:

    def test_token_grants_access(self, client, registered) -> None:
        response = _login(client)
        assert response.status_code == 200
        token = response.json()
        assert token["token_type"] == "bearer"

        me = client.get("/api/user", headers={"Authorization": f"Bearer {token['access_token']}"})
        assert me.status_code == 200
        assert me.json()["username"] == "listener"

    def test_wrong_password_is_rejected(self, client, registered) -> None:
        assert _login(client, password="wrong-password").status_code == 401

    def test_missing_token_is_rejected(self, client) -> None:
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token_is_rejected(self, client) -> None:
        response = client.get("/api/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_for_unknown_user_is_rejected(self, client) -> None:
        token = auth_utils.create_access_token({"sub": "ghost"})
        response = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_password_hash_roundtrip() -> None:
    hashed = auth_utils.get_password_hash("password123")
    assert hashed != "password123"
    assert auth_utils.verify_password("password123", hashed)
    assert not auth_utils.verify_password("password124", hashed)
