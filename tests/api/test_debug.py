"""Tests for the development-only /debug endpoints."""

import pytest

from dubium_core.config import settings


@pytest.fixture
def debug_enabled(monkeypatch):
    monkeypatch.setattr(settings, "enable_debug_endpoints", True)


class TestDisabled:
    """Without the flag every debug route looks absent."""

    @pytest.mark.parametrize("method, path", [
        ("get", "/debug/users"),
        ("get", "/debug/stats"),
        ("delete", "/debug/users"),
    ])
    def test_returns_404(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 404

    def test_delete_does_nothing(self, client, auth_headers):
        client.delete("/debug/users")

        response = client.post(
            "/auth/login",
            json={"username": "alice_1", "password": "pass123"}
        )
        assert response.status_code == 200


@pytest.mark.usefixtures("debug_enabled")
class TestEnabled:
    """With the flag set the routes are served."""

    def test_list_users(self, client, auth_headers):
        user, _headers = auth_headers
        client.post("/auth/register", json={"username": "bob_2", "password": "pass123"})

        response = client.get("/debug/users")
        assert response.status_code == 200

        data = response.get_json()["data"]
        assert data["total"] == 2
        assert [u["username"] for u in data["users"]] == ["bob_2", "alice_1"]
        assert data["users"][1] == user
        assert b"password" not in response.data

    def test_stats(self, client, auth_headers):
        response = client.get("/debug/stats")
        assert response.status_code == 200
        assert response.get_json() == {
            "success": True,
            "data": {"total_users": 1, "database_connected": True},
        }

    def test_clear_users(self, client, auth_headers):
        response = client.delete("/debug/users")
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "message": "Deleted 1 users"}

        stats = client.get("/debug/stats").get_json()["data"]
        assert stats["total_users"] == 0

    def test_token_invalid_after_clear(self, client, auth_headers):
        _user, headers = auth_headers
        client.delete("/debug/users")

        response = client.get("/auth/verify", headers=headers)
        assert response.status_code == 401
