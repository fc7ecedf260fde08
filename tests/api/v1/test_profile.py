"""
Tests for the signed-in user's profile endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestGetProfile:
    """Tests for GET /api/v1/user/profile."""

    async def test_get_profile(self, client: AsyncClient, owner_headers: dict):
        response = await client.get("/api/v1/user/profile", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {
            "id": "user-0001",
            "username": "alice",
            "display_id": "100001",
            "avatar_url": None,
        }

    async def test_profile_does_not_expose_email(self, client: AsyncClient, owner_headers: dict):
        response = await client.get("/api/v1/user/profile", headers=owner_headers)
        assert "email" not in response.json()["user"]

    async def test_get_profile_unregistered(self, client: AsyncClient, make_headers):
        response = await client.get("/api/v1/user/profile", headers=make_headers("nobody"))
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"


@pytest.mark.api
class TestUpdateProfile:
    """Tests for PUT /api/v1/user/profile."""

    async def test_update_profile(self, client: AsyncClient, owner_headers: dict):
        response = await client.put(
            "/api/v1/user/profile",
            json={"username": "Alice", "avatarUrl": "http://localhost:3000/images/a.png"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["username"] == "Alice"
        assert user["avatar_url"] == "http://localhost:3000/images/a.png"
        assert user["display_id"] == "100001"

    async def test_update_profile_rejects_long_username(
        self, client: AsyncClient, owner_headers: dict
    ):
        response = await client.put(
            "/api/v1/user/profile", json={"username": "a" * 11}, headers=owner_headers
        )
        assert response.status_code == 400

    async def test_display_id_cannot_be_changed(self, client: AsyncClient, owner_headers: dict):
        response = await client.put(
            "/api/v1/user/profile",
            json={"username": "alice", "displayId": "999999"},
            headers=owner_headers,
        )
        assert response.status_code == 400
