"""
Blog List Backend — /api/users and /api/login Endpoint Tests
==============================================================

What:  Registration, user listing, and login through the HTTP surface.
How:   Starts from one stored user ("root") in a fresh SQLite database.
"""

import pytest


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_fresh_username(self, test_client, stored_user):
        await stored_user()
        new_user = {"username": "mluukkai", "name": "Matti Luukkainen", "password": "salainen"}

        response = await test_client.post("/api/users", json=new_user)

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "mluukkai"
        assert body["blogs"] == []
        assert "password" not in body
        assert "password_hash" not in body

        usernames = [u["username"] for u in (await test_client.get("/api/users")).json()]
        assert usernames == ["root", "mluukkai"]

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, test_client, stored_user):
        await stored_user()

        response = await test_client.post(
            "/api/users", json={"username": "root", "name": "Superuser", "password": "salainen"}
        )

        assert response.status_code == 400
        assert "username must be unique" in response.json()["message"]
        assert len((await test_client.get("/api/users")).json()) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "ab", "name": "Short", "password": "salainen"},
            {"username": "mluukkai", "name": "Matti", "password": "pw"},
            {"username": "u" * 65, "name": "Too Long", "password": "salainen"},
            {"username": "mluukkai", "name": "n" * 256, "password": "salainen"},
        ],
    )
    async def test_out_of_range_credentials_rejected(self, test_client, payload):
        response = await test_client.post("/api/users", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert (await test_client.get("/api/users")).json() == []

    @pytest.mark.asyncio
    async def test_missing_password_rejected(self, test_client):
        response = await test_client.post("/api/users", json={"username": "mluukkai"})

        assert response.status_code == 400


class TestListUsers:

    @pytest.mark.asyncio
    async def test_users_list_populates_blogs(self, test_client, register_and_login):
        token = await register_and_login()
        await test_client.post(
            "/api/blogs",
            json={"title": "Canonical string reduction", "author": "Edsger W. Dijkstra"},
            headers={"Authorization": f"bearer {token}"},
        )

        users = (await test_client.get("/api/users")).json()

        assert len(users) == 1
        blog = users[0]["blogs"][0]
        assert blog["title"] == "Canonical string reduction"
        assert set(blog) == {"id", "title", "author", "url", "likes"}
        assert "password_hash" not in users[0]


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token(self, test_client, stored_user):
        await stored_user()

        response = await test_client.post(
            "/api/login", json={"username": "root", "password": "sekret"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "root"
        assert body["name"] == "Root"
        assert body["token"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, stored_user):
        await stored_user()

        response = await test_client.post(
            "/api/login", json={"username": "root", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "invalid username or password"

    @pytest.mark.asyncio
    async def test_unknown_username(self, test_client):
        response = await test_client.post(
            "/api/login", json={"username": "nobody", "password": "sekret"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_error"
