import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create_user(client: AsyncClient, username: str = "writer", email: str = "writer@example.com", **extra):
    response = await client.post("/api/v1/users", json={"username": username, "email": email, **extra})
    assert response.status_code == 201
    return response.json()


async def test_create_user(client: AsyncClient):
    """Test creating a user normalizes the email and defaults the role."""
    data = await _create_user(client, email="  Writer@Example.COM ", display_name="Wren")
    assert data["username"] == "writer"
    assert data["email"] == "writer@example.com"
    assert data["display_name"] == "Wren"
    assert data["role"] == "SUBSCRIBER"


async def test_create_user_rejects_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/users", json={"username": "bad", "email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email address"


async def test_create_user_duplicate_username(client: AsyncClient):
    await _create_user(client)
    response = await client.post("/api/v1/users", json={"username": "writer", "email": "other@example.com"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


async def test_list_and_get_user(client: AsyncClient):
    created = await _create_user(client, role="EDITOR")

    response = await client.get("/api/v1/users", params={"skip": 0, "take": 10})
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [created["id"]]

    response = await client.get(f"/api/v1/users/{created['id']}")
    assert response.status_code == 200
    assert response.json()["role"] == "EDITOR"


async def test_get_user_not_found(client: AsyncClient):
    response = await client.get("/api/v1/users/missing")
    assert response.status_code == 404


async def test_update_user(client: AsyncClient):
    created = await _create_user(client)
    response = await client.patch(f"/api/v1/users/{created['id']}", json={"role": "AUTHOR", "display_name": "W"})
    assert response.status_code == 200
    assert response.json()["role"] == "AUTHOR"
    assert response.json()["display_name"] == "W"


async def test_delete_user(client: AsyncClient):
    created = await _create_user(client)
    response = await client.delete(f"/api/v1/users/{created['id']}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/users/{created['id']}")
    assert response.status_code == 404


async def test_delete_user_with_posts_conflicts(client: AsyncClient, author):
    response = await client.post(
        "/api/v1/blog/manual", json={"title": "Owned", "content": "<p>body</p>", "author_id": author.id}
    )
    assert response.status_code == 201

    response = await client.delete(f"/api/v1/users/{author.id}")
    assert response.status_code == 409
