import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

CATEGORIES_URL = "/api/v1/categories"


async def _create_category(client: AsyncClient, name: str, **extra) -> dict:
    response = await client.post(CATEGORIES_URL, json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_category(client: AsyncClient):
    """Test creating a category derives its slug and starts without posts."""
    data = await _create_category(client, "Release Notes", color="#112233")
    assert data["slug"] == "release-notes"
    assert data["color"] == "#112233"
    assert data["post_count"] == 0
    assert data["children"] == []


async def test_create_duplicate_slug(client: AsyncClient):
    await _create_category(client, "News")
    response = await client.post(CATEGORIES_URL, json={"name": "Other", "slug": "news"})
    assert response.status_code == 409


async def test_create_with_unknown_parent(client: AsyncClient):
    response = await client.post(CATEGORIES_URL, json={"name": "Child", "parent_id": "missing"})
    assert response.status_code == 404


async def test_list_orders_by_position_then_name(client: AsyncClient):
    await _create_category(client, "Zeta", order=0)
    await _create_category(client, "Alpha", order=1)
    await _create_category(client, "Beta", order=0)

    response = await client.get(CATEGORIES_URL)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Beta", "Zeta", "Alpha"]


async def test_get_category_with_parent_and_children(client: AsyncClient, author):
    parent = await _create_category(client, "Parent")
    child = await _create_category(client, "Child", parent_id=parent["id"])
    response = await client.post(
        "/api/v1/blog/manual",
        json={"title": "Filed", "author_id": author.id, "category_ids": [child["id"]], "auto_tag": False},
    )
    assert response.status_code == 201

    data = (await client.get(f"{CATEGORIES_URL}/{parent['id']}")).json()
    assert data["children"] == [{"id": child["id"], "name": "Child", "slug": "child", "post_count": 1}]

    data = (await client.get(f"{CATEGORIES_URL}/{child['id']}")).json()
    assert data["parent"]["id"] == parent["id"]
    assert data["post_count"] == 1


async def test_get_missing_category(client: AsyncClient):
    response = await client.get(f"{CATEGORIES_URL}/missing")
    assert response.status_code == 404
    assert response.json() == {"detail": "Category not found"}


async def test_update_rejects_cycles(client: AsyncClient):
    parent = await _create_category(client, "Parent")
    child = await _create_category(client, "Child", parent_id=parent["id"])

    response = await client.put(f"{CATEGORIES_URL}/{parent['id']}", json={"parent_id": child["id"]})
    assert response.status_code == 400
    assert response.json()["detail"] == "Parent assignment would create a cycle"

    response = await client.put(f"{CATEGORIES_URL}/{parent['id']}", json={"parent_id": parent["id"]})
    assert response.status_code == 400


async def test_update_category(client: AsyncClient):
    category = await _create_category(client, "Old")
    response = await client.put(f"{CATEGORIES_URL}/{category['id']}", json={"name": "New", "featured": True})
    assert response.status_code == 200
    assert response.json()["name"] == "New"
    assert response.json()["featured"] is True


async def test_delete_category_detaches_children(client: AsyncClient):
    parent = await _create_category(client, "Parent")
    child = await _create_category(client, "Child", parent_id=parent["id"])

    response = await client.delete(f"{CATEGORIES_URL}/{parent['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Category deleted successfully"}

    data = (await client.get(f"{CATEGORIES_URL}/{child['id']}")).json()
    assert data["parent_id"] is None
