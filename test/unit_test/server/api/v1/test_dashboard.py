import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_dashboard_stats_empty(client: AsyncClient):
    response = await client.get("/api/v1/dashboard/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total_docs"] == 0
    assert data["users"] == 0


async def test_dashboard_stats_counts_content(client: AsyncClient, author):
    for title, status in (("One", "PUBLISHED"), ("Two", "DRAFT"), ("Three", "ARCHIVED")):
        response = await client.post(
            "/api/v1/blog/manual",
            json={"title": title, "author_id": author.id, "status": status, "auto_tag": False},
        )
        assert response.status_code == 201
    await client.post("/api/v1/categories", json={"name": "News"})
    await client.post("/api/v1/blog/admin/tags", json={"name": "Python"})

    data = (await client.get("/api/v1/dashboard/stats")).json()
    assert (data["total_docs"], data["published"], data["drafts"], data["archived"]) == (3, 1, 1, 1)
    assert data["scheduled"] == 0
    assert (data["users"], data["categories"], data["tags"]) == (1, 1, 1)
    assert data["pending_comments"] == 0
