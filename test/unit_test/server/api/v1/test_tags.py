import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

TAGS_URL = "/api/v1/blog/admin/tags"


async def _create_tag(client: AsyncClient, name: str, **extra) -> dict:
    response = await client.post(TAGS_URL, json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def _create_post(client: AsyncClient, author_id: str, title: str, tag_ids: list) -> dict:
    response = await client.post(
        "/api/v1/blog/manual",
        json={"title": title, "author_id": author_id, "status": "PUBLISHED", "tag_ids": tag_ids, "auto_tag": False},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestTagCrud:
    async def test_create_tag(self, client: AsyncClient):
        """Test creating a tag derives the slug and normalizes synonyms."""
        data = await _create_tag(client, "  Machine Learning ", synonyms=["ML", " ml ", "AI"])
        assert data["name"] == "Machine Learning"
        assert data["slug"] == "machine-learning"
        assert data["synonyms"] == ["ml", "ai"]
        assert data["locked"] is False

    async def test_create_duplicate_tag(self, client: AsyncClient):
        await _create_tag(client, "Python")
        response = await client.post(TAGS_URL, json={"name": "python"})
        assert response.status_code == 409

    async def test_create_blank_tag(self, client: AsyncClient):
        response = await client.post(TAGS_URL, json={"name": "   "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Tag name is required"

    async def test_admin_list_includes_post_counts(self, client: AsyncClient, author):
        tag = await _create_tag(client, "Counted")
        await _create_tag(client, "Unused")
        await _create_post(client, author.id, "One", [tag["id"]])

        response = await client.get(TAGS_URL, params={"skip": 0, "take": 10})
        assert response.status_code == 200
        counts = {item["name"]: item["post_count"] for item in response.json()}
        assert counts == {"Counted": 1, "Unused": 0}

    async def test_update_tag(self, client: AsyncClient):
        tag = await _create_tag(client, "Old")
        response = await client.put(f"{TAGS_URL}/{tag['id']}", json={"name": "New", "color": "#000000"})
        assert response.status_code == 200
        assert response.json()["name"] == "New"
        assert response.json()["color"] == "#000000"

    async def test_update_locked_tag_is_rejected(self, client: AsyncClient):
        tag = await _create_tag(client, "Frozen", locked=True)

        response = await client.put(f"{TAGS_URL}/{tag['id']}", json={"name": "Thawed"})
        assert response.status_code == 423
        assert response.json()["details"] == {"tag_id": tag["id"]}

        response = await client.put(f"{TAGS_URL}/{tag['id']}", json={"name": "Thawed", "force_unlock": True})
        assert response.status_code == 200

    async def test_self_parent_is_rejected(self, client: AsyncClient):
        tag = await _create_tag(client, "Loop")
        response = await client.put(f"{TAGS_URL}/{tag['id']}", json={"parent_id": tag["id"]})
        assert response.status_code == 400

    async def test_delete_tag(self, client: AsyncClient):
        tag = await _create_tag(client, "Gone")
        response = await client.delete(f"{TAGS_URL}/{tag['id']}")
        assert response.status_code == 204

        response = await client.delete(f"{TAGS_URL}/{tag['id']}")
        assert response.status_code == 404

    async def test_delete_locked_tag(self, client: AsyncClient):
        tag = await _create_tag(client, "Kept", locked=True)
        response = await client.delete(f"{TAGS_URL}/{tag['id']}")
        assert response.status_code == 423


class TestTagMaintenance:
    async def test_merge_tags(self, client: AsyncClient, author):
        target = await _create_tag(client, "JavaScript")
        source = await _create_tag(client, "JS")
        post = await _create_post(client, author.id, "Scripts", [source["id"]])

        response = await client.post(f"{TAGS_URL}/merge", json={"source_ids": [source["id"]], "target_id": target["id"]})
        assert response.status_code == 200
        data = response.json()
        assert data["merge_count"] == 1
        assert data["usage_count"] == 1

        response = await client.get(f"/api/v1/blog/admin/posts/{post['id']}")
        assert [tag["id"] for tag in response.json()["tags"]] == [target["id"]]

    async def test_merge_into_itself_is_rejected(self, client: AsyncClient):
        tag = await _create_tag(client, "Solo")
        response = await client.post(f"{TAGS_URL}/merge", json={"source_ids": [tag["id"]], "target_id": tag["id"]})
        assert response.status_code == 400

    async def test_merge_requires_sources(self, client: AsyncClient):
        tag = await _create_tag(client, "Target")
        response = await client.post(f"{TAGS_URL}/merge", json={"source_ids": [], "target_id": tag["id"]})
        assert response.status_code == 422

    async def test_bulk_parent_skips_locked(self, client: AsyncClient):
        parent = await _create_tag(client, "Parent")
        free = await _create_tag(client, "Free")
        locked = await _create_tag(client, "Locked", locked=True)

        response = await client.post(
            f"{TAGS_URL}/bulk/parent", json={"ids": [free["id"], locked["id"]], "parent_id": parent["id"]}
        )
        assert response.json() == {"updated": 1}

    async def test_bulk_style(self, client: AsyncClient):
        first = await _create_tag(client, "First")
        second = await _create_tag(client, "Second")

        response = await client.post(
            f"{TAGS_URL}/bulk/style", json={"ids": [first["id"], second["id"]], "color": "#ff0000", "featured": True}
        )
        assert response.json() == {"updated": 2}

        public = (await client.get("/api/v1/tags")).json()
        assert {tag["color"] for tag in public} == {"#ff0000"}
        assert all(tag["featured"] for tag in public)

    async def test_lock_and_unlock(self, client: AsyncClient):
        tag = await _create_tag(client, "Toggle")

        response = await client.post(f"{TAGS_URL}/lock", json={"ids": [tag["id"]], "locked": True})
        assert response.json() == {"updated": 1}
        response = await client.delete(f"{TAGS_URL}/{tag['id']}")
        assert response.status_code == 423

        await client.post(f"{TAGS_URL}/lock", json={"ids": [tag["id"]], "locked": False})
        response = await client.delete(f"{TAGS_URL}/{tag['id']}")
        assert response.status_code == 204

    async def test_convert_to_category(self, client: AsyncClient, author):
        tag = await _create_tag(client, "Tutorials")
        await _create_post(client, author.id, "Guide", [tag["id"]])

        response = await client.post(f"{TAGS_URL}/convert-to-category", json={"ids": [tag["id"], "unknown"]})
        assert response.status_code == 200
        results = response.json()
        assert len(results) == 1
        assert results[0]["tag_id"] == tag["id"]

        category = (await client.get(f"/api/v1/categories/{results[0]['category_id']}")).json()
        assert category["slug"] == "tutorials"
        assert category["post_count"] == 1

    async def test_find_duplicates(self, client: AsyncClient):
        await _create_tag(client, "javascript")
        await _create_tag(client, "java-script")
        await _create_tag(client, "rust")

        response = await client.get(f"{TAGS_URL}/duplicates", params={"threshold": 0.8})
        assert response.status_code == 200
        pairs = response.json()
        assert len(pairs) == 1
        assert {pairs[0]["a"]["name"], pairs[0]["b"]["name"]} == {"javascript", "java-script"}

    async def test_find_duplicates_threshold_out_of_range(self, client: AsyncClient):
        response = await client.get(f"{TAGS_URL}/duplicates", params={"threshold": 2})
        assert response.status_code == 400


class TestPublicTags:
    async def test_public_and_trending(self, client: AsyncClient, author):
        hot = await _create_tag(client, "Hot")
        await _create_tag(client, "Cold")
        await _create_post(client, author.id, "Fresh", [hot["id"]])
        await client.post("/api/v1/blog/admin/update-trending")

        response = await client.get("/api/v1/tags")
        assert [tag["name"] for tag in response.json()] == ["Cold", "Hot"]

        response = await client.get("/api/v1/tags/trending")
        assert [tag["name"] for tag in response.json()] == ["Hot"]
