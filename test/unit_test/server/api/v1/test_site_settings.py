import pytest
from httpx import AsyncClient

from quillpress.core.database.entities.site_settings import DEFAULT_SITE_NAME

pytestmark = pytest.mark.asyncio

SETTINGS_URL = "/api/v1/settings"


async def test_get_settings_creates_defaults(client: AsyncClient):
    response = await client.get(SETTINGS_URL)
    assert response.status_code == 200
    data = response.json()
    assert data["site_name"] == DEFAULT_SITE_NAME
    assert data["dark_mode"] is False


async def test_update_settings_keeps_absent_fields(client: AsyncClient):
    await client.put(SETTINGS_URL, json={"site_name": "Quill", "footer_text": "(c) Quill"})

    response = await client.put(SETTINGS_URL, json={"dark_mode": True, "site_name": None})
    assert response.status_code == 200
    data = response.json()
    assert (data["site_name"], data["footer_text"], data["dark_mode"]) == ("Quill", "(c) Quill", True)


async def test_update_settings_rejects_bad_appearance(client: AsyncClient):
    response = await client.put(SETTINGS_URL, json={"appearance_settings": {"colors": {"primary": "red"}}})
    assert response.status_code == 400


async def test_public_settings(client: AsyncClient):
    response = await client.get(f"{SETTINGS_URL}/public")
    assert response.status_code == 200
    data = response.json()
    assert data["verification_files"] == []
    assert "widget_config" not in data


async def test_save_menus_links_pages_by_slug(client: AsyncClient, author):
    response = await client.post(
        "/api/v1/pages", json={"title": "About", "slug": "about", "author_id": author.id, "status": "PUBLISHED"}
    )
    page_id = response.json()["id"]

    payload = {
        "menus": [
            {
                "name": "Main",
                "items": [
                    {"label": "About", "type": "page", "page_id": page_id},
                    {"label": "Docs", "type": "custom", "url": "https://docs.example.com"},
                ],
            }
        ]
    }
    response = await client.put(f"{SETTINGS_URL}/menus", json=payload)
    assert response.status_code == 200
    items = response.json()["menus"][0]["items"]
    assert [(item["label"], item["url"]) for item in items] == [
        ("About", "/about"),
        ("Docs", "https://docs.example.com"),
    ]

    response = await client.get(f"{SETTINGS_URL}/menus")
    assert response.json()["menus"][0]["items"] == items


async def test_save_malformed_menus_falls_back_to_default(client: AsyncClient):
    response = await client.put(f"{SETTINGS_URL}/menus", json={"menus": "not-a-list"})
    assert response.status_code == 200
    assert response.json()["menus"][0]["id"] == "main"


async def test_widgets(client: AsyncClient):
    response = await client.put(f"{SETTINGS_URL}/widgets", json={"widgets": [{"id": "latest-posts", "enabled": True}]})
    assert response.status_code == 200
    widgets = {w["id"]: w for w in response.json()["widgets"]}
    assert widgets["latest-posts"]["enabled"] is True

    response = await client.get(f"{SETTINGS_URL}/widgets")
    assert response.json()["widgets"] == list(widgets.values())


async def test_appearance_merges_over_defaults(client: AsyncClient):
    default = (await client.get(f"{SETTINGS_URL}/appearance")).json()

    response = await client.put(f"{SETTINGS_URL}/appearance", json={"colors": {"primary": "#101010"}})
    assert response.status_code == 200
    data = response.json()
    assert data["colors"]["primary"] == "#101010"
    assert data["fonts"] == default["fonts"]

    response = await client.put(f"{SETTINGS_URL}/appearance", json={"colors": {"primary": "bad"}})
    assert response.status_code == 400


class TestVerificationFiles:
    async def test_upload_list_serve_and_delete(self, client: AsyncClient):
        payload = {"platform": "google", "filename": "google1234.html", "content": "google-site-verification"}
        response = await client.post(f"{SETTINGS_URL}/verification-files", json=payload)
        assert response.status_code == 200
        uploaded = response.json()
        assert uploaded["message"] == "Verification file uploaded successfully"
        assert uploaded["size"] == len("google-site-verification")

        response = await client.get(f"{SETTINGS_URL}/verification-files")
        assert [(f["platform"], f["filename"]) for f in response.json()] == [("google", "google1234.html")]

        response = await client.get("/google1234.html")
        assert response.status_code == 200
        assert response.text == "google-site-verification"
        assert response.headers["content-type"].startswith("text/html")
        assert response.headers["cache-control"] == "public, max-age=3600"

        response = await client.get(f"{SETTINGS_URL}/verification-files/serve/google1234.html")
        assert response.status_code == 200

        response = await client.delete(f"{SETTINGS_URL}/verification-files/google")
        assert response.json() == {"message": "Verification file deleted successfully", "platform": "google"}

        response = await client.get("/google1234.html")
        assert response.status_code == 404

    async def test_upload_rejects_bad_extension(self, client: AsyncClient):
        payload = {"platform": "other", "filename": "evil.exe", "content": "x"}
        response = await client.post(f"{SETTINGS_URL}/verification-files", json=payload)
        assert response.status_code == 400

    async def test_upload_rejects_unknown_platform(self, client: AsyncClient):
        payload = {"platform": "myspace", "filename": "a.txt", "content": "x"}
        response = await client.post(f"{SETTINGS_URL}/verification-files", json=payload)
        assert response.status_code == 422

    async def test_delete_missing(self, client: AsyncClient):
        response = await client.delete(f"{SETTINGS_URL}/verification-files/bing")
        assert response.status_code == 404
