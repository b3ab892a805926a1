"""
Service for the site settings singleton.

Besides plain field updates this normalizes the loosely-shaped documents the
admin dashboard saves (menus, widgets, appearance) and manages search-engine
verification files stored on the settings row.
"""

from __future__ import annotations

import copy
import re
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.database.base import utc_now
from quillpress.core.database.entities.site_settings import SiteSettings
from quillpress.core.database.repositories import PageRepository, PostRepository, SiteSettingsRepository
from quillpress.core.errors import InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.site_settings import (
    PublicSiteSettingsRead,
    SiteSettingsRead,
    SiteSettingsUpdate,
    VerificationFileCreate,
    VerificationFileDeleteResponse,
    VerificationFileRead,
    VerificationFileUploadResponse,
)
from quillpress.server.core.config import settings

logger = get_logger(__name__)

RESERVED_PAGE_SLUGS = frozenset({"login", "dashboard", "auth", "admin", "api", "_next", "static", "settings"})
HOME_PAGE_SLUGS = frozenset({"home", "homepage", "index"})
MENU_ITEM_TYPES = ("page", "post", "custom")

WIDGET_CATALOG: List[Dict[str, Any]] = [
    {"id": "latest-posts", "type": "latest-posts", "name": "Latest Posts", "description": "Display the most recent blog posts"},
    {"id": "trending-posts", "type": "trending-posts", "name": "Trending Posts", "description": "Show popular or trending posts"},
    {"id": "latest-comments", "type": "latest-comments", "name": "Latest Comments", "description": "Display recent comments from readers"},
    {"id": "category-archives", "type": "category-archives", "name": "Category Archives", "description": "List all post categories"},
    {"id": "about-me", "type": "about-me", "name": "About Me", "description": "Show author or site owner information"},
    {"id": "social-sharing", "type": "social-sharing", "name": "Social Sharing", "description": "Social media sharing buttons"},
]

DEFAULT_APPEARANCE: Dict[str, Any] = {
    "colors": {
        "primary": "#3B82F6",
        "secondary": "#8B5CF6",
        "accent": "#10B981",
        "background": "#FFFFFF",
        "text": "#1F2937",
    },
    "fonts": {"heading": "Inter", "body": "Inter"},
    "typography": {"headingSize": "2rem", "bodySize": "1rem", "lineHeight": "1.6"},
}

VERIFICATION_MAX_BYTES = 10240
VERIFICATION_CONTENT_TYPES = {
    ".html": "text/html",
    ".txt": "text/plain",
    ".json": "application/json",
    ".xml": "application/xml",
}

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

SETTINGS_FIELDS = (
    "site_name",
    "description",
    "footer_text",
    "seo_keywords",
    "logo",
    "favicon",
    "dark_mode",
    "home_page_id",
    "blog_page_id",
    "top_bar_enabled",
    "social_links",
    "contact_info",
    "menu_structure",
    "widget_config",
    "appearance_settings",
)


def default_menus() -> List[Dict[str, Any]]:
    return [{"id": "main", "name": "Main Menu", "locations": {"primary": True, "footer": False}, "items": []}]


def _normalize_menu_item(raw: Dict[str, Any], index: int) -> Dict[str, Any]:
    item_type = raw.get("type") if raw.get("type") in MENU_ITEM_TYPES else "custom"
    order = raw.get("order")
    item: Dict[str, Any] = {
        "id": raw.get("id") if isinstance(raw.get("id"), str) and raw.get("id") else f"item-{index}",
        "label": raw.get("label") if isinstance(raw.get("label"), str) and raw.get("label") else "Menu Item",
        "type": item_type,
        "url": raw.get("url") if isinstance(raw.get("url"), str) and raw.get("url") else "#",
        "order": order if isinstance(order, (int, float)) and not isinstance(order, bool) else index,
    }
    for key in ("page_id", "post_id"):
        if isinstance(raw.get(key), str):
            item[key] = raw[key]
    return item


def normalize_menus(raw: Any) -> List[Dict[str, Any]]:
    """
    Coerce a saved menu document into a list of well-formed menus.

    A missing, non-list or empty value gives the default main menu. Items are
    sorted by their ``order``; URLs are not resolved here.
    """
    if not isinstance(raw, list) or not raw:
        return default_menus()

    menus = []
    for i, menu in enumerate(raw):
        if not isinstance(menu, dict):
            continue
        locations = menu.get("locations")
        if isinstance(locations, dict):
            locations = {str(key): bool(value) for key, value in locations.items()}
        else:
            locations = {"primary": i == 0, "footer": False}
        items = [
            _normalize_menu_item(item, j)
            for j, item in enumerate(menu.get("items") if isinstance(menu.get("items"), list) else [])
            if isinstance(item, dict)
        ]
        menus.append(
            {
                "id": menu.get("id") if isinstance(menu.get("id"), str) and menu.get("id") else f"menu-{i}",
                "name": menu.get("name") if isinstance(menu.get("name"), str) and menu.get("name") else f"Menu {i + 1}",
                "locations": locations,
                "items": sorted(items, key=lambda item: item["order"]),
            }
        )
    return menus or default_menus()


def normalize_widgets(raw: Any) -> List[Dict[str, Any]]:
    """
    Merge saved widget entries onto the catalog.

    Catalog widgets always come first in catalog order; saved widgets with an
    unknown id follow in the order they were saved.
    """
    saved: Dict[str, Dict[str, Any]] = {}
    if isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, dict) and isinstance(entry.get("id"), str) and entry["id"]:
                saved.setdefault(entry["id"], entry)

    def merge(base: Dict[str, Any], entry: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        widget = {**base, "enabled": False}
        if entry is None:
            return widget
        for key in ("type", "name", "description"):
            if isinstance(entry.get(key), str):
                widget[key] = entry[key]
        if "enabled" in entry:
            widget["enabled"] = bool(entry["enabled"])
        if isinstance(entry.get("settings"), dict):
            widget["settings"] = entry["settings"]
        return widget

    catalog_ids = {widget["id"] for widget in WIDGET_CATALOG}
    widgets = [merge(base, saved.get(base["id"])) for base in WIDGET_CATALOG]
    for widget_id, entry in saved.items():
        if widget_id not in catalog_ids:
            widgets.append(merge({"id": widget_id, "type": widget_id, "name": widget_id, "description": ""}, entry))
    return widgets


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_appearance(stored: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Deep-merge a stored appearance document over the defaults."""
    return _deep_merge(DEFAULT_APPEARANCE, stored if isinstance(stored, dict) else {})


def validate_appearance(appearance: Dict[str, Any]) -> None:
    colors = appearance.get("colors")
    if colors is None:
        return
    if not isinstance(colors, dict):
        raise InvalidRequestError("Appearance colors must be an object")
    for name, value in colors.items():
        if not isinstance(value, str) or not _HEX_COLOR_RE.match(value):
            raise InvalidRequestError(f"Invalid color for {name}: expected #RGB or #RRGGBB")


def verification_content_type(filename: str) -> Optional[str]:
    return VERIFICATION_CONTENT_TYPES.get(PurePosixPath(filename).suffix.lower())


class SiteSettingsService:
    """Service for site settings, menus, widgets, appearance and verification files."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = SiteSettingsRepository(session)
        self.pages = PageRepository(session)
        self.posts = PostRepository(session)

    async def _resolve_menu_urls(self, menus: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Fill page and post item URLs from their slugs and drop reserved pages."""
        page_ids = {item["page_id"] for menu in menus for item in menu["items"] if item.get("page_id")}
        post_ids = {item["post_id"] for menu in menus for item in menu["items"] if item.get("post_id")}
        pages = {page.id: page for page in await self.pages.get_many(list(page_ids))}
        posts = {post.id: post for post in await self.posts.get_many(list(post_ids))}

        for menu in menus:
            resolved = []
            for item in menu["items"]:
                if item["type"] == "page" and item.get("page_id") in pages:
                    slug = pages[item["page_id"]].slug
                    if slug in RESERVED_PAGE_SLUGS:
                        continue
                    if item["url"] == "#":
                        item["url"] = "/" if slug in HOME_PAGE_SLUGS else f"/{slug}"
                elif item["type"] == "post" and item.get("post_id") in posts:
                    item["url"] = f"/blog/{posts[item['post_id']].slug}"
                resolved.append(item)
            menu["items"] = resolved
        return menus

    # ------------------------------------------------------------------
    # Settings row
    # ------------------------------------------------------------------

    async def _current(self) -> SiteSettings:
        return await self.settings.get_or_create()

    async def get(self) -> SiteSettingsRead:
        return SiteSettingsRead.model_validate(await self._current())

    async def update(self, data: SiteSettingsUpdate) -> SiteSettingsRead:
        current = await self._current()
        fields = {key: value for key, value in data.model_dump(include=set(SETTINGS_FIELDS)).items() if value is not None}

        if "menu_structure" in fields:
            fields["menu_structure"] = await self._resolve_menu_urls(normalize_menus(fields["menu_structure"]))
        if "widget_config" in fields:
            fields["widget_config"] = normalize_widgets(fields["widget_config"])
        if "appearance_settings" in fields:
            validate_appearance(fields["appearance_settings"])

        for name, value in fields.items():
            setattr(current, name, value)
        current = await self.settings.update(current)
        logger.info(f"Site settings updated: {sorted(fields)}")
        return SiteSettingsRead.model_validate(current)

    async def public(self) -> PublicSiteSettingsRead:
        current = await self._current()
        files = current.verification_files or {}
        return PublicSiteSettingsRead.model_validate(
            {
                **current.model_dump(exclude={"verification_files"}),
                "menu_structure": current.menu_structure or default_menus(),
                "verification_files": [entry["filename"] for entry in files.values() if entry.get("filename")],
            }
        )

    # ------------------------------------------------------------------
    # Menus, widgets and appearance
    # ------------------------------------------------------------------

    async def get_menus(self) -> List[Dict[str, Any]]:
        current = await self._current()
        return await self._resolve_menu_urls(normalize_menus(current.menu_structure))

    async def set_menus(self, menus: Any) -> List[Dict[str, Any]]:
        current = await self._current()
        current.menu_structure = await self._resolve_menu_urls(normalize_menus(menus))
        current = await self.settings.update(current)
        return current.menu_structure

    async def get_widgets(self) -> List[Dict[str, Any]]:
        return normalize_widgets((await self._current()).widget_config)

    async def set_widgets(self, widgets: Any) -> List[Dict[str, Any]]:
        current = await self._current()
        current.widget_config = normalize_widgets(widgets)
        current = await self.settings.update(current)
        return current.widget_config

    async def get_appearance(self) -> Dict[str, Any]:
        return merge_appearance((await self._current()).appearance_settings)

    async def set_appearance(self, appearance: Dict[str, Any]) -> Dict[str, Any]:
        validate_appearance(appearance)
        current = await self._current()
        current.appearance_settings = _deep_merge(merge_appearance(current.appearance_settings), appearance)
        current = await self.settings.update(current)
        return current.appearance_settings

    # ------------------------------------------------------------------
    # Verification files
    # ------------------------------------------------------------------

    def _public_url(self, filename: str) -> str:
        return f"{settings.site.backend_url.rstrip('/')}/{filename}"

    async def upload_verification_file(self, data: VerificationFileCreate) -> VerificationFileUploadResponse:
        filename = data.filename.strip()
        if not filename or PurePosixPath(filename).name != filename or "\\" in filename:
            raise InvalidRequestError("Invalid verification file name")
        if verification_content_type(filename) is None:
            raise InvalidRequestError(
                f"Unsupported verification file type. Allowed: {', '.join(VERIFICATION_CONTENT_TYPES)}"
            )
        size = len(data.content.encode("utf-8"))
        if size > VERIFICATION_MAX_BYTES:
            raise InvalidRequestError(f"Verification file too large. Maximum size is {VERIFICATION_MAX_BYTES} bytes")

        current = await self._current()
        files = dict(current.verification_files or {})
        files[data.platform.value] = {
            "filename": filename,
            "content": data.content,
            "description": data.description or "",
            "uploaded_at": utc_now().isoformat(),
            "size": size,
        }
        current.verification_files = files
        await self.settings.update(current)
        logger.info(f"Verification file {filename} stored for {data.platform.value}")
        return VerificationFileUploadResponse(
            message="Verification file uploaded successfully",
            platform=data.platform,
            filename=filename,
            public_url=self._public_url(filename),
            size=size,
        )

    async def list_verification_files(self) -> List[VerificationFileRead]:
        files = (await self._current()).verification_files or {}
        return [
            VerificationFileRead(
                platform=platform,
                filename=entry["filename"],
                description=entry.get("description"),
                uploaded_at=entry.get("uploaded_at"),
                size=entry.get("size", 0),
                public_url=self._public_url(entry["filename"]),
            )
            for platform, entry in files.items()
        ]

    async def delete_verification_file(self, platform: str) -> VerificationFileDeleteResponse:
        current = await self._current()
        files = dict(current.verification_files or {})
        if platform not in files:
            raise NotFoundError("Verification file not found")
        del files[platform]
        current.verification_files = files
        await self.settings.update(current)
        logger.info(f"Verification file removed for {platform}")
        return VerificationFileDeleteResponse(message="Verification file deleted successfully", platform=platform)

    async def find_verification_file(self, filename: str) -> Tuple[str, str]:
        """Return ``(content, content_type)`` for a stored verification file."""
        content_type = verification_content_type(filename)
        if content_type is None:
            raise NotFoundError("Verification file not found")
        for entry in ((await self._current()).verification_files or {}).values():
            if entry.get("filename") == filename:
                return entry.get("content", ""), content_type
        raise NotFoundError("Verification file not found")
