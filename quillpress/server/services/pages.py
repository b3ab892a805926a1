"""
Service for site pages and their version history.

Page content is either an HTML string or a page-builder document. Both forms
are sanitized on write: strings as a whole, builder documents field by field
(section text, left/right columns and column contents). Every content change
records a new version so earlier states can be restored.
"""

from __future__ import annotations

import copy
import time
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import sanitize_html
from quillpress.core.database.base import utc_now
from quillpress.core.database.entities.pages import Page, PageStatus, PageType, PageVersion
from quillpress.core.database.repositories import PageRepository, UserRepository
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.pages import (
    PageCreate,
    PageDetailRead,
    PageDuplicateRequest,
    PageRead,
    PageUpdate,
    PageVersionRead,
)
from quillpress.core.monitoring import log_content_event

logger = get_logger(__name__)

ALL_FILTER = "ALL"


def empty_builder_document() -> dict:
    return {
        "sections": [],
        "globalStyles": {
            "colors": {"primary": "#3b82f6", "secondary": "#64748b", "accent": "#8b5cf6"},
            "fonts": {"heading": "Inter", "body": "Inter"},
            "spacing": {"unit": 8},
        },
    }


def sanitize_builder_document(document: dict) -> dict:
    """Sanitize the HTML-bearing fields of every section in a builder document."""
    sanitized = copy.deepcopy(document)
    sections = sanitized.get("sections")
    if not isinstance(sections, list):
        return sanitized
    for section in sections:
        content = section.get("content") if isinstance(section, dict) else None
        if not isinstance(content, dict):
            continue
        for key in ("text", "leftColumn", "rightColumn"):
            if isinstance(content.get(key), str) and content[key]:
                content[key] = sanitize_html(content[key])
        if isinstance(content.get("columns"), list):
            for column in content["columns"]:
                if isinstance(column, dict) and isinstance(column.get("content"), str) and column["content"]:
                    column["content"] = sanitize_html(column["content"])
    return sanitized


def sanitize_page_content(content: Any) -> Any:
    if isinstance(content, str):
        return sanitize_html(content)
    if isinstance(content, dict):
        return sanitize_builder_document(content)
    return content


def check_custom_code(slug: str, custom_css: Optional[str], custom_js: Optional[str]) -> None:
    """Reject script tags in CSS; custom JS is allowed but logged."""
    if custom_css and "<script" in custom_css.lower():
        raise InvalidRequestError("CSS cannot contain script tags")
    if custom_js:
        logger.warning(f"Custom JS set on page {slug}; it is served to visitors unmodified")


def _parse_filter(enum_type, value: Optional[str]):
    if not value or value.upper() == ALL_FILTER:
        return None
    try:
        return enum_type(value.upper())
    except ValueError:
        raise InvalidRequestError(f"Invalid filter value: {value}")


class PageService:
    """Service for page CRUD, publishing views, duplication and versions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.pages = PageRepository(session)
        self.users = UserRepository(session)

    async def _read(self, page: Page) -> PageRead:
        latest = await self.pages.latest_version_numbers([page.id])
        return PageRead.model_validate({**page.model_dump(), "latest_version": latest.get(page.id)})

    async def _require(self, page_id: str) -> Page:
        page = await self.pages.get_by_id(page_id)
        if page is None:
            raise NotFoundError("Page not found")
        return page

    async def _ensure_slug_free(self, slug: str, page_id: Optional[str] = None) -> None:
        existing = await self.pages.get_by_slug(slug)
        if existing is not None and existing.id != page_id:
            raise ConflictError("Page with this slug already exists")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(
        self, status: Optional[str] = None, page_type: Optional[str] = None, author_id: Optional[str] = None
    ) -> List[PageRead]:
        pages = await self.pages.list_filtered(
            status=_parse_filter(PageStatus, status),
            page_type=_parse_filter(PageType, page_type),
            author_id=author_id or None,
        )
        latest = await self.pages.latest_version_numbers([page.id for page in pages])
        logger.debug(f"Listed {len(pages)} pages (status={status}, page_type={page_type}, author_id={author_id})")
        return [
            PageRead.model_validate({**page.model_dump(), "latest_version": latest.get(page.id)}) for page in pages
        ]

    async def list_public(self) -> List[PageRead]:
        return await self.list(status=PageStatus.PUBLISHED.value)

    async def get_public_by_slug(self, slug: str) -> PageRead:
        page = await self.pages.get_by_slug(slug)
        if page is None or page.status != PageStatus.PUBLISHED:
            raise NotFoundError("Page not found")
        page = await self.pages.increment_view_count(page)
        return await self._read(page)

    async def get_public_by_id(self, page_id: str) -> PageRead:
        page = await self.pages.get_by_id(page_id)
        if page is None or page.status != PageStatus.PUBLISHED:
            raise NotFoundError("Page not found")
        return await self._read(page)

    async def get(self, page_id: str) -> PageDetailRead:
        page = await self._require(page_id)
        versions = await self.pages.list_versions(page.id)
        return PageDetailRead.model_validate(
            {
                **page.model_dump(),
                "latest_version": versions[0].version_number if versions else None,
                "versions": [PageVersionRead.model_validate(version) for version in versions],
            }
        )

    async def versions(self, page_id: str) -> List[PageVersionRead]:
        page = await self._require(page_id)
        return [PageVersionRead.model_validate(version) for version in await self.pages.list_versions(page.id)]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: PageCreate) -> PageRead:
        await self._ensure_slug_free(data.slug)
        check_custom_code(data.slug, data.custom_css, data.custom_js)
        if await self.users.get_by_id(data.author_id) is None:
            raise NotFoundError("Author not found")
        if data.parent_id and await self.pages.get_by_id(data.parent_id) is None:
            raise NotFoundError("Parent page not found")

        if data.content is None:
            content: Any = empty_builder_document() if data.use_page_builder else ""
        else:
            content = sanitize_page_content(data.content)

        page = Page(
            **data.model_dump(exclude={"content", "use_page_builder", "parent_id"}),
            content=content,
            parent_id=data.parent_id or None,
            published_at=utc_now() if data.status == PageStatus.PUBLISHED else None,
        )
        self.session.add(page)
        await self.session.flush()
        await self.pages.add_version(page, "Initial version", created_by_id=page.author_id)
        await self.session.commit()
        await self.session.refresh(page)

        logger.info(f"Created page {page.id} ({page.slug})")
        log_content_event("page_created", page_id=page.id, status=page.status)
        return await self._read(page)

    async def update(self, page_id: str, data: PageUpdate) -> PageRead:
        page = await self._require(page_id)
        fields = data.model_dump(exclude_unset=True, exclude={"updated_by_id"})

        if fields.get("slug") and fields["slug"] != page.slug:
            await self._ensure_slug_free(fields["slug"], page.id)
        check_custom_code(page.slug, fields.get("custom_css"), fields.get("custom_js"))

        if "parent_id" in fields:
            parent_id = fields.pop("parent_id")
            if parent_id == page.id:
                raise InvalidRequestError("A page cannot be its own parent")
            if parent_id and await self.pages.get_by_id(parent_id) is None:
                raise NotFoundError("Parent page not found")
            page.parent_id = parent_id or None

        content_changed = any(fields.get(key) for key in ("content", "custom_css", "custom_js"))
        if fields.get("content") is not None:
            fields["content"] = sanitize_page_content(fields["content"])

        for name, value in fields.items():
            if value is None and name in ("title", "slug", "page_type", "status", "layout", "content"):
                continue
            setattr(page, name, value)
        if page.status == PageStatus.PUBLISHED and page.published_at is None:
            page.published_at = utc_now()
        page.updated_at = utc_now()
        self.session.add(page)

        if content_changed:
            await self.session.flush()
            await self.pages.add_version(page, "Content updated", created_by_id=data.updated_by_id)
        await self.session.commit()
        await self.session.refresh(page)
        logger.info(f"Updated page {page.id}")
        return await self._read(page)

    async def delete(self, page_id: str) -> None:
        if not await self.pages.delete(page_id):
            raise NotFoundError("Page not found")
        logger.info(f"Deleted page {page_id}")
        log_content_event("page_deleted", page_id=page_id)

    async def duplicate(self, page_id: str, data: PageDuplicateRequest) -> PageRead:
        original = await self._require(page_id)
        author_id = data.author_id or original.author_id
        if await self.users.get_by_id(author_id) is None:
            raise NotFoundError("Author not found")

        copy_page = Page(
            **original.model_dump(
                exclude={"id", "slug", "title", "status", "author_id", "published_at", "view_count", "created_at", "updated_at"}
            ),
            title=f"{original.title} (Copy)",
            slug=f"{original.slug}-copy-{int(time.time() * 1000)}",
            status=PageStatus.DRAFT,
            author_id=author_id,
            published_at=None,
            view_count=0,
        )
        copy_page.content = copy.deepcopy(original.content)
        self.session.add(copy_page)
        await self.session.flush()
        await self.pages.add_version(copy_page, "Initial version", created_by_id=author_id)
        await self.session.commit()
        await self.session.refresh(copy_page)
        logger.info(f"Duplicated page {original.id} as {copy_page.id}")
        return await self._read(copy_page)

    async def restore_version(self, page_id: str, version_number: int, user_id: Optional[str] = None) -> PageRead:
        page = await self._require(page_id)
        version: Optional[PageVersion] = await self.pages.get_version(page.id, version_number)
        if version is None:
            raise NotFoundError("Version not found")

        page.title = version.title
        page.content = copy.deepcopy(version.content)
        page.custom_css = version.custom_css
        page.custom_js = version.custom_js
        page.updated_at = utc_now()
        self.session.add(page)
        await self.session.flush()
        await self.pages.add_version(page, f"Restored from version {version_number}", created_by_id=user_id)
        await self.session.commit()
        await self.session.refresh(page)
        logger.info(f"Restored page {page.id} to version {version_number}")
        return await self._read(page)
