"""
Page repository.

Covers pages and their version history. Version numbers are allocated per page
as one more than the highest existing number.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.pages import Page, PageStatus, PageType, PageVersion
from .base import AsyncBaseRepository, QueryBuilder


class PageRepository(AsyncBaseRepository[Page]):
    """Repository for pages and page versions using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Page)

    def default_order(self):
        return (Page.updated_at.desc(),)

    async def delete(self, entity_id: str | int) -> bool:
        """Delete a page with its versions; child pages are detached."""
        page = await self.get_by_id(entity_id)
        if page is None:
            return False
        await self.session.execute(sa_delete(PageVersion).where(PageVersion.page_id == page.id))
        await self.session.execute(update(Page).where(Page.parent_id == page.id).values(parent_id=None))
        await self.session.delete(page)
        await self.session.commit()
        return True

    async def get_by_slug(self, slug: str) -> Optional[Page]:
        result = await self.session.execute(select(Page).where(Page.slug == slug))
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        status: Optional[PageStatus] = None,
        page_type: Optional[PageType] = None,
        author_id: Optional[str] = None,
    ) -> List[Page]:
        stmt = QueryBuilder.apply_filters(
            select(Page), Page, {"status": status, "page_type": page_type, "author_id": author_id}
        )
        result = await self.session.execute(stmt.order_by(Page.updated_at.desc()))
        return list(result.scalars().all())

    async def increment_view_count(self, page: Page) -> Page:
        await self.session.execute(update(Page).where(Page.id == page.id).values(view_count=Page.view_count + 1))
        await self.session.commit()
        await self.session.refresh(page)
        return page

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    async def latest_version_numbers(self, page_ids: Sequence[str]) -> Dict[str, int]:
        if not page_ids:
            return {}
        stmt = (
            select(PageVersion.page_id, func.max(PageVersion.version_number))
            .where(PageVersion.page_id.in_(list(page_ids)))
            .group_by(PageVersion.page_id)
        )
        return {page_id: int(number) for page_id, number in (await self.session.execute(stmt)).all()}

    async def list_versions(self, page_id: str) -> List[PageVersion]:
        stmt = select(PageVersion).where(PageVersion.page_id == page_id).order_by(PageVersion.version_number.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_version(self, page_id: str, version_number: int) -> Optional[PageVersion]:
        stmt = select(PageVersion).where(
            PageVersion.page_id == page_id, PageVersion.version_number == version_number
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_version(self, page: Page, change_note: str, created_by_id: Optional[str] = None) -> PageVersion:
        """Snapshot the page as its next version. Staged only; the caller commits."""
        latest = await self.latest_version_numbers([page.id])
        version = PageVersion(
            page_id=page.id,
            version_number=latest.get(page.id, 0) + 1,
            title=page.title,
            content=page.content,
            custom_css=page.custom_css,
            custom_js=page.custom_js,
            change_note=change_note,
            created_by_id=created_by_id,
        )
        self.session.add(version)
        return version
