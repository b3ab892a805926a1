"""
Tag repository.

Provides the lookups tag administration and auto-tagging rely on: conflict
checks by slug or case-insensitive name, keyword resolution through slugs,
names and synonyms, and bulk maintenance of the parent hierarchy and the
trending flag.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.tags import Tag
from .base import AsyncBaseRepository, QueryBuilder


class TagRepository(AsyncBaseRepository[Tag]):
    """Repository for tag data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Tag)

    def default_order(self):
        return (Tag.usage_count.desc(), Tag.name.asc())

    async def list_by_name(self) -> List[Tag]:
        result = await self.session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def list_trending(self, limit: int = 10) -> List[Tag]:
        stmt = select(Tag).where(Tag.trending == True).order_by(Tag.usage_count.desc())  # noqa: E712
        result = await self.session.execute(QueryBuilder.apply_pagination(stmt, limit, None))
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Optional[Tag]:
        result = await self.session.execute(select(Tag).where(Tag.slug == slug))
        return result.scalar_one_or_none()

    async def find_conflict(self, slug: str, name: str, exclude_id: Optional[str] = None) -> Optional[Tag]:
        """Another tag with the same slug, or the same name ignoring case."""
        stmt = select(Tag).where(or_(Tag.slug == slug, func.lower(Tag.name) == name.lower()))
        if exclude_id:
            stmt = stmt.where(Tag.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def resolve_keyword(self, keyword: str) -> Tuple[Optional[Tag], bool]:
        """
        Find the tag a keyword refers to.

        Slug and case-insensitive name matches win; otherwise a tag listing the
        keyword among its synonyms is used.

        Returns:
            ``(tag, via_synonym)``; ``(None, False)`` when nothing matches
        """
        slug = "-".join(keyword.split())
        stmt = select(Tag).where(or_(Tag.slug == slug, func.lower(Tag.name) == keyword.lower()))
        direct = (await self.session.execute(stmt)).scalars().first()
        if direct is not None:
            return direct, False

        # JSON list membership is not portable across backends; scan tags that have synonyms.
        for tag in (await self.session.execute(select(Tag))).scalars().all():
            if keyword in (tag.synonyms or []):
                return tag, True
        return None, False

    async def children_of(self, parent_ids: Sequence[str]) -> Dict[str, List[Tag]]:
        grouped: Dict[str, List[Tag]] = defaultdict(list)
        if not parent_ids:
            return grouped
        stmt = select(Tag).where(Tag.parent_id.in_(list(parent_ids))).order_by(Tag.name)
        for child in (await self.session.execute(stmt)).scalars().all():
            grouped[child.parent_id].append(child)
        return grouped

    async def existing_ids(self, ids: Sequence[str]) -> List[str]:
        """The subset of ``ids`` that exist, in input order."""
        if not ids:
            return []
        result = await self.session.execute(select(Tag.id).where(Tag.id.in_(list(ids))))
        found = set(result.scalars().all())
        return [tag_id for tag_id in dict.fromkeys(ids) if tag_id in found]

    async def detach_children(self, parent_ids: Sequence[str]) -> None:
        """Staged only; the caller commits."""
        if parent_ids:
            await self.session.execute(
                update(Tag).where(Tag.parent_id.in_(list(parent_ids))).values(parent_id=None)
            )

    async def reparent_children(self, parent_ids: Sequence[str], new_parent_id: str) -> None:
        """Move the children of ``parent_ids`` under ``new_parent_id``. Staged only."""
        if parent_ids:
            await self.session.execute(
                update(Tag)
                .where(Tag.parent_id.in_(list(parent_ids)), Tag.id != new_parent_id)
                .values(parent_id=new_parent_id)
            )

    async def set_trending(self, tag_ids: Sequence[str]) -> None:
        """Clear the trending flag everywhere, then set it on ``tag_ids``. Staged only."""
        await self.session.execute(update(Tag).values(trending=False))
        if tag_ids:
            await self.session.execute(update(Tag).where(Tag.id.in_(list(tag_ids))).values(trending=True))
