"""Category repository."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.categories import Category
from .base import AsyncBaseRepository


class CategoryRepository(AsyncBaseRepository[Category]):
    """Repository for category data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    def default_order(self):
        return (Category.order.asc(), Category.name.asc())

    async def list_by_name(self) -> List[Category]:
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def find_by_slug_or_name(self, slug: str, name: str) -> Optional[Category]:
        stmt = select(Category).where(or_(Category.slug == slug, func.lower(Category.name) == name.lower()))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def children_of(self, parent_ids: Sequence[str]) -> Dict[str, List[Category]]:
        grouped: Dict[str, List[Category]] = defaultdict(list)
        if not parent_ids:
            return grouped
        stmt = (
            select(Category)
            .where(Category.parent_id.in_(list(parent_ids)))
            .order_by(Category.order.asc(), Category.name.asc())
        )
        for child in (await self.session.execute(stmt)).scalars().all():
            grouped[child.parent_id].append(child)
        return grouped

    async def existing_ids(self, ids: Sequence[str]) -> List[str]:
        if not ids:
            return []
        result = await self.session.execute(select(Category.id).where(Category.id.in_(list(ids))))
        found = set(result.scalars().all())
        return [category_id for category_id in dict.fromkeys(ids) if category_id in found]

    async def detach_children(self, parent_id: str) -> None:
        """Staged only; the caller commits."""
        await self.session.execute(update(Category).where(Category.parent_id == parent_id).values(parent_id=None))
