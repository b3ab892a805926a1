"""Service for managing categories."""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import slugify
from quillpress.core.database.entities.categories import Category
from quillpress.core.database.repositories import CategoryRepository, PostRepository
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.categories import (
    CategoryChildRead,
    CategoryCreate,
    CategoryRead,
    CategorySummary,
    CategoryUpdate,
    PublicCategoryRead,
)

logger = get_logger(__name__)


class CategoryService:
    """Service for category CRUD and the public category listing."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.categories = CategoryRepository(session)
        self.posts = PostRepository(session)

    def _read(
        self,
        category: Category,
        counts: Dict[str, int],
        parent: Optional[Category],
        children: List[Category],
    ) -> CategoryRead:
        return CategoryRead.model_validate(
            {
                **category.model_dump(),
                "post_count": counts.get(category.id, 0),
                "parent": CategorySummary.model_validate(parent) if parent else None,
                "children": [
                    CategoryChildRead.model_validate({**child.model_dump(), "post_count": counts.get(child.id, 0)})
                    for child in children
                ],
            }
        )

    async def _require(self, category_id: str) -> Category:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def _creates_cycle(self, category_id: str, parent_id: str) -> bool:
        seen = set()
        current: Optional[str] = parent_id
        while current and current not in seen:
            if current == category_id:
                return True
            seen.add(current)
            parent = await self.categories.get_by_id(current)
            current = parent.parent_id if parent else None
        return False

    async def list(self) -> List[CategoryRead]:
        """All categories by position then name, each with its parent and children."""
        categories = await self.categories.list()
        by_id = {category.id: category for category in categories}
        counts = await self.posts.category_post_counts(list(by_id))
        children: Dict[str, List[Category]] = {}
        for category in categories:
            if category.parent_id:
                children.setdefault(category.parent_id, []).append(category)
        return [
            self._read(category, counts, by_id.get(category.parent_id), children.get(category.id, []))
            for category in categories
        ]

    async def list_public(self) -> List[PublicCategoryRead]:
        return [PublicCategoryRead.model_validate(c) for c in await self.categories.list_by_name()]

    async def get(self, category_id: str) -> CategoryRead:
        category = await self._require(category_id)
        children = (await self.categories.children_of([category.id])).get(category.id, [])
        counts = await self.posts.category_post_counts([category.id, *[child.id for child in children]])
        parent = await self.categories.get_by_id(category.parent_id) if category.parent_id else None
        return self._read(category, counts, parent, children)

    async def create(self, data: CategoryCreate) -> CategoryRead:
        name = data.name.strip()
        slug = slugify(data.slug or name)
        if not name or not slug:
            raise InvalidRequestError("Category name is required")
        if await self.categories.get_by_slug(slug):
            raise ConflictError("A category with this slug already exists")
        if data.parent_id and await self.categories.get_by_id(data.parent_id) is None:
            raise NotFoundError("Parent category not found")

        category = Category(
            name=name,
            slug=slug,
            description=data.description,
            color=data.color,
            icon=data.icon,
            parent_id=data.parent_id or None,
            order=data.order,
            featured=data.featured,
        )
        category = await self.categories.create(category)
        logger.info(f"Created category {category.id} ({category.slug})")
        return await self.get(category.id)

    async def update(self, category_id: str, data: CategoryUpdate) -> CategoryRead:
        category = await self._require(category_id)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("name") is not None:
            category.name = fields["name"].strip() or category.name
        if fields.get("slug") is not None:
            slug = slugify(fields["slug"])
            if not slug:
                raise InvalidRequestError("Category slug is empty after normalization")
            existing = await self.categories.get_by_slug(slug)
            if existing is not None and existing.id != category.id:
                raise ConflictError("A category with this slug already exists")
            category.slug = slug
        for nullable in ("description", "color", "icon"):
            if nullable in fields:
                setattr(category, nullable, fields[nullable])
        for name in ("order", "featured"):
            if fields.get(name) is not None:
                setattr(category, name, fields[name])

        if "parent_id" in fields:
            parent_id = fields["parent_id"]
            if parent_id is None:
                category.parent_id = None
            elif parent_id == category.id:
                raise InvalidRequestError("A category cannot be its own parent")
            else:
                if await self.categories.get_by_id(parent_id) is None:
                    raise NotFoundError("Parent category not found")
                if await self._creates_cycle(category.id, parent_id):
                    raise InvalidRequestError("Parent assignment would create a cycle")
                category.parent_id = parent_id

        await self.categories.update(category)
        return await self.get(category.id)

    async def delete(self, category_id: str) -> None:
        category = await self._require(category_id)
        await self.posts.remove_category_links(category.id)
        await self.categories.detach_children(category.id)
        await self.session.delete(category)
        await self.session.commit()
        logger.info(f"Deleted category {category_id}")
