"""
Post repository.

Besides CRUD over ``posts`` this repository owns the ``post_tags`` and
``post_categories`` link tables: it loads the tags and categories of a batch of
posts in one query each, rewrites a post's link set, and answers the reverse
questions (which posts carry a tag) used by tag administration.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.categories import Category
from ..entities.comments import Comment
from ..entities.posts import Post, PostCategory, PostStatus, PostTag
from ..entities.tags import Tag
from .base import AsyncBaseRepository, QueryBuilder


class PostRepository(AsyncBaseRepository[Post]):
    """Repository for blog posts and their tag/category links."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Post)

    async def delete(self, entity_id: str | int) -> bool:
        """Delete a post together with its links and comments."""
        post = await self.get_by_id(entity_id)
        if post is None:
            return False
        await self.session.execute(sa_delete(PostTag).where(PostTag.post_id == post.id))
        await self.session.execute(sa_delete(PostCategory).where(PostCategory.post_id == post.id))
        await self.session.execute(sa_delete(Comment).where(Comment.post_id == post.id))
        await self.session.delete(post)
        await self.session.commit()
        return True

    async def get_by_slug(self, slug: str) -> Optional[Post]:
        stmt = select(Post).where(Post.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_published_by_slug(self, slug: str) -> Optional[Post]:
        stmt = select(Post).where(Post.slug == slug, Post.status == PostStatus.PUBLISHED)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_published(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        tag_slug: Optional[str] = None,
        category_slug: Optional[str] = None,
    ) -> List[Post]:
        """Published posts, newest first, optionally narrowed to a tag and/or category slug."""
        stmt = select(Post).where(Post.status == PostStatus.PUBLISHED)
        if tag_slug:
            tagged = select(PostTag.post_id).join(Tag, Tag.id == PostTag.tag_id).where(Tag.slug == tag_slug)
            stmt = stmt.where(Post.id.in_(tagged))
        if category_slug:
            categorized = (
                select(PostCategory.post_id)
                .join(Category, Category.id == PostCategory.category_id)
                .where(Category.slug == category_slug)
            )
            stmt = stmt.where(Post.id.in_(categorized))
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Post.created_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_admin(
        self,
        status: Optional[PostStatus] = None,
        author_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        newest_first: bool = True,
    ) -> List[Post]:
        order = Post.created_at.desc() if newest_first else Post.created_at.asc()
        stmt = QueryBuilder.apply_filters(select(Post), Post, {"status": status, "author_id": author_id})
        stmt = QueryBuilder.apply_pagination(stmt.order_by(order), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_scheduled(self) -> List[Post]:
        """Posts with a publication date set that are not yet published."""
        stmt = (
            select(Post)
            .where(
                Post.scheduled_for.is_not(None),
                Post.status.in_([PostStatus.SCHEDULED, PostStatus.DRAFT]),
            )
            .order_by(Post.scheduled_for.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_due(self, now: datetime) -> List[Post]:
        """Scheduled posts whose publication time has passed."""
        stmt = select(Post).where(Post.status == PostStatus.SCHEDULED, Post.scheduled_for <= now)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_published_since(self, since: datetime) -> List[Post]:
        stmt = select(Post).where(
            Post.status == PostStatus.PUBLISHED,
            or_(Post.published_at >= since, (Post.published_at.is_(None)) & (Post.created_at >= since)),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def related_candidates(
        self, post_id: str, tag_ids: Sequence[str], category_ids: Sequence[str], limit: int
    ) -> List[Post]:
        """Published posts other than ``post_id`` sharing a tag or category, newest first."""
        conditions = []
        if tag_ids:
            conditions.append(Post.id.in_(select(PostTag.post_id).where(PostTag.tag_id.in_(list(tag_ids)))))
        if category_ids:
            conditions.append(
                Post.id.in_(select(PostCategory.post_id).where(PostCategory.category_id.in_(list(category_ids))))
            )
        if not conditions:
            return []
        stmt = (
            select(Post)
            .where(Post.status == PostStatus.PUBLISHED, Post.id != post_id, or_(*conditions))
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_view_count(self, post: Post) -> Post:
        await self.session.execute(update(Post).where(Post.id == post.id).values(view_count=Post.view_count + 1))
        await self.session.commit()
        await self.session.refresh(post)
        return post

    # ------------------------------------------------------------------
    # Link tables
    # ------------------------------------------------------------------

    async def tag_ids_for(self, post_id: str) -> List[str]:
        result = await self.session.execute(select(PostTag.tag_id).where(PostTag.post_id == post_id))
        return list(result.scalars().all())

    async def category_ids_for(self, post_id: str) -> List[str]:
        result = await self.session.execute(select(PostCategory.category_id).where(PostCategory.post_id == post_id))
        return list(result.scalars().all())

    async def tags_for_posts(self, post_ids: Iterable[str]) -> Dict[str, List[Tag]]:
        """Map each post id to its tags, ordered by name."""
        ids = list(post_ids)
        grouped: Dict[str, List[Tag]] = defaultdict(list)
        if not ids:
            return grouped
        stmt = (
            select(PostTag.post_id, Tag)
            .join(Tag, Tag.id == PostTag.tag_id)
            .where(PostTag.post_id.in_(ids))
            .order_by(Tag.name)
        )
        for post_id, tag in (await self.session.execute(stmt)).all():
            grouped[post_id].append(tag)
        return grouped

    async def categories_for_posts(self, post_ids: Iterable[str]) -> Dict[str, List[Category]]:
        """Map each post id to its categories, ordered by name."""
        ids = list(post_ids)
        grouped: Dict[str, List[Category]] = defaultdict(list)
        if not ids:
            return grouped
        stmt = (
            select(PostCategory.post_id, Category)
            .join(Category, Category.id == PostCategory.category_id)
            .where(PostCategory.post_id.in_(ids))
            .order_by(Category.name)
        )
        for post_id, category in (await self.session.execute(stmt)).all():
            grouped[post_id].append(category)
        return grouped

    async def set_tags(self, post_id: str, tag_ids: Sequence[str]) -> None:
        """Make the post's tag links exactly ``tag_ids``. Staged only; the caller commits."""
        wanted = list(dict.fromkeys(tag_ids))
        result = await self.session.execute(select(PostTag).where(PostTag.post_id == post_id))
        existing = {link.tag_id: link for link in result.scalars().all()}
        for tag_id, link in existing.items():
            if tag_id not in wanted:
                await self.session.delete(link)
        for tag_id in wanted:
            if tag_id not in existing:
                self.session.add(PostTag(post_id=post_id, tag_id=tag_id))

    async def set_categories(self, post_id: str, category_ids: Sequence[str]) -> None:
        """Make the post's category links exactly ``category_ids``. Staged only; the caller commits."""
        wanted = list(dict.fromkeys(category_ids))
        result = await self.session.execute(select(PostCategory).where(PostCategory.post_id == post_id))
        existing = {link.category_id: link for link in result.scalars().all()}
        for category_id, link in existing.items():
            if category_id not in wanted:
                await self.session.delete(link)
        for category_id in wanted:
            if category_id not in existing:
                self.session.add(PostCategory(post_id=post_id, category_id=category_id))

    async def add_tag_links(self, tag_id: str, post_ids: Sequence[str]) -> None:
        """Attach ``tag_id`` to every post in ``post_ids`` that lacks it. Staged only."""
        result = await self.session.execute(select(PostTag.post_id).where(PostTag.tag_id == tag_id))
        present = set(result.scalars().all())
        for post_id in dict.fromkeys(post_ids):
            if post_id not in present:
                self.session.add(PostTag(post_id=post_id, tag_id=tag_id))

    async def add_category_links(self, category_id: str, post_ids: Sequence[str]) -> None:
        """Attach ``category_id`` to every post in ``post_ids`` that lacks it. Staged only."""
        present = set(await self.post_ids_for_category(category_id))
        for post_id in dict.fromkeys(post_ids):
            if post_id not in present:
                self.session.add(PostCategory(post_id=post_id, category_id=category_id))

    async def remove_tag_links(self, tag_ids: Sequence[str]) -> None:
        """Drop every link to ``tag_ids``. Staged only."""
        if tag_ids:
            await self.session.execute(sa_delete(PostTag).where(PostTag.tag_id.in_(list(tag_ids))))

    async def remove_category_links(self, category_id: str) -> None:
        """Drop every link to ``category_id``. Staged only."""
        await self.session.execute(sa_delete(PostCategory).where(PostCategory.category_id == category_id))

    async def tag_occurrences(self, post_ids: Sequence[str]) -> Dict[str, int]:
        """Number of posts among ``post_ids`` carrying each tag."""
        if not post_ids:
            return {}
        stmt = (
            select(PostTag.tag_id, func.count())
            .where(PostTag.post_id.in_(list(post_ids)))
            .group_by(PostTag.tag_id)
        )
        return {tag_id: int(count) for tag_id, count in (await self.session.execute(stmt)).all()}

    async def tag_post_counts(self, tag_ids: Sequence[str]) -> Dict[str, int]:
        if not tag_ids:
            return {}
        stmt = select(PostTag.tag_id, func.count()).where(PostTag.tag_id.in_(list(tag_ids))).group_by(PostTag.tag_id)
        return {tag_id: int(count) for tag_id, count in (await self.session.execute(stmt)).all()}

    async def category_post_counts(self, category_ids: Sequence[str]) -> Dict[str, int]:
        if not category_ids:
            return {}
        stmt = (
            select(PostCategory.category_id, func.count())
            .where(PostCategory.category_id.in_(list(category_ids)))
            .group_by(PostCategory.category_id)
        )
        return {category_id: int(count) for category_id, count in (await self.session.execute(stmt)).all()}

    async def post_ids_for_tags(self, tag_ids: Sequence[str]) -> List[str]:
        """Distinct ids of posts carrying any of ``tag_ids``."""
        if not tag_ids:
            return []
        stmt = select(PostTag.post_id).where(PostTag.tag_id.in_(list(tag_ids))).distinct()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def post_ids_for_category(self, category_id: str) -> List[str]:
        stmt = select(PostCategory.post_id).where(PostCategory.category_id == category_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
