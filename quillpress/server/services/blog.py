"""
Service for blog posts.

Handles the public read path (published listing, post by slug, related posts,
RSS) and the editorial write path. Saving a post runs the automatic features:
sanitization, reading time, excerpt derivation and keyword auto-tagging with
linked-tag expansion.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import (
    derive_excerpt,
    extract_keywords,
    link_tags_in_content,
    reading_time,
    sanitize_html,
    sanitize_slug,
    sanitize_text,
    slugify,
)
from quillpress.core.content.feeds import render_rss
from quillpress.core.database.base import to_naive_utc, utc_now
from quillpress.core.database.entities.posts import Post, PostStatus
from quillpress.core.database.entities.tags import Tag
from quillpress.core.database.repositories import (
    CategoryRepository,
    PostRepository,
    TagRepository,
    UserRepository,
)
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.categories import CategorySummary
from quillpress.core.models.io.posts import PostCreate, PostRead, PostSummary, PostUpdate
from quillpress.core.models.io.tags import TagSummary
from quillpress.core.models.io.users import UserSummary
from quillpress.core.monitoring import log_content_event
from quillpress.server.core.config import settings

logger = get_logger(__name__)

RSS_ITEM_LIMIT = 20
TRENDING_WINDOW_DAYS = 30
TRENDING_TAG_LIMIT = 10


def _unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class BlogService:
    """Service for post publishing, auto-tagging and the public blog read path."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.posts = PostRepository(session)
        self.tags = TagRepository(session)
        self.categories = CategoryRepository(session)
        self.users = UserRepository(session)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    async def to_read(self, posts: Sequence[Post]) -> List[PostRead]:
        """Attach author, categories and tags to each post."""
        if not posts:
            return []
        ids = [post.id for post in posts]
        authors = {user.id: user for user in await self.users.get_many(_unique(p.author_id for p in posts))}
        tags = await self.posts.tags_for_posts(ids)
        categories = await self.posts.categories_for_posts(ids)

        reads = []
        for post in posts:
            author = authors.get(post.author_id)
            reads.append(
                PostRead.model_validate(
                    {
                        **post.model_dump(),
                        "author": UserSummary.model_validate(author) if author else None,
                        "tags": [TagSummary.model_validate(tag) for tag in tags.get(post.id, [])],
                        "categories": [
                            CategorySummary.model_validate(category) for category in categories.get(post.id, [])
                        ],
                    }
                )
            )
        return reads

    async def _require(self, post_id: str) -> Post:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    # ------------------------------------------------------------------
    # Public read path
    # ------------------------------------------------------------------

    async def list_published(
        self,
        take: int = 10,
        skip: int = 0,
        tag: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[PostRead]:
        posts = await self.posts.list_published(limit=take, offset=skip, tag_slug=tag, category_slug=category)
        return await self.to_read(posts)

    async def get_published_by_slug(self, slug: str) -> PostRead:
        """
        Fetch a published post for display and count the view.

        The returned content has the post's tag names linked to their archives;
        the stored content is left as written.
        """
        post = await self.posts.get_published_by_slug(slug)
        if post is None:
            raise NotFoundError("Post not found")
        post = await self.posts.increment_view_count(post)
        read = (await self.to_read([post]))[0]
        return read.model_copy(update={"content": link_tags_in_content(read.content, read.tags)})

    async def render_feed(self) -> str:
        posts = await self.posts.list_published(limit=RSS_ITEM_LIMIT)
        site = settings.site
        return render_rss(posts, site_url=site.site_url, title=site.feed_title, description=site.feed_description)

    async def related(self, post_id: str, limit: int = 5) -> List[PostSummary]:
        """
        Rank published posts related to ``post_id``.

        Score = 3 per shared tag + 2 per shared category + a recency bonus that
        starts at 10 and loses one point per 30 days of age.
        """
        source = await self.posts.get_by_id(post_id)
        if source is None:
            return []
        tag_ids = set(await self.posts.tag_ids_for(source.id))
        category_ids = set(await self.posts.category_ids_for(source.id))
        candidates = await self.posts.related_candidates(source.id, list(tag_ids), list(category_ids), limit * 2)
        if not candidates:
            return []

        candidate_ids = [post.id for post in candidates]
        candidate_tags = await self.posts.tags_for_posts(candidate_ids)
        candidate_categories = await self.posts.categories_for_posts(candidate_ids)
        now = utc_now()

        scored = []
        for post in candidates:
            shared_tags = len(tag_ids & {tag.id for tag in candidate_tags.get(post.id, [])})
            shared_categories = len(category_ids & {c.id for c in candidate_categories.get(post.id, [])})
            age_days = (now - (post.published_at or post.created_at)).total_seconds() / 86400
            score = 3 * shared_tags + 2 * shared_categories + max(0.0, 10 - age_days / 30)
            scored.append((score, post))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [PostSummary.model_validate(post) for _, post in scored[:limit]]

    # ------------------------------------------------------------------
    # Auto-tagging
    # ------------------------------------------------------------------

    async def _auto_tags(self, content: str, title: str) -> List[str]:
        """
        Resolve the content's keywords to tag ids, creating tags as needed.

        Resolved tags have their usage counted; a resolution through a synonym
        is also counted as a synonym hit. Changes are staged on the session.
        """
        tag_ids: List[str] = []
        for keyword in extract_keywords(content, title):
            tag, via_synonym = await self.tags.resolve_keyword(keyword)
            if tag is not None:
                tag.usage_count += 1
                if via_synonym:
                    tag.synonym_hits += 1
                self.session.add(tag)
            else:
                tag = Tag(
                    name=keyword.capitalize(),
                    slug=slugify(keyword),
                    description=f"Auto-generated tag for {keyword}",
                    usage_count=1,
                )
                self.session.add(tag)
                await self.session.flush()
                logger.debug(f"Auto-created tag {tag.slug}")
            if tag.id not in tag_ids:
                tag_ids.append(tag.id)
        return tag_ids

    async def _expand_linked(self, tag_ids: Sequence[str]) -> List[str]:
        """Add every existing tag linked from the selected tags."""
        selected = await self.tags.get_many(_unique(tag_ids))
        linked = [linked_id for tag in selected for linked_id in (tag.linked_tag_ids or [])]
        return _unique([*tag_ids, *await self.tags.existing_ids(linked)])

    async def _validate_ids(self, category_ids: Sequence[str], tag_ids: Sequence[str]) -> None:
        missing_categories = set(category_ids) - set(await self.categories.existing_ids(category_ids))
        if missing_categories:
            raise InvalidRequestError("Unknown category ids", details={"category_ids": sorted(missing_categories)})
        missing_tags = set(tag_ids) - set(await self.tags.existing_ids(tag_ids))
        if missing_tags:
            raise InvalidRequestError("Unknown tag ids", details={"tag_ids": sorted(missing_tags)})

    async def _ensure_slug_free(self, slug: str, post_id: Optional[str] = None) -> None:
        existing = await self.posts.get_by_slug(slug)
        if existing is not None and existing.id != post_id:
            raise ConflictError("A post with this slug already exists")

    # ------------------------------------------------------------------
    # Editorial write path
    # ------------------------------------------------------------------

    async def create_manual(self, data: PostCreate) -> PostRead:
        """Create a post, applying sanitization, auto-tagging and derived fields."""
        title = sanitize_text(data.title)
        if not title:
            raise InvalidRequestError("Title is required")
        content = sanitize_html(data.content)
        slug = sanitize_slug(data.slug) or sanitize_slug(title)
        if not slug:
            raise InvalidRequestError("Slug could not be derived from the title")

        await self._ensure_slug_free(slug)
        if await self.users.get_by_id(data.author_id) is None:
            raise NotFoundError("Author not found")
        await self._validate_ids(data.category_ids, data.tag_ids)

        auto_tag_ids = await self._auto_tags(content, title) if data.auto_tag else []
        final_tag_ids = await self._expand_linked(_unique([*data.tag_ids, *auto_tag_ids]))

        post = Post(
            title=title,
            slug=slug,
            content=content,
            excerpt=derive_excerpt(content, data.excerpt) or None,
            featured_image=data.featured_image,
            status=data.status,
            published_at=utc_now() if data.status == PostStatus.PUBLISHED else None,
            scheduled_for=to_naive_utc(data.scheduled_for),
            seo_title=sanitize_text(data.seo_title) or None,
            seo_description=sanitize_text(data.seo_description) or None,
            author_id=data.author_id,
            allow_comments=data.allow_comments,
            language=data.language,
            reading_time=reading_time(content),
            auto_tag_ids=auto_tag_ids,
        )
        self.session.add(post)
        await self.session.flush()
        await self.posts.set_tags(post.id, final_tag_ids)
        await self.posts.set_categories(post.id, data.category_ids)
        await self.session.commit()

        logger.info(f"Created post {post.id} ({post.slug}) with {len(final_tag_ids)} tags")
        log_content_event("post_created", post_id=post.id, status=post.status, auto_tags=len(auto_tag_ids))
        return (await self.to_read([post]))[0]

    async def update(self, post_id: str, data: PostUpdate) -> PostRead:
        """
        Update a post.

        When the title or content changes the automatic features run again;
        auto-tags are then recorded on the post but attached only when the
        payload does not carry its own tag set.
        """
        post = await self._require(post_id)
        fields = data.model_dump(exclude_unset=True)
        was_published = post.status == PostStatus.PUBLISHED

        if fields.get("title") is not None:
            post.title = sanitize_text(fields["title"])
            if not post.title:
                raise InvalidRequestError("Title is required")
        if fields.get("content") is not None:
            post.content = sanitize_html(fields["content"])
        if "excerpt" in fields:
            post.excerpt = sanitize_text(fields["excerpt"]) or None
        if fields.get("slug") is not None:
            slug = sanitize_slug(fields["slug"])
            if not slug:
                raise InvalidRequestError("Slug is empty after sanitization")
            await self._ensure_slug_free(slug, post.id)
            post.slug = slug

        if "featured_image" in fields:
            post.featured_image = fields["featured_image"]
        for name in ("allow_comments", "language"):
            if fields.get(name) is not None:
                setattr(post, name, fields[name])
        for name in ("seo_title", "seo_description"):
            if name in fields:
                setattr(post, name, sanitize_text(fields[name]) or None)
        if "scheduled_for" in fields:
            post.scheduled_for = to_naive_utc(fields["scheduled_for"])
        if "published_at" in fields:
            post.published_at = to_naive_utc(fields["published_at"])
        if fields.get("status") is not None:
            post.status = fields["status"]
            if post.status == PostStatus.PUBLISHED and not was_published and post.published_at is None:
                post.published_at = utc_now()

        category_ids = fields.get("category_ids")
        manual_tag_ids = fields.get("tag_ids")
        await self._validate_ids(category_ids or [], manual_tag_ids or [])
        if category_ids is not None:
            await self.posts.set_categories(post.id, category_ids)

        if fields.get("title") is not None or fields.get("content") is not None:
            post.reading_time = reading_time(post.content)
            auto_tag_ids = await self._auto_tags(post.content, post.title) if data.auto_tag else []
            post.auto_tag_ids = auto_tag_ids
            if manual_tag_ids is not None:
                base = manual_tag_ids
            else:
                base = [*await self.posts.tag_ids_for(post.id), *auto_tag_ids]
            await self.posts.set_tags(post.id, await self._expand_linked(base))
        elif manual_tag_ids is not None:
            await self.posts.set_tags(post.id, manual_tag_ids)

        post = await self.posts.update(post)
        if post.status == PostStatus.PUBLISHED and not was_published:
            log_content_event("post_published", post_id=post.id)
        logger.info(f"Updated post {post.id}")
        return (await self.to_read([post]))[0]

    async def delete(self, post_id: str) -> None:
        if not await self.posts.delete(post_id):
            raise NotFoundError("Post not found")
        logger.info(f"Deleted post {post_id}")
        log_content_event("post_deleted", post_id=post_id)

    # ------------------------------------------------------------------
    # Admin listings and maintenance
    # ------------------------------------------------------------------

    async def list_admin(
        self,
        status: Optional[str] = None,
        author_id: Optional[str] = None,
        take: int = 1000,
        skip: int = 0,
        order_by: str = "newest",
    ) -> List[PostRead]:
        status_filter: Optional[PostStatus] = None
        if status and status.lower() != "all":
            try:
                status_filter = PostStatus(status.upper())
            except ValueError:
                raise InvalidRequestError(f"Unknown post status '{status}'")
        posts = await self.posts.list_admin(
            status=status_filter,
            author_id=author_id,
            limit=take,
            offset=skip,
            newest_first=order_by != "oldest",
        )
        return await self.to_read(posts)

    async def get_admin(self, post_id: str) -> PostRead:
        return (await self.to_read([await self._require(post_id)]))[0]

    async def list_scheduled(self) -> List[PostRead]:
        return await self.to_read(await self.posts.list_scheduled())

    async def process_scheduled(self, now: Optional[datetime] = None) -> int:
        """Publish every scheduled post whose time has come; returns how many."""
        now = now or utc_now()
        due = await self.posts.list_due(now)
        for post in due:
            post.status = PostStatus.PUBLISHED
            post.published_at = now
            post.updated_at = now
            self.session.add(post)
        if due:
            await self.session.commit()
            for post in due:
                log_content_event("post_published", post_id=post.id, scheduled=True)
            logger.info(f"Published {len(due)} scheduled posts")
        return len(due)

    async def update_trending(self) -> int:
        """Flag the tags used most by posts published in the last 30 days."""
        since = utc_now() - timedelta(days=TRENDING_WINDOW_DAYS)
        recent = await self.posts.list_published_since(since)
        occurrences: Dict[str, int] = await self.posts.tag_occurrences([post.id for post in recent])
        ranked = sorted(occurrences.items(), key=lambda item: item[1], reverse=True)[:TRENDING_TAG_LIMIT]
        trending_ids = [tag_id for tag_id, _ in ranked]
        await self.tags.set_trending(trending_ids)
        await self.session.commit()
        logger.info(f"Trending tags updated: {len(trending_ids)}")
        return len(trending_ids)
