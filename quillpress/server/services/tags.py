"""
Service for tag administration.

Covers single-tag CRUD plus the maintenance operations editors run over the
tag vocabulary: merging duplicates, bulk re-parenting and styling, locking,
converting tags into categories, and duplicate detection.

Locked tags reject edits and deletion; bulk operations skip them silently.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import find_duplicate_pairs, slugify
from quillpress.core.database.entities.categories import Category
from quillpress.core.database.entities.tags import DEFAULT_TAG_COLOR, Tag
from quillpress.core.database.repositories import CategoryRepository, PostRepository, TagRepository
from quillpress.core.errors import ConflictError, InvalidRequestError, LockedTagError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.tags import (
    DuplicatePairRead,
    DuplicateTagSummary,
    PublicTagRead,
    TagAdminRead,
    TagBulkStyleRequest,
    TagConversionResult,
    TagCreate,
    TagMergeRequest,
    TagRead,
    TagSummary,
    TagUpdate,
)
from quillpress.core.monitoring import log_content_event

logger = get_logger(__name__)


def normalize_synonyms(synonyms: Optional[Sequence[str]]) -> List[str]:
    """Lower-case and trim synonyms, dropping empties and repeats."""
    cleaned = (synonym.strip().lower() for synonym in synonyms or [])
    return list(dict.fromkeys(synonym for synonym in cleaned if synonym))


def normalize_linked_ids(ids: Optional[Sequence[str]], own_id: Optional[str] = None) -> List[str]:
    cleaned = (tag_id.strip() for tag_id in ids or [])
    return list(dict.fromkeys(tag_id for tag_id in cleaned if tag_id and tag_id != own_id))


class TagService:
    """Service for tag administration and public tag listings."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tags = TagRepository(session)
        self.posts = PostRepository(session)
        self.categories = CategoryRepository(session)

    async def _require(self, tag_id: str) -> Tag:
        tag = await self.tags.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    async def _creates_cycle(self, tag_id: str, parent_id: str) -> bool:
        """True when ``tag_id`` is ``parent_id`` or one of its ancestors."""
        seen = set()
        current: Optional[str] = parent_id
        while current and current not in seen:
            if current == tag_id:
                return True
            seen.add(current)
            parent = await self.tags.get_by_id(current)
            current = parent.parent_id if parent else None
        return False

    async def _ancestor_ids(self, tag_id: str) -> List[str]:
        """Parent chain of ``tag_id``, nearest first."""
        ancestors: List[str] = []
        tag = await self.tags.get_by_id(tag_id)
        current = tag.parent_id if tag else None
        while current and current not in ancestors and current != tag_id:
            ancestors.append(current)
            parent = await self.tags.get_by_id(current)
            current = parent.parent_id if parent else None
        return ancestors

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_admin(self, skip: int = 0, take: int = 50) -> List[TagAdminRead]:
        tags = await self.tags.list(limit=take, offset=skip)
        ids = [tag.id for tag in tags]
        parents = {p.id: p for p in await self.tags.get_many([t.parent_id for t in tags if t.parent_id])}
        children = await self.tags.children_of(ids)
        counts = await self.posts.tag_post_counts(ids)

        result = []
        for tag in tags:
            parent = parents.get(tag.parent_id) if tag.parent_id else None
            result.append(
                TagAdminRead.model_validate(
                    {
                        **tag.model_dump(),
                        "parent": TagSummary.model_validate(parent) if parent else None,
                        "children": [TagSummary.model_validate(child) for child in children.get(tag.id, [])],
                        "post_count": counts.get(tag.id, 0),
                    }
                )
            )
        return result

    async def list_public(self) -> List[PublicTagRead]:
        return [PublicTagRead.model_validate(tag) for tag in await self.tags.list_by_name()]

    async def list_trending(self, limit: int = 10) -> List[PublicTagRead]:
        return [PublicTagRead.model_validate(tag) for tag in await self.tags.list_trending(limit)]

    # ------------------------------------------------------------------
    # Single-tag CRUD
    # ------------------------------------------------------------------

    async def create(self, data: TagCreate) -> TagRead:
        name = data.name.strip()
        if not name:
            raise InvalidRequestError("Tag name is required")
        slug = slugify(data.slug or name)
        if not slug:
            raise InvalidRequestError("Tag slug could not be derived from the name")
        if await self.tags.find_conflict(slug, name):
            raise ConflictError("A tag with the same name or slug already exists")
        if data.parent_id and await self.tags.get_by_id(data.parent_id) is None:
            raise NotFoundError("Parent tag not found")

        tag = Tag(
            name=name,
            slug=slug,
            description=data.description,
            color=data.color or DEFAULT_TAG_COLOR,
            icon=data.icon,
            parent_id=data.parent_id or None,
            featured=data.featured,
            locked=data.locked,
            synonyms=normalize_synonyms(data.synonyms),
            linked_tag_ids=normalize_linked_ids(data.linked_tag_ids),
        )
        tag = await self.tags.create(tag)
        logger.info(f"Created tag {tag.id} ({tag.slug})")
        return TagRead.model_validate(tag)

    async def update(self, tag_id: str, data: TagUpdate) -> TagRead:
        tag = await self._require(tag_id)
        if tag.locked and not data.force_unlock:
            raise LockedTagError(tag.id, "modified")
        fields = data.model_dump(exclude_unset=True, exclude={"force_unlock"})

        name = tag.name
        if fields.get("name") is not None:
            name = fields["name"].strip()
            if not name:
                raise InvalidRequestError("Tag name is required")
        if fields.get("name") is not None or fields.get("slug") is not None:
            slug = slugify(fields.get("slug") or name)
            if not slug:
                raise InvalidRequestError("Tag slug could not be derived from the name")
            if await self.tags.find_conflict(slug, name, exclude_id=tag.id):
                raise ConflictError("A tag with the same name or slug already exists")
            tag.name = name
            tag.slug = slug

        for nullable in ("description", "color", "icon"):
            if nullable in fields:
                setattr(tag, nullable, fields[nullable])
        for flag in ("featured", "locked"):
            if fields.get(flag) is not None:
                setattr(tag, flag, fields[flag])
        if fields.get("synonyms") is not None:
            tag.synonyms = normalize_synonyms(fields["synonyms"])
        if fields.get("linked_tag_ids") is not None:
            tag.linked_tag_ids = normalize_linked_ids(fields["linked_tag_ids"], own_id=tag.id)

        if "parent_id" in fields:
            parent_id = fields["parent_id"]
            if parent_id is None:
                tag.parent_id = None
            elif parent_id == tag.id:
                raise InvalidRequestError("A tag cannot be its own parent")
            else:
                if await self.tags.get_by_id(parent_id) is None:
                    raise NotFoundError("Parent tag not found")
                if await self._creates_cycle(tag.id, parent_id):
                    raise InvalidRequestError("Parent assignment would create a cycle")
                tag.parent_id = parent_id

        tag = await self.tags.update(tag)
        return TagRead.model_validate(tag)

    async def delete(self, tag_id: str) -> None:
        tag = await self._require(tag_id)
        if tag.locked:
            raise LockedTagError(tag.id, "deleted")
        await self.posts.remove_tag_links([tag.id])
        await self.tags.detach_children([tag.id])
        await self.session.delete(tag)
        await self.session.commit()
        logger.info(f"Deleted tag {tag_id}")

    # ------------------------------------------------------------------
    # Maintenance operations
    # ------------------------------------------------------------------

    async def merge(self, data: TagMergeRequest) -> TagRead:
        """
        Fold the source tags into the target.

        The target ends up attached to every post that carried a source or the
        target itself, adopts the sources' children and counts the merge. The
        sources are deleted.
        """
        target = await self.tags.get_by_id(data.target_id)
        if target is None:
            raise NotFoundError("Target tag not found")
        source_ids = list(dict.fromkeys(data.source_ids))
        if target.id in source_ids:
            raise InvalidRequestError("Target tag cannot be one of the sources")
        sources = await self.tags.get_many(source_ids)

        post_ids = await self.posts.post_ids_for_tags([*source_ids, target.id])
        await self.posts.add_tag_links(target.id, post_ids)

        target.usage_count = len(post_ids)
        target.merge_count += len(source_ids)
        if set(await self._ancestor_ids(target.id)) & set(source_ids):
            target.parent_id = None
        self.session.add(target)
        await self.session.flush()

        await self.tags.reparent_children(source_ids, target.id)
        await self.posts.remove_tag_links(source_ids)
        for source in sources:
            await self.session.delete(source)

        target = await self.tags.update(target)
        logger.info(f"Merged {len(sources)} tags into {target.id}")
        log_content_event("tags_merged", target_id=target.id, source_ids=source_ids, posts=len(post_ids))
        return TagRead.model_validate(target)

    async def bulk_set_parent(self, ids: Sequence[str], parent_id: Optional[str]) -> int:
        """Re-parent unlocked tags, skipping any assignment that would form a cycle."""
        if parent_id and await self.tags.get_by_id(parent_id) is None:
            raise NotFoundError("Parent tag not found")
        updated = 0
        for tag in await self.tags.get_many(ids):
            if tag.locked or tag.id == parent_id:
                continue
            if parent_id and await self._creates_cycle(tag.id, parent_id):
                continue
            tag.parent_id = parent_id
            self.session.add(tag)
            updated += 1
        await self.session.commit()
        return updated

    async def bulk_style(self, data: TagBulkStyleRequest) -> int:
        fields = data.model_dump(exclude_unset=True, exclude={"ids"})
        updated = 0
        for tag in await self.tags.get_many(data.ids):
            if tag.locked:
                continue
            for name, value in fields.items():
                if name == "featured" and value is None:
                    continue
                setattr(tag, name, value)
            self.session.add(tag)
            updated += 1
        await self.session.commit()
        return updated

    async def set_locked(self, ids: Sequence[str], locked: bool) -> int:
        tags = await self.tags.get_many(ids)
        for tag in tags:
            tag.locked = locked
            self.session.add(tag)
        await self.session.commit()
        return len(tags)

    async def convert_to_categories(self, ids: Sequence[str]) -> List[TagConversionResult]:
        """
        Give each tag a matching category and file the tag's posts under it.

        An existing category with the same slug or name is reused. Tag links
        are kept. Unknown tag ids are skipped.
        """
        tags: Dict[str, Tag] = {tag.id: tag for tag in await self.tags.get_many(ids)}
        results = []
        for tag_id in dict.fromkeys(ids):
            tag = tags.get(tag_id)
            if tag is None:
                continue
            category = await self.categories.find_by_slug_or_name(tag.slug, tag.name)
            if category is None:
                category = Category(
                    name=tag.name,
                    slug=tag.slug,
                    description=tag.description,
                    color=tag.color,
                    icon=tag.icon,
                    featured=tag.featured,
                )
                self.session.add(category)
                await self.session.flush()
            await self.posts.add_category_links(category.id, await self.posts.post_ids_for_tags([tag.id]))
            results.append(TagConversionResult(tag_id=tag.id, category_id=category.id))
        await self.session.commit()
        logger.info(f"Converted {len(results)} tags to categories")
        return results

    async def find_duplicates(self, threshold: float) -> List[DuplicatePairRead]:
        if not 0 <= threshold <= 1:
            raise InvalidRequestError("Threshold must be between 0 and 1")
        tags = await self.tags.list_by_name()
        return [
            DuplicatePairRead(
                a=DuplicateTagSummary.model_validate(a),
                b=DuplicateTagSummary.model_validate(b),
                score=score,
            )
            for a, b, score in find_duplicate_pairs(tags, threshold=threshold)
        ]
