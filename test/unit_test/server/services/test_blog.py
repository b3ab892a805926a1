"""
Unit tests for BlogService.

Covers the editorial write path (sanitization, derived fields, auto-tagging
and linked-tag expansion), the public read path and the maintenance passes
for scheduled publishing and trending tags.
"""

from datetime import timedelta

import pytest

from quillpress.core.database.base import utc_now
from quillpress.core.database.entities.posts import PostStatus
from quillpress.core.database.entities.tags import Tag
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.models.io.posts import PostCreate, PostUpdate
from quillpress.server.services.blog import BlogService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session):
    return BlogService(session)


async def _tag(session, name, **kwargs) -> Tag:
    tag = Tag(name=name, slug=name.lower(), **kwargs)
    session.add(tag)
    await session.commit()
    await session.refresh(tag)
    return tag


def _post(author, title="A title", content="<p>Body</p>", **kwargs) -> PostCreate:
    kwargs.setdefault("auto_tag", False)
    return PostCreate(title=title, content=content, author_id=author.id, **kwargs)


class TestCreateManual:
    async def test_sanitizes_and_derives_fields(self, service, author):
        """Test the title is cleaned and slug, reading time and excerpt are derived."""
        post = await service.create_manual(
            _post(author, title="Hello <b>World</b>", content="<p>Python tips</p><script>alert(1)</script>")
        )

        assert post.title == "Hello World"
        assert post.slug == "hello-world"
        assert "<script" not in post.content
        assert post.reading_time == 1
        assert post.excerpt == "Python tips..."
        assert post.status == PostStatus.DRAFT
        assert post.published_at is None
        assert post.author.username == author.username

    async def test_author_excerpt_wins(self, service, author):
        post = await service.create_manual(_post(author, excerpt="<i>Short</i> summary"))
        assert post.excerpt == "Short summary"

    async def test_published_status_stamps_published_at(self, service, author):
        post = await service.create_manual(_post(author, status=PostStatus.PUBLISHED))
        assert post.published_at is not None

    async def test_explicit_slug_is_sanitized(self, service, author):
        post = await service.create_manual(_post(author, slug="My Custom  Slug!"))
        assert post.slug == "my-custom-slug"

    async def test_duplicate_slug_conflicts(self, service, author):
        await service.create_manual(_post(author, title="Same"))
        with pytest.raises(ConflictError):
            await service.create_manual(_post(author, title="Same"))

    async def test_unknown_author(self, service):
        with pytest.raises(NotFoundError):
            await service.create_manual(PostCreate(title="Orphan", author_id="missing", auto_tag=False))

    async def test_unknown_tag_ids_rejected(self, service, author):
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.create_manual(_post(author, tag_ids=["nope"]))
        assert exc_info.value.details == {"tag_ids": ["nope"]}

    async def test_unknown_category_ids_rejected(self, service, author):
        with pytest.raises(InvalidRequestError):
            await service.create_manual(_post(author, category_ids=["nope"]))

    async def test_title_empty_after_sanitization(self, service, author):
        with pytest.raises(InvalidRequestError):
            await service.create_manual(_post(author, title="<b></b>"))


class TestAutoTagging:
    async def test_creates_tags_from_keywords(self, service, session, author):
        """Test keywords without a matching tag become new tags attached to the post."""
        post = await service.create_manual(
            _post(author, title="Python tips", content="<p>Python tips</p>", auto_tag=True)
        )

        slugs = {tag.slug for tag in post.tags}
        assert slugs == {"python", "tips"}
        assert len(post.auto_tag_ids) == 2

        created = await session.get(Tag, post.auto_tag_ids[0])
        assert created.name == "Python"
        assert created.slug == "python"
        assert created.usage_count == 1
        assert created.description == "Auto-generated tag for python"

    async def test_resolves_existing_tag_and_counts_usage(self, service, session, author):
        existing = await _tag(session, "Python", usage_count=4)

        post = await service.create_manual(_post(author, title="Notes", content="<p>python python</p>", auto_tag=True))

        assert [tag.id for tag in post.tags] == [existing.id]
        await session.refresh(existing)
        assert existing.usage_count == 5
        assert existing.synonym_hits == 0

    async def test_resolves_synonym_and_counts_hit(self, service, session, author):
        """Test a keyword listed as a synonym resolves to that tag."""
        existing = await _tag(session, "Python", synonyms=["py"])

        post = await service.create_manual(_post(author, title="Snippets", content="<p>py py</p>", auto_tag=True))

        assert [tag.id for tag in post.tags] == [existing.id]
        await session.refresh(existing)
        assert existing.synonym_hits == 1
        assert existing.usage_count == 1

    async def test_linked_tags_are_expanded(self, service, session, author):
        linked = await _tag(session, "Programming")
        selected = await _tag(session, "Python", linked_tag_ids=[linked.id, "gone"])

        post = await service.create_manual(_post(author, tag_ids=[selected.id]))

        # tags come back ordered by name
        assert [tag.id for tag in post.tags] == [linked.id, selected.id]

    async def test_update_with_manual_tags_records_auto_tags_only(self, service, author):
        """Test auto-tags are recorded but not attached when the payload carries tag ids."""
        post = await service.create_manual(_post(author))

        updated = await service.update(post.id, PostUpdate(content="<p>rust rust</p>", tag_ids=[]))

        assert updated.tags == []
        assert len(updated.auto_tag_ids) == 1

    async def test_update_without_manual_tags_attaches_auto_tags(self, service, author):
        post = await service.create_manual(_post(author))

        updated = await service.update(post.id, PostUpdate(content="<p>rust rust</p>"))

        assert [tag.slug for tag in updated.tags] == ["rust"]
        assert updated.auto_tag_ids == [updated.tags[0].id]


class TestPublicReadPath:
    async def test_get_published_by_slug_counts_view_and_links_tags(self, service, session, author):
        tag = await _tag(session, "Python")
        await service.create_manual(
            _post(
                author,
                title="Why Python",
                content="<p>Python is fun. Python again.</p>",
                tag_ids=[tag.id],
                status=PostStatus.PUBLISHED,
            )
        )

        read = await service.get_published_by_slug("why-python")

        assert read.view_count == 1
        assert read.content.count('class="tag-link"') == 1
        assert '<a href="/blog?tag=python" class="tag-link">Python</a> is fun' in read.content

        again = await service.get_published_by_slug("why-python")
        assert again.view_count == 2

    async def test_draft_is_not_public(self, service, author):
        await service.create_manual(_post(author, title="Hidden"))
        with pytest.raises(NotFoundError):
            await service.get_published_by_slug("hidden")

    async def test_list_published_filters_by_tag(self, service, session, author):
        tag = await _tag(session, "Python")
        await service.create_manual(_post(author, title="Tagged", tag_ids=[tag.id], status=PostStatus.PUBLISHED))
        await service.create_manual(_post(author, title="Untagged", status=PostStatus.PUBLISHED))
        await service.create_manual(_post(author, title="Draft", tag_ids=[tag.id]))

        assert {post.slug for post in await service.list_published()} == {"tagged", "untagged"}
        assert [post.slug for post in await service.list_published(tag="python")] == ["tagged"]

    async def test_render_feed_includes_published_posts(self, service, author):
        await service.create_manual(_post(author, title="Feed Me", status=PostStatus.PUBLISHED))
        await service.create_manual(_post(author, title="Not Yet"))

        feed = await service.render_feed()

        assert "<title>Feed Me</title>" in feed
        assert "Not Yet" not in feed

    async def test_related_ranks_shared_tags_first(self, service, session, author):
        a = await _tag(session, "Alpha")
        b = await _tag(session, "Beta")
        source = await service.create_manual(
            _post(author, title="Source", tag_ids=[a.id, b.id], status=PostStatus.PUBLISHED)
        )
        both = await service.create_manual(
            _post(author, title="Both", tag_ids=[a.id, b.id], status=PostStatus.PUBLISHED)
        )
        one = await service.create_manual(_post(author, title="One", tag_ids=[a.id], status=PostStatus.PUBLISHED))
        await service.create_manual(_post(author, title="Draft", tag_ids=[a.id, b.id]))
        await service.create_manual(_post(author, title="Unrelated", status=PostStatus.PUBLISHED))

        related = await service.related(source.id)

        assert [post.id for post in related] == [both.id, one.id]

    async def test_related_unknown_post_is_empty(self, service):
        assert await service.related("missing") == []


class TestUpdateAndDelete:
    async def test_update_fields(self, service, author):
        post = await service.create_manual(_post(author))

        updated = await service.update(
            post.id,
            PostUpdate(title="New <i>title</i>", slug="fresh slug", status=PostStatus.PUBLISHED, auto_tag=False),
        )

        assert updated.title == "New title"
        assert updated.slug == "fresh-slug"
        assert updated.status == PostStatus.PUBLISHED
        assert updated.published_at is not None

    async def test_update_slug_conflict(self, service, author):
        await service.create_manual(_post(author, title="Taken"))
        post = await service.create_manual(_post(author, title="Other"))

        with pytest.raises(ConflictError):
            await service.update(post.id, PostUpdate(slug="taken"))

    async def test_update_missing_post(self, service):
        with pytest.raises(NotFoundError):
            await service.update("missing", PostUpdate(title="x"))

    async def test_delete(self, service, author):
        post = await service.create_manual(_post(author))
        await service.delete(post.id)

        with pytest.raises(NotFoundError):
            await service.get_admin(post.id)
        with pytest.raises(NotFoundError):
            await service.delete(post.id)


class TestAdminAndMaintenance:
    async def test_list_admin_status_filter(self, service, author):
        await service.create_manual(_post(author, title="Draft One"))
        await service.create_manual(_post(author, title="Live One", status=PostStatus.PUBLISHED))

        assert len(await service.list_admin(status="all")) == 2
        assert [p.slug for p in await service.list_admin(status="published")] == ["live-one"]

        with pytest.raises(InvalidRequestError):
            await service.list_admin(status="bogus")

    async def test_process_scheduled_publishes_due_posts(self, service, author):
        due = await service.create_manual(
            _post(author, title="Due", status=PostStatus.SCHEDULED, scheduled_for=utc_now() - timedelta(minutes=5))
        )
        later = await service.create_manual(
            _post(author, title="Later", status=PostStatus.SCHEDULED, scheduled_for=utc_now() + timedelta(days=1))
        )

        assert [p.id for p in await service.list_scheduled()] == [due.id, later.id]
        assert await service.process_scheduled() == 1

        assert (await service.get_admin(due.id)).status == PostStatus.PUBLISHED
        assert (await service.get_admin(due.id)).published_at is not None
        assert (await service.get_admin(later.id)).status == PostStatus.SCHEDULED
        assert await service.process_scheduled() == 0

    async def test_update_trending_flags_recent_tags(self, service, session, author):
        used = await _tag(session, "Used")
        stale = await _tag(session, "Stale", trending=True)
        await service.create_manual(_post(author, tag_ids=[used.id], status=PostStatus.PUBLISHED))

        assert await service.update_trending() == 1

        await session.refresh(used)
        await session.refresh(stale)
        assert used.trending is True
        assert stale.trending is False
