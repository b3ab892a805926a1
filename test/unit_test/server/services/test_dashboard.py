"""Unit tests for DashboardService."""

import pytest

from quillpress.core.database.entities.categories import Category
from quillpress.core.database.entities.comments import Comment
from quillpress.core.database.entities.posts import Post, PostStatus
from quillpress.core.database.entities.tags import Tag
from quillpress.server.services.dashboard import DashboardService


@pytest.mark.asyncio
async def test_stats_counts_content(session, author):
    """Test the dashboard counts posts by status and the other content tables."""
    posts = [
        Post(title="a", slug="a", author_id=author.id, status=PostStatus.PUBLISHED),
        Post(title="b", slug="b", author_id=author.id, status=PostStatus.PUBLISHED),
        Post(title="c", slug="c", author_id=author.id, status=PostStatus.DRAFT),
        Post(title="d", slug="d", author_id=author.id, status=PostStatus.SCHEDULED),
    ]
    session.add_all(posts)
    session.add_all([Tag(name="t", slug="t"), Category(name="c", slug="c")])
    await session.flush()
    session.add_all(
        [
            Comment(post_id=posts[0].id, content="ok"),
            Comment(post_id=posts[0].id, content="held", is_approved=False),
        ]
    )
    await session.commit()

    stats = await DashboardService(session).stats()

    assert stats.total_docs == 4
    assert (stats.published, stats.drafts, stats.scheduled, stats.archived) == (2, 1, 1, 0)
    assert stats.users == 1
    assert stats.pending_comments == 1
    assert (stats.tags, stats.categories, stats.pages, stats.media) == (1, 1, 0, 0)


@pytest.mark.asyncio
async def test_stats_on_empty_database(session):
    stats = await DashboardService(session).stats()
    assert stats.model_dump() == {
        "total_docs": 0,
        "published": 0,
        "drafts": 0,
        "scheduled": 0,
        "archived": 0,
        "users": 0,
        "pages": 0,
        "pending_comments": 0,
        "media": 0,
        "tags": 0,
        "categories": 0,
    }
