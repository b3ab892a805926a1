"""Service for the admin dashboard counters."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.database.entities.posts import PostStatus
from quillpress.core.database.repositories import (
    CategoryRepository,
    CommentRepository,
    MediaRepository,
    PageRepository,
    PostRepository,
    TagRepository,
    UserRepository,
)
from quillpress.core.models.io.system import DashboardStats


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.posts = PostRepository(session)

    async def stats(self) -> DashboardStats:
        by_status = {status: await self.posts.count({"status": status}) for status in PostStatus}
        return DashboardStats(
            total_docs=await self.posts.count(),
            published=by_status[PostStatus.PUBLISHED],
            drafts=by_status[PostStatus.DRAFT],
            scheduled=by_status[PostStatus.SCHEDULED],
            archived=by_status[PostStatus.ARCHIVED],
            users=await UserRepository(self.session).count(),
            pages=await PageRepository(self.session).count(),
            pending_comments=await CommentRepository(self.session).count({"is_approved": False}),
            media=await MediaRepository(self.session).count(),
            tags=await TagRepository(self.session).count(),
            categories=await CategoryRepository(self.session).count(),
        )
