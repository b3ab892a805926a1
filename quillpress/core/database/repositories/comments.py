"""
Comment repository.

Threads are one level deep, so a post's discussion is loaded as two queries:
the approved root comments, then the approved replies of those roots.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.comments import Comment
from .base import AsyncBaseRepository, QueryBuilder


class CommentRepository(AsyncBaseRepository[Comment]):
    """Repository for comment data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Comment)

    async def delete(self, entity_id: str | int) -> bool:
        """Delete a comment and its replies."""
        comment = await self.get_by_id(entity_id)
        if comment is None:
            return False
        await self.session.execute(sa_delete(Comment).where(Comment.parent_id == comment.id))
        await self.session.delete(comment)
        await self.session.commit()
        return True

    async def list_roots(self, post_id: str) -> List[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id, Comment.parent_id.is_(None), Comment.is_approved == True)  # noqa: E712
            .order_by(Comment.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replies_for(self, parent_ids: Sequence[str]) -> Dict[str, List[Comment]]:
        """Approved replies grouped by parent, oldest first."""
        grouped: Dict[str, List[Comment]] = defaultdict(list)
        if not parent_ids:
            return grouped
        stmt = (
            select(Comment)
            .where(Comment.parent_id.in_(list(parent_ids)), Comment.is_approved == True)  # noqa: E712
            .order_by(Comment.created_at.asc())
        )
        for reply in (await self.session.execute(stmt)).scalars().all():
            grouped[reply.parent_id].append(reply)
        return grouped

    async def list_for_admin(
        self, post_id: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Comment]:
        stmt = QueryBuilder.apply_filters(select(Comment), Comment, {"post_id": post_id})
        stmt = QueryBuilder.apply_pagination(stmt.order_by(Comment.created_at.desc()), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def vote(self, comment: Comment, up: bool, down: bool) -> Comment:
        values = {}
        if up:
            values["upvotes"] = Comment.upvotes + 1
        if down:
            values["downvotes"] = Comment.downvotes + 1
        if values:
            await self.session.execute(update(Comment).where(Comment.id == comment.id).values(**values))
            await self.session.commit()
            await self.session.refresh(comment)
        return comment
