"""
Service for post comments.

Comments are stored approved. Threads are one level deep: a reply to a reply
is attached to the root comment of the thread.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import sanitize_email, sanitize_text
from quillpress.core.database.entities.comments import Comment
from quillpress.core.database.entities.users import User
from quillpress.core.database.repositories import CommentRepository, PostRepository, UserRepository
from quillpress.core.errors import InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.comments import (
    CommentAdminRead,
    CommentCreate,
    CommentRead,
    CommentThreadRead,
    PublicCommentRead,
)
from quillpress.core.models.io.users import UserSummary

logger = get_logger(__name__)


class CommentService:
    """Service for creating, listing, voting on and deleting comments."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.comments = CommentRepository(session)
        self.posts = PostRepository(session)
        self.users = UserRepository(session)

    async def create(self, data: CommentCreate) -> CommentRead:
        content = sanitize_text(data.content)
        if not content:
            raise InvalidRequestError("Comment content is required")
        author_email: Optional[str] = None
        if data.author_email:
            author_email = sanitize_email(data.author_email)
            if author_email is None:
                raise InvalidRequestError("Invalid email address")

        post = await self.posts.get_by_id(data.post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if not post.allow_comments:
            raise InvalidRequestError("Comments are disabled for this post")

        parent_id = None
        if data.parent_id:
            parent = await self.comments.get_by_id(data.parent_id)
            if parent is None or parent.post_id != post.id:
                raise InvalidRequestError("Parent comment not found on this post")
            parent_id = parent.parent_id or parent.id

        if data.user_id and await self.users.get_by_id(data.user_id) is None:
            raise NotFoundError("User not found")

        comment = Comment(
            post_id=post.id,
            user_id=data.user_id or None,
            parent_id=parent_id,
            content=content,
            author_name=sanitize_text(data.author_name) or None,
            author_email=author_email,
            is_approved=True,
        )
        comment = await self.comments.create(comment)
        logger.info(f"Comment {comment.id} added to post {post.id}")
        return CommentRead.model_validate(comment)

    def _public(self, comment: Comment, users: Dict[str, User]) -> dict:
        user = users.get(comment.user_id) if comment.user_id else None
        return {
            **comment.model_dump(),
            "user": UserSummary.model_validate(user) if user else None,
        }

    async def thread(self, post_id: str) -> List[CommentThreadRead]:
        """Approved root comments (newest first), each with its approved replies (oldest first)."""
        roots = await self.comments.list_roots(post_id)
        replies = await self.comments.replies_for([root.id for root in roots])
        everyone = [*roots, *(reply for group in replies.values() for reply in group)]
        users = {u.id: u for u in await self.users.get_many(list({c.user_id for c in everyone if c.user_id}))}

        return [
            CommentThreadRead.model_validate(
                {
                    **self._public(root, users),
                    "replies": [
                        PublicCommentRead.model_validate(self._public(reply, users))
                        for reply in replies.get(root.id, [])
                    ],
                }
            )
            for root in roots
        ]

    async def list_admin(
        self, post_id: Optional[str] = None, skip: int = 0, take: int = 50
    ) -> List[CommentAdminRead]:
        comments = await self.comments.list_for_admin(post_id=post_id, limit=take, offset=skip)
        posts = {p.id: p for p in await self.posts.get_many(list({c.post_id for c in comments}))}
        result = []
        for comment in comments:
            post = posts.get(comment.post_id)
            result.append(
                CommentAdminRead.model_validate(
                    {
                        **comment.model_dump(),
                        "post_title": post.title if post else None,
                        "post_slug": post.slug if post else None,
                    }
                )
            )
        return result

    async def vote(self, comment_id: str, up: bool, down: bool) -> CommentRead:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        comment = await self.comments.vote(comment, up=up, down=down)
        return CommentRead.model_validate(comment)

    async def delete(self, comment_id: str) -> None:
        if not await self.comments.delete(comment_id):
            raise NotFoundError("Comment not found")
        logger.info(f"Deleted comment {comment_id}")
