"""
Comment entity model.

Comments thread one level deep: a reply points at its root comment through
``parent_id``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class CommentBase(Base):
    """Base fields for comments."""

    content: str = Field(sa_type=Text)
    author_name: Optional[str] = Field(default=None, max_length=120)
    author_email: Optional[str] = Field(default=None, max_length=150)
    is_approved: bool = Field(default=True, index=True)
    upvotes: int = Field(default=0)
    downvotes: int = Field(default=0)


class Comment(CommentBase, table=True):
    """Persistent comment.

    Table: comments
    """

    __tablename__ = "comments"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    post_id: str = Field(foreign_key="posts.id", index=True, ondelete="CASCADE", max_length=32)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", ondelete="SET NULL", max_length=32)
    parent_id: Optional[str] = Field(
        default=None, foreign_key="comments.id", index=True, ondelete="CASCADE", max_length=32
    )

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Comment(id={self.id}, post_id={self.post_id})"
