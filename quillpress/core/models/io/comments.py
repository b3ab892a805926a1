"""
Comment I/O models for API requests and responses.

Public thread responses omit the commenter's e-mail address; the admin list
includes it along with the title and slug of the commented post.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .users import UserSummary


class CommentCreate(BaseModel):
    """Schema for posting a comment."""

    post_id: str
    content: str = Field(min_length=1, max_length=3000)
    author_name: Optional[str] = Field(default=None, max_length=120)
    author_email: Optional[str] = Field(default=None, max_length=150)
    parent_id: Optional[str] = None
    user_id: Optional[str] = None


class CommentRead(BaseModel):
    """Schema for reading a comment from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    user_id: Optional[str] = None
    parent_id: Optional[str] = None
    content: str
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    is_approved: bool
    upvotes: int
    downvotes: int
    created_at: datetime
    updated_at: datetime


class PublicCommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    parent_id: Optional[str] = None
    content: str
    author_name: Optional[str] = None
    upvotes: int
    downvotes: int
    created_at: datetime
    user: Optional[UserSummary] = None


class CommentThreadRead(PublicCommentRead):
    """A root comment with its replies, oldest reply first."""

    replies: List[PublicCommentRead] = Field(default_factory=list)


class CommentAdminRead(CommentRead):
    post_title: Optional[str] = None
    post_slug: Optional[str] = None


class CommentVote(BaseModel):
    up: bool = False
    down: bool = False
