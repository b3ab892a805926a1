"""
Post entity models.

This module contains the blog post table and the two link tables that attach
tags and categories to posts. Relations are resolved by the repositories with
explicit joins; the entities carry no ORM relationships.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import DateTime, String, Text
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class PostStatus(str, Enum):
    """Publication state of a post."""

    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class PostBase(Base):
    """Base fields for blog posts."""

    title: str = Field(max_length=300, description="Post title (plain text)")
    slug: str = Field(max_length=200, unique=True, index=True, description="Unique URL slug")
    content: str = Field(default="", sa_type=Text, description="Sanitized HTML body")
    excerpt: Optional[str] = Field(default=None, sa_type=Text, description="Plain-text summary")
    featured_image: Optional[str] = Field(default=None, max_length=500)
    status: PostStatus = Field(default=PostStatus.DRAFT, sa_type=String(16), index=True)
    published_at: Optional[datetime] = Field(default=None, sa_type=DateTime(), index=True)
    scheduled_for: Optional[datetime] = Field(default=None, sa_type=DateTime(), index=True)
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = Field(default=None, sa_type=Text)
    allow_comments: bool = Field(default=True)
    view_count: int = Field(default=0)
    reading_time: Optional[int] = Field(default=None, description="Estimated minutes to read")
    language: str = Field(default="en", max_length=10)


class Post(PostBase, table=True):
    """Persistent blog post.

    Table: posts
    """

    __tablename__ = "posts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    auto_tag_ids: List[str] = Field(default_factory=list, sa_type=JSON, description="Tags attached by auto-tagging")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Post(id={self.id}, slug={self.slug}, status={self.status})"


class PostTag(Base, table=True):
    """Link between a post and a tag.

    Table: post_tags
    """

    __tablename__ = "post_tags"
    __table_args__ = ({"extend_existing": True},)

    post_id: str = Field(foreign_key="posts.id", primary_key=True, ondelete="CASCADE", max_length=32)
    tag_id: str = Field(foreign_key="tags.id", primary_key=True, ondelete="CASCADE", index=True, max_length=32)


class PostCategory(Base, table=True):
    """Link between a post and a category.

    Table: post_categories
    """

    __tablename__ = "post_categories"
    __table_args__ = ({"extend_existing": True},)

    post_id: str = Field(foreign_key="posts.id", primary_key=True, ondelete="CASCADE", max_length=32)
    category_id: str = Field(
        foreign_key="categories.id", primary_key=True, ondelete="CASCADE", index=True, max_length=32
    )
