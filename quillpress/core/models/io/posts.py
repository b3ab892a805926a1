"""
Post I/O models for API requests and responses.

``PostRead`` embeds the author, categories and tags so the admin and the
public blog can render a post without follow-up requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from quillpress.core.database.entities.posts import PostStatus

from .categories import CategorySummary
from .tags import TagSummary
from .users import UserSummary


class PostRead(BaseModel):
    """Schema for reading a post from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: PostStatus
    published_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    author_id: str
    allow_comments: bool
    view_count: int
    reading_time: Optional[int] = None
    language: str
    auto_tag_ids: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    author: Optional[UserSummary] = None
    categories: List[CategorySummary] = Field(default_factory=list)
    tags: List[TagSummary] = Field(default_factory=list)


class PostSummary(BaseModel):
    """Compact post card used for related-post lists."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    reading_time: Optional[int] = None
    published_at: Optional[datetime] = None
    created_at: datetime


class PostCreate(BaseModel):
    """Schema for creating a post with automatic tagging."""

    title: str = Field(min_length=1, max_length=300)
    content: str = ""
    excerpt: Optional[str] = None
    slug: Optional[str] = Field(default=None, max_length=200)
    featured_image: Optional[str] = Field(default=None, max_length=500)
    status: PostStatus = PostStatus.DRAFT
    scheduled_for: Optional[datetime] = None
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = None
    author_id: str
    allow_comments: bool = True
    language: str = Field(default="en", max_length=10)
    category_ids: List[str] = Field(default_factory=list)
    tag_ids: List[str] = Field(default_factory=list)
    auto_tag: bool = Field(default=True, description="Attach tags derived from the content keywords")


class PostUpdate(BaseModel):
    """Schema for updating a post via API."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    slug: Optional[str] = Field(default=None, max_length=200)
    featured_image: Optional[str] = Field(default=None, max_length=500)
    status: Optional[PostStatus] = None
    published_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = None
    allow_comments: Optional[bool] = None
    language: Optional[str] = Field(default=None, max_length=10)
    category_ids: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = None
    auto_tag: bool = True


class PublishedCountResponse(BaseModel):
    published: int = Field(description="Number of scheduled posts published by this pass")


class TrendingCountResponse(BaseModel):
    trending: int = Field(description="Number of tags now flagged as trending")
