"""
Page I/O models for API requests and responses.

Page ``content`` is either an HTML string or a page-builder document (an
object with ``sections`` and ``globalStyles``), so it is typed loosely here and
normalized by the page service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from quillpress.core.database.entities.pages import PageStatus, PageType

PageContent = Union[str, Dict[str, Any]]


class PageVersionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    page_id: str
    version_number: int
    title: str
    content: Optional[PageContent] = None
    custom_css: Optional[str] = None
    custom_js: Optional[str] = None
    change_note: Optional[str] = None
    created_by_id: Optional[str] = None
    created_at: datetime


class PageRead(BaseModel):
    """Schema for reading a page from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    description: Optional[str] = None
    page_type: PageType
    status: PageStatus
    content: Optional[PageContent] = None
    custom_css: Optional[str] = None
    custom_js: Optional[str] = None
    layout: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    parent_id: Optional[str] = None
    author_id: str
    published_at: Optional[datetime] = None
    view_count: int
    created_at: datetime
    updated_at: datetime
    latest_version: Optional[int] = None


class PageDetailRead(PageRead):
    """Page with its full version history, newest first."""

    versions: List[PageVersionRead] = Field(default_factory=list)


class PageCreate(BaseModel):
    """Schema for creating a page via API."""

    title: str = Field(min_length=1, max_length=300)
    slug: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    page_type: PageType = PageType.STATIC
    status: PageStatus = PageStatus.DRAFT
    content: Optional[PageContent] = None
    custom_css: Optional[str] = None
    custom_js: Optional[str] = None
    layout: str = Field(default="default", max_length=50)
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = None
    parent_id: Optional[str] = None
    author_id: str
    use_page_builder: bool = Field(default=False, description="Start from an empty page-builder document")


class PageUpdate(BaseModel):
    """Schema for updating a page via API."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    page_type: Optional[PageType] = None
    status: Optional[PageStatus] = None
    content: Optional[PageContent] = None
    custom_css: Optional[str] = None
    custom_js: Optional[str] = None
    layout: Optional[str] = Field(default=None, max_length=50)
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = None
    parent_id: Optional[str] = None
    updated_by_id: Optional[str] = Field(default=None, description="User recorded on the new version")


class PageDuplicateRequest(BaseModel):
    author_id: Optional[str] = None
