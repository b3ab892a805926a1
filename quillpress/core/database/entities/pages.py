"""
Page entity models.

Pages are standalone site pages. Their ``content`` is either an HTML string or
a page-builder document (a JSON object of sections plus global styles). Every
content change is snapshotted into ``page_versions`` so earlier states can be
restored.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class PageStatus(str, Enum):
    """Publication state of a page."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"
    SCHEDULED = "SCHEDULED"


class PageType(str, Enum):
    """Rendering mode of a page."""

    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"
    TEMPLATE = "TEMPLATE"
    HOMEPAGE = "HOMEPAGE"
    LANDING = "LANDING"


class PageBase(Base):
    """Base fields for pages."""

    title: str = Field(max_length=300)
    slug: str = Field(max_length=200, unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    page_type: PageType = Field(default=PageType.STATIC, sa_type=String(16))
    status: PageStatus = Field(default=PageStatus.DRAFT, sa_type=String(16), index=True)
    custom_css: Optional[str] = Field(default=None, sa_type=Text)
    custom_js: Optional[str] = Field(default=None, sa_type=Text)
    layout: str = Field(default="default", max_length=50)
    seo_title: Optional[str] = Field(default=None, max_length=300)
    seo_description: Optional[str] = Field(default=None, sa_type=Text)
    published_at: Optional[datetime] = Field(default=None, sa_type=DateTime())
    view_count: int = Field(default=0)


class Page(PageBase, table=True):
    """Persistent page.

    Table: pages
    """

    __tablename__ = "pages"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    content: Any = Field(default="", sa_type=JSON, description="HTML string or page-builder document")
    parent_id: Optional[str] = Field(default=None, foreign_key="pages.id", index=True, max_length=32)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now}, index=True
    )

    def __repr__(self) -> str:
        return f"Page(id={self.id}, slug={self.slug}, status={self.status})"


class PageVersion(Base, table=True):
    """Snapshot of a page's title, content and custom code.

    Table: page_versions
    """

    __tablename__ = "page_versions"
    __table_args__ = (
        UniqueConstraint("page_id", "version_number", name="uq_page_versions_page_version"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    page_id: str = Field(foreign_key="pages.id", index=True, ondelete="CASCADE", max_length=32)
    version_number: int = Field(description="1-based, increasing per page")
    title: str = Field(max_length=300)
    content: Any = Field(default="", sa_type=JSON)
    custom_css: Optional[str] = Field(default=None, sa_type=Text)
    custom_js: Optional[str] = Field(default=None, sa_type=Text)
    change_note: Optional[str] = Field(default=None, max_length=300)
    created_by_id: Optional[str] = Field(default=None, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"PageVersion(page_id={self.page_id}, version={self.version_number})"
