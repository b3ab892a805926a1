"""
Tag entity model.

Tags form an optional hierarchy through ``parent_id`` and carry the bookkeeping
used by tag administration: usage and merge counters, synonyms that resolve
to the tag during auto-tagging, tags linked for co-attachment, and a lock flag.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Text
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now

DEFAULT_TAG_COLOR = "#3b82f6"


class TagBase(Base):
    """Base fields for tags."""

    name: str = Field(max_length=100, index=True)
    slug: str = Field(max_length=120, unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    color: Optional[str] = Field(default=DEFAULT_TAG_COLOR, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    featured: bool = Field(default=False)
    trending: bool = Field(default=False, index=True)
    usage_count: int = Field(default=0, index=True)
    locked: bool = Field(default=False)
    merge_count: int = Field(default=0)
    synonym_hits: int = Field(default=0)


class Tag(TagBase, table=True):
    """Persistent tag.

    Table: tags
    """

    __tablename__ = "tags"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    parent_id: Optional[str] = Field(default=None, foreign_key="tags.id", index=True, max_length=32)
    synonyms: List[str] = Field(default_factory=list, sa_type=JSON)
    linked_tag_ids: List[str] = Field(default_factory=list, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Tag(id={self.id}, slug={self.slug})"
