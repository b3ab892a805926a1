"""
Tag I/O models for API requests and responses.

Update and bulk payloads are applied field-by-field from the set of fields the
client actually sent, so an explicit ``null`` clears a nullable field while an
omitted field is left alone.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TagSummary(BaseModel):
    """Compact tag reference."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class TagRead(BaseModel):
    """Schema for reading a tag from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    featured: bool
    trending: bool
    usage_count: int
    synonyms: List[str] = Field(default_factory=list)
    linked_tag_ids: List[str] = Field(default_factory=list)
    locked: bool
    merge_count: int
    synonym_hits: int
    created_at: datetime
    updated_at: datetime


class TagAdminRead(TagRead):
    """Tag with its place in the hierarchy and the number of posts carrying it."""

    parent: Optional[TagSummary] = None
    children: List[TagSummary] = Field(default_factory=list)
    post_count: int = 0


class PublicTagRead(BaseModel):
    """Tag fields exposed to the public blog."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    trending: bool
    featured: bool
    usage_count: int
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TagCreate(BaseModel):
    """Schema for creating a tag via API."""

    name: str = Field(max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    parent_id: Optional[str] = None
    featured: bool = False
    locked: bool = False
    synonyms: List[str] = Field(default_factory=list)
    linked_tag_ids: List[str] = Field(default_factory=list)


class TagUpdate(BaseModel):
    """Schema for updating a tag via API."""

    name: Optional[str] = Field(default=None, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    parent_id: Optional[str] = None
    featured: Optional[bool] = None
    locked: Optional[bool] = None
    synonyms: Optional[List[str]] = None
    linked_tag_ids: Optional[List[str]] = None
    force_unlock: bool = Field(default=False, description="Allow editing a locked tag")


class TagMergeRequest(BaseModel):
    source_ids: List[str] = Field(min_length=1)
    target_id: str


class TagBulkParentRequest(BaseModel):
    ids: List[str] = Field(min_length=1)
    parent_id: Optional[str] = None


class TagBulkStyleRequest(BaseModel):
    ids: List[str] = Field(min_length=1)
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    featured: Optional[bool] = None


class TagLockRequest(BaseModel):
    ids: List[str] = Field(min_length=1)
    locked: bool


class TagConvertRequest(BaseModel):
    ids: List[str] = Field(min_length=1)


class TagConversionResult(BaseModel):
    tag_id: str
    category_id: str


class DuplicateTagSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    usage_count: int


class DuplicatePairRead(BaseModel):
    """Two tags whose names are likely duplicates, with their similarity."""

    a: DuplicateTagSummary
    b: DuplicateTagSummary
    score: float = Field(ge=0.0, le=1.0)
