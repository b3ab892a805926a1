"""
Category I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategorySummary(BaseModel):
    """Compact category reference."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class CategoryChildRead(CategorySummary):
    post_count: int = 0


class CategoryRead(BaseModel):
    """Schema for reading a category from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    order: int
    featured: bool
    created_at: datetime
    updated_at: datetime
    post_count: int = 0
    parent: Optional[CategorySummary] = None
    children: List[CategoryChildRead] = Field(default_factory=list)


class PublicCategoryRead(BaseModel):
    """Category fields exposed to the public blog."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    featured: bool
    created_at: datetime
    updated_at: datetime


class CategoryCreate(BaseModel):
    """Schema for creating a category via API."""

    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    parent_id: Optional[str] = None
    order: int = 0
    featured: bool = False


class CategoryUpdate(BaseModel):
    """Schema for updating a category via API."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=100)
    parent_id: Optional[str] = None
    order: Optional[int] = None
    featured: Optional[bool] = None
