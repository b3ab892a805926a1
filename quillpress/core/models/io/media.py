"""
Media I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MediaRead(BaseModel):
    """Schema for reading a media item from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    alt_text: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    folder: str
    variants: Dict[str, Any] = Field(default_factory=dict, description="Variant name -> {url, width, height}")
    uploaded_by_id: str
    created_at: datetime
    updated_at: datetime


class MediaListResponse(BaseModel):
    """One page of the media library."""

    items: List[MediaRead]
    total: int
    page: int
    limit: int
    total_pages: int


class MediaFromUrlRequest(BaseModel):
    """Schema for importing a remote image into the media library."""

    url: str = Field(max_length=2048)
    folder: str = "uploads"
    uploaded_by_id: str


class MediaUpdate(BaseModel):
    """Schema for editing media metadata."""

    title: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = None
    alt_text: Optional[str] = Field(default=None, max_length=300)
    tags: Optional[List[str]] = None
