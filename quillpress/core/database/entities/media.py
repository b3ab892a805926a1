"""
Media entity model.

A media row describes one uploaded image: where the original lives on disk,
its public URL, its pixel dimensions and the resized variants generated for it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Text
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class MediaBase(Base):
    """Base fields for media items."""

    filename: str = Field(max_length=255, description="Stored file name ({uuid}{ext})")
    original_name: str = Field(max_length=255)
    mime_type: str = Field(max_length=100)
    size: int = Field(description="Size of the original in bytes")
    url: str = Field(max_length=500, description="Public URL of the original")
    path: str = Field(max_length=500, description="Filesystem path of the original")
    width: Optional[int] = Field(default=None)
    height: Optional[int] = Field(default=None)
    alt_text: Optional[str] = Field(default=None, max_length=300)
    title: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, sa_type=Text)
    folder: str = Field(default="uploads", max_length=200, index=True)


class Media(MediaBase, table=True):
    """Persistent media item.

    Table: media
    """

    __tablename__ = "media"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    tags: List[str] = Field(default_factory=list, sa_type=JSON)
    variants: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON, description="Variant name -> {url, path, width, height}")
    uploaded_by_id: str = Field(foreign_key="users.id", index=True, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Media(id={self.id}, filename={self.filename})"
