"""
User I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from quillpress.core.database.entities.users import UserRole


class UserSummary(BaseModel):
    """Compact user reference embedded in posts, comments and media."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    display_name: Optional[str] = None


class UserRead(BaseModel):
    """Schema for reading a user from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    display_name: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Schema for creating a user via API."""

    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=150)
    display_name: Optional[str] = Field(default=None, max_length=120)
    role: UserRole = Field(default=UserRole.SUBSCRIBER)


class UserUpdate(BaseModel):
    """Schema for partially updating a user via API."""

    display_name: Optional[str] = Field(default=None, max_length=120)
    role: Optional[UserRole] = None
