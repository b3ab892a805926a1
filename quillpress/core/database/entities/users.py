"""
User entity models.

Users are the authors, uploaders and commenters that content rows point at.
They carry identity and role only; credentials are out of this service's hands.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserRole(str, Enum):
    """Editorial role of a user."""

    SUBSCRIBER = "SUBSCRIBER"
    AUTHOR = "AUTHOR"
    EDITOR = "EDITOR"
    ADMINISTRATOR = "ADMINISTRATOR"
    SUPER_ADMIN = "SUPER_ADMIN"


class UserBase(Base):
    """Base fields for users."""

    username: str = Field(max_length=100, unique=True, index=True, description="Unique login-style handle")
    email: str = Field(max_length=150, unique=True, index=True, description="Unique e-mail address")
    display_name: Optional[str] = Field(default=None, max_length=120, description="Name shown on content")
    role: UserRole = Field(default=UserRole.SUBSCRIBER, sa_type=String(32), description="Editorial role")


class User(UserBase, table=True):
    """Persistent user record.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"
