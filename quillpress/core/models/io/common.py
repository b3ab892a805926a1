"""Small response envelopes shared by several endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class UpdatedCountResponse(BaseModel):
    """Result of a bulk operation."""

    updated: int = Field(description="Number of records changed")
