"""Health, version and dashboard response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(default="ok")


class VersionResponse(BaseModel):
    version: str
    schema_version: str = "v1"


class DashboardStats(BaseModel):
    """Content counters shown on the admin dashboard."""

    total_docs: int = Field(description="All posts regardless of status")
    published: int
    drafts: int
    scheduled: int
    archived: int
    users: int
    pages: int
    pending_comments: int = Field(description="Comments awaiting approval")
    media: int
    tags: int
    categories: int
