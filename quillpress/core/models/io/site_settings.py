"""
Site settings I/O models for API requests and responses.

Menus and widgets are accepted as loosely-typed JSON and normalized by the
settings service, mirroring how the admin dashboard saves whatever shape its
editor produced.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SiteSettingsRead(BaseModel):
    """Schema for reading the site settings from API."""

    model_config = ConfigDict(from_attributes=True)

    site_name: str
    description: Optional[str] = None
    footer_text: Optional[str] = None
    seo_keywords: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    dark_mode: bool
    home_page_id: Optional[str] = None
    blog_page_id: Optional[str] = None
    top_bar_enabled: bool
    social_links: Dict[str, Any] = Field(default_factory=dict)
    contact_info: Dict[str, Any] = Field(default_factory=dict)
    menu_structure: List[Dict[str, Any]] = Field(default_factory=list)
    widget_config: List[Dict[str, Any]] = Field(default_factory=list)
    appearance_settings: Dict[str, Any] = Field(default_factory=dict)
    verification_files: Dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime


class SiteSettingsUpdate(BaseModel):
    """Schema for updating site settings; absent or null fields are ignored."""

    site_name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    footer_text: Optional[str] = None
    seo_keywords: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    dark_mode: Optional[bool] = None
    home_page_id: Optional[str] = None
    blog_page_id: Optional[str] = None
    top_bar_enabled: Optional[bool] = None
    social_links: Optional[Dict[str, Any]] = None
    contact_info: Optional[Dict[str, Any]] = None
    menu_structure: Optional[Any] = None
    widget_config: Optional[Any] = None
    appearance_settings: Optional[Dict[str, Any]] = None


class PublicSiteSettingsRead(BaseModel):
    """Settings subset the public site needs to render its chrome."""

    site_name: str
    description: Optional[str] = None
    footer_text: Optional[str] = None
    seo_keywords: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    dark_mode: bool
    home_page_id: Optional[str] = None
    blog_page_id: Optional[str] = None
    top_bar_enabled: bool
    social_links: Dict[str, Any] = Field(default_factory=dict)
    contact_info: Dict[str, Any] = Field(default_factory=dict)
    menu_structure: List[Dict[str, Any]] = Field(default_factory=list)
    verification_files: List[str] = Field(default_factory=list, description="Served verification file names")


class MenusPayload(BaseModel):
    menus: Any = None


class MenusResponse(BaseModel):
    menus: List[Dict[str, Any]]


class WidgetsPayload(BaseModel):
    widgets: Any = None


class WidgetsResponse(BaseModel):
    widgets: List[Dict[str, Any]]


class VerificationPlatform(str, Enum):
    GOOGLE = "google"
    BING = "bing"
    YANDEX = "yandex"
    PINTEREST = "pinterest"
    OTHER = "other"


class VerificationFileCreate(BaseModel):
    """Schema for uploading a search-engine verification file."""

    platform: VerificationPlatform
    filename: str = Field(min_length=1, max_length=255)
    content: str
    description: Optional[str] = Field(default=None, max_length=500)


class VerificationFileUploadResponse(BaseModel):
    message: str
    platform: VerificationPlatform
    filename: str
    public_url: str
    size: int


class VerificationFileRead(BaseModel):
    platform: str
    filename: str
    description: Optional[str] = None
    uploaded_at: Optional[str] = None
    size: int
    public_url: str


class VerificationFileDeleteResponse(BaseModel):
    message: str
    platform: str
