"""
Site settings entity model.

A single row holds the site identity and every structured configuration
document the admin dashboard edits: menus, widgets, appearance, social and
contact info, and search-engine verification files.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Text
from sqlmodel import JSON, Field

from ..base import Base, utc_now

SITE_SETTINGS_ID = 1
DEFAULT_SITE_NAME = "My AI Blog"
DEFAULT_SITE_DESCRIPTION = "A futuristic blog powered by AI"


class SiteSettings(Base, table=True):
    """The singleton site configuration row.

    Table: site_settings
    """

    __tablename__ = "site_settings"
    __table_args__ = ({"extend_existing": True},)

    id: int = Field(default=SITE_SETTINGS_ID, primary_key=True)

    site_name: str = Field(default=DEFAULT_SITE_NAME, max_length=200)
    description: Optional[str] = Field(default=DEFAULT_SITE_DESCRIPTION, sa_type=Text)
    footer_text: Optional[str] = Field(default=None, sa_type=Text)
    seo_keywords: Optional[str] = Field(default=None, sa_type=Text)
    logo: Optional[str] = Field(default=None, max_length=500)
    favicon: Optional[str] = Field(default=None, max_length=500)
    dark_mode: bool = Field(default=False)
    home_page_id: Optional[str] = Field(default=None, max_length=32)
    blog_page_id: Optional[str] = Field(default=None, max_length=32)
    top_bar_enabled: bool = Field(default=True)

    social_links: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    contact_info: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    menu_structure: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    widget_config: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    appearance_settings: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    verification_files: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(), sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"SiteSettings(site_name={self.site_name})"
