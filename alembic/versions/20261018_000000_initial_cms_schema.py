"""Initial schema and seed data for QuillPress

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

This is the initial migration that creates every table the CMS needs and
seeds the default site settings row. This includes:
- users
- posts, tags, categories and the post_tags / post_categories link tables
- comments
- media
- pages and page_versions
- site_settings (singleton row, id = 1)

Revision format: YYYYMMDD_HHMMSS_description

"""

import json
from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id(name: str = "id") -> sa.Column:
    return sa.Column(name, sa.String(32), nullable=False)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed initial data."""

    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(150), nullable=False),
        sa.Column("display_name", sa.String(120), nullable=True),
        sa.Column("role", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "tags",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(20), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("trending", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("merge_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("synonym_hits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("parent_id", sa.String(32), sa.ForeignKey("tags.id"), nullable=True),
        sa.Column("synonyms", sa.JSON(), nullable=False),
        sa.Column("linked_tag_ids", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tags_name", "tags", ["name"])
    op.create_index("ix_tags_slug", "tags", ["slug"], unique=True)
    op.create_index("ix_tags_trending", "tags", ["trending"])
    op.create_index("ix_tags_usage_count", "tags", ["usage_count"])
    op.create_index("ix_tags_parent_id", "tags", ["parent_id"])

    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(20), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("parent_id", sa.String(32), sa.ForeignKey("categories.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "posts",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("featured_image", sa.String(500), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(), nullable=True),
        sa.Column("seo_title", sa.String(300), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("allow_comments", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reading_time", sa.Integer(), nullable=True),
        sa.Column("language", sa.String(10), nullable=False, server_default="en"),
        sa.Column("author_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("auto_tag_ids", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_posts_slug", "posts", ["slug"], unique=True)
    op.create_index("ix_posts_status", "posts", ["status"])
    op.create_index("ix_posts_published_at", "posts", ["published_at"])
    op.create_index("ix_posts_scheduled_for", "posts", ["scheduled_for"])
    op.create_index("ix_posts_author_id", "posts", ["author_id"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "post_tags",
        sa.Column("post_id", sa.String(32), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tag_id", sa.String(32), sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )
    op.create_index("ix_post_tags_tag_id", "post_tags", ["tag_id"])

    op.create_table(
        "post_categories",
        sa.Column("post_id", sa.String(32), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "category_id", sa.String(32), sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
        ),
        sa.PrimaryKeyConstraint("post_id", "category_id"),
    )
    op.create_index("ix_post_categories_category_id", "post_categories", ["category_id"])

    op.create_table(
        "comments",
        _id(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_name", sa.String(120), nullable=True),
        sa.Column("author_email", sa.String(150), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("post_id", sa.String(32), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(32), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("parent_id", sa.String(32), sa.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])
    op.create_index("ix_comments_is_approved", "comments", ["is_approved"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])

    op.create_table(
        "media",
        _id(),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("alt_text", sa.String(300), nullable=True),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("folder", sa.String(200), nullable=False, server_default="uploads"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("variants", sa.JSON(), nullable=False),
        sa.Column("uploaded_by_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_media_folder", "media", ["folder"])
    op.create_index("ix_media_uploaded_by_id", "media", ["uploaded_by_id"])
    op.create_index("ix_media_created_at", "media", ["created_at"])

    op.create_table(
        "pages",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("page_type", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("custom_css", sa.Text(), nullable=True),
        sa.Column("custom_js", sa.Text(), nullable=True),
        sa.Column("layout", sa.String(50), nullable=False, server_default="default"),
        sa.Column("seo_title", sa.String(300), nullable=True),
        sa.Column("seo_description", sa.Text(), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("parent_id", sa.String(32), sa.ForeignKey("pages.id"), nullable=True),
        sa.Column("author_id", sa.String(32), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pages_slug", "pages", ["slug"], unique=True)
    op.create_index("ix_pages_status", "pages", ["status"])
    op.create_index("ix_pages_parent_id", "pages", ["parent_id"])
    op.create_index("ix_pages_author_id", "pages", ["author_id"])
    op.create_index("ix_pages_updated_at", "pages", ["updated_at"])

    op.create_table(
        "page_versions",
        _id(),
        sa.Column("page_id", sa.String(32), sa.ForeignKey("pages.id", ondelete="CASCADE"), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("custom_css", sa.Text(), nullable=True),
        sa.Column("custom_js", sa.Text(), nullable=True),
        sa.Column("change_note", sa.String(300), nullable=True),
        sa.Column("created_by_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("page_id", "version_number", name="uq_page_versions_page_version"),
    )
    op.create_index("ix_page_versions_page_id", "page_versions", ["page_id"])

    op.create_table(
        "site_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("site_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("footer_text", sa.Text(), nullable=True),
        sa.Column("seo_keywords", sa.Text(), nullable=True),
        sa.Column("logo", sa.String(500), nullable=True),
        sa.Column("favicon", sa.String(500), nullable=True),
        sa.Column("dark_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("home_page_id", sa.String(32), nullable=True),
        sa.Column("blog_page_id", sa.String(32), nullable=True),
        sa.Column("top_bar_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("contact_info", sa.JSON(), nullable=False),
        sa.Column("menu_structure", sa.JSON(), nullable=False),
        sa.Column("widget_config", sa.JSON(), nullable=False),
        sa.Column("appearance_settings", sa.JSON(), nullable=False),
        sa.Column("verification_files", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Seed the settings singleton
    now = datetime.now(timezone.utc).replace(tzinfo=None).isoformat(sep=" ")
    settings_columns = [
        "id",
        "site_name",
        "description",
        "dark_mode",
        "top_bar_enabled",
        "social_links",
        "contact_info",
        "menu_structure",
        "widget_config",
        "appearance_settings",
        "verification_files",
        "updated_at",
    ]
    values = ", ".join(
        [
            "1",
            "'My AI Blog'",
            "'A futuristic blog powered by AI'",
            "false",
            "true",
            f"'{json.dumps({})}'",
            f"'{json.dumps({})}'",
            f"'{json.dumps([])}'",
            f"'{json.dumps([])}'",
            f"'{json.dumps({})}'",
            f"'{json.dumps({})}'",
            f"'{now}'",
        ]
    )
    op.execute(f"INSERT INTO site_settings ({', '.join(settings_columns)}) VALUES ({values})")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("site_settings")
    op.drop_table("page_versions")
    op.drop_table("pages")
    op.drop_table("media")
    op.drop_table("comments")
    op.drop_table("post_categories")
    op.drop_table("post_tags")
    op.drop_table("posts")
    op.drop_table("categories")
    op.drop_table("tags")
    op.drop_table("users")
