"""
Database entity models.

This package contains all database entity models, one module per table family:

Modules:
- users: Authors, uploaders and commenters
- posts: Blog posts plus the post_tags / post_categories link tables
- tags: Hierarchical tags with synonyms, links and lock state
- categories: Hierarchical categories
- comments: Threaded post comments
- media: Uploaded images and their generated variants
- pages: Site pages and their version history
- site_settings: The singleton site configuration row
"""

from . import (
    categories,
    comments,
    media,
    pages,
    posts,
    site_settings,
    tags,
    users,
)

__all__ = [
    "categories",
    "comments",
    "media",
    "pages",
    "posts",
    "site_settings",
    "tags",
    "users",
]
