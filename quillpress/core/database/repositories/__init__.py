"""
Repository layer.

One async repository per entity, all sharing ``AsyncBaseRepository``:

- users: UserRepository
- posts: PostRepository (also owns the post_tags / post_categories links)
- tags: TagRepository
- categories: CategoryRepository
- comments: CommentRepository
- media: MediaRepository
- pages: PageRepository (pages and page versions)
- site_settings: SiteSettingsRepository
"""

from .base import AsyncBaseRepository, QueryBuilder
from .categories import CategoryRepository
from .comments import CommentRepository
from .media import MediaRepository
from .pages import PageRepository
from .posts import PostRepository
from .site_settings import SiteSettingsRepository
from .tags import TagRepository
from .users import UserRepository

__all__ = [
    "AsyncBaseRepository",
    "CategoryRepository",
    "CommentRepository",
    "MediaRepository",
    "PageRepository",
    "PostRepository",
    "QueryBuilder",
    "SiteSettingsRepository",
    "TagRepository",
    "UserRepository",
]
