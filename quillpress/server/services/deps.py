"""
Service Dependencies.

Provides request-scoped service instances for API endpoints. Each service is
built around the request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.database import get_session

from .blog import BlogService
from .categories import CategoryService
from .comments import CommentService
from .dashboard import DashboardService
from .media import MediaService
from .pages import PageService
from .site_settings import SiteSettingsService
from .tags import TagService
from .users import UserService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_service(session: SessionDep) -> UserService:
    return UserService(session)


def get_blog_service(session: SessionDep) -> BlogService:
    return BlogService(session)


def get_tag_service(session: SessionDep) -> TagService:
    return TagService(session)


def get_category_service(session: SessionDep) -> CategoryService:
    return CategoryService(session)


def get_comment_service(session: SessionDep) -> CommentService:
    return CommentService(session)


def get_media_service(session: SessionDep) -> MediaService:
    return MediaService(session)


def get_site_settings_service(session: SessionDep) -> SiteSettingsService:
    return SiteSettingsService(session)


def get_page_service(session: SessionDep) -> PageService:
    return PageService(session)


def get_dashboard_service(session: SessionDep) -> DashboardService:
    return DashboardService(session)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]
SiteSettingsServiceDep = Annotated[SiteSettingsService, Depends(get_site_settings_service)]
PageServiceDep = Annotated[PageService, Depends(get_page_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
