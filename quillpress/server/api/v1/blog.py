"""
Blog API Endpoints.

Serves the public blog (published post listings, single posts, related posts,
the RSS feed and the public category/tag vocabularies) and the admin post
workflow (auto-tagged creation, updates, scheduling and trending refresh).

Static paths are declared before ``/{slug}`` so they are never captured as a
slug.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from quillpress.core.models.io.categories import PublicCategoryRead
from quillpress.core.models.io.posts import (
    PostCreate,
    PostRead,
    PostSummary,
    PostUpdate,
    PublishedCountResponse,
    TrendingCountResponse,
)
from quillpress.core.models.io.tags import PublicTagRead
from quillpress.server.services.deps import BlogServiceDep, CategoryServiceDep, TagServiceDep

router = APIRouter(tags=["blog"])

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"


# ----------------------------------------------------------------------
# Public
# ----------------------------------------------------------------------


@router.get(
    "",
    response_model=List[PostRead],
    summary="List Published Posts",
    description="Published posts, newest first, with author, categories and tags. Optionally filtered by tag or category slug.",
    response_description="List of published posts.",
)
async def list_posts(
    service: BlogServiceDep,
    take: int = Query(10, ge=1, le=100),
    skip: int = Query(0, ge=0),
    tag: Optional[str] = Query(None, description="Tag slug"),
    category: Optional[str] = Query(None, description="Category slug"),
) -> List[PostRead]:
    return await service.list_published(take=take, skip=skip, tag=tag or None, category=category or None)


@router.get(
    "/rss",
    summary="RSS Feed",
    description="RSS 2.0 feed of the 20 most recent published posts.",
    response_class=Response,
    responses={200: {"content": {"application/rss+xml": {}}}},
)
async def rss_feed(service: BlogServiceDep) -> Response:
    return Response(content=await service.render_feed(), media_type=RSS_MEDIA_TYPE)


@router.get("/categories", response_model=List[PublicCategoryRead], summary="List Public Categories")
async def public_categories(service: CategoryServiceDep) -> List[PublicCategoryRead]:
    return await service.list_public()


@router.get("/tags", response_model=List[PublicTagRead], summary="List Public Tags")
async def public_tags(service: TagServiceDep) -> List[PublicTagRead]:
    return await service.list_public()


@router.get(
    "/tags/trending",
    response_model=List[PublicTagRead],
    summary="List Trending Tags",
    description="Tags flagged as trending, most used first.",
)
async def trending_tags(service: TagServiceDep) -> List[PublicTagRead]:
    return await service.list_trending()


# ----------------------------------------------------------------------
# Admin
# ----------------------------------------------------------------------


@router.post(
    "/manual",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Create a post with sanitization, auto-tagging, linked-tag expansion and reading time.",
    response_description="The created post with its relations.",
    responses={
        201: {"description": "Post created"},
        400: {"description": "Unknown category or tag ids"},
        404: {"description": "Author not found"},
        409: {"description": "Slug already in use"},
    },
)
async def create_post(data: PostCreate, service: BlogServiceDep) -> PostRead:
    """
    Create a new post.

    - **title** / **content**: Sanitized before storing.
    - **slug**: Optional; derived from the title when empty after sanitization.
    - **category_ids** / **tag_ids**: Must reference existing records.
    - **auto_tag**: Extract keywords from the content and attach matching tags.
    - **status** / **scheduled_for**: Publishing state; PUBLISHED stamps `published_at`.
    """
    return await service.create_manual(data)


@router.get(
    "/admin/posts",
    response_model=List[PostRead],
    summary="List All Posts",
    description="All posts in any status, for the admin dashboard.",
)
async def admin_list_posts(
    service: BlogServiceDep,
    status_filter: Optional[str] = Query(None, alias="status", description="Post status or 'all'"),
    author_id: Optional[str] = None,
    take: int = Query(1000, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    order_by: str = Query("newest", pattern="^(newest|oldest)$"),
) -> List[PostRead]:
    return await service.list_admin(
        status=status_filter, author_id=author_id or None, take=take, skip=skip, order_by=order_by
    )


@router.get(
    "/admin/posts/{post_id}",
    response_model=PostRead,
    summary="Get Post (Admin)",
    responses={404: {"description": "Post not found"}},
)
async def admin_get_post(post_id: str, service: BlogServiceDep) -> PostRead:
    return await service.get_admin(post_id)


@router.get(
    "/admin/scheduled",
    response_model=List[PostRead],
    summary="List Scheduled Posts",
    description="Draft or scheduled posts with a scheduled time, soonest first.",
)
async def admin_scheduled_posts(service: BlogServiceDep) -> List[PostRead]:
    return await service.list_scheduled()


@router.post(
    "/admin/process-scheduled",
    response_model=PublishedCountResponse,
    summary="Publish Due Posts",
    description="Publish every scheduled post whose time has come.",
)
async def process_scheduled(service: BlogServiceDep) -> PublishedCountResponse:
    published = await service.process_scheduled()
    return PublishedCountResponse(published=published)


@router.post(
    "/admin/update-trending",
    response_model=TrendingCountResponse,
    summary="Refresh Trending Tags",
    description="Flag the ten tags used most by posts published in the last 30 days.",
)
async def update_trending(service: BlogServiceDep) -> TrendingCountResponse:
    return TrendingCountResponse(trending=await service.update_trending())


@router.get("/admin/{post_id}/related", response_model=List[str], summary="Related Post Ids")
async def admin_related_posts(
    post_id: str,
    service: BlogServiceDep,
    limit: int = Query(5, ge=1, le=50),
) -> List[str]:
    return [post.id for post in await service.related(post_id, limit=limit)]


# ----------------------------------------------------------------------
# Parameterized public and admin routes
# ----------------------------------------------------------------------


@router.get(
    "/{post_id}/related",
    response_model=List[PostSummary],
    summary="Related Posts",
    description="Published posts sharing tags or categories with the given post, best match first.",
)
async def related_posts(
    post_id: str,
    service: BlogServiceDep,
    limit: int = Query(5, ge=1, le=50),
) -> List[PostSummary]:
    return await service.related(post_id, limit=limit)


@router.get(
    "/{slug}",
    response_model=PostRead,
    summary="Get Published Post",
    description="Fetch a published post by slug and count the view. Tag names in the content are linked to their archives.",
    responses={404: {"description": "Post not found"}},
)
async def get_post(slug: str, service: BlogServiceDep) -> PostRead:
    return await service.get_published_by_slug(slug)


@router.put(
    "/{post_id}",
    response_model=PostRead,
    summary="Update Post",
    responses={
        404: {"description": "Post not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_post(post_id: str, data: PostUpdate, service: BlogServiceDep) -> PostRead:
    """
    Update a post.

    Providing a title or content re-runs sanitization, auto-tagging and the
    reading time. Provided `category_ids`/`tag_ids` replace the current sets.
    """
    return await service.update(post_id, data)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Post",
    responses={404: {"description": "Post not found"}},
)
async def delete_post(post_id: str, service: BlogServiceDep) -> Response:
    await service.delete(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
