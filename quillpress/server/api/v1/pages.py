"""
Page API Endpoints.

Standalone site pages built from HTML or page-builder documents, with a
public read path and a version history that can be restored.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from quillpress.core.models.io.common import MessageResponse
from quillpress.core.models.io.pages import (
    PageCreate,
    PageDetailRead,
    PageDuplicateRequest,
    PageRead,
    PageUpdate,
    PageVersionRead,
)
from quillpress.server.services.deps import PageServiceDep

router = APIRouter(tags=["pages"])


@router.get(
    "",
    response_model=List[PageRead],
    summary="List Pages",
    description="Pages in any status, most recently updated first. `ALL` or an empty filter means no filter.",
)
async def list_pages(
    service: PageServiceDep,
    status_filter: Optional[str] = Query(None, alias="status"),
    page_type: Optional[str] = None,
    author_id: Optional[str] = None,
) -> List[PageRead]:
    return await service.list(status=status_filter, page_type=page_type, author_id=author_id)


@router.post(
    "",
    response_model=PageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Page",
    responses={
        400: {"description": "Script tags in custom CSS"},
        404: {"description": "Author or parent page not found"},
        409: {"description": "Slug already in use"},
    },
)
async def create_page(data: PageCreate, service: PageServiceDep) -> PageRead:
    """
    Create a page and record its initial version.

    - **content**: An HTML string or a page-builder document. Sanitized before storing.
    - **use_page_builder**: When no content is given, start from an empty builder document.
    - **custom_css** / **custom_js**: Page-level code; CSS may not contain script tags.
    """
    return await service.create(data)


@router.get("/public", response_model=List[PageRead], summary="List Published Pages")
async def list_public_pages(service: PageServiceDep) -> List[PageRead]:
    return await service.list_public()


@router.get(
    "/slug/{slug}",
    response_model=PageRead,
    summary="Get Published Page by Slug",
    description="Fetch a published page and count the view.",
    responses={404: {"description": "Page not found"}},
)
async def get_page_by_slug(slug: str, service: PageServiceDep) -> PageRead:
    return await service.get_public_by_slug(slug)


@router.get(
    "/id/{page_id}",
    response_model=PageRead,
    summary="Get Published Page by Id",
    responses={404: {"description": "Page not found or not published"}},
)
async def get_public_page(page_id: str, service: PageServiceDep) -> PageRead:
    return await service.get_public_by_id(page_id)


@router.get(
    "/{page_id}",
    response_model=PageDetailRead,
    summary="Get Page",
    description="Any status, with the full version history.",
    responses={404: {"description": "Page not found"}},
)
async def get_page(page_id: str, service: PageServiceDep) -> PageDetailRead:
    return await service.get(page_id)


@router.put(
    "/{page_id}",
    response_model=PageRead,
    summary="Update Page",
    description="Update a page; changes to content, CSS or JS record a new version.",
    responses={
        400: {"description": "Invalid parent or script tags in custom CSS"},
        404: {"description": "Page not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_page(page_id: str, data: PageUpdate, service: PageServiceDep) -> PageRead:
    return await service.update(page_id, data)


@router.delete(
    "/{page_id}",
    response_model=MessageResponse,
    summary="Delete Page",
    responses={404: {"description": "Page not found"}},
)
async def delete_page(page_id: str, service: PageServiceDep) -> MessageResponse:
    await service.delete(page_id)
    return MessageResponse(message="Page deleted successfully")


@router.post(
    "/{page_id}/duplicate",
    response_model=PageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate Page",
    description="Copy a page as a new draft with a unique `-copy-` slug.",
    responses={404: {"description": "Page or author not found"}},
)
async def duplicate_page(
    page_id: str,
    service: PageServiceDep,
    data: Optional[PageDuplicateRequest] = None,
) -> PageRead:
    return await service.duplicate(page_id, data or PageDuplicateRequest())


@router.get(
    "/{page_id}/versions",
    response_model=List[PageVersionRead],
    summary="List Page Versions",
    responses={404: {"description": "Page not found"}},
)
async def list_page_versions(page_id: str, service: PageServiceDep) -> List[PageVersionRead]:
    return await service.versions(page_id)


@router.post(
    "/{page_id}/versions/{version_number}/restore",
    response_model=PageRead,
    summary="Restore Page Version",
    responses={404: {"description": "Page or version not found"}},
)
async def restore_page_version(
    page_id: str,
    version_number: int,
    service: PageServiceDep,
    user_id: Optional[str] = Query(None, description="User recorded on the new version"),
) -> PageRead:
    return await service.restore_version(page_id, version_number, user_id=user_id)
