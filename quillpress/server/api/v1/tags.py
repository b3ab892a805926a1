"""
Tag API Endpoints.

``admin_router`` is mounted under ``/blog/admin/tags`` and carries tag CRUD plus
the vocabulary maintenance operations (merge, bulk parent/style, lock,
convert-to-category, duplicate detection). ``public_router`` is mounted under
``/tags``.
"""

from typing import List

from fastapi import APIRouter, Query, Response, status

from quillpress.core.models.io.common import UpdatedCountResponse
from quillpress.core.models.io.tags import (
    DuplicatePairRead,
    PublicTagRead,
    TagAdminRead,
    TagBulkParentRequest,
    TagBulkStyleRequest,
    TagConversionResult,
    TagConvertRequest,
    TagCreate,
    TagLockRequest,
    TagMergeRequest,
    TagRead,
    TagUpdate,
)
from quillpress.server.services.deps import TagServiceDep

admin_router = APIRouter(tags=["tags"])
public_router = APIRouter(tags=["tags"])


@admin_router.get(
    "",
    response_model=List[TagAdminRead],
    summary="List Tags (Admin)",
    description="Tags with parent, children and post count, most used first.",
)
async def list_tags(
    service: TagServiceDep,
    skip: int = Query(0, ge=0),
    take: int = Query(50, ge=1, le=1000),
) -> List[TagAdminRead]:
    return await service.list_admin(skip=skip, take=take)


@admin_router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tag",
    responses={
        404: {"description": "Parent tag not found"},
        409: {"description": "A tag with the same name or slug exists"},
    },
)
async def create_tag(data: TagCreate, service: TagServiceDep) -> TagRead:
    """
    Create a tag.

    - **name**: Required, trimmed.
    - **slug**: Optional; derived from the name.
    - **synonyms**: Lower-cased alternative spellings used by auto-tagging.
    - **linked_tag_ids**: Tags attached alongside this one.
    """
    return await service.create(data)


@admin_router.post("/merge", response_model=TagRead, summary="Merge Tags")
async def merge_tags(data: TagMergeRequest, service: TagServiceDep) -> TagRead:
    """
    Merge source tags into a target.

    The target inherits every post and child of the sources, which are deleted.
    """
    return await service.merge(data)


@admin_router.post("/bulk/parent", response_model=UpdatedCountResponse, summary="Bulk Set Parent")
async def bulk_set_parent(data: TagBulkParentRequest, service: TagServiceDep) -> UpdatedCountResponse:
    return UpdatedCountResponse(updated=await service.bulk_set_parent(data.ids, data.parent_id))


@admin_router.post("/bulk/style", response_model=UpdatedCountResponse, summary="Bulk Style Tags")
async def bulk_style(data: TagBulkStyleRequest, service: TagServiceDep) -> UpdatedCountResponse:
    return UpdatedCountResponse(updated=await service.bulk_style(data))


@admin_router.post("/lock", response_model=UpdatedCountResponse, summary="Lock or Unlock Tags")
async def lock_tags(data: TagLockRequest, service: TagServiceDep) -> UpdatedCountResponse:
    return UpdatedCountResponse(updated=await service.set_locked(data.ids, data.locked))


@admin_router.post(
    "/convert-to-category",
    response_model=List[TagConversionResult],
    summary="Convert Tags to Categories",
    description="Create or reuse a matching category for each tag and file the tag's posts under it.",
)
async def convert_to_category(data: TagConvertRequest, service: TagServiceDep) -> List[TagConversionResult]:
    return await service.convert_to_categories(data.ids)


@admin_router.get(
    "/duplicates",
    response_model=List[DuplicatePairRead],
    summary="Find Duplicate Tags",
    description="Pairs of tags whose names are at least `threshold` similar, most similar first.",
    responses={400: {"description": "Threshold outside 0..1"}},
)
async def find_duplicates(service: TagServiceDep, threshold: float = 0.28) -> List[DuplicatePairRead]:
    return await service.find_duplicates(threshold)


@admin_router.put(
    "/{tag_id}",
    response_model=TagRead,
    summary="Update Tag",
    responses={
        400: {"description": "Invalid parent assignment"},
        404: {"description": "Tag or parent not found"},
        409: {"description": "A tag with the same name or slug exists"},
        423: {"description": "Tag is locked"},
    },
)
async def update_tag(tag_id: str, data: TagUpdate, service: TagServiceDep) -> TagRead:
    return await service.update(tag_id, data)


@admin_router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Tag",
    responses={404: {"description": "Tag not found"}, 423: {"description": "Tag is locked"}},
)
async def delete_tag(tag_id: str, service: TagServiceDep) -> Response:
    await service.delete(tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@public_router.get("", response_model=List[PublicTagRead], summary="List Tags")
async def public_list_tags(service: TagServiceDep) -> List[PublicTagRead]:
    return await service.list_public()


@public_router.get("/trending", response_model=List[PublicTagRead], summary="List Trending Tags")
async def public_trending_tags(service: TagServiceDep) -> List[PublicTagRead]:
    return await service.list_trending()
