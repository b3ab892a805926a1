"""
Category API Endpoints.

CRUD for the hierarchical category tree used to file posts.
"""

from typing import List

from fastapi import APIRouter, status

from quillpress.core.models.io.categories import CategoryCreate, CategoryRead, CategoryUpdate
from quillpress.core.models.io.common import MessageResponse
from quillpress.server.services.deps import CategoryServiceDep

router = APIRouter(tags=["categories"])


@router.get(
    "",
    response_model=List[CategoryRead],
    summary="List Categories",
    description="All categories ordered by position then name, with parent, children and post counts.",
)
async def list_categories(service: CategoryServiceDep) -> List[CategoryRead]:
    return await service.list()


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Get Category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(category_id: str, service: CategoryServiceDep) -> CategoryRead:
    return await service.get(category_id)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    responses={
        404: {"description": "Parent category not found"},
        409: {"description": "Slug already in use"},
    },
)
async def create_category(data: CategoryCreate, service: CategoryServiceDep) -> CategoryRead:
    """
    Create a category.

    - **name**: Display name.
    - **slug**: Optional; derived from the name.
    - **parent_id**: Optional parent category.
    - **order**: Position among siblings.
    """
    return await service.create(data)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Update Category",
    responses={
        400: {"description": "Invalid parent assignment"},
        404: {"description": "Category not found"},
        409: {"description": "Slug already in use"},
    },
)
async def update_category(category_id: str, data: CategoryUpdate, service: CategoryServiceDep) -> CategoryRead:
    return await service.update(category_id, data)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    summary="Delete Category",
    responses={404: {"description": "Category not found"}},
)
async def delete_category(category_id: str, service: CategoryServiceDep) -> MessageResponse:
    await service.delete(category_id)
    return MessageResponse(message="Category deleted successfully")
