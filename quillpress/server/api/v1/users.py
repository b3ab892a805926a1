"""
User API Endpoints.

Users are the authors and uploaders referenced by posts, pages, media and
comments. They carry no credentials.
"""

from typing import List

from fastapi import APIRouter, Query, Response, status

from quillpress.core.models.io.users import UserCreate, UserRead, UserUpdate
from quillpress.server.services.deps import UserServiceDep

router = APIRouter(tags=["users"])


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a user that can author posts and pages or upload media.",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Invalid email address"},
        409: {"description": "Username or email already taken"},
    },
)
async def create_user(data: UserCreate, service: UserServiceDep) -> UserRead:
    """
    Create a new user.

    - **username**: Unique handle.
    - **email**: Unique, valid email address.
    - **display_name**: Optional name shown next to content.
    - **role**: Editorial role (defaults to SUBSCRIBER).
    """
    return await service.create(data)


@router.get("", response_model=List[UserRead], summary="List Users", description="List users, newest first.")
async def list_users(
    service: UserServiceDep,
    skip: int = Query(0, ge=0),
    take: int = Query(50, ge=1, le=500),
) -> List[UserRead]:
    return await service.list(skip=skip, take=take)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, service: UserServiceDep) -> UserRead:
    return await service.get(user_id)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Partially update a user's display name and role.",
    responses={404: {"description": "User not found"}},
)
async def update_user(user_id: str, data: UserUpdate, service: UserServiceDep) -> UserRead:
    return await service.update(user_id, data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    responses={
        404: {"description": "User not found"},
        409: {"description": "User still owns posts, pages or media"},
    },
)
async def delete_user(user_id: str, service: UserServiceDep) -> Response:
    await service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
