"""
Comment API Endpoints.

Public comment submission and threaded reads, plus the admin listing, voting
and deletion.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from quillpress.core.models.io.comments import (
    CommentAdminRead,
    CommentCreate,
    CommentRead,
    CommentThreadRead,
    CommentVote,
)
from quillpress.server.services.deps import CommentServiceDep

router = APIRouter(tags=["comments"])


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post Comment",
    responses={
        400: {"description": "Empty content, invalid email, closed comments or bad parent"},
        404: {"description": "Post or user not found"},
    },
)
async def create_comment(data: CommentCreate, service: CommentServiceDep) -> CommentRead:
    """
    Add a comment to a post.

    - **post_id**: The post being discussed; it must allow comments.
    - **content**: Plain text, 1 to 3000 characters.
    - **parent_id**: Optional comment being replied to. Replies nest one level.
    """
    return await service.create(data)


@router.get(
    "/post/{post_id}",
    response_model=List[CommentThreadRead],
    summary="Comment Thread",
    description="Approved root comments, newest first, each with its replies oldest first.",
)
async def comment_thread(post_id: str, service: CommentServiceDep) -> List[CommentThreadRead]:
    return await service.thread(post_id)


@router.get("", response_model=List[CommentAdminRead], summary="List Comments (Admin)")
async def list_comments(
    service: CommentServiceDep,
    post_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    take: int = Query(50, ge=1, le=500),
) -> List[CommentAdminRead]:
    return await service.list_admin(post_id=post_id or None, skip=skip, take=take)


@router.patch(
    "/{comment_id}/vote",
    response_model=CommentRead,
    summary="Vote on Comment",
    responses={404: {"description": "Comment not found"}},
)
async def vote_comment(comment_id: str, data: CommentVote, service: CommentServiceDep) -> CommentRead:
    return await service.vote(comment_id, up=data.up, down=data.down)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    responses={404: {"description": "Comment not found"}},
)
async def delete_comment(comment_id: str, service: CommentServiceDep) -> Response:
    await service.delete(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
