"""
Media API Endpoints.

Multipart uploads and remote imports into the media library, plus listing,
metadata edits and deletion. Uploaded files are served from ``/uploads``.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status

from quillpress.core.errors import InvalidRequestError
from quillpress.core.models.io.common import MessageResponse
from quillpress.core.models.io.media import MediaFromUrlRequest, MediaListResponse, MediaRead, MediaUpdate
from quillpress.server.services.deps import MediaServiceDep

router = APIRouter(tags=["media"])


@router.post(
    "/upload",
    response_model=MediaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Image",
    description="Upload an image; thumbnail, medium and large variants are generated.",
    responses={
        400: {"description": "Missing file, invalid folder or undecodable image"},
        404: {"description": "Uploader not found"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported media type"},
    },
)
async def upload_media(
    service: MediaServiceDep,
    file: Optional[UploadFile] = File(None),
    folder: str = Form("uploads"),
    uploaded_by_id: str = Form(...),
) -> MediaRead:
    """
    Upload an image to the media library.

    - **file**: JPEG, PNG, GIF or WebP image.
    - **folder**: Target folder below the upload root (letters, digits, `/`, `_`, `-`).
    - **uploaded_by_id**: The uploading user.
    """
    if file is None or not file.filename:
        raise InvalidRequestError("No file uploaded")
    # One byte past the limit is enough to reject oversized files.
    data = await file.read(service.config.max_upload_bytes + 1)
    return await service.upload(
        data=data,
        filename=file.filename,
        content_type=file.content_type,
        folder=folder,
        uploaded_by_id=uploaded_by_id,
    )


@router.post(
    "/upload-from-url",
    response_model=MediaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Import Image From URL",
    description="Download a public image over http(s) and store it like an upload.",
    responses={400: {"description": "URL refused or download failed"}},
)
async def upload_from_url(data: MediaFromUrlRequest, service: MediaServiceDep) -> MediaRead:
    return await service.upload_from_url(data)


@router.get("", response_model=MediaListResponse, summary="List Media", description="Newest first, paginated.")
async def list_media(
    service: MediaServiceDep,
    folder: Optional[str] = None,
    page: int = 1,
    limit: int = 100,
) -> MediaListResponse:
    return await service.list(folder=folder, page=page, limit=limit)


@router.get(
    "/{media_id}",
    response_model=MediaRead,
    summary="Get Media Item",
    responses={404: {"description": "Media not found"}},
)
async def get_media(media_id: str, service: MediaServiceDep) -> MediaRead:
    return await service.get(media_id)


@router.patch(
    "/{media_id}",
    response_model=MediaRead,
    summary="Edit Media Metadata",
    responses={404: {"description": "Media not found"}},
)
async def update_media(media_id: str, data: MediaUpdate, service: MediaServiceDep) -> MediaRead:
    return await service.update(media_id, data)


@router.delete(
    "/{media_id}",
    response_model=MessageResponse,
    summary="Delete Media Item",
    description="Remove the original and its variants from disk, then the record.",
    responses={404: {"description": "Media not found"}},
)
async def delete_media(media_id: str, service: MediaServiceDep) -> MessageResponse:
    await service.delete(media_id)
    return MessageResponse(message="Media deleted successfully")
