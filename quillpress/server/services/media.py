"""
Service for the media library.

Uploads are validated (size, MIME type, target folder), decoded with Pillow to
read their dimensions, written under the upload root with a random file name,
and accompanied by three width-bounded variants (thumbnail, medium, large).

Remote imports go through the same pipeline after the URL has been checked
against server-side request forgery: only http(s), no private or local
addresses (literal or resolved), no redirects and no oversized bodies.
"""

from __future__ import annotations

import asyncio
import ipaddress
import math
import re
import socket
import uuid
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import aiofiles
import httpx
from PIL import Image, UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import sanitize_text, sanitize_url
from quillpress.core.database.entities.media import Media
from quillpress.core.database.repositories import MediaRepository, UserRepository
from quillpress.core.errors import CmsError, InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.media import MediaFromUrlRequest, MediaListResponse, MediaRead, MediaUpdate
from quillpress.core.monitoring import log_content_event
from quillpress.server.core.config import MediaConfig, settings

logger = get_logger(__name__)

DEFAULT_FOLDER = "uploads"
VARIANT_WIDTHS = {"thumbnail": 300, "medium": 800, "large": 1200}
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
IMAGE_SUFFIXES = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/jpg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/gif": (".gif",),
    "image/webp": (".webp",),
}
BLOCKED_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})
MAX_PAGE_SIZE = 200

_FOLDER_RE = re.compile(r"^[A-Za-z0-9/_-]+$")


def stored_extension(original_name: str, mime_type: str) -> str:
    """Keep the client suffix only when it matches the declared image type."""
    suffix = Path(original_name).suffix.lower()
    if suffix in IMAGE_SUFFIXES.get(mime_type, ()):
        return suffix
    return MIME_EXTENSIONS.get(mime_type, "")


def normalize_folder(folder: Optional[str], root: Path) -> str:
    """
    Validate a client-supplied folder and return it relative to ``root``.

    Raises:
        InvalidRequestError: For traversal, absolute paths, disallowed
            characters, or a folder resolving outside ``root``
    """
    raw = (folder or DEFAULT_FOLDER).replace("\\", "/")
    if raw.startswith("/"):
        raise InvalidRequestError("Invalid folder path")
    segments = [segment for segment in raw.split("/") if segment]
    if not segments:
        return DEFAULT_FOLDER
    if any(segment in ("..", ".") for segment in segments):
        raise InvalidRequestError("Invalid folder path")
    normalized = "/".join(segments)
    if not _FOLDER_RE.match(normalized):
        raise InvalidRequestError("Folder may only contain letters, digits, '/', '_' and '-'")

    resolved_root = root.resolve()
    target = (resolved_root / normalized).resolve()
    if target != resolved_root and resolved_root not in target.parents:
        raise InvalidRequestError("Invalid folder path")
    return normalized


def is_blocked_address(address: str) -> bool:
    """True for loopback, private, link-local, reserved, multicast or unspecified IPs."""
    ip = ipaddress.ip_address(address)
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


async def resolve_host(host: str) -> List[str]:
    """Resolve ``host`` to the IP addresses it points at."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    return [info[4][0] for info in infos]


def _process_image(data: bytes, directory: Path, filename: str) -> Tuple[int, int, Dict[str, Dict[str, Any]]]:
    """
    Decode ``data`` and write its resized variants next to the original.

    Variants are bounded by width and never enlarged.

    Returns:
        ``(width, height, variants)`` where variants maps a variant name to
        ``{"filename", "width", "height"}``
    """
    with Image.open(BytesIO(data)) as image:
        image.load()
        width, height = image.size
        image_format = image.format
        variants: Dict[str, Dict[str, Any]] = {}
        for name, max_width in VARIANT_WIDTHS.items():
            variant = image.copy()
            if width > max_width:
                variant.thumbnail((max_width, math.ceil(height * max_width / width)), Image.Resampling.LANCZOS)
            if image_format == "JPEG" and variant.mode not in ("RGB", "L"):
                variant = variant.convert("RGB")
            variant_name = f"{name}-{filename}"
            variant.save(directory / variant_name, format=image_format)
            variants[name] = {"filename": variant_name, "width": variant.width, "height": variant.height}
    return width, height, variants


class MediaService:
    """Service for uploading, importing, listing, editing and deleting media."""

    def __init__(
        self,
        session: AsyncSession,
        config: Optional[MediaConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.config = config or settings.media
        self.root = Path(self.config.upload_dir)
        self.transport = transport
        self.media = MediaRepository(session)
        self.users = UserRepository(session)

    # ------------------------------------------------------------------
    # Storage pipeline
    # ------------------------------------------------------------------

    def _check_limits(self, size: int, mime_type: str) -> None:
        if size > self.config.max_upload_bytes:
            raise CmsError(
                f"File too large. Maximum size is {self.config.max_upload_bytes} bytes", status_code=413
            )
        if mime_type not in self.config.allowed_mime_types:
            raise CmsError(f"Unsupported media type: {mime_type or 'unknown'}", status_code=415)

    async def _store(
        self,
        data: bytes,
        *,
        original_name: str,
        extension: str,
        mime_type: str,
        folder: str,
        uploaded_by_id: str,
    ) -> MediaRead:
        filename = f"{uuid.uuid4().hex}{extension}"
        directory = self.root.resolve() / folder
        directory.mkdir(parents=True, exist_ok=True)

        try:
            width, height, variants = await asyncio.to_thread(_process_image, data, directory, filename)
        except (UnidentifiedImageError, OSError) as exc:
            logger.warning(f"Rejected upload {original_name!r}: {exc}")
            raise InvalidRequestError("File is not a valid image")

        path = directory / filename
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

        prefix = f"{self.config.public_prefix.rstrip('/')}/{folder}"
        media = Media(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size=len(data),
            url=f"{prefix}/{filename}",
            path=str(path),
            width=width,
            height=height,
            folder=folder,
            variants={
                name: {
                    "url": f"{prefix}/{info['filename']}",
                    "path": str(directory / info["filename"]),
                    "width": info["width"],
                    "height": info["height"],
                }
                for name, info in variants.items()
            },
            uploaded_by_id=uploaded_by_id,
        )
        media = await self.media.create(media)
        logger.info(f"Stored media {media.id} at {media.url} ({media.size} bytes)")
        log_content_event("media_uploaded", media_id=media.id, size=media.size, mime_type=mime_type)
        return MediaRead.model_validate(media)

    async def _require_uploader(self, user_id: str) -> None:
        if await self.users.get_by_id(user_id) is None:
            raise NotFoundError("Uploader not found")

    async def upload(
        self,
        *,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        folder: Optional[str],
        uploaded_by_id: str,
    ) -> MediaRead:
        mime_type = (content_type or "").lower()
        self._check_limits(len(data), mime_type)
        normalized_folder = normalize_folder(folder, self.root)
        await self._require_uploader(uploaded_by_id)

        original_name = Path(filename or "upload").name
        extension = stored_extension(original_name, mime_type)
        return await self._store(
            data,
            original_name=original_name,
            extension=extension,
            mime_type=mime_type,
            folder=normalized_folder,
            uploaded_by_id=uploaded_by_id,
        )

    # ------------------------------------------------------------------
    # Remote import
    # ------------------------------------------------------------------

    async def _assert_public_host(self, host: Optional[str]) -> None:
        if not host:
            raise InvalidRequestError("Failed to upload from URL: missing host")
        if host.lower() in BLOCKED_HOSTS:
            raise InvalidRequestError("Failed to upload from URL: host is not allowed")
        try:
            addresses = [str(ipaddress.ip_address(host.strip("[]")))]
        except ValueError:
            try:
                addresses = await resolve_host(host)
            except socket.gaierror:
                raise InvalidRequestError("Failed to upload from URL: host could not be resolved")
        if not addresses or any(is_blocked_address(address) for address in addresses):
            raise InvalidRequestError("Failed to upload from URL: host resolves to a private address")

    async def _download(self, url: str) -> Tuple[bytes, str]:
        limit = self.config.max_upload_bytes
        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=self.config.fetch_timeout_seconds,
            transport=self.transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if response.is_redirect:
                    raise InvalidRequestError("Failed to upload from URL: redirects are not allowed")
                if not response.is_success:
                    raise InvalidRequestError(
                        f"Failed to upload from URL: remote server responded with {response.status_code}"
                    )
                mime_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
                if mime_type not in self.config.allowed_mime_types:
                    raise InvalidRequestError(f"Failed to upload from URL: unsupported media type {mime_type}")
                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > limit:
                    raise InvalidRequestError("Failed to upload from URL: file too large")

                chunks = bytearray()
                async for chunk in response.aiter_bytes():
                    chunks.extend(chunk)
                    if len(chunks) > limit:
                        raise InvalidRequestError("Failed to upload from URL: file too large")
        return bytes(chunks), mime_type

    async def upload_from_url(self, request: MediaFromUrlRequest) -> MediaRead:
        url = sanitize_url(request.url)
        if url is None:
            raise InvalidRequestError("Failed to upload from URL: only http and https URLs are allowed")
        parsed = urlparse(url)
        await self._assert_public_host(parsed.hostname)
        folder = normalize_folder(request.folder, self.root)
        await self._require_uploader(request.uploaded_by_id)

        try:
            data, mime_type = await self._download(url)
        except httpx.HTTPError as exc:
            logger.warning(f"Remote media download failed for {url}: {exc}")
            raise InvalidRequestError(f"Failed to upload from URL: {exc}")

        original_name = Path(parsed.path).name or "remote-image"
        return await self._store(
            data,
            original_name=original_name,
            extension=MIME_EXTENSIONS.get(mime_type, ""),
            mime_type=mime_type,
            folder=folder,
            uploaded_by_id=request.uploaded_by_id,
        )

    # ------------------------------------------------------------------
    # Library management
    # ------------------------------------------------------------------

    async def list(self, folder: Optional[str] = None, page: int = 1, limit: int = 100) -> MediaListResponse:
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        page = max(page, 1)
        filters = {"folder": folder or None}
        total = await self.media.count(filters)
        items = await self.media.list(limit=limit, offset=(page - 1) * limit, filters=filters)
        return MediaListResponse(
            items=[MediaRead.model_validate(item) for item in items],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    async def _require(self, media_id: str) -> Media:
        media = await self.media.get_by_id(media_id)
        if media is None:
            raise NotFoundError("Media not found")
        return media

    async def get(self, media_id: str) -> MediaRead:
        return MediaRead.model_validate(await self._require(media_id))

    async def update(self, media_id: str, data: MediaUpdate) -> MediaRead:
        media = await self._require(media_id)
        fields = data.model_dump(exclude_unset=True)
        for name in ("title", "description", "alt_text"):
            if name in fields:
                setattr(media, name, sanitize_text(fields[name]) or None)
        if fields.get("tags") is not None:
            media.tags = list(dict.fromkeys(tag.strip() for tag in fields["tags"] if tag and tag.strip()))
        media = await self.media.update(media)
        return MediaRead.model_validate(media)

    def _remove_file(self, raw_path: Optional[str]) -> None:
        """Delete a stored file when it lies inside the upload root."""
        if not raw_path:
            return
        root = self.root.resolve()
        path = Path(raw_path).resolve()
        if root not in path.parents:
            logger.warning(f"Refusing to delete file outside the upload root: {path}")
            return
        path.unlink(missing_ok=True)

    async def delete(self, media_id: str) -> None:
        media = await self._require(media_id)
        paths = [media.path, *(variant.get("path") for variant in (media.variants or {}).values())]
        for raw_path in paths:
            await asyncio.to_thread(self._remove_file, raw_path)
        await self.media.delete(media.id)
        logger.info(f"Deleted media {media_id}")
        log_content_event("media_deleted", media_id=media_id)
