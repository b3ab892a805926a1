"""Media repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.media import Media
from .base import AsyncBaseRepository


class MediaRepository(AsyncBaseRepository[Media]):
    """Repository for media library items; ``list``/``count`` filter by folder."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Media)
