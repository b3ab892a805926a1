"""Site settings repository for the singleton configuration row."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.site_settings import SITE_SETTINGS_ID, SiteSettings
from .base import AsyncBaseRepository


class SiteSettingsRepository(AsyncBaseRepository[SiteSettings]):
    """Repository for the site settings row."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SiteSettings)

    async def get_or_create(self) -> SiteSettings:
        """Return the settings row, creating it with defaults when missing."""
        current = await self.get_by_id(SITE_SETTINGS_ID)
        if current is not None:
            return current
        return await self.create(SiteSettings(id=SITE_SETTINGS_ID))
