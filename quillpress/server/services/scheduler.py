"""
Scheduled publishing loop.

Runs inside the server process when ``SCHEDULER_ENABLED`` is set: every
``SCHEDULER_INTERVAL_SECONDS`` it publishes due scheduled posts and refreshes
the trending tag flags. The same work can be triggered on demand through
``POST /api/v1/blog/admin/process-scheduled``.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quillpress.core.logging_config import get_logger
from quillpress.core.monitoring import log_error

from .blog import BlogService

logger = get_logger(__name__)


async def run_scheduled_pass(session_maker: async_sessionmaker[AsyncSession]) -> int:
    """Publish due posts and refresh trending tags in one session; returns posts published."""
    async with session_maker() as session:
        service = BlogService(session)
        published = await service.process_scheduled()
        await service.update_trending()
    return published


class PublishingScheduler:
    """Background task that periodically runs ``run_scheduled_pass``."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], interval_seconds: int = 60):
        self.session_maker = session_maker
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        while True:
            try:
                published = await run_scheduled_pass(self.session_maker)
                if published:
                    logger.info(f"Scheduler published {published} posts")
            except Exception as e:
                logger.error(f"Scheduled publishing pass failed: {e}", exc_info=True)
                log_error("scheduler", str(e))
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="quillpress-scheduler")
        logger.info(f"Scheduled publishing started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Scheduled publishing stopped")
        except Exception as e:
            logger.error(f"Scheduled publishing task had already failed: {e}", exc_info=True)
            log_error("scheduler", str(e))
