"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.logging_config import get_logger
from quillpress.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.resolved_database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    Tables are created from the ORM metadata only when ``DATABASE_AUTO_CREATE``
    is set. In production the schema is owned by Alembic migrations and this
    function leaves the database untouched.
    """
    if not settings.database_auto_create:
        logger.info("DATABASE_AUTO_CREATE is off; schema is managed by Alembic migrations")
        return
    logger.info("Creating database tables from ORM metadata")
    await create_all(engine)
