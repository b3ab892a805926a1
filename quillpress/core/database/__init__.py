"""
Centralized database layer for QuillPress.

This package provides a unified location for all database entities and repositories,
organized by content type.

Structure:
- entities/: Database entity models, one module per table family
- repositories/: Data access layer, one repository per entity
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, create_all)
"""

from .base import Base, new_id, to_naive_utc, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "new_id",
    "to_naive_utc",
    "utc_now",
]
