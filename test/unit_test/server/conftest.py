from typing import AsyncGenerator
from unittest.mock import patch

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quillpress.core.database import create_all
from quillpress.core.database.entities.users import User, UserRole

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def author(session: AsyncSession) -> User:
    """An AUTHOR user that content can be attributed to."""
    user = User(username="author", email="author@example.com", display_name="Ada Author", role=UserRole.AUTHOR)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from quillpress.core.database import get_session
    from quillpress.server.core.config import MediaConfig
    from quillpress.server.main import app
    from quillpress.server.services.deps import get_media_service
    from quillpress.server.services.media import MediaService

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    def get_media_service_override() -> MediaService:
        return MediaService(session, config=MediaConfig(upload_dir=str(tmp_path / "uploads")))

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_media_service] = get_media_service_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("quillpress.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
