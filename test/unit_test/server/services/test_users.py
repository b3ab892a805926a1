"""Unit tests for UserService."""

import pytest
import pytest_asyncio
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quillpress.core.database import create_all
from quillpress.core.database.entities.comments import Comment
from quillpress.core.database.entities.media import Media
from quillpress.core.database.entities.posts import Post
from quillpress.core.database.entities.users import User, UserRole
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.models.io.users import UserCreate, UserUpdate
from quillpress.server.services.users import UserService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session):
    return UserService(session)


class TestUserService:
    async def test_create(self, service):
        user = await service.create(
            UserCreate(username=" editor ", email="Editor@Example.com", display_name="<b>Ed</b>", role=UserRole.EDITOR)
        )

        assert user.username == "editor"
        assert user.email == "editor@example.com"
        assert user.display_name == "Ed"
        assert user.role == UserRole.EDITOR

    async def test_create_defaults_to_subscriber(self, service):
        user = await service.create(UserCreate(username="reader", email="reader@example.com"))
        assert user.role == UserRole.SUBSCRIBER

    async def test_create_duplicates(self, service):
        await service.create(UserCreate(username="taken", email="taken@example.com"))

        with pytest.raises(ConflictError, match="Username"):
            await service.create(UserCreate(username="taken", email="other@example.com"))
        with pytest.raises(ConflictError, match="Email"):
            await service.create(UserCreate(username="other", email="TAKEN@example.com"))

    async def test_create_invalid_email(self, service):
        with pytest.raises(InvalidRequestError):
            await service.create(UserCreate(username="bad", email="nope"))

    async def test_get_list_and_update(self, service, author):
        assert (await service.get(author.id)).username == author.username
        assert [u.id for u in await service.list()] == [author.id]

        updated = await service.update(author.id, UserUpdate(display_name="Renamed", role=UserRole.ADMINISTRATOR))
        assert (updated.display_name, updated.role) == ("Renamed", UserRole.ADMINISTRATOR)

    async def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.get("missing")

    async def test_delete(self, service, author):
        await service.delete(author.id)
        with pytest.raises(NotFoundError):
            await service.get(author.id)

    async def test_delete_refuses_content_owner(self, service, session, author):
        session.add(Post(title="Mine", slug="mine", author_id=author.id))
        await session.commit()

        with pytest.raises(ConflictError):
            await service.delete(author.id)

    async def test_delete_refuses_media_uploader(self, service, session, author):
        session.add(
            Media(
                filename="a.png",
                original_name="a.png",
                mime_type="image/png",
                size=3,
                url="/uploads/a.png",
                path="uploads/a.png",
                uploaded_by_id=author.id,
            )
        )
        await session.commit()

        with pytest.raises(ConflictError):
            await service.delete(author.id)


class TestUserDeleteWithForeignKeys:
    """User deletion against SQLite with foreign key enforcement switched on."""

    @pytest_asyncio.fixture
    async def fk_session(self):
        engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        await create_all(engine)
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            yield session
        await engine.dispose()

    async def test_delete_commenter_keeps_comment_without_user(self, fk_session):
        writer = User(username="writer", email="writer@example.com", role=UserRole.AUTHOR)
        reader = User(username="reader", email="reader@example.com")
        fk_session.add_all([writer, reader])
        await fk_session.commit()
        post = Post(title="Hello", slug="hello", author_id=writer.id)
        fk_session.add(post)
        await fk_session.commit()
        comment = Comment(content="Nice post", post_id=post.id, user_id=reader.id, author_name="Reader")
        fk_session.add(comment)
        await fk_session.commit()

        await UserService(fk_session).delete(reader.id)

        stored_user_id = (await fk_session.execute(select(Comment.user_id).where(Comment.id == comment.id))).one()
        assert stored_user_id == (None,)
        with pytest.raises(NotFoundError):
            await UserService(fk_session).get(reader.id)
