"""
Service for managing users.

Users carry no credentials here; they exist so posts, pages, media and
comments can name an author or uploader.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from quillpress.core.content import sanitize_email, sanitize_text
from quillpress.core.database.entities.users import User
from quillpress.core.database.repositories import (
    MediaRepository,
    PageRepository,
    PostRepository,
    UserRepository,
)
from quillpress.core.errors import ConflictError, InvalidRequestError, NotFoundError
from quillpress.core.logging_config import get_logger
from quillpress.core.models.io.users import UserCreate, UserRead, UserUpdate
from quillpress.core.monitoring import log_content_event

logger = get_logger(__name__)


class UserService:
    """Service for user CRUD."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def create(self, data: UserCreate) -> UserRead:
        username = data.username.strip()
        if not username:
            raise InvalidRequestError("Username is required")
        email = sanitize_email(data.email)
        if email is None:
            raise InvalidRequestError("Invalid email address")

        if await self.users.get_by_username(username):
            raise ConflictError("Username already exists")
        if await self.users.get_by_email(email):
            raise ConflictError("Email already exists")

        user = User(
            username=username,
            email=email,
            display_name=sanitize_text(data.display_name) or None,
            role=data.role,
        )
        user = await self.users.create(user)
        logger.info(f"Created user {user.id} ({user.username})")
        log_content_event("user_created", user_id=user.id)
        return UserRead.model_validate(user)

    async def list(self, skip: int = 0, take: int = 50) -> List[UserRead]:
        users = await self.users.list(limit=take, offset=skip)
        return [UserRead.model_validate(user) for user in users]

    async def get(self, user_id: str) -> UserRead:
        return UserRead.model_validate(await self.require(user_id))

    async def require(self, user_id: str, message: str = "User not found") -> User:
        """Load a user or raise ``NotFoundError`` with ``message``."""
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(message)
        return user

    async def update(self, user_id: str, data: UserUpdate) -> UserRead:
        user = await self.require(user_id)
        fields = data.model_dump(exclude_unset=True)
        if "display_name" in fields:
            user.display_name = sanitize_text(fields["display_name"]) or None
        if fields.get("role") is not None:
            user.role = fields["role"]
        user = await self.users.update(user)
        return UserRead.model_validate(user)

    async def delete(self, user_id: str) -> None:
        """Delete a user that owns no posts, pages or media."""
        user = await self.require(user_id)
        owned = (
            await PostRepository(self.session).count({"author_id": user.id})
            + await PageRepository(self.session).count({"author_id": user.id})
            + await MediaRepository(self.session).count({"uploaded_by_id": user.id})
        )
        if owned:
            raise ConflictError("User still owns content and cannot be deleted")
        await self.users.delete(user.id)
        logger.info(f"Deleted user {user_id}")
