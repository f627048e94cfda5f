"""
Blog List Backend — User Service
==================================

What:  Registration, user listing, and user lookup.
Who:   Called by the /api/users routes and by AuthService.

Registration rules:
    - username and password must be at least settings.username_min_length /
      settings.password_min_length characters
    - username must be unique; the database unique constraint is the source
      of truth, so a concurrent duplicate registration is caught there too
    - the password is stored only as a bcrypt hash
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.concurrency import run_in_threadpool

from bloglist.config import settings
from bloglist.exceptions import DatabaseError, ValidationError
from bloglist.models.user import User
from bloglist.schemas.user import BlogSummary, UserCreate, UserResponse
from bloglist.security import hash_password

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    """Maps a User row (with `blogs` loaded) to its public shape."""
    return UserResponse(
        id=str(user.id),
        username=user.username,
        name=user.name,
        blogs=[
            BlogSummary(
                id=str(blog.id),
                title=blog.title,
                author=blog.author,
                url=blog.url,
                likes=blog.likes,
            )
            for blog in user.blogs
        ],
    )


class UserService:
    """Business logic for user accounts."""

    def _validate_credentials(self, payload: UserCreate) -> None:
        if len(payload.username) < settings.username_min_length:
            raise ValidationError(
                message=(
                    f"username must be at least {settings.username_min_length} "
                    "characters long"
                ),
                field="username",
            )
        if len(payload.password) < settings.password_min_length:
            raise ValidationError(
                message=(
                    f"password must be at least {settings.password_min_length} "
                    "characters long"
                ),
                field="password",
            )

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        """
        Register a new account.

        Raises:
            ValidationError: Short username/password, or duplicate username
                (the driver's message is attached under `db_error`).
            DatabaseError: Any other persistence failure.
        """
        self._validate_credentials(payload)

        # bcrypt is CPU-bound; hashing on the event loop would stall every
        # other request for its duration
        password_hash = await run_in_threadpool(hash_password, payload.password)

        # blogs=[] marks the collection as loaded, so building the response
        # never triggers a lazy load
        user = User(
            id=uuid.uuid4(),
            username=payload.username,
            name=payload.name,
            password_hash=password_hash,
            blogs=[],
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError as e:
            logger.warning("Rejected registration for duplicate username '%s'", payload.username)
            raise ValidationError(
                message="username must be unique",
                field="username",
                context={"db_error": str(e.orig)},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User created: %s (%s)", user.id, user.username)
        return to_user_response(user)

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """All users in registration order, each with their blogs populated."""
        try:
            result = await db.execute(
                select(User)
                .options(selectinload(User.blogs))
                .order_by(User.created_at, User.id)
            )
            users = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_user_response(user) for user in users]

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


user_service = UserService()
