"""
Blog List Backend — Blog Service (Business Logic)
===================================================

What:  List, fetch, create, update and delete blog posts.
Why:   Encapsulates the access rules in one place, independent of HTTP.
Who:   Called by the /api/blogs route handlers.

Access Contract:
    ┌──────────┬──────────────────┬─────────────────────────────┐
    │ Action   │ Needs a token?   │ Needs to own the post?      │
    ├──────────┼──────────────────┼─────────────────────────────┤
    │ list/get │ no               │ no                          │
    │ create   │ yes (401)        │ n/a (caller becomes owner)  │
    │ update   │ no               │ no                          │
    │ delete   │ yes (401)        │ yes (403)                   │
    └──────────┴──────────────────┴─────────────────────────────┘

    Update is deliberately left open to any caller: existing clients
    rely on it. The authenticated user for create/delete is resolved by
    the route dependency and passed in explicitly.

Design Decision:
    BlogService is stateless: it receives the db session (and the caller,
    where relevant) for each call. No shared mutable state, no locks; the
    database serializes conflicting writes and concurrent updates are
    last-writer-wins.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bloglist.exceptions import (
    AuthorizationError,
    BlogListError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from bloglist.models.blog import Blog
from bloglist.models.user import User
from bloglist.schemas.blog import BlogCreate, BlogResponse, BlogUpdate, OwnerSummary

logger = logging.getLogger(__name__)


def parse_blog_id(raw_id: str) -> uuid.UUID:
    """
    Convert a path id to the internal key.

    Raises:
        ValidationError: The id is not a well-formed identifier (400, as
            opposed to 404 for a well-formed id that matches nothing).
    """
    try:
        return uuid.UUID(raw_id)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(message="malformatted id", field="id")


def to_blog_response(blog: Blog) -> BlogResponse:
    """
    Maps a Blog row to its public shape.

    The internal UUID becomes the string `id`; the owner is populated as
    {username, name, id}. `blog.user` must already be loaded.
    """
    owner = None
    if blog.user is not None:
        owner = OwnerSummary(
            username=blog.user.username,
            name=blog.user.name,
            id=str(blog.user.id),
        )
    return BlogResponse(
        id=str(blog.id),
        title=blog.title,
        author=blog.author,
        url=blog.url,
        likes=blog.likes,
        user=owner,
    )


class BlogService:
    """
    Business logic layer for blog operations.

    Error Handling Strategy:
        Application exceptions (NotFoundError, AuthorizationError, ...)
        propagate unchanged. SQLAlchemy failures are wrapped in DatabaseError
        so no driver detail reaches the client.
    """

    async def _load(self, db: AsyncSession, blog_id: uuid.UUID) -> Blog:
        result = await db.execute(
            select(Blog).options(selectinload(Blog.user)).where(Blog.id == blog_id)
        )
        blog = result.scalar_one_or_none()
        if blog is None:
            raise NotFoundError(resource="blog", resource_id=str(blog_id))
        return blog

    async def list_blogs(self, db: AsyncSession) -> List[BlogResponse]:
        """
        Every blog in insertion order with owners populated.

        Query plan:
            SELECT * FROM blogs ORDER BY created_at, id
            SELECT * FROM users WHERE id IN (...)     -- selectinload
        """
        try:
            result = await db.execute(
                select(Blog)
                .options(selectinload(Blog.user))
                .order_by(Blog.created_at, Blog.id)
            )
            blogs = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing blogs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve blogs. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_blog_response(blog) for blog in blogs]

    async def get_blog(self, db: AsyncSession, blog_id: str) -> BlogResponse:
        key = parse_blog_id(blog_id)
        try:
            blog = await self._load(db, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching blog %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not retrieve the blog. Please try again.",
                context={"blog_id": str(key)},
            )
        return to_blog_response(blog)

    async def create_blog(
        self,
        db: AsyncSession,
        user: User,
        payload: BlogCreate,
    ) -> BlogResponse:
        """
        Store a new blog owned by `user`.

        Args:
            db: Async database session
            user: The authenticated caller (becomes the owner)
            payload: Validated body; likes already defaulted to 0

        Raises:
            DatabaseError: Insert failed
        """
        blog = Blog(
            id=uuid.uuid4(),
            title=payload.title,
            author=payload.author,
            url=payload.url,
            likes=payload.likes,
            user=user,
        )
        try:
            db.add(blog)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating blog: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the blog. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Blog %s created by user %s", blog.id, user.id)
        return to_blog_response(blog)

    async def update_blog(
        self,
        db: AsyncSession,
        blog_id: str,
        payload: BlogUpdate,
    ) -> BlogResponse:
        """
        Replace title, author, url and likes of an existing blog.

        No caller identity is taken: any client may update any blog.

        Raises:
            ValidationError: Malformed id
            NotFoundError: No blog with this id
        """
        key = parse_blog_id(blog_id)
        try:
            blog = await self._load(db, key)
            blog.title = payload.title
            blog.author = payload.author
            blog.url = payload.url
            blog.likes = payload.likes
            await db.flush()
        except BlogListError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating blog %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not update the blog. Please try again.",
                context={"blog_id": str(key)},
            )

        logger.info("Blog %s updated", blog.id)
        return to_blog_response(blog)

    async def delete_blog(self, db: AsyncSession, user: User, blog_id: str) -> None:
        """
        Remove a blog owned by `user`.

        Concurrency:
            The row is removed with a conditional DELETE ... WHERE id = :id.
            If a concurrent request removed it after our lookup, zero rows
            are affected and the caller gets NotFoundError, not a crash.

        Raises:
            ValidationError: Malformed id
            NotFoundError: No blog with this id (or lost a delete race)
            AuthorizationError: The blog belongs to someone else
        """
        key = parse_blog_id(blog_id)
        try:
            result = await db.execute(select(Blog).where(Blog.id == key))
            blog = result.scalar_one_or_none()
            if blog is None:
                raise NotFoundError(resource="blog", resource_id=str(key))

            if blog.user_id is None or blog.user_id != user.id:
                logger.warning("User %s may not delete blog %s", user.id, key)
                raise AuthorizationError(context={"blog_id": str(key)})

            outcome = await db.execute(
                delete(Blog)
                .where(Blog.id == key)
                .execution_options(synchronize_session=False)
            )
            if outcome.rowcount == 0:
                raise NotFoundError(resource="blog", resource_id=str(key))
        except BlogListError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting blog %s: %s", key, str(e))
            raise DatabaseError(
                message="Could not delete the blog. Please try again.",
                context={"blog_id": str(key)},
            )

        logger.info("Blog %s deleted by user %s", key, user.id)


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
