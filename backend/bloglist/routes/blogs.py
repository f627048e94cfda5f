"""
Blog List Backend — Blog Route Handlers
=========================================

What:  CRUD endpoints for the shared blog list under /api/blogs.
How:   Extracts path/body/caller, delegates to BlogService, returns JSON.

Status codes:
    200  list, get, create, update
    204  delete (empty body)
    400  invalid body or malformed id
    401  missing/invalid bearer token (create, delete)
    403  valid token, not the blog's owner (delete)
    404  unknown id
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.models.user import User
from bloglist.routes.dependencies import get_current_user
from bloglist.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from bloglist.schemas.common import ErrorResponse
from bloglist.services.blog_service import blog_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/blogs", tags=["Blogs"])


@router.get(
    "",
    response_model=List[BlogResponse],
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all blogs",
    description="Returns every blog in insertion order, each with its owner populated.",
)
async def list_blogs(db: AsyncSession = Depends(get_db_session)) -> List[BlogResponse]:
    return await blog_service.list_blogs(db)


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Get a single blog by id",
)
async def get_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.get_blog(db, blog_id)


@router.post(
    "",
    response_model=BlogResponse,
    responses={
        400: {"description": "Missing title or author", "model": ErrorResponse},
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
    },
    summary="Create a blog",
    description=(
        "Stores a new blog owned by the token's user. "
        "Requires `Authorization: bearer <token>`. `likes` defaults to 0."
    ),
)
async def create_blog(
    payload: BlogCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    """
    Create a blog for the authenticated caller.

    Why 200 (not 201): existing clients of this API check for 200.
    """
    return await blog_service.create_blog(db, user, payload)


@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={
        400: {"description": "Invalid body or malformed id", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Replace a blog's fields",
    description=(
        "Replaces title, author, url and likes. No token is required "
        "(kept open for compatibility with existing clients)."
    ),
)
async def update_blog(
    blog_id: str,
    payload: BlogUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.update_blog(db, blog_id, payload)


@router.delete(
    "/{blog_id}",
    status_code=204,
    response_class=Response,
    responses={
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
        403: {"description": "Caller does not own the blog", "model": ErrorResponse},
        404: {"description": "Blog not found", "model": ErrorResponse},
    },
    summary="Delete a blog",
    description="Only the blog's creator may delete it. Requires a bearer token.",
)
async def delete_blog(
    blog_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await blog_service.delete_blog(db, user, blog_id)
    return Response(status_code=204)
