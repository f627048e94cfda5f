"""
Blog List Backend — Route Dependencies
========================================

What:  FastAPI dependencies shared by several routers.
How:   `get_current_user` runs before the request body is validated, so a
       request with a bad token is answered 401 even when its body is also
       invalid.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.models.user import User
from bloglist.services.auth_service import auth_service


async def get_current_user(
    authorization: Optional[str] = Header(
        default=None,
        description="`bearer <token>` as returned by POST /api/login",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the caller from the Authorization header.

    FastAPI caches get_db_session per request, so the user is loaded in the
    same session the route handler then writes with.

    Raises:
        AuthenticationError: → 401 via the global handler
    """
    token = auth_service.extract_bearer_token(authorization)
    return await auth_service.resolve_user(db, token)
