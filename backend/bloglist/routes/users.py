"""
Blog List Backend — User Route Handlers
=========================================

What:  Registration (POST /api/users) and listing (GET /api/users).
Why:   Registration is open: no token is needed to create an account.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.user import UserCreate, UserResponse
from bloglist.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
    description="Returns every user with their blogs populated. Password hashes are never included.",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.post(
    "",
    response_model=UserResponse,
    responses={
        400: {"description": "Short or duplicate username, short password", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create_user(db, payload)
