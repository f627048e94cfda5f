"""
Blog List Backend — Login Route
=================================

What:  POST /api/login exchanges username + password for a bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.user import LoginRequest, LoginResponse
from bloglist.services.auth_service import auth_service

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Log in",
    description="Returns `{token, username, name}`. Send the token as `Authorization: bearer <token>`.",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(db, payload)
