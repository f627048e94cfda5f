"""
Blog List Backend — Authentication Service
============================================

What:  Login (credentials → token) and token resolution (token → User).
Why:   Create and Delete on blogs require a caller identity. This service is
       the only place that turns an Authorization header into a User.
Who:   Called by POST /api/login and by the `get_current_user` route
       dependency.

Resolution flow:
    Authorization: bearer <token>
        │
        ├─ header missing / not "bearer" / empty token ──▶ 401
        ├─ bad signature / malformed / expired ──────────▶ 401
        ├─ `id` claim missing or not a UUID ─────────────▶ 401
        ├─ no such user (deleted, or foreign token) ─────▶ 401
        ▼
      User

    Every failure is an AuthenticationError; ownership (403) is decided
    later by BlogService, once the user is known.
"""

import logging
import uuid
from typing import Optional

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from bloglist.exceptions import AuthenticationError
from bloglist.models.user import User
from bloglist.schemas.user import LoginRequest, LoginResponse
from bloglist.security import (
    create_access_token,
    decode_access_token,
    dummy_verify,
    verify_password,
)
from bloglist.services.user_service import user_service

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class AuthService:
    """Token issuance and verification."""

    def extract_bearer_token(self, authorization: Optional[str]) -> str:
        """
        Pull the token out of an `Authorization: bearer <token>` header.

        The scheme is matched case-insensitively ("Bearer" works too).
        """
        if not authorization:
            raise AuthenticationError(context={"reason": "missing_header"})
        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme.lower() != BEARER_SCHEME or not token:
            raise AuthenticationError(context={"reason": "malformed_header"})
        return token

    def create_token(self, user: User) -> str:
        return create_access_token({"username": user.username, "id": str(user.id)})

    def decode_token(self, token: str) -> uuid.UUID:
        """Verify a token and return the user id it names."""
        try:
            claims = decode_access_token(token)
        except JWTError as e:
            logger.warning("Rejected bearer token: %s", type(e).__name__)
            raise AuthenticationError(context={"reason": "invalid_token"})

        raw_id = claims.get("id")
        try:
            return uuid.UUID(str(raw_id))
        except ValueError:
            logger.warning("Rejected bearer token without a usable id claim")
            raise AuthenticationError(context={"reason": "invalid_token"})

    async def resolve_user(self, db: AsyncSession, token: str) -> User:
        """Map a verified token to a live user."""
        user_id = self.decode_token(token)
        user = await user_service.get_user(db, user_id)
        if user is None:
            logger.warning("Token names unknown user %s", user_id)
            raise AuthenticationError(context={"reason": "unknown_user"})
        return user

    async def login(self, db: AsyncSession, payload: LoginRequest) -> LoginResponse:
        """
        Exchange username + password for a token.

        Raises:
            AuthenticationError: Unknown username or wrong password (the two
                are indistinguishable to the caller).
        """
        user = await user_service.get_by_username(db, payload.username)
        if user is None:
            await run_in_threadpool(dummy_verify)
            password_ok = False
        else:
            password_ok = await run_in_threadpool(
                verify_password, payload.password, user.password_hash
            )

        if not password_ok:
            logger.warning("Failed login for username '%s'", payload.username)
            raise AuthenticationError(message="invalid username or password")

        logger.info("User %s logged in", user.id)
        return LoginResponse(
            token=self.create_token(user),
            username=user.username,
            name=user.name,
        )


auth_service = AuthService()
