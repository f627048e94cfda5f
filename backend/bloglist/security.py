"""
Blog List Backend — Password Hashing & Token Primitives
=========================================================

What:  bcrypt password hashing (passlib) and signed bearer tokens (python-jose).
Why:   Keeps the cryptographic primitives in one import-cycle-free module that
       both UserService (hashing on registration) and AuthService (login,
       token resolution) can use.

Token format:
    A compact JWT signed with settings.secret_key. Claims:
        username: the account's login name
        id:       the account's public id (UUID string)
        exp:      only present when settings.token_expire_minutes is set

    Verification needs no database round trip; mapping the `id` claim to a
    live user is AuthService's job.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from bloglist.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def dummy_verify() -> None:
    """Spends one hash verification so unknown usernames take as long as wrong passwords."""
    pwd_context.dummy_verify()


def create_access_token(
    claims: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign `claims` into a token.

    Expiry comes from `expires_delta`, falling back to
    settings.token_expire_minutes; with neither, no `exp` claim is written.
    """
    to_encode = dict(claims)
    if expires_delta is None and settings.token_expire_minutes is not None:
        expires_delta = timedelta(minutes=settings.token_expire_minutes)
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.token_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify the signature (and `exp`, when present) and return the claims.

    Raises:
        jose.JWTError: Bad signature, malformed token, or expired token.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
