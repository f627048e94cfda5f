"""
Blog List Backend — User & Login Schemas
==========================================

What:  Pydantic models for registration, user listing and login.
Why:   Keeps password material out of every response by construction:
       no response model here has a password field.

Length rules (username/password minimum) are enforced in UserService rather
than here because their limits come from runtime settings.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

# Column bounds from models/user.py
USERNAME_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255


class UserCreate(BaseModel):
    """Body of POST /api/users."""
    username: str = Field(max_length=USERNAME_MAX_LENGTH, description="Unique login name")
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH, description="Display name")
    password: str = Field(description="Plain-text password (hashed before storage)")


class BlogSummary(BaseModel):
    """A user's blog as embedded in UserResponse (owner omitted)."""
    id: str
    title: str
    author: str
    url: str
    likes: int


class UserResponse(BaseModel):
    """
    What:  Public representation of a user.
    Who:   Returned by POST /api/users and GET /api/users.
    """
    id: str
    username: str
    name: Optional[str] = None
    blogs: List[BlogSummary] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """
    What:  Successful login result.
    How:   The client sends `token` back as `Authorization: bearer <token>`.
    """
    token: str
    username: str
    name: Optional[str] = None
