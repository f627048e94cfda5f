"""
Blog List Backend — Blog Request/Response Schemas
===================================================

What:  Pydantic models defining the blog API contract.
Why:   Every request body is an explicit, validated structure. A payload that
       does not fit is rejected (400) before any service code runs.
How:   FastAPI validates request bodies against the *Create/*Update models and
       serializes responses through BlogResponse.

Design Decision:
    Schemas are separate from SQLAlchemy models because:
    1. The public `id` is a string derived from the internal UUID key
    2. The owner is rendered as a populated summary, not a foreign key
    3. Validation rules (non-blank title) differ from DB constraints
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Column bounds from models/blog.py; anything larger is a 400, not a driver error
TEXT_MAX_LENGTH = 255
URL_MAX_LENGTH = 2048
LIKES_MAX = 2**31 - 1  # INTEGER is 32-bit on PostgreSQL


def _require_text(value: str) -> str:
    """Strips surrounding whitespace and rejects blank strings."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class BlogCreate(BaseModel):
    """
    What:  Body of POST /api/blogs.
    Rules: title and author are required and non-blank; likes defaults to 0.
    """
    title: str = Field(max_length=TEXT_MAX_LENGTH, description="Blog post title")
    author: str = Field(max_length=TEXT_MAX_LENGTH, description="Author of the linked post")
    url: str = Field(default="", max_length=URL_MAX_LENGTH, description="Link to the post")
    likes: int = Field(default=0, ge=0, le=LIKES_MAX, description="Like count (defaults to 0)")

    @field_validator("title", "author")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Rejects blank title/author (a missing one fails as 'Field required')."""
        return _require_text(v)


class BlogUpdate(BaseModel):
    """
    What:  Body of PUT /api/blogs/{id}.
    How:   Full replacement of title, author, url and likes. Omitted url and
           likes are replaced by their defaults, not left untouched.
    """
    title: str = Field(max_length=TEXT_MAX_LENGTH)
    author: str = Field(max_length=TEXT_MAX_LENGTH)
    url: str = Field(default="", max_length=URL_MAX_LENGTH)
    likes: int = Field(default=0, ge=0, le=LIKES_MAX)

    @field_validator("title", "author")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class OwnerSummary(BaseModel):
    """Populated owner reference embedded in every BlogResponse."""
    username: str
    name: Optional[str] = None
    id: str


class BlogResponse(BaseModel):
    """
    What:  Public representation of a blog post.
    Who:   Returned by every /api/blogs endpoint except DELETE.

    `user` is null only for posts that were stored without an owner.
    """
    id: str = Field(description="Public identifier (string form of the internal key)")
    title: str
    author: str
    url: str
    likes: int
    user: Optional[OwnerSummary] = None
