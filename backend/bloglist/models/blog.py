"""
Blog List Backend — Blog SQLAlchemy Model
===========================================

What:  ORM model representing the `blogs` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by BlogService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: Non-sequential, so ids cannot be enumerated
    - url: Optional in practice; stored as empty string rather than NULL
    - likes: Non-negative counter, enforced by a CHECK constraint as well as
      by the request schemas
    - user_id: Owner reference; nullable so seeded or orphaned posts are valid
      (ON DELETE SET NULL keeps posts when an account is removed out-of-band)
    - created_at: Insertion time; the list endpoint orders by it

    Public identity:
        The internal UUID is never serialized as-is. The service layer maps
        each row to BlogResponse, whose `id` is the UUID rendered as a string.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bloglist.database import Base

if TYPE_CHECKING:
    from bloglist.models.user import User


class Blog(Base):
    """
    A blog post saved to the shared list.

    Lifecycle:
        existing → deleted (terminal)
        1. Created by an authenticated POST (owner = token's user)
        2. Fields replaced in place by PUT (no state change)
        3. Removed by an authenticated DELETE from its owner
    """

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)

    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        default="",
        server_default=text("''"),
    )

    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    # ── Owner Reference ───────────────────────────────────────────────────
    # Used for the ownership check on DELETE and populated as
    # {username, name, id} in responses
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    user: Mapped[Optional["User"]] = relationship(back_populates="blogs")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_blogs_likes_non_negative"),
        Index("idx_blogs_created_at", "created_at"),
        Index("idx_blogs_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}', likes={self.likes})>"
