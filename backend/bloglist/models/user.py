"""
Blog List Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by UserService (registration, listing) and AuthService
       (login, token resolution).

Security:
    password_hash holds a bcrypt hash produced by AuthService. It is never
    copied into a response schema; UserResponse simply has no such field.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bloglist.database import Base

if TYPE_CHECKING:
    from bloglist.models.blog import Blog


class User(Base):
    """A registered account that can log in and own blog posts."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Unique constraint violations surface as IntegrityError and are
    # translated to a 400 by UserService
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # One-to-many: the owner side of Blog.user
    # passive_deletes: let the database apply ON DELETE SET NULL
    blogs: Mapped[List["Blog"]] = relationship(
        back_populates="user",
        passive_deletes=True,
        order_by="Blog.created_at",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
