"""Post ORM — persists owner-scoped, soft-deletable posts.

Invariants:
    - id is a UUID primary key assigned by the store, never by the caller
    - created_at and owner_id are written once at insert
    - deleted_at NULL means active; soft delete is the only destructive write

Design Decisions:
    - Generic Uuid type: native uuid on PostgreSQL, CHAR(32) on SQLite for tests
    - (owner_id, created_at) index: owner-scoped listings are the hot path
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from quietbackend.core.domain_types import Content
from quietbackend.db.base import Base


class PostRow(Base):
    """Post table row."""
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[Content] = mapped_column(
        Enum(Content, name="post_content", native_enum=False, length=20),
        nullable=False,
        default=Content.NONE,
    )
