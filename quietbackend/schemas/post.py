"""Post Schemas — Pydantic models for the post API boundaries.

Invariants:
    - UserFacingPost never exposes owner_id; AdminPost does
    - PostQuery has no owner field: owners come from the trusted path, injected
      by to_filters(), never from client-supplied query parameters
    - limit bounded 1..MAX_LIMIT, default DEFAULT_LIMIT

Design Decisions:
    - Separate from models/ and core/: schemas are API contracts, not persistence
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from quietbackend.core.domain_types import (
    Content, OwnerId, PostId, DEFAULT_LIMIT, MAX_LIMIT,
)
from quietbackend.core.post_filters import Post, PostFilters


class WritePostBody(BaseModel):
    """New post payload."""
    text: str = Field(max_length=10_000)
    content: Content = Content.NONE


class UserFacingPost(BaseModel):
    """A post without business-sensitive fields."""
    id: UUID
    created_at: datetime
    deleted_at: datetime | None
    text: str
    content: Content

    @classmethod
    def from_post(cls, post: Post) -> "UserFacingPost":
        return cls(
            id=post.id,
            created_at=post.created_at,
            deleted_at=post.deleted_at,
            text=post.text,
            content=post.content,
        )


class AdminPost(UserFacingPost):
    """A post as seen by operators, including its owner."""
    owner_id: UUID

    @classmethod
    def from_post(cls, post: Post) -> "AdminPost":
        return cls(
            id=post.id,
            created_at=post.created_at,
            deleted_at=post.deleted_at,
            text=post.text,
            content=post.content,
            owner_id=post.owner_id,
        )


class PostQuery(BaseModel):
    """Filters a client may specify when listing posts."""
    is_deleted: bool | None = None
    existed_at: datetime | None = None
    text_contains: str | None = None
    uuid: UUID | None = None
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    def to_filters(self, owner_id: UUID | None) -> PostFilters:
        """Combine client filters with an owner chosen by the server.

        ``owner_id=None`` is only valid on the admin tier.
        """
        return PostFilters(
            id=PostId(self.uuid) if self.uuid is not None else None,
            owner_id=OwnerId(owner_id) if owner_id is not None else None,
            is_deleted=self.is_deleted,
            text_contains=self.text_contains,
            existed_at=self.existed_at,
            limit=self.limit,
        )
