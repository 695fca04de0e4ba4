"""Posts & Filters — the post entity, declarative filters and the in-memory evaluator.

Invariants:
    - Filter semantics work like SQL: an unset field is not applied, a set field
      rejects posts that don't match it
    - An all-unset PostFilters matches every post
    - existed_at=T holds iff created_at < T and (deleted_at unset or deleted_at > T),
      both comparisons strict
    - evaluate() is pure: no side effects, same answer for the same inputs

Design Decisions:
    - Frozen dataclasses: posts and filters are values, updates go through replace()
    - limit validated here so every store enforces the same default and bound
"""

from dataclasses import dataclass, replace
from datetime import datetime

from quietbackend.core.domain_types import (
    Content, OwnerId, PostId, PostState, DEFAULT_LIMIT, MAX_LIMIT, as_utc,
)
from quietbackend.core.errors import Cause, ExternalError, TwoFaceError


@dataclass(frozen=True)
class Post:
    """A post from an owner."""
    id: PostId
    created_at: datetime
    deleted_at: datetime | None
    owner_id: OwnerId
    text: str
    content: Content = Content.NONE

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def state(self) -> PostState:
        return PostState.DELETED if self.is_deleted else PostState.ACTIVE


@dataclass(frozen=True)
class PostFilters:
    """Filters that can be applied to queries on a post store."""
    id: PostId | None = None
    owner_id: OwnerId | None = None
    is_deleted: bool | None = None
    text_contains: str | None = None
    existed_at: datetime | None = None
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if not 1 <= self.limit <= MAX_LIMIT:
            raise TwoFaceError(
                internal=f"limit {self.limit} outside 1..{MAX_LIMIT}",
                external=ExternalError(
                    Cause.USER_INVALID_FIELD,
                    f"limit must be between 1 and {MAX_LIMIT}",
                ),
            )
        if self.existed_at is not None:
            object.__setattr__(self, "existed_at", as_utc(self.existed_at))

    def for_owner(self, owner_id: OwnerId) -> "PostFilters":
        """Scope these filters to one owner, overriding any owner already set."""
        return replace(self, owner_id=owner_id)


def existed_at(post: Post, instant: datetime) -> bool:
    """Did the post exist (created and not yet deleted) at ``instant``?"""
    if not post.created_at < instant:
        return False
    return post.deleted_at is None or post.deleted_at > instant


def evaluate(filters: PostFilters, post: Post) -> bool:
    """Does the post match all specified filters?"""
    if filters.owner_id is not None and filters.owner_id != post.owner_id:
        return False
    if filters.id is not None and filters.id != post.id:
        return False
    if filters.is_deleted is not None and filters.is_deleted != post.is_deleted:
        return False
    if filters.text_contains is not None and filters.text_contains not in post.text:
        return False
    if filters.existed_at is not None and not existed_at(post, filters.existed_at):
        return False
    return True


def sort_key(post: Post) -> tuple:
    """Listing order: created_at ascending, id breaks ties."""
    return (post.created_at, post.id)
