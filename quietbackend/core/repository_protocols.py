"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Every PostStore orders listings by created_at ascending and caps them at
      filters.limit; this is part of the contract, not a backend detail
    - get/soft_delete always narrow by owner_id AND post_id, never by id alone
    - "Not found" is None, never an error; failures raise TwoFaceError

Design Decisions:
    - Protocol over ABC: structural subtyping, stores are picked by injection
    - Async in Protocol: implementations do IO (or may block), callers await
"""

from typing import Protocol

from quietbackend.core.domain_types import Content, OwnerId, PostId
from quietbackend.core.post_filters import Post, PostFilters


class PostStore(Protocol):
    """Contract for post persistence, implemented by shell."""
    async def create_post(
        self, owner_id: OwnerId, text: str, content: Content,
    ) -> Post: ...
    async def list_posts(self, filters: PostFilters) -> list[Post]: ...
    async def get_post(
        self, owner_id: OwnerId, post_id: PostId,
    ) -> Post | None: ...
    async def soft_delete_post(
        self, owner_id: OwnerId, post_id: PostId,
    ) -> Post | None: ...
    async def health_check(self) -> bool: ...
    async def close(self) -> None: ...


class MetricsSink(Protocol):
    """Receives operational measurements of API handlers."""
    def observe(self, endpoint: str, result: str, duration_seconds: float) -> None: ...
