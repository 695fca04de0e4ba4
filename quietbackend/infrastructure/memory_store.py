"""In-Memory Post Store — reference PostStore backed by a Python list.

Invariants:
    - One lock guards the whole collection; every operation holds it start to finish
    - Filtering uses the core evaluator; ordering and limit match every other store
    - Soft delete on an already deleted post returns it unchanged

Design Decisions:
    - Reference/test implementation only: a single lock is not the production
      concurrency model (see sql_store.py + worker_pool.py)
    - Clock injected so temporal tests can pin created_at/deleted_at
"""

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable

from quietbackend.core.domain_types import Content, OwnerId, PostId, utc_now
from quietbackend.core.post_filters import Post, PostFilters, evaluate, sort_key

logger = logging.getLogger(__name__)


class InMemoryPostStore:
    """PostStore that keeps every post in process memory."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._lock = threading.Lock()
        self._posts: list[Post] = []

    def seed(self, posts: Iterable[Post]) -> None:
        """Replace the stored posts (tests and fixtures)."""
        with self._lock:
            self._posts = list(posts)

    async def create_post(
        self, owner_id: OwnerId, text: str, content: Content,
    ) -> Post:
        post = Post(
            id=PostId(uuid.uuid4()),
            created_at=self._clock(),
            deleted_at=None,
            owner_id=owner_id,
            text=text,
            content=content,
        )
        with self._lock:
            self._posts.append(post)
        logger.debug("Post created", extra={"post_id": str(post.id)})
        return post

    async def list_posts(self, filters: PostFilters) -> list[Post]:
        with self._lock:
            matching = [p for p in self._posts if evaluate(filters, p)]
        matching.sort(key=sort_key)
        return matching[:filters.limit]

    async def get_post(
        self, owner_id: OwnerId, post_id: PostId,
    ) -> Post | None:
        posts = await self.list_posts(
            PostFilters(owner_id=owner_id, id=post_id, limit=1),
        )
        return posts[0] if posts else None

    async def soft_delete_post(
        self, owner_id: OwnerId, post_id: PostId,
    ) -> Post | None:
        filters = PostFilters(owner_id=owner_id, id=post_id, limit=1)
        with self._lock:
            for index, post in enumerate(self._posts):
                if not evaluate(filters, post):
                    continue
                if post.is_deleted:
                    return post
                deleted = replace(post, deleted_at=self._clock())
                self._posts[index] = deleted
                return deleted
        return None

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None
