"""SQL Post Store — PostStore backed by SQLAlchemy, queried through compiled predicate terms.

Invariants:
    - Filtering goes through compile_filters() → to_where(); never hand-written per call
    - Listing order created_at ASC, id ASC; LIMIT filters.limit, same as InMemoryPostStore
    - get/soft_delete narrow by owner_id AND id
    - Soft delete only touches active rows; a deleted post is returned unchanged
    - Each operation runs on the StoreWorkerPool with its own session

Design Decisions:
    - Timestamps come from the injected clock, not the database: both stores share
      one notion of "now" and SQLite tests can pin instants
"""

import logging
import uuid
from datetime import datetime
from typing import Callable

from sqlalchemy import select, update

from quietbackend.core.domain_types import Content, OwnerId, PostId, as_utc, utc_now
from quietbackend.core.post_filters import Post, PostFilters
from quietbackend.core.predicates import compile_filters
from quietbackend.infrastructure.database import DatabaseSessionManager
from quietbackend.infrastructure.sql_predicates import to_where
from quietbackend.infrastructure.worker_pool import StoreWorkerPool
from quietbackend.models.post import PostRow

logger = logging.getLogger(__name__)


def _to_domain(row: PostRow) -> Post:
    return Post(
        id=PostId(row.id),
        created_at=as_utc(row.created_at),
        deleted_at=as_utc(row.deleted_at) if row.deleted_at is not None else None,
        owner_id=OwnerId(row.owner_id),
        text=row.text,
        content=row.content,
    )


class SqlPostStore:
    """PostStore on a relational database."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        pool: StoreWorkerPool,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._pool = pool
        self._clock = clock

    async def create_post(
        self, owner_id: OwnerId, text: str, content: Content,
    ) -> Post:
        return await self._pool.run(self._create_post, owner_id, text, content)

    async def list_posts(self, filters: PostFilters) -> list[Post]:
        return await self._pool.run(self._list_posts, filters)

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
        return await self._pool.run(self._soft_delete_post, owner_id, post_id)

    async def health_check(self) -> bool:
        return await self._pool.run(self._db.health_check)

    async def close(self) -> None:
        self._pool.close()
        self._db.dispose()

    # ─── Blocking units (run on worker threads) ──────────────────

    def _create_post(self, owner_id: OwnerId, text: str, content: Content) -> Post:
        row = PostRow(
            id=uuid.uuid4(),
            created_at=self._clock(),
            deleted_at=None,
            owner_id=owner_id,
            text=text,
            content=content,
        )
        with self._db.session() as db:
            db.add(row)
            db.commit()
        logger.debug("Post created", extra={"post_id": str(row.id)})
        return _to_domain(row)

    def _list_posts(self, filters: PostFilters) -> list[Post]:
        query = (
            select(PostRow)
            .where(*to_where(compile_filters(filters), self._db.dialect_name))
            .order_by(PostRow.created_at, PostRow.id)
            .limit(filters.limit)
        )
        with self._db.session() as db:
            rows = db.scalars(query).all()
        return [_to_domain(row) for row in rows]

    def _soft_delete_post(self, owner_id: OwnerId, post_id: PostId) -> Post | None:
        active = PostFilters(owner_id=owner_id, id=post_id, is_deleted=False)
        target = PostFilters(owner_id=owner_id, id=post_id)
        dialect = self._db.dialect_name
        with self._db.session() as db:
            db.execute(
                update(PostRow)
                .where(*to_where(compile_filters(active), dialect))
                .values(deleted_at=self._clock())
                .execution_options(synchronize_session=False),
            )
            row = db.scalars(
                select(PostRow).where(*to_where(compile_filters(target), dialect)),
            ).one_or_none()
            db.commit()
        return _to_domain(row) if row else None
