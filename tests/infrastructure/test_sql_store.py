"""SQL Post Store — compiled predicates agree with the in-memory evaluator.

Tests cover:
    - Evaluator/compiler equivalence over a fixed dataset and a grid of filters,
      including instants exactly on created_at/deleted_at boundaries
    - Timestamps come back as aware UTC instants
    - Database failures surface as default ServerError envelopes
"""

from datetime import datetime, timedelta, timezone
from itertools import product
from uuid import uuid4

import pytest
from sqlalchemy import text

from quietbackend.core.domain_types import Content
from quietbackend.core.errors import Cause, TwoFaceError
from quietbackend.core.post_filters import Post, PostFilters, evaluate, sort_key
from quietbackend.models.post import PostRow

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
OWNER_A, OWNER_B = uuid4(), uuid4()


def _minutes(n: float) -> datetime:
    return T0 + timedelta(minutes=n)


DATASET = [
    Post(uuid4(), _minutes(0), None, OWNER_A, "hello world", Content.NONE),
    Post(uuid4(), _minutes(1), _minutes(4), OWNER_A, "Hello again", Content.NONE),
    Post(uuid4(), _minutes(2), _minutes(3), OWNER_B, "100% hello", Content.NONE),
    Post(uuid4(), _minutes(3), None, OWNER_B, "snake_case", Content.NONE),
    Post(uuid4(), _minutes(4), _minutes(6), OWNER_A, "", Content.NONE),
    Post(uuid4(), _minutes(5), None, OWNER_A, "goodbye", Content.NONE),
]


@pytest.fixture
def seeded_sql_store(sql_store, db_manager):
    with db_manager.session() as db:
        for post in DATASET:
            db.add(PostRow(
                id=post.id, created_at=post.created_at, deleted_at=post.deleted_at,
                owner_id=post.owner_id, text=post.text, content=post.content,
            ))
        db.commit()
    return sql_store


def _in_memory(filters: PostFilters) -> list[Post]:
    matching = sorted((p for p in DATASET if evaluate(filters, p)), key=sort_key)
    return matching[:filters.limit]


async def test_compiled_query_matches_evaluator(seeded_sql_store):
    instants = [None] + [_minutes(n) for n in (0, 0.5, 1, 3, 3.5, 4, 6, 10)]
    grid = product(
        [None, DATASET[1].id],
        [None, OWNER_A, OWNER_B],
        [None, True, False],
        [None, "hello", "Hello", "%", "_", ""],
        instants,
        [100, 2],
    )
    checked = 0
    for post_id, owner_id, is_deleted, substring, instant, limit in grid:
        filters = PostFilters(
            id=post_id, owner_id=owner_id, is_deleted=is_deleted,
            text_contains=substring, existed_at=instant, limit=limit,
        )
        from_db = await seeded_sql_store.list_posts(filters)
        assert [p.id for p in from_db] == [p.id for p in _in_memory(filters)], filters
        checked += 1
    assert checked == 2 * 3 * 3 * 6 * 9 * 2


async def test_rows_round_trip_as_domain_posts(seeded_sql_store):
    listed = await seeded_sql_store.list_posts(PostFilters())
    assert listed == sorted(DATASET, key=sort_key)
    assert all(p.created_at.tzinfo is timezone.utc for p in listed)


async def test_soft_delete_only_updates_active_row(seeded_sql_store):
    already_deleted = DATASET[1]
    result = await seeded_sql_store.soft_delete_post(OWNER_A, already_deleted.id)
    assert result == already_deleted


async def test_database_failure_is_default_envelope(sql_store, db_manager):
    with db_manager.session() as db:
        db.execute(text("DROP TABLE posts"))
        db.commit()
    with pytest.raises(TwoFaceError) as info:
        await sql_store.list_posts(PostFilters())
    assert info.value.cause is Cause.SERVER_ERROR
    assert str(info.value) == "ServerError: Internal server error"
    assert "posts" in str(info.value.internal)
