"""In-Memory Post Store — seeding and snapshot behavior specific to the reference store."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from quietbackend.core.domain_types import Content
from quietbackend.core.post_filters import Post, PostFilters
from quietbackend.infrastructure.memory_store import InMemoryPostStore

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _post(minutes: int, text: str) -> Post:
    return Post(uuid4(), T0 + timedelta(minutes=minutes), None, uuid4(), text, Content.NONE)


async def test_seed_replaces_contents_and_list_sorts_by_created_at():
    store = InMemoryPostStore()
    await store.create_post(uuid4(), "dropped by seed", Content.NONE)
    store.seed([_post(2, "late"), _post(0, "early"), _post(1, "middle")])

    listed = await store.list_posts(PostFilters())
    assert [p.text for p in listed] == ["early", "middle", "late"]


async def test_listing_is_a_snapshot():
    store = InMemoryPostStore()
    store.seed([_post(0, "a")])
    listed = await store.list_posts(PostFilters())
    await store.create_post(uuid4(), "b", Content.NONE)
    assert [p.text for p in listed] == ["a"]


async def test_soft_delete_does_not_mutate_returned_posts(clock):
    store = InMemoryPostStore(clock=clock)
    owner = uuid4()
    created = await store.create_post(owner, "x", Content.NONE)
    await store.soft_delete_post(owner, created.id)
    assert created.deleted_at is None
