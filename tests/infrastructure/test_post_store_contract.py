"""PostStore Contract — every store implementation behaves identically.

Invariants tested (each test runs against InMemoryPostStore AND SqlPostStore):
    - create assigns id, created_at=now, deleted_at unset
    - list orders by created_at ascending and caps at limit (default 100)
    - get/soft_delete never cross owners
    - soft delete is Active -> Deleted once; repeating it changes nothing
"""

from datetime import timedelta
from uuid import uuid4

from quietbackend.core.domain_types import Content
from quietbackend.core.post_filters import PostFilters


async def test_create_starts_active(store, clock):
    expected_created = clock.now
    owner = uuid4()
    post = await store.create_post(owner, "hello", Content.NONE)
    assert post.owner_id == owner
    assert post.text == "hello"
    assert post.content is Content.NONE
    assert post.created_at == expected_created
    assert post.deleted_at is None
    assert not post.is_deleted


async def test_create_assigns_fresh_ids(store):
    owner = uuid4()
    ids = {(await store.create_post(owner, f"p{i}", Content.NONE)).id for i in range(20)}
    assert len(ids) == 20


async def test_end_to_end_soft_delete_scenario(store):
    u1, u2 = uuid4(), uuid4()
    post = await store.create_post(u1, "hello", Content.NONE)
    assert post.deleted_at is None

    listed = await store.list_posts(PostFilters(owner_id=u1))
    assert [p.id for p in listed] == [post.id]

    deleted = await store.soft_delete_post(u1, post.id)
    assert deleted is not None
    assert deleted.id == post.id
    assert deleted.deleted_at is not None
    assert deleted.created_at == post.created_at

    assert await store.list_posts(PostFilters(owner_id=u1, is_deleted=False)) == []
    only_deleted = await store.list_posts(PostFilters(owner_id=u1, is_deleted=True))
    assert [p.id for p in only_deleted] == [post.id]

    assert await store.get_post(u2, post.id) is None


async def test_get_is_owner_scoped(store):
    owner_a, owner_b = uuid4(), uuid4()
    post_b = await store.create_post(owner_b, "b's post", Content.NONE)
    assert await store.get_post(owner_a, post_b.id) is None
    found = await store.get_post(owner_b, post_b.id)
    assert found is not None and found.id == post_b.id


async def test_get_missing_post_is_none(store):
    assert await store.get_post(uuid4(), uuid4()) is None


async def test_soft_delete_other_owners_post_is_none_and_harmless(store):
    owner_a, owner_b = uuid4(), uuid4()
    post_b = await store.create_post(owner_b, "b's post", Content.NONE)
    assert await store.soft_delete_post(owner_a, post_b.id) is None
    untouched = await store.get_post(owner_b, post_b.id)
    assert untouched.deleted_at is None


async def test_soft_delete_missing_post_is_none(store):
    assert await store.soft_delete_post(uuid4(), uuid4()) is None


async def test_repeated_soft_delete_keeps_first_deleted_at(store):
    owner = uuid4()
    post = await store.create_post(owner, "hello", Content.NONE)
    first = await store.soft_delete_post(owner, post.id)
    second = await store.soft_delete_post(owner, post.id)
    assert second is not None
    assert second.deleted_at == first.deleted_at


async def test_identity_filter_returns_everything_capped_and_ordered(store, clock):
    owners = [uuid4(), uuid4()]
    # Creation times go backwards so insertion order differs from created_at order
    clock.set(clock.now + timedelta(days=1))
    clock.step = -timedelta(seconds=1)
    for i in range(105):
        await store.create_post(owners[i % 2], f"post {i}", Content.NONE)

    listed = await store.list_posts(PostFilters())
    assert len(listed) == 100
    created = [p.created_at for p in listed]
    assert created == sorted(created)
    assert listed[0].text == "post 104"


async def test_explicit_limit_truncates_after_ordering(store):
    owner = uuid4()
    for i in range(5):
        await store.create_post(owner, f"post {i}", Content.NONE)
    listed = await store.list_posts(PostFilters(owner_id=owner, limit=2))
    assert [p.text for p in listed] == ["post 0", "post 1"]


async def test_text_contains_is_case_sensitive_and_literal(store):
    owner = uuid4()
    for text in ["Hello", "hello", "100% sure", "snake_case", "a_b"]:
        await store.create_post(owner, text, Content.NONE)

    async def texts(substring):
        posts = await store.list_posts(PostFilters(owner_id=owner, text_contains=substring))
        return [p.text for p in posts]

    assert await texts("hello") == ["hello"]
    assert await texts("H") == ["Hello"]
    assert await texts("%") == ["100% sure"]
    assert await texts("_") == ["snake_case", "a_b"]


async def test_existed_at_through_store(store, clock):
    owner = uuid4()
    post = await store.create_post(owner, "short-lived", Content.NONE)
    deleted = await store.soft_delete_post(owner, post.id)
    t0, t1 = post.created_at, deleted.deleted_at
    tick = timedelta(microseconds=1)

    async def existed(instant):
        return bool(await store.list_posts(PostFilters(owner_id=owner, existed_at=instant)))

    assert not await existed(t0)
    assert await existed(t0 + tick)
    assert await existed(t1 - tick)
    assert not await existed(t1)
    assert not await existed(t1 + tick)


async def test_health_check(store):
    assert await store.health_check() is True
