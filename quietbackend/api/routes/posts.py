"""Owner Posts — create, list, get and soft-delete one owner's posts.

Invariants:
    - owner_id comes from the URL path only; query strings cannot widen the scope
    - Absent posts are returned as null, not as an error
    - Responses use UserFacingPost (owner_id redacted)

Design Decisions:
    - Thin routes: filtering, ordering and limits live in the store
    - Every handler runs inside observe() with the injected metrics sink
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from quietbackend.api.dependencies import (
    enforce_body_limit, get_metrics, get_post_query, get_store,
)
from quietbackend.api.observe import observe
from quietbackend.core.domain_types import OwnerId, PostId
from quietbackend.core.repository_protocols import MetricsSink, PostStore
from quietbackend.schemas.post import PostQuery, UserFacingPost, WritePostBody

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/accounts/{owner_id}/posts", tags=["posts"])


@router.post(
    "",
    response_model=UserFacingPost,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_body_limit)],
)
async def write_post(
    owner_id: UUID,
    body: WritePostBody,
    store: PostStore = Depends(get_store),
    metrics: MetricsSink = Depends(get_metrics),
):
    """Insert a post for the owner."""
    async def handler():
        post = await store.create_post(OwnerId(owner_id), body.text, body.content)
        return UserFacingPost.from_post(post)

    return await observe("post_post", metrics, handler)


@router.get("", response_model=list[UserFacingPost])
async def list_posts(
    owner_id: UUID,
    query: PostQuery = Depends(get_post_query),
    store: PostStore = Depends(get_store),
    metrics: MetricsSink = Depends(get_metrics),
):
    """List the owner's posts matching the query filters."""
    async def handler():
        posts = await store.list_posts(query.to_filters(owner_id))
        return [UserFacingPost.from_post(p) for p in posts]

    return await observe("list_post", metrics, handler)


@router.get("/{post_id}", response_model=UserFacingPost | None)
async def get_post(
    owner_id: UUID,
    post_id: UUID,
    store: PostStore = Depends(get_store),
    metrics: MetricsSink = Depends(get_metrics),
):
    async def handler():
        post = await store.get_post(OwnerId(owner_id), PostId(post_id))
        return UserFacingPost.from_post(post) if post else None

    return await observe("get_post", metrics, handler)


@router.delete("/{post_id}", response_model=UserFacingPost | None)
async def delete_post(
    owner_id: UUID,
    post_id: UUID,
    store: PostStore = Depends(get_store),
    metrics: MetricsSink = Depends(get_metrics),
):
    """Soft-delete a post. Deleting an already deleted post returns it unchanged."""
    async def handler():
        post = await store.soft_delete_post(OwnerId(owner_id), PostId(post_id))
        if post:
            logger.info("Post soft-deleted", extra={"post_id": str(post.id)})
        return UserFacingPost.from_post(post) if post else None

    return await observe("delete_post", metrics, handler)
