"""Admin Posts — unrestricted listing across all owners.

Invariants:
    - The only route that may filter by owner_id from the query string
    - Same ordering and limit contract as the owner-scoped listing
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from quietbackend.api.dependencies import get_metrics, get_post_query, get_store
from quietbackend.api.observe import observe
from quietbackend.core.repository_protocols import MetricsSink, PostStore
from quietbackend.schemas.post import AdminPost, PostQuery

router = APIRouter(prefix="/admin/posts", tags=["admin"])


@router.get("", response_model=list[AdminPost])
async def list_all_posts(
    owner_id: UUID | None = Query(None),
    query: PostQuery = Depends(get_post_query),
    store: PostStore = Depends(get_store),
    metrics: MetricsSink = Depends(get_metrics),
):
    """List posts of every owner, optionally narrowed to one."""
    async def handler():
        posts = await store.list_posts(query.to_filters(owner_id))
        return [AdminPost.from_post(p) for p in posts]

    return await observe("admin_list_post", metrics, handler)
