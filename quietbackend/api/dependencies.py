"""API Dependencies — FastAPI providers for the store, the metrics sink and query filters.

Invariants:
    - Store and metrics sink come from app.state, set once by create_app()/lifespan
    - Query filters never include an owner; routes inject it
    - Write bodies are capped at Settings.max_body_size bytes
"""

from datetime import datetime
from uuid import UUID

from fastapi import Query, Request

from quietbackend.config import get_settings
from quietbackend.core.domain_types import DEFAULT_LIMIT, MAX_LIMIT
from quietbackend.core.errors import Cause, ExternalError, TwoFaceError
from quietbackend.core.repository_protocols import MetricsSink, PostStore
from quietbackend.schemas.post import PostQuery


def get_store(request: Request) -> PostStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise TwoFaceError(internal="Post store not initialized")
    return store


def get_metrics(request: Request) -> MetricsSink:
    return request.app.state.metrics


def get_post_query(
    is_deleted: bool | None = Query(None),
    existed_at: datetime | None = Query(None),
    text_contains: str | None = Query(None, max_length=1_000),
    post_id: UUID | None = Query(None, alias="id"),
    post_uuid: UUID | None = Query(None, alias="uuid"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PostQuery:
    """Collect list filters from the query string. ``id`` and ``uuid`` are synonyms."""
    if post_id is not None and post_uuid is not None and post_id != post_uuid:
        raise TwoFaceError(
            internal=f"id={post_id} uuid={post_uuid}",
            external=ExternalError(
                Cause.USER_INVALID_FIELD, "id and uuid must match when both are given",
            ),
        )
    return PostQuery(
        is_deleted=is_deleted,
        existed_at=existed_at,
        text_contains=text_contains,
        uuid=post_uuid or post_id,
        limit=limit,
    )


async def enforce_body_limit(request: Request) -> None:
    """Reject request bodies larger than ``max_body_size`` bytes."""
    limit = get_settings().max_body_size
    declared = request.headers.get("content-length", "")
    size = int(declared) if declared.isdigit() else len(await request.body())
    if size > limit:
        raise TwoFaceError(
            internal=f"request body of {size} bytes exceeds {limit}",
            external=ExternalError(Cause.USER_ACTION_INVALID, "Request body too large"),
        )
