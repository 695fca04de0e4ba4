"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PostId, OwnerId wrap UUIDs; the owner field is called owner_id everywhere
    - Content is a closed set of post content variants
    - A listing never returns more than MAX_LIMIT posts; DEFAULT_LIMIT applies when unset

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", UUID)
OwnerId = NewType("OwnerId", UUID)


# ─── Limits ──────────────────────────────────────────────────────

DEFAULT_LIMIT = 100
MAX_LIMIT = 255


# ─── Enums ───────────────────────────────────────────────────────

class Content(str, Enum):
    """Attached content variants. Posts are plain text for now."""
    NONE = "None"


class PostState(str, Enum):
    """Post lifecycle. ACTIVE -> DELETED via soft delete; DELETED is terminal."""
    ACTIVE = "active"
    DELETED = "deleted"


# ─── Time ────────────────────────────────────────────────────────

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalise to an aware UTC instant. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
