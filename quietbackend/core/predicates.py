"""Predicate Compiler — turns PostFilters into backend-neutral predicate terms.

Invariants:
    - compile_filters() returns terms meant to be ANDed; [] matches everything
    - Each term mirrors one evaluate() check; existed_at compiles to TWO terms
      (CreatedBefore, AliveAfter) exactly like the evaluator's compound check
    - all(term_holds(t, post) for t in compile_filters(f)) == evaluate(f, post)

Design Decisions:
    - Terms are a closed sum of frozen dataclasses, not query-library expressions:
      each backend translates them (see infrastructure/sql_predicates.py)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from quietbackend.core.domain_types import OwnerId, PostId
from quietbackend.core.post_filters import Post, PostFilters


@dataclass(frozen=True)
class IdEquals:
    post_id: PostId


@dataclass(frozen=True)
class OwnerEquals:
    owner_id: OwnerId


@dataclass(frozen=True)
class DeletedIs:
    deleted: bool


@dataclass(frozen=True)
class TextContains:
    substring: str


@dataclass(frozen=True)
class CreatedBefore:
    instant: datetime


@dataclass(frozen=True)
class AliveAfter:
    """deleted_at is unset, or later than ``instant``."""
    instant: datetime


Term = Union[IdEquals, OwnerEquals, DeletedIs, TextContains, CreatedBefore, AliveAfter]


def compile_filters(filters: PostFilters) -> list[Term]:
    """Compile filters into an ordered list of predicate terms."""
    terms: list[Term] = []
    if filters.id is not None:
        terms.append(IdEquals(filters.id))
    if filters.text_contains is not None:
        terms.append(TextContains(filters.text_contains))
    if filters.is_deleted is not None:
        terms.append(DeletedIs(filters.is_deleted))
    if filters.existed_at is not None:
        terms.append(CreatedBefore(filters.existed_at))
        terms.append(AliveAfter(filters.existed_at))
    if filters.owner_id is not None:
        terms.append(OwnerEquals(filters.owner_id))
    return terms


def term_holds(term: Term, post: Post) -> bool:
    """In-memory meaning of a single term."""
    match term:
        case IdEquals(post_id=post_id):
            return post.id == post_id
        case OwnerEquals(owner_id=owner_id):
            return post.owner_id == owner_id
        case DeletedIs(deleted=deleted):
            return post.is_deleted == deleted
        case TextContains(substring=substring):
            return substring in post.text
        case CreatedBefore(instant=instant):
            return post.created_at < instant
        case AliveAfter(instant=instant):
            return post.deleted_at is None or post.deleted_at > instant
    raise TypeError(f"Unknown predicate term: {term!r}")
