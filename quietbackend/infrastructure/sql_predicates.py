"""SQL Predicates — translates core predicate terms into SQLAlchemy WHERE clauses.

Invariants:
    - One clause per term; clauses are ANDed by the caller
    - Each clause selects exactly the rows term_holds() accepts for the same post
    - TextContains is case-sensitive and treats %, _ as literal characters

Design Decisions:
    - SQLite LIKE is case-insensitive for ASCII, so containment uses instr() there;
      other dialects use LIKE with autoescape (case-sensitive on PostgreSQL)
"""

from sqlalchemy import ColumnElement, func, or_

from quietbackend.core.predicates import (
    AliveAfter, CreatedBefore, DeletedIs, IdEquals, OwnerEquals, Term, TextContains,
)
from quietbackend.models.post import PostRow


def to_clause(term: Term, dialect_name: str = "postgresql") -> ColumnElement[bool]:
    """Translate one predicate term for the given SQL dialect."""
    match term:
        case IdEquals(post_id=post_id):
            return PostRow.id == post_id
        case OwnerEquals(owner_id=owner_id):
            return PostRow.owner_id == owner_id
        case DeletedIs(deleted=True):
            return PostRow.deleted_at.is_not(None)
        case DeletedIs(deleted=False):
            return PostRow.deleted_at.is_(None)
        case TextContains(substring=substring):
            if dialect_name == "sqlite":
                return func.instr(PostRow.text, substring) > 0
            return PostRow.text.contains(substring, autoescape=True)
        case CreatedBefore(instant=instant):
            return PostRow.created_at < instant
        case AliveAfter(instant=instant):
            return or_(PostRow.deleted_at.is_(None), PostRow.deleted_at > instant)
    raise TypeError(f"Unknown predicate term: {term!r}")


def to_where(terms: list[Term], dialect_name: str = "postgresql") -> list[ColumnElement[bool]]:
    return [to_clause(term, dialect_name) for term in terms]
