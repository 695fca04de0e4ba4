"""ORM Models — SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models are persistence shapes; stores convert them to core Post values

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
"""

from quietbackend.models.post import PostRow  # noqa: F401
