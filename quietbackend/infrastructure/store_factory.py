"""Store Factory — builds the PostStore selected by configuration.

Invariants:
    - Exactly one store per application instance, chosen at construction time
    - The SQL store owns its worker pool and engine; close() releases both
    - With a registry, the SQL engine's pool is exported as connection gauges
"""

import logging

from prometheus_client import CollectorRegistry

from quietbackend.config import Settings
from quietbackend.core.repository_protocols import PostStore
from quietbackend.infrastructure.database import DatabaseSessionManager
from quietbackend.infrastructure.memory_store import InMemoryPostStore
from quietbackend.infrastructure.metrics import ConnectionPoolCollector
from quietbackend.infrastructure.sql_store import SqlPostStore
from quietbackend.infrastructure.worker_pool import StoreWorkerPool

logger = logging.getLogger(__name__)


def build_store(
    settings: Settings, registry: CollectorRegistry | None = None,
) -> PostStore:
    if settings.store_backend == "memory":
        logger.warning("Using in-memory post store. Data is lost on restart.")
        return InMemoryPostStore()

    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout_seconds,
    )
    if settings.database_create_tables:
        db.create_tables()
    if registry is not None:
        registry.register(ConnectionPoolCollector(db.engine))
    return SqlPostStore(db, StoreWorkerPool(settings.store_workers))
