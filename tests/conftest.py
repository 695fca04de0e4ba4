"""Root conftest — shared fixtures for stores, clocks and the API client.

Invariants:
    - Tests never reach a real database: SQL stores run on in-memory SQLite
    - Every store fixture gets a fresh, empty store and a pinned clock
    - The `store` fixture runs each contract test against BOTH backends

Design Decisions:
    - FakeClock advances one second per reading: created_at values are distinct
      and ordered, so listing order is predictable
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FORMAT", "text")

from quietbackend.infrastructure.database import DatabaseSessionManager  # noqa: E402
from quietbackend.infrastructure.memory_store import InMemoryPostStore  # noqa: E402
from quietbackend.infrastructure.sql_store import SqlPostStore  # noqa: E402
from quietbackend.infrastructure.worker_pool import StoreWorkerPool  # noqa: E402
from quietbackend.main import create_app  # noqa: E402

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock: returns the current instant, then steps forward."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def set(self, instant: datetime) -> None:
        self.now = instant


class RecordingMetricsSink:
    """MetricsSink that keeps every observation in memory."""

    def __init__(self):
        self.calls: list[tuple[str, str, float]] = []

    def observe(self, endpoint: str, result: str, duration_seconds: float) -> None:
        self.calls.append((endpoint, result, duration_seconds))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metrics():
    return RecordingMetricsSink()


@pytest.fixture
def db_manager():
    manager = DatabaseSessionManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
async def sql_store(db_manager, clock):
    store = SqlPostStore(db_manager, StoreWorkerPool(max_workers=2), clock=clock)
    yield store
    await store.close()


@pytest.fixture
def memory_store(clock):
    return InMemoryPostStore(clock=clock)


@pytest.fixture(params=["memory", "sql"])
async def store(request, clock):
    """Each contract test runs once per PostStore implementation."""
    if request.param == "memory":
        yield InMemoryPostStore(clock=clock)
        return
    manager = DatabaseSessionManager("sqlite://")
    manager.create_tables()
    sql = SqlPostStore(manager, StoreWorkerPool(max_workers=2), clock=clock)
    yield sql
    await sql.close()


@pytest.fixture
def app(memory_store, metrics):
    return create_app(store=memory_store, metrics=metrics)


@pytest.fixture
async def client(app):
    """FastAPI test client around an in-memory store."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
