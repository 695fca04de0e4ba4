"""Handler Observation — times API handlers and reports ok/err to a MetricsSink."""

import time
from typing import Awaitable, Callable, TypeVar

from quietbackend.core.repository_protocols import MetricsSink

T = TypeVar("T")


async def observe(
    name: str, sink: MetricsSink, fn: Callable[[], Awaitable[T]],
) -> T:
    """Execute ``fn``, then record time taken and whether it returned or raised."""
    start = time.perf_counter()
    result = "err"
    try:
        value = await fn()
        result = "ok"
        return value
    finally:
        sink.observe(name, result, time.perf_counter() - start)
