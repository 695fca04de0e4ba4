"""Store Worker Pool — runs blocking store calls off the event loop on a bounded thread pool.

Invariants:
    - At most max_workers store calls run at once; the rest queue in the executor
    - The awaiting request suspends cooperatively; no partial result is observable
    - Cancelling the awaiting request does NOT cancel a call already running
    - A call the pool itself cancels (shutdown) or refuses raises TwoFaceError
      with internal "store operation cancelled", never silently dropped
    - A caller cancelled in the same tick as shutdown still sees CancelledError

Design Decisions:
    - ThreadPoolExecutor + asyncio.wrap_future over asyncio.to_thread: the default
      executor is unbounded-by-config and shared; store calls get their own pool
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

from quietbackend.core.errors import TwoFaceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCELLED_DIAGNOSTIC = "store operation cancelled"


class StoreWorkerPool:
    """Bounded pool of worker threads for blocking store operations."""

    def __init__(self, max_workers: int = 8, name: str = "store"):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=name,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn`` on a worker thread and await its result."""
        try:
            future = self._executor.submit(partial(fn, *args, **kwargs))
        except RuntimeError as e:
            # Executor refuses new work after shutdown
            raise TwoFaceError(internal=f"{CANCELLED_DIAGNOSTIC}: {e}") from e

        try:
            return await asyncio.shield(asyncio.wrap_future(future))
        except asyncio.CancelledError:
            caller = asyncio.current_task()
            if (
                self._closed and future.cancelled()
                and not (caller is not None and caller.cancelling())
            ):
                logger.warning("Store operation cancelled by pool shutdown")
                raise TwoFaceError(internal=CANCELLED_DIAGNOSTIC)
            raise

    def close(self) -> None:
        """Stop accepting work and cancel queued calls. Running calls finish."""
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
