"""
Single-writer mutation queue.

Mutations submitted to one queue run strictly one at a time in submission
order. A submitted mutation is admitted immediately; from then on it runs to
completion or failure even if the caller stops waiting for it.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationQueue:

    def __init__(self, name: str = "cart"):
        self.name = name
        self._queue: asyncio.Queue[tuple[Callable[[], Awaitable[Any]], asyncio.Future]] | None = None
        self._worker: asyncio.Task | None = None
        self._closed = False
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of admitted mutations that have not finished yet."""
        return self._pending

    async def submit(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Admit an operation and wait for its result.

        Cancelling the caller does not cancel the admitted operation.

        Raises:
            RuntimeError: If the queue has been closed
            Exception: Whatever the operation raises
        """
        if self._closed:
            raise RuntimeError(f"Mutation queue '{self.name}' is closed")
        self._ensure_worker()

        future = asyncio.get_running_loop().create_future()
        future.add_done_callback(self._consume_unobserved)
        self._pending += 1
        self._queue.put_nowait((operation, future))
        return await asyncio.shield(future)

    async def drain(self) -> None:
        """Wait until every admitted mutation has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def close(self) -> None:
        """Finish admitted mutations, then stop the worker."""
        self._closed = True
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    def _ensure_worker(self) -> None:
        if self._queue is None:
            self._queue = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name=f"mutation-queue-{self.name}")

    async def _run(self) -> None:
        while True:
            operation, future = await self._queue.get()
            try:
                result = await operation()
            except Exception as e:
                if not future.done():
                    future.set_exception(e)
            else:
                if not future.done():
                    future.set_result(result)
            finally:
                self._pending -= 1
                self._queue.task_done()

    def _consume_unobserved(self, future: asyncio.Future) -> None:
        # The caller may have stopped waiting; keep asyncio from warning about
        # a never-retrieved exception and record it instead
        if not future.cancelled() and future.exception() is not None:
            logger.debug(f"[MutationQueue:{self.name}] mutation finished with {future.exception()!r}")
