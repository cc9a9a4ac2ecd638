"""Strictly serial execution of coroutine tasks."""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class TaskOutcome(Generic[T]):
    """Result of one task: either ``value`` or ``error`` is set."""

    key: Hashable
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SerialTaskQueue(Generic[T]):
    """Run submitted coroutine factories one at a time, in submission order.

    A single worker drains the queue. A task that raises is recorded as a
    failed outcome and the worker moves on to the next task.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[tuple[Hashable, Callable[[], Awaitable[T]]]] = (
            asyncio.Queue()
        )
        self._outcomes: list[TaskOutcome[T]] = []

    def submit(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> None:
        """Enqueue a task. The coroutine is created only when its turn comes."""
        self._queue.put_nowait((key, factory))

    def __len__(self) -> int:
        return self._queue.qsize()

    async def _worker(self) -> None:
        while True:
            key, factory = await self._queue.get()
            try:
                value = await factory()
            except Exception as e:
                logger.debug("serial_task_failed", key=str(key), error=str(e))
                self._outcomes.append(TaskOutcome(key=key, error=e))
            else:
                self._outcomes.append(TaskOutcome(key=key, value=value))
            finally:
                self._queue.task_done()

    async def drain(self) -> list[TaskOutcome[T]]:
        """Run every queued task and return their outcomes in order.

        Raises:
            BaseException: Whatever a task let escape that is not an
                ``Exception`` (cancellation included); queued tasks after it
                are dropped
        """
        worker = asyncio.create_task(self._worker())
        joined = asyncio.create_task(self._queue.join())
        try:
            await asyncio.wait({worker, joined}, return_when=asyncio.FIRST_COMPLETED)
            if worker.done():
                while not self._queue.empty():
                    self._queue.get_nowait()
                    self._queue.task_done()
                self._outcomes = []
                worker.result()
        finally:
            for task in (worker, joined):
                task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await joined
            if not worker.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await worker

        outcomes, self._outcomes = self._outcomes, []
        return outcomes


__all__ = ["SerialTaskQueue", "TaskOutcome"]
