"""Single-flight execution of keyed asynchronous work.

Concurrent callers asking for the same key while work for that key is in
progress share one task and its outcome instead of starting their own.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlight(Generic[K, V]):
    """Map from key to the one in-progress task computing its value.

    Looking up and installing a task happen without an intervening ``await``,
    which makes the check-and-insert atomic on the event loop. The entry is
    removed as soon as the task finishes, successfully or not, so a failed
    attempt is never reused. Results are not cached here; callers keep
    successful values themselves.

    Each waiter awaits the task through ``asyncio.shield``: a cancelled
    waiter stops waiting but the shared task keeps running for the others.
    """

    def __init__(self) -> None:
        self._tasks: dict[K, asyncio.Task[V]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def is_pending(self, key: K) -> bool:
        """Return whether work for ``key`` is currently in progress."""
        return key in self._tasks

    async def do(self, key: K, work: Callable[[], Awaitable[V]]) -> V:
        """Run ``work`` for ``key`` unless a run is already in progress.

        Args:
            key: Identity of the work
            work: Zero-argument coroutine factory; only called when no task
                exists for ``key``

        Returns:
            The shared task's result

        Raises:
            Whatever the shared task raised; every waiter receives the same
            exception instance.
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, work))
            task.add_done_callback(_consume_exception)
            self._tasks[key] = task
        return await asyncio.shield(task)

    async def _run(self, key: K, work: Callable[[], Awaitable[V]]) -> V:
        try:
            return await work()
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]

    async def cancel_all(self) -> None:
        """Cancel every in-progress task and wait for it to unwind.

        Used at shutdown. Returns once each task has run its cleanup.
        """
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _consume_exception(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled before the task failed; mark the
    # exception retrieved so asyncio does not report it as unhandled.
    if not task.cancelled():
        task.exception()
