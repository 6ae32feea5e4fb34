"""
Background Dispatcher

Runs side effects (notification e-mails) outside the request path. Work is
fire-and-forget: the caller gets nothing back, and failures are logged here
instead of reaching a response that has usually been sent already.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from greenlight.domain.result import Result

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """
    Bounded asyncio executor for background tasks.

    Tasks are zero-argument callables. Coroutine functions run on the event
    loop; plain functions run in a worker thread so blocking I/O never stalls
    request handling. Concurrency is capped by `max_concurrency`.
    """

    def __init__(self, max_concurrency: int = 8):
        self.max_concurrency = max(1, max_concurrency)
        self._tasks: Set[asyncio.Task] = set()
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, task: Callable[[], Any], name: Optional[str] = None) -> None:
        """
        Schedule `task` and return immediately.

        Must be called with a running event loop.
        """
        name = name or getattr(task, "__name__", "background-task")
        background = asyncio.get_running_loop().create_task(self._run(task, name), name=name)
        self._tasks.add(background)
        background.add_done_callback(self._tasks.discard)

    async def _run(self, task: Callable[[], Any], name: str) -> None:
        try:
            async with self._get_semaphore():
                if inspect.iscoroutinefunction(task):
                    outcome = await task()
                else:
                    outcome = await asyncio.to_thread(task)
                    if inspect.isawaitable(outcome):
                        outcome = await outcome
        except asyncio.CancelledError:
            logger.warning("Background task %s cancelled", name)
            raise
        except Exception:
            logger.exception("Background task %s failed", name)
            return

        if isinstance(outcome, Result) and outcome.is_err():
            logger.error(
                "Background task %s reported %s: %s",
                name,
                outcome.error.code.value,
                outcome.error.message,
            )

    def _get_semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
            self._loop = loop
        return self._semaphore

    async def wait_idle(self) -> None:
        """Wait until every task dispatched so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Give pending work `timeout` seconds to finish, then cancel the rest."""
        if not self._tasks:
            return
        logger.info("Waiting for %d background task(s)", len(self._tasks))
        try:
            await asyncio.wait_for(self.wait_idle(), timeout=timeout)
        except asyncio.TimeoutError:
            remaining = list(self._tasks)
            logger.warning("Cancelling %d unfinished background task(s)", len(remaining))
            for task in remaining:
                task.cancel()
            await asyncio.gather(*remaining, return_exceptions=True)
