"""Serialize calls through an infinite queue."""

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from promiseutil.core.config.models import QueueOptions
from promiseutil.core.coroutine import invoker
from promiseutil.core.deferred import Deferred
from promiseutil.core.errors import QueueStoppedError
from promiseutil.runtime.queue.queue import Queue

logger = logging.getLogger(__name__)


class Fifo:
    """Callable that runs each call of `action` through a shared infinite queue.

    Calls start in the order they are made, at most `parallel` at a time.
    Every call gets its own Deferred; a failing call rejects only that
    Deferred and the queue keeps serving later calls.

    The queue is started on the first call, on the running event loop, and
    is replaced if a later call happens on a different loop.
    """

    def __init__(self, action: Callable[..., Any], parallel: int = 1):
        self._invoke = invoker(action)
        self.action = action
        self.options = QueueOptions(parallel=parallel, infinite=True)
        self.queue: Queue | None = None
        self._run: asyncio.Future[Any] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def __call__(self, *args: Any) -> Deferred:
        deferred = Deferred()
        self._ensure_running().add((args, deferred))
        return deferred

    def close(self) -> None:
        """Stop the underlying queue, rejecting calls that have not started yet."""
        if self.queue is None:
            return
        queue, self.queue = self.queue, None
        error = QueueStoppedError()
        while queue.pending:
            _, deferred = queue.pending.popleft()
            deferred.reject(error)
        queue.stop(error)

    def _ensure_running(self) -> Queue:
        loop = asyncio.get_running_loop()
        if self.queue is None or self._loop is not loop:
            self.queue = Queue.from_config(self._run_call, self.options)
            self._loop = loop
            self._run = self.queue.run()
            self._run.add_done_callback(partial(self._on_queue_done, self.queue))
            logger.debug(f"Started fifo queue for {getattr(self.action, '__qualname__', self.action)!r}")
        return self.queue

    async def _run_call(self, call: tuple[tuple[Any, ...], Deferred]) -> None:
        args, deferred = call
        try:
            deferred.resolve(await self._invoke(*args))
        except asyncio.CancelledError:
            # Only this call was cancelled unless our own task is being cancelled
            deferred.future.cancel()
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
        except Exception as exc:
            deferred.reject(exc)

    def _on_queue_done(self, queue: Queue, run: asyncio.Future[Any]) -> None:
        if run.cancelled():
            logger.debug("Fifo queue cancelled")
            error: BaseException = QueueStoppedError("cancelled")
        else:
            error = run.exception() or QueueStoppedError()
            logger.debug(f"Fifo queue ended: {error!r}")
        while queue.pending:
            _, deferred = queue.pending.popleft()
            deferred.reject(error)
        if run is self._run:
            # Next call starts a fresh queue
            self.queue = None
            self._run = None


def fifo(action: Callable[..., Any], parallel: int = 1) -> Fifo:
    """Wrap `action` so that calls to it are queued and run in order.

    Args:
        action: Generator function or callable to run for each call.
        parallel: Number of calls allowed to run at once.

    Returns:
        A callable returning a Deferred for each call's result.

    Raises:
        TypeError: If `action` is not callable.
    """
    return Fifo(action, parallel=parallel)
