"""Pausable work queue built on the series runner."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from promiseutil.core.config.models import QueueOptions
from promiseutil.core.coroutine import invoker
from promiseutil.core.deferred import Deferred
from promiseutil.core.errors import QueueStoppedError
from promiseutil.runtime.series import series

logger = logging.getLogger(__name__)


class _WaitSymbol:
    """Marker a custom iterator yields to idle a worker until resume()."""

    def __repr__(self) -> str:
        return "Queue.wait_symbol"


WAIT = _WaitSymbol()
_EXHAUSTED = object()


@dataclass(frozen=True)
class Item:
    """A unit of work pulled from the queue."""

    value: Any


class _Idle:
    def __repr__(self) -> str:
        return "IDLE"


IDLE = _Idle()


class Queue:
    """A work queue drained by a bounded number of cooperative workers.

    Values added with add() are handed to `action` in FIFO order by up to
    `parallel` workers. A finite queue finishes once nothing is pending and
    no action is running; an infinite queue idles instead and only finishes
    when stopped.

    Workers with nothing to do idle on a waiter until work arrives, resume()
    is called, or the queue is stopped. Pausing keeps the workers idle even
    when work is added.

    Example:
        >>> queue = Queue(fetch, parallel=4, collect=True)
        >>> queue.add(*urls)
        >>> pages = await queue.run()
    """

    wait_symbol = WAIT

    def __init__(
        self,
        action: Callable[..., Any],
        parallel: int = 1,
        infinite: bool = False,
        collect: bool = False,
        iterator: Iterator[Any] | None = None,
    ):
        """Initialize the queue.

        Args:
            action: Generator function or callable run for each value.
            parallel: Number of cooperative workers.
            infinite: Keep the queue open after pending work drains.
            collect: Collect action results, returned by run().
            iterator: Custom source of values used instead of add(). It may
                yield Queue.wait_symbol to idle a worker until resume().

        Raises:
            TypeError: If `action` is not callable.
            pydantic.ValidationError: If `parallel` is less than 1.
        """
        self._invoke = invoker(action)
        self.action = action
        self.options = QueueOptions(parallel=parallel, infinite=infinite, collect=collect)

        self.pending: deque[Any] = deque()
        self.active_count = 0
        self.paused = False
        self.stop_error: BaseException | None = None
        self.results: list[Any] = []

        self._iterator = iterator
        self._resume_waiters: deque[Deferred] = deque()

    @classmethod
    def from_config(
        cls,
        action: Callable[..., Any],
        options: QueueOptions,
        iterator: Iterator[Any] | None = None,
    ) -> "Queue":
        """Create a queue from loaded QueueOptions."""
        return cls(
            action,
            parallel=options.parallel,
            infinite=options.infinite,
            collect=options.collect,
            iterator=iterator,
        )

    @property
    def parallel(self) -> int:
        return self.options.parallel

    @property
    def infinite(self) -> bool:
        return self.options.infinite

    @property
    def collect(self) -> bool:
        return self.options.collect

    def add(self, *values: Any) -> "Queue":
        """Append values to the pending work and wake idle workers unless paused.

        Returns:
            The queue, so calls can be chained.
        """
        self.pending.extend(values)
        if not self.paused:
            self._release_waiters()
        return self

    def run(self) -> asyncio.Future[list[Any] | None]:
        """Start the workers.

        Returns:
            A future resolved with the collected results (None unless
            `collect`) once the queue finishes, or rejected with the stop
            error or the first action error.
        """
        logger.debug(
            f"Running queue for {getattr(self.action, '__qualname__', self.action)!r}: "
            f"parallel={self.parallel}, infinite={self.infinite}, pending={len(self.pending)}"
        )
        drained = series(self._dispatch, self._steps(), parallel=self.parallel, collect=False)
        return asyncio.ensure_future(self._finish(drained))

    def pause(self) -> None:
        """Stop handing out work. Running actions are not interrupted."""
        if not self.paused:
            logger.debug("Queue paused")
        self.paused = True

    def resume(self) -> None:
        """Clear the pause and release every idle worker."""
        if self.paused:
            logger.debug("Queue resumed")
        self.paused = False
        self._release_waiters()

    def stop(self, error: BaseException | None = None) -> None:
        """Stop the queue, making run() reject with `error`.

        Actions already running finish, but their results are not observed.

        Args:
            error: Exception to reject with. Defaults to QueueStoppedError.
        """
        if self.stop_error is None:
            self.stop_error = error if error is not None else QueueStoppedError()
            logger.info(f"Queue stopped: {self.stop_error!r}")
        self.resume()

    def get_stats(self) -> dict[str, Any]:
        """Get current queue statistics."""
        return {
            "pending": len(self.pending),
            "active": self.active_count,
            "waiting": len(self._resume_waiters),
            "parallel": self.parallel,
            "paused": self.paused,
            "stopped": self.stop_error is not None,
        }

    def _next(self) -> Item | _Idle | None:
        """Decide what a worker does next: work on an item, idle, or finish (None)."""
        if self._iterator is not None:
            if self.paused:
                return IDLE
            value = next(self._iterator, _EXHAUSTED)
            if value is _EXHAUSTED:
                self._release_waiters()
                return None
            if value is WAIT:
                return IDLE
            self.active_count += 1
            return Item(value)

        if not self.paused and self.pending:
            self.active_count += 1
            return Item(self.pending.popleft())
        if not self.pending and not self.infinite and self.active_count == 0:
            # Drained: wake idle workers so they finish too
            self._release_waiters()
            return None
        return IDLE

    def _steps(self) -> Iterator[Item | _Idle]:
        while (step := self._next()) is not None:
            yield step

    async def _dispatch(self, step: Item | _Idle) -> None:
        if step is IDLE:
            if self.stop_error is None:
                waiter = Deferred()
                self._resume_waiters.append(waiter)
                await waiter
            if self.stop_error is not None:
                raise self.stop_error
            return

        # active_count was incremented when the item was pulled
        try:
            if self.stop_error is not None:
                raise self.stop_error
            result = await self._invoke(step.value)
        except Exception as exc:
            if exc is not self.stop_error:
                # A failed action tears the queue down like stop()
                logger.warning(f"Queue action failed for {step.value!r}: {exc!r}")
                self.stop(exc)
            raise
        finally:
            self.active_count -= 1
        if self.collect:
            self.results.append(result)

    async def _finish(self, drained: asyncio.Future[list[Any]]) -> list[Any] | None:
        await drained
        if self.stop_error is not None:
            raise self.stop_error
        logger.debug(f"Queue finished, {len(self.results)} result(s) collected")
        return self.results if self.collect else None

    def _release_waiters(self) -> None:
        while self._resume_waiters:
            self._resume_waiters.popleft().resolve()

