"""Deferred promises and timer helpers."""

import asyncio
import inspect
from collections.abc import Callable, Generator
from typing import Any

from promiseutil.core.errors import Rejection


def as_exception(error: Any) -> BaseException:
    """Return `error` if it can be raised, otherwise wrap it in a Rejection."""
    if isinstance(error, BaseException):
        return error
    return Rejection(error)


class Deferred:
    """An awaitable with external resolve and reject controls.

    Settlement happens at most once; later calls to resolve() or reject()
    are ignored. Resolving with another awaitable chains through it, so the
    deferred settles with that awaitable's outcome.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self.future: asyncio.Future[Any] = self._loop.create_future()
        self._chained = False

    def __await__(self) -> Generator[Any, None, Any]:
        return self.future.__await__()

    def __repr__(self) -> str:
        return f"<Deferred {self.future!r}>"

    def resolve(self, value: Any = None) -> None:
        """Resolve the deferred, chaining through `value` if it is awaitable."""
        if self.future.done() or self._chained:
            return
        if value is self or value is self.future:
            self.future.set_exception(TypeError("a deferred cannot be resolved with itself"))
            return
        if inspect.isawaitable(value):
            self._chained = True
            source = asyncio.ensure_future(value, loop=self._loop)
            source.add_done_callback(self._settle_from)
            return
        self.future.set_result(value)

    def reject(self, error: Any) -> None:
        """Reject the deferred with `error`."""
        if self.future.done() or self._chained:
            return
        self.future.set_exception(as_exception(error))

    def done(self) -> bool:
        return self.future.done()

    def result(self) -> Any:
        return self.future.result()

    def add_done_callback(self, callback: Callable[[asyncio.Future[Any]], Any]) -> None:
        self.future.add_done_callback(callback)

    def _settle_from(self, source: asyncio.Future[Any]) -> None:
        if self.future.done():
            return
        if source.cancelled():
            self.future.cancel()
        elif source.exception() is not None:
            self.future.set_exception(source.exception())
        else:
            self.future.set_result(source.result())


def defer() -> Deferred:
    """Create a new Deferred bound to the running event loop."""
    return Deferred()


async def wait(delay: float, value: Any = None) -> Any:
    """Sleep for `delay` seconds and return `value`.

    The delay is in seconds, like asyncio.sleep, not milliseconds.
    """
    return await asyncio.sleep(delay, result=value)
