"""Generator-driven coroutines and plain-call wrappers.

A generator action yields values or awaitables. The runner waits for each
yielded awaitable and sends its result back into the generator, or throws
its exception in so the generator can recover. Plain values are sent back
on the next loop iteration.
"""

import asyncio
import inspect
from collections.abc import Callable, Generator, Iterable
from typing import Any


def is_generator_action(action: Any) -> bool:
    """Return True if `action` should be driven by run_coroutine."""
    return inspect.isgeneratorfunction(action)


def run_coroutine(gen_fn: Callable[..., Generator[Any, Any, Any]], *args: Any) -> asyncio.Future[Any]:
    """Run a generator function to completion.

    The first step runs synchronously. Every later step is scheduled on the
    event loop, so long-running generators do not build up a call chain.

    Args:
        gen_fn: A generator function.
        *args: Arguments the generator function is called with.

    Returns:
        A future resolved with the generator's return value, or rejected with
        the first exception it does not handle.

    Raises:
        TypeError: If `gen_fn` is not a generator function.
    """
    if not is_generator_action(gen_fn):
        raise TypeError("first argument must be a generator function")
    return _drive(gen_fn(*args))


def spawn(gen_fn: Callable[[], Generator[Any, Any, Any]]) -> asyncio.Future[Any]:
    """Run a generator function that takes no arguments."""
    return run_coroutine(gen_fn)


def _drive(gen: Generator[Any, Any, Any]) -> asyncio.Future[Any]:
    loop = asyncio.get_running_loop()
    result: asyncio.Future[Any] = loop.create_future()

    def step(value: Any = None, error: BaseException | None = None) -> None:
        if result.done():
            return
        try:
            if error is not None:
                yielded = gen.throw(error)
            else:
                yielded = gen.send(value)
        except StopIteration as stop:
            result.set_result(stop.value)
            return
        except asyncio.CancelledError:
            result.cancel()
            return
        except Exception as exc:
            result.set_exception(exc)
            return

        if inspect.isgenerator(yielded):
            awaitable: Any = _drive(yielded)
        elif inspect.isawaitable(yielded):
            awaitable = asyncio.ensure_future(yielded)
        else:
            loop.call_soon(step, yielded)
            return
        awaitable.add_done_callback(wakeup)

    def wakeup(source: asyncio.Future[Any]) -> None:
        if source.cancelled():
            step(error=asyncio.CancelledError())
        elif source.exception() is not None:
            step(error=source.exception())
        else:
            step(source.result())

    def on_done(fut: asyncio.Future[Any]) -> None:
        if fut.cancelled():
            gen.close()

    result.add_done_callback(on_done)
    step()
    return result


def resolve_call(fn: Callable[..., Any], *args: Any) -> asyncio.Future[Any]:
    """Call `fn` and wrap its outcome in a future.

    A returned awaitable is chained, a returned value resolves the future
    and an exception raised by the call rejects it.

    Raises:
        TypeError: If `fn` is not callable.
    """
    if not callable(fn):
        raise TypeError("first argument must be a function")
    loop = asyncio.get_running_loop()
    try:
        value = fn(*args)
    except Exception as exc:
        future: asyncio.Future[Any] = loop.create_future()
        future.set_exception(exc)
        return future
    if inspect.isawaitable(value):
        return asyncio.ensure_future(value)
    future = loop.create_future()
    future.set_result(value)
    return future


def invoker(action: Callable[..., Any]) -> Callable[..., asyncio.Future[Any]]:
    """Return run_coroutine or resolve_call bound to `action`.

    Raises:
        TypeError: If `action` is neither a generator function nor callable.
    """
    if is_generator_action(action):
        return lambda *args: run_coroutine(action, *args)
    if not callable(action):
        raise TypeError("first argument must be a function")
    return lambda *args: resolve_call(action, *args)


async def sequence(fns: Iterable[Callable[[Any], Any]], start: Any = None) -> Any:
    """Pass `start` through each function in turn, awaiting every result."""
    value = start
    for fn in fns:
        value = await resolve_call(fn, value)
    return value
