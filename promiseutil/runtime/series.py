"""Run an action over every value of an iterable with bounded parallelism."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from promiseutil.core.config.models import SeriesOptions
from promiseutil.core.coroutine import invoker

logger = logging.getLogger(__name__)


def series(
    action: Callable[..., Any],
    iterable: Iterable[Any],
    parallel: int = 1,
    collect: bool = True,
) -> asyncio.Future[list[Any]]:
    """Apply `action` to each value of `iterable`.

    `parallel` workers share a single iterator over `iterable`. Each worker
    pulls a value, awaits the action's result and pulls again until the
    iterator is exhausted. The iterator is consulted live, so values appended
    to a backing list while the series runs are picked up.

    With one worker the results keep input order. With more, results are
    collected in the order they become available.

    The first action failure rejects the returned future. Workers that are
    still busy run on; whatever they produce is discarded.

    Args:
        action: A generator function (driven by run_coroutine) or any callable.
        iterable: Values to process.
        parallel: Number of cooperative workers.
        collect: Whether to collect results. When False the future resolves
            to an empty list.

    Returns:
        A future resolved with the collected results.

    Raises:
        TypeError: If `action` is not callable.
        pydantic.ValidationError: If `parallel` is less than 1.
    """
    invoke = invoker(action)
    options = SeriesOptions(parallel=parallel, collect=collect)
    cursor = iter(iterable)
    results: list[Any] = []

    async def worker() -> None:
        for value in cursor:
            result = await invoke(value)
            if options.collect:
                results.append(result)

    async def run() -> list[Any]:
        logger.debug(f"Starting series of {getattr(action, '__qualname__', action)!r} with {options.parallel} worker(s)")
        await asyncio.gather(*(worker() for _ in range(options.parallel)))
        return results

    return asyncio.ensure_future(run())
