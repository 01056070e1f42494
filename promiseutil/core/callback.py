"""Adapter for completion-callback style APIs."""

import inspect
import logging
from collections.abc import Callable
from types import MethodType
from typing import Any

from promiseutil.core.deferred import Deferred

logger = logging.getLogger(__name__)


def callback(context: Any, fn: Callable[..., Any] | str, *args: Any) -> Deferred:
    """Call a function that reports completion through a trailing callback.

    The callback is invoked as ``cb(error, *results)``. A truthy error rejects
    the returned Deferred with it. Several results resolve to a list of them;
    a single result resolves to that value alone.

    Args:
        context: Object the function belongs to. When `fn` is a string it names
            a method on `context`; otherwise `fn` is called with `context`
            prepended when it is an unbound function and `context` is not None.
        fn: The function to call, or the name of a method on `context`.
        *args: Arguments passed before the callback.

    Returns:
        A Deferred settled by the callback.

    Examples:
        >>> def read(path, cb):
        ...     cb(None, "contents")
        >>> await callback(None, read, "file.txt")
        'contents'
    """
    if isinstance(fn, str):
        if context is None:
            raise TypeError("a context is required when calling a method by name")
        target = getattr(context, fn)
    elif context is not None and inspect.isfunction(fn):
        target = MethodType(fn, context)
    else:
        target = fn

    deferred = Deferred()

    def on_complete(error: Any = None, *results: Any) -> None:
        if error:
            deferred.reject(error)
        elif len(results) > 1:
            deferred.resolve(list(results))
        else:
            deferred.resolve(results[0] if results else None)

    logger.debug(f"Calling {getattr(target, '__qualname__', target)!r} with completion callback")
    target(*args, on_complete)
    return deferred
