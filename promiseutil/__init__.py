"""Promise and coroutine utilities for asyncio.

Deferreds, a completion-callback adapter, generator-driven coroutines, a
series runner with bounded parallelism, a pausable work queue and a FIFO
call serializer.
"""

from promiseutil.core import (
    Config,
    Deferred,
    PromiseUtilError,
    QueueStoppedError,
    Rejection,
    callback,
    defer,
    load_config,
    resolve_call,
    run_coroutine,
    sequence,
    spawn,
    wait,
)
from promiseutil.runtime import Fifo, Queue, fifo, series

# Short alias matching the common name for generator runners
coroutine = run_coroutine

__all__ = [
    "Config",
    "Deferred",
    "Fifo",
    "PromiseUtilError",
    "Queue",
    "QueueStoppedError",
    "Rejection",
    "callback",
    "coroutine",
    "defer",
    "fifo",
    "load_config",
    "resolve_call",
    "run_coroutine",
    "sequence",
    "series",
    "spawn",
    "wait",
]
