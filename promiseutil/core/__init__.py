"""Core primitives for promiseutil: deferreds, coroutines, config and errors."""

from promiseutil.core.callback import callback
from promiseutil.core.config import Config, LoggingConfig, QueueOptions, SeriesOptions, load_config
from promiseutil.core.coroutine import invoker, is_generator_action, resolve_call, run_coroutine, sequence, spawn
from promiseutil.core.deferred import Deferred, defer, wait
from promiseutil.core.errors import PromiseUtilError, QueueStoppedError, Rejection

__all__ = [
    "Config",
    "Deferred",
    "LoggingConfig",
    "PromiseUtilError",
    "QueueOptions",
    "QueueStoppedError",
    "Rejection",
    "SeriesOptions",
    "callback",
    "defer",
    "invoker",
    "is_generator_action",
    "load_config",
    "resolve_call",
    "run_coroutine",
    "sequence",
    "spawn",
    "wait",
]
