"""Series runner and work queues."""

from promiseutil.runtime.queue import Fifo, Queue, fifo
from promiseutil.runtime.series import series

__all__ = ["Fifo", "Queue", "fifo", "series"]
