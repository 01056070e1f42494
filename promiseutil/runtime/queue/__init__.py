"""Work queue and call serialization."""

from promiseutil.runtime.queue.fifo import Fifo, fifo
from promiseutil.runtime.queue.queue import IDLE, WAIT, Item, Queue

__all__ = ["Fifo", "IDLE", "Item", "Queue", "WAIT", "fifo"]
