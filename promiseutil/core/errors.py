"""Exceptions raised by promiseutil."""

from typing import Any


class PromiseUtilError(Exception):
    """Base class for promiseutil errors."""


class QueueStoppedError(PromiseUtilError):
    """Raised into a queue's workers when it is stopped without a custom error."""

    def __init__(self, message: str = "stopped"):
        super().__init__(message)


class Rejection(PromiseUtilError):
    """A rejection carrying a value that is not an exception.

    Attributes:
        reason: The original rejection value.
    """

    def __init__(self, reason: Any):
        super().__init__(reason)
        self.reason = reason
