"""
Cooperative cancellation shared between the pipeline driver and worker threads.
"""

import threading

from .exceptions import OperationCancelled


class CancellationToken:
    """Thread-safe cancellation flag checked before every network call."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()
