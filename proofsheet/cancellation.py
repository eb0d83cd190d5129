"""
CancellationToken - Cooperative cancellation flag shared with worker tasks.
"""

import threading


class TaskCancelled(Exception):
    """Raised inside a worker task when it observes a cancelled token."""
    pass


class CancellationToken:
    """
    Flag checked by worker tasks at safe points.

    Setting it never interrupts a task; tasks observe it before decoding and
    before finalizing output, then exit cleanly.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the run."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise TaskCancelled()
