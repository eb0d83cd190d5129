"""
Progress events emitted while a run is in flight.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .asset_record import AssetRecord
from .manifest_summary import ManifestSummary


class ProgressEvent:
    """Base class for progress events."""
    pass


@dataclass(frozen=True)
class Started(ProgressEvent):
    """A worker picked up a candidate."""
    index: int
    filename: str


@dataclass(frozen=True)
class Completed(ProgressEvent):
    """A candidate produced its record (possibly degraded)."""
    index: int
    record: AssetRecord


@dataclass(frozen=True)
class Failed(ProgressEvent):
    """A worker task hit an unexpected error; its slot holds a degraded record."""
    index: int
    filename: str
    error: str


@dataclass(frozen=True)
class Finished(ProgressEvent):
    """
    The run is over.

    Attributes:
        summary: Summary of the records that were published
        partial: True when the run was cancelled before every slot was filled
    """
    summary: ManifestSummary
    partial: bool = False


ProgressSink = Callable[[ProgressEvent], None]


class ProgressChannel:
    """
    Serializes delivery of events from many worker threads to one sink.

    Events are passed to the sink one at a time; events of different
    indices may arrive in any relative order.
    """

    def __init__(
        self,
        sink: Optional[ProgressSink] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.sink = sink
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()

    def emit(self, event: ProgressEvent) -> None:
        """Deliver an event to the sink."""
        if self.sink is None:
            return
        with self._lock:
            try:
                self.sink(event)
            except Exception as e:
                # Sink errors never reach the worker that emitted the event
                self.logger.warning(f"Progress sink raised on {type(event).__name__}: {e}")
