"""
PipelineProgress - Tracks and displays pipeline progress.
"""

import logging
from typing import Optional, Set

from .progress_events import Completed, Failed, Finished, ProgressEvent, Started
from .progress_stats import ProgressStats


class PipelineProgress:
    """
    Progress sink with optional per-file output.

    Events for different assets may arrive in any order; the sink only
    counts each index once.
    """

    def __init__(
        self,
        total: int = 0,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            total: Expected number of assets (for ETA; may be 0)
            show_files: If True, print each file as it finishes
            log_interval: Log summary progress every N assets (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.stats = ProgressStats(total=total)
        self.last_logged = 0
        self.finished: Optional[Finished] = None
        self._seen: Set[int] = set()

    def on_started(self, event: Started) -> None:
        self.stats.started += 1
        self.stats.total = max(self.stats.total, event.index + 1)

    def on_completed(self, event: Completed) -> None:
        """Called when an asset produced its record."""
        if not self._mark(event.index):
            return
        record = event.record
        if record.is_degraded:
            self.stats.degraded += 1
        else:
            self.stats.ready += 1

        if self.show_files:
            tag = "[DEGRADED]" if record.is_degraded else "[OK]"
            print(f"  {tag} {record.format_status()}")
        self.on_progress_update()

    def on_failed(self, event: Failed) -> None:
        """Called when an asset task raised."""
        if not self._mark(event.index):
            return
        self.stats.failed += 1
        self.stats.error_details.append(f"{event.filename}: {event.error}")

        if self.show_files:
            print(f"  [ERROR] {event.filename} -> {event.error}")
        self.on_progress_update()

    def on_finished(self, event: Finished) -> None:
        self.finished = event
        summary = event.summary
        state = "cancelled" if event.partial else "finished"
        self.logger.info(
            f"Run {state}: {summary.total_files} assets "
            f"({summary.image_count} images, {summary.video_count} videos, "
            f"{summary.degraded_count} degraded) in {self.stats.elapsed_seconds:.1f}s"
        )

    def on_progress_update(self) -> None:
        """Log overall progress every log_interval assets."""
        stats = self.stats
        total_done = stats.completed_count

        if not self.show_files and total_done - self.last_logged >= self.log_interval:
            self.last_logged = total_done

            eta_seconds = stats.estimated_remaining_seconds
            self.logger.info(
                f"Progress: {total_done}/{stats.total} "
                f"({stats.degraded} degraded, {stats.failed} errors, "
                f"{stats.rate_per_minute:.1f}/min, ~{eta_seconds:.0f}s remaining)"
            )

    def _mark(self, index: int) -> bool:
        if index in self._seen:
            self.logger.debug(f"Duplicate completion for index {index} ignored")
            return False
        self._seen.add(index)
        return True

    def __call__(self, event: ProgressEvent) -> None:
        """Allow use as a ProgressSink."""
        if isinstance(event, Started):
            self.on_started(event)
        elif isinstance(event, Completed):
            self.on_completed(event)
        elif isinstance(event, Failed):
            self.on_failed(event)
        elif isinstance(event, Finished):
            self.on_finished(event)
