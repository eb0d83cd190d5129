"""
ProgressStats - Running counts for a pipeline run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class ProgressStats:
    """
    Running counts for a pipeline run, fed by progress events.

    Attributes:
        total: Number of candidates discovered
        started: Tasks that emitted Started
        ready: Assets finished with full metadata
        degraded: Assets finished degraded
        failed: Tasks that raised unexpectedly
        start_time: Start timestamp
        error_details: Error messages from failed tasks
    """
    total: int = 0
    started: int = 0
    ready: int = 0
    degraded: int = 0
    failed: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total finished (ready + degraded + failed)."""
        return self.ready + self.degraded + self.failed

    @property
    def remaining_count(self) -> int:
        return max(self.total - self.completed_count, 0)

    @property
    def rate_per_second(self) -> float:
        """Processing rate in assets per second."""
        if self.elapsed_seconds > 0:
            return self.completed_count / self.elapsed_seconds
        return 0.0

    @property
    def rate_per_minute(self) -> float:
        return self.rate_per_second * 60

    @property
    def estimated_remaining_seconds(self) -> float:
        """Estimated time remaining in seconds."""
        if self.rate_per_second > 0:
            return self.remaining_count / self.rate_per_second
        return 0.0

    @property
    def percent_complete(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.completed_count / self.total * 100
