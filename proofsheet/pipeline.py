"""
Pipeline - Scan, process and aggregate a delivery directory.
"""

import logging
import os
import time
from typing import List, Optional

from .aggregator import Aggregator
from .cancellation import CancellationToken
from .config import PipelineConfig
from .coordinator import Coordinator
from .errors import ConfigError
from .manifest import Manifest
from .metadata_extractor import MetadataExtractor
from .progress_events import Finished, ProgressChannel, ProgressSink
from .scanner import CandidatePath, Scanner
from .thumbnail_generator import ThumbnailGenerator
from .video_probe import VideoProbe


class Pipeline:
    """
    Runs one self-contained pass over a directory.

    The video capability is decided before the run: pass the VideoProbe
    returned by VideoProbe.detect(), or None to treat video tools as absent.
    with_detected_tools() does the detection from the config.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        video_probe: Optional[VideoProbe] = None,
        sink: Optional[ProgressSink] = None,
        token: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            video_probe: Video tool wrapper, or None if unavailable
            sink: Callable receiving ProgressEvents
            token: Cancellation token
            logger: Optional logger instance
        """
        self.config = config or PipelineConfig()
        self.video_probe = video_probe
        self.sink = sink
        self.token = token or CancellationToken()
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def with_detected_tools(
        cls,
        config: Optional[PipelineConfig] = None,
        sink: Optional[ProgressSink] = None,
        token: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None
    ) -> 'Pipeline':
        """Create a pipeline after checking once for ffprobe/ffmpeg."""
        config = config or PipelineConfig()
        probe = VideoProbe.detect(
            ffprobe_bin=config.ffprobe_bin,
            ffmpeg_bin=config.ffmpeg_bin,
            timeout=config.probe_timeout,
            logger=logger,
        )
        return cls(config, video_probe=probe, sink=sink, token=token, logger=logger)

    @property
    def video_available(self) -> bool:
        return self.video_probe is not None

    def scan(self, root: str) -> List[CandidatePath]:
        """
        List the supported files in root in scan order.

        Raises:
            ScanError: If root cannot be scanned or holds no supported files
        """
        self.logger.info(f"Scanning {root}...")
        return Scanner(self.config, self.logger).scan(root)

    def run(
        self,
        root: str,
        scratch_dir: str,
        candidates: Optional[List[CandidatePath]] = None
    ) -> Manifest:
        """
        Process every supported file in root.

        Args:
            root: Directory to scan
            scratch_dir: Directory receiving thumbnails (created if missing)
            candidates: Result of an earlier scan of root (scanned here if None)

        Returns:
            Manifest in scan order; partial if the run was cancelled

        Raises:
            ConfigError: If the configuration is invalid
            ScanError: If root cannot be scanned or holds no supported files
        """
        errors = self.config.validate()
        if errors:
            raise ConfigError("; ".join(errors))

        start_time = time.time()
        if candidates is None:
            candidates = self.scan(root)

        if self.config.generate_thumbnails:
            os.makedirs(scratch_dir, exist_ok=True)

        coordinator = Coordinator(
            extractor=MetadataExtractor(self.config, self.video_probe, self.logger),
            thumbnail_generator=ThumbnailGenerator.from_config(
                self.config, self.video_probe, self.logger
            ),
            scratch_dir=scratch_dir,
            config=self.config,
            channel=ProgressChannel(self.sink, self.logger),
            token=self.token,
            logger=self.logger,
        )
        result = coordinator.run(candidates)

        manifest = Aggregator().aggregate(
            result.slots,
            root=os.path.abspath(root),
            scan_duration_seconds=time.time() - start_time,
        )
        coordinator.channel.emit(Finished(manifest.summary, partial=manifest.partial))

        if manifest.partial:
            self.logger.warning(
                f"Run cancelled: {manifest.total_files} of {manifest.expected_total} assets processed"
            )
        return manifest
