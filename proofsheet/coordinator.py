"""
Coordinator - Processes candidates on a bounded worker pool.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional

from .asset_kind import AssetKind, classify, format_label
from .asset_record import AssetRecord, AssetStatus
from .cancellation import CancellationToken, TaskCancelled
from .config import PipelineConfig
from .errors import ClassificationError, MetadataError, ThumbnailError
from .metadata_extractor import MediaMetadata, MetadataExtractor
from .progress_events import Completed, Failed, ProgressChannel, Started
from .result_slots import ResultSlots
from .scanner import CandidatePath
from .thumbnail_generator import ThumbnailGenerator


@dataclass
class CoordinatorResult:
    """
    Outcome of processing a candidate list.

    Attributes:
        slots: Index-addressed records, one slot per candidate
        cancelled: True if cancellation was requested during the run
        failed_indices: Candidates whose task raised an unexpected error
        elapsed_seconds: Wall time of the run
    """
    slots: ResultSlots
    cancelled: bool = False
    failed_indices: List[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def partial(self) -> bool:
        """True when at least one slot was left empty."""
        return not self.slots.is_complete


class Coordinator:
    """
    Dispatches one task per candidate and collects results in scan order.

    Tasks share nothing but the slot array (one slot each) and the progress
    channel. Per-item failures are recorded on the asset and never stop
    sibling tasks.
    """

    def __init__(
        self,
        extractor: MetadataExtractor,
        thumbnail_generator: ThumbnailGenerator,
        scratch_dir: str,
        config: Optional[PipelineConfig] = None,
        channel: Optional[ProgressChannel] = None,
        token: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize coordinator.

        Args:
            extractor: Metadata extractor
            thumbnail_generator: Thumbnail generator
            scratch_dir: Directory receiving thumbnails
            config: Pipeline configuration
            channel: Progress channel (events are dropped if None)
            token: Cancellation token
            logger: Optional logger instance
        """
        self.extractor = extractor
        self.thumb_gen = thumbnail_generator
        self.scratch_dir = scratch_dir
        self.config = config or PipelineConfig()
        self.channel = channel or ProgressChannel()
        self.token = token or CancellationToken()
        self.logger = logger or logging.getLogger(__name__)

    def run(self, candidates: List[CandidatePath]) -> CoordinatorResult:
        """
        Process all candidates.

        Args:
            candidates: Scan-ordered candidates with dense indices

        Returns:
            CoordinatorResult whose slots are complete unless cancelled
        """
        start_time = time.time()
        slots = ResultSlots(len(candidates))
        result = CoordinatorResult(slots=slots)

        if not candidates:
            return result

        workers = self.config.worker_count(len(candidates))
        self.logger.info(f"Processing {len(candidates)} assets with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='proofsheet') as executor:
            futures = {
                executor.submit(self._run_task, candidate, slots, result.failed_indices): candidate
                for candidate in candidates
            }
            stop_sent = False
            for future in as_completed(futures):
                if self.token.cancelled and not stop_sent:
                    stop_sent = True
                    pending = sum(1 for f in futures if f.cancel())
                    self.logger.info(f"Cancellation requested, {pending} tasks not started")
                if future.cancelled():
                    continue
                future.result()

        result.cancelled = self.token.cancelled
        result.elapsed_seconds = time.time() - start_time

        degraded = sum(1 for r in slots.records() if r.is_degraded)
        self.logger.info(
            f"Processing {'cancelled' if result.partial else 'complete'}: "
            f"{slots.filled_count}/{len(slots)} assets, {degraded} degraded, "
            f"{len(result.failed_indices)} failed ({result.elapsed_seconds:.1f}s)"
        )
        return result

    def _run_task(
        self,
        candidate: CandidatePath,
        slots: ResultSlots,
        failed_indices: List[int]
    ) -> None:
        """Worker task: build, publish and report the record for one candidate."""
        if self.token.cancelled:
            return

        self.channel.emit(Started(candidate.index, candidate.filename))
        try:
            record = self.process_candidate(candidate)
        except TaskCancelled:
            self.logger.debug(f"Cancelled: {candidate.filename}")
            return
        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            self.logger.error(f"Error processing {candidate.filename}: {error_msg}")
            failed_indices.append(candidate.index)
            slots.publish(candidate.index, self._failed_record(candidate, error_msg))
            self.channel.emit(Failed(candidate.index, candidate.filename, error_msg))
            return

        slots.publish(candidate.index, record)
        self.channel.emit(Completed(candidate.index, record))

    def process_candidate(self, candidate: CandidatePath) -> AssetRecord:
        """
        Classify, extract metadata and generate the thumbnail for one file.

        Metadata and thumbnail failures degrade the record; anything else
        (unsupported extension, vanished file) propagates.

        Raises:
            ClassificationError: If the extension is not supported
            OSError: If the file cannot be stat'ed
            TaskCancelled: If cancellation is observed at a safe point
        """
        path = candidate.path
        kind = classify(path)
        file_size = os.stat(path).st_size
        reasons = []

        self.token.raise_if_cancelled()

        metadata = MediaMetadata()
        try:
            metadata = self.extractor.extract(path, kind)
        except MetadataError as e:
            reasons.append(str(e))
            self.logger.warning(f"Metadata unavailable for {candidate.filename}: {e}")

        thumbnail_path = None
        if self.config.generate_thumbnails and self._should_preview(kind, reasons):
            try:
                thumbnail_path = self.thumb_gen.generate(
                    candidate.index, path, kind, metadata, self.scratch_dir, self.token
                )
            except ThumbnailError as e:
                reasons.append(str(e))
                self.logger.warning(f"Thumbnail failed for {candidate.filename}: {e}")

        status = AssetStatus.degraded('; '.join(reasons)) if reasons else AssetStatus.ready()
        return AssetRecord(
            index=candidate.index,
            filename=candidate.filename,
            source_path=path,
            kind=kind,
            format=format_label(path),
            file_size=file_size,
            width=metadata.width,
            height=metadata.height,
            duration=metadata.duration,
            codec=metadata.codec,
            color_space=metadata.color_space,
            thumbnail_path=thumbnail_path,
            status=status,
        )

    def _should_preview(self, kind: AssetKind, reasons: List[str]) -> bool:
        """
        Whether to attempt a thumbnail after metadata extraction.

        A video whose probe failed still gets a frame at the fallback offset
        when the video tools are present.
        """
        if not reasons:
            return True
        return kind is AssetKind.VIDEO and self.thumb_gen.video_probe is not None

    def _failed_record(self, candidate: CandidatePath, error: str) -> AssetRecord:
        """Minimal degraded record for a task that raised."""
        path = candidate.path
        try:
            kind: Optional[AssetKind] = classify(path)
        except ClassificationError:
            kind = None
        try:
            file_size = os.stat(path).st_size
        except OSError:
            file_size = 0
        return AssetRecord(
            index=candidate.index,
            filename=candidate.filename,
            source_path=path,
            kind=kind,
            format=format_label(path),
            file_size=file_size,
            status=AssetStatus.degraded(error),
        )
