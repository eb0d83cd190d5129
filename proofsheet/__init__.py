"""
Proofsheet - Concurrent metadata and thumbnail pipeline for media deliveries.

One pass over a directory:
    1. Scan: discover supported images and videos in a stable order
    2. Process: extract metadata and write thumbnails on a worker pool
    3. Aggregate: build an ordered manifest with summary counts

Video support uses ffprobe/ffmpeg when they are available.
"""

__version__ = "0.1.0"

from .errors import (
    ProofsheetError,
    ConfigError,
    ScanError,
    ClassificationError,
    MetadataError,
    ThumbnailError,
    VideoProbeError,
)
from .asset_kind import AssetKind, SUPPORTED_FORMATS, classify
from .asset_record import AssetRecord, AssetStatus
from .config import PipelineConfig
from .cancellation import CancellationToken
from .scanner import CandidatePath, Scanner
from .video_probe import VideoInfo, VideoProbe
from .metadata_extractor import MediaMetadata, MetadataExtractor
from .thumbnail_generator import ThumbnailGenerator
from .progress_events import ProgressEvent, Started, Completed, Failed, Finished, ProgressChannel
from .result_slots import ResultSlots
from .coordinator import Coordinator, CoordinatorResult
from .manifest_summary import ManifestSummary
from .manifest import Manifest
from .aggregator import Aggregator
from .pipeline import Pipeline
from .progress_stats import ProgressStats
from .pipeline_progress import PipelineProgress
from .reporter import Reporter

__all__ = [
    "ProofsheetError",
    "ConfigError",
    "ScanError",
    "ClassificationError",
    "MetadataError",
    "ThumbnailError",
    "VideoProbeError",
    "AssetKind",
    "SUPPORTED_FORMATS",
    "classify",
    "AssetRecord",
    "AssetStatus",
    "PipelineConfig",
    "CancellationToken",
    "CandidatePath",
    "Scanner",
    "VideoInfo",
    "VideoProbe",
    "MediaMetadata",
    "MetadataExtractor",
    "ThumbnailGenerator",
    "ProgressEvent",
    "Started",
    "Completed",
    "Failed",
    "Finished",
    "ProgressChannel",
    "ResultSlots",
    "Coordinator",
    "CoordinatorResult",
    "ManifestSummary",
    "Manifest",
    "Aggregator",
    "Pipeline",
    "ProgressStats",
    "PipelineProgress",
    "Reporter",
]
