"""
PipelineConfig - Settings for a proofsheet run.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from .errors import ConfigError


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer (got {value!r})") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number (got {value!r})") from None


@dataclass
class PipelineConfig:
    """
    Configuration for scanning and processing a delivery directory.

    Attributes:
        auto_orient: Apply the EXIF orientation tag before resizing
        thumbnail_size: Maximum dimension for thumbnails
        thumbnail_quality: JPEG quality for thumbnails
        generate_thumbnails: If False, only metadata is collected
        max_workers: Cap on the worker pool (None = all CPUs)
        recursive: Descend into subdirectories (symlinked dirs are not followed)
        include_hidden: Include dot-files and dot-directories
        ffprobe_bin: ffprobe binary name or path
        ffmpeg_bin: ffmpeg binary name or path
        probe_timeout: Seconds allowed for each ffprobe/ffmpeg call
        seek_fraction: Offset into a video, as a fraction of its duration,
            at which the preview frame is taken
    """
    auto_orient: bool = False
    thumbnail_size: int = 300
    thumbnail_quality: int = 85
    generate_thumbnails: bool = True
    max_workers: Optional[int] = None
    recursive: bool = False
    include_hidden: bool = False
    ffprobe_bin: str = 'ffprobe'
    ffmpeg_bin: str = 'ffmpeg'
    probe_timeout: float = 30.0
    seek_fraction: float = 0.1

    # Seek position for videos whose duration is unknown
    FALLBACK_SEEK_SECONDS = 1.0

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """
        Create configuration from PROOFSHEET_* environment variables.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        defaults = cls()
        return cls(
            auto_orient=_env_bool('PROOFSHEET_AUTO_ORIENT', defaults.auto_orient),
            thumbnail_size=_env_int('PROOFSHEET_THUMBNAIL_SIZE') or defaults.thumbnail_size,
            thumbnail_quality=_env_int('PROOFSHEET_THUMBNAIL_QUALITY') or defaults.thumbnail_quality,
            max_workers=_env_int('PROOFSHEET_MAX_WORKERS'),
            recursive=_env_bool('PROOFSHEET_RECURSIVE', defaults.recursive),
            include_hidden=_env_bool('PROOFSHEET_INCLUDE_HIDDEN', defaults.include_hidden),
            ffprobe_bin=os.getenv('PROOFSHEET_FFPROBE', defaults.ffprobe_bin),
            ffmpeg_bin=os.getenv('PROOFSHEET_FFMPEG', defaults.ffmpeg_bin),
            probe_timeout=_env_float('PROOFSHEET_PROBE_TIMEOUT', defaults.probe_timeout),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        if self.thumbnail_size < 16:
            errors.append(f"Thumbnail size must be at least 16px (got {self.thumbnail_size})")
        if not 1 <= self.thumbnail_quality <= 95:
            errors.append(f"Thumbnail quality must be between 1 and 95 (got {self.thumbnail_quality})")
        if self.max_workers is not None and self.max_workers < 1:
            errors.append(f"Worker cap must be at least 1 (got {self.max_workers})")
        if self.probe_timeout <= 0:
            errors.append("Probe timeout must be positive")
        if not 0.0 < self.seek_fraction < 1.0:
            errors.append(f"Seek fraction must be in (0, 1) (got {self.seek_fraction})")
        return errors

    def worker_count(self, candidates: int) -> int:
        """Effective pool size for a run over the given number of candidates."""
        available = os.cpu_count() or 1
        workers = min(self.max_workers, available) if self.max_workers else available
        return max(1, min(workers, candidates))
