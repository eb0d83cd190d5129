"""
AssetRecord - Manifest entry for a single delivered asset.
"""

from dataclasses import dataclass
from typing import Optional

from .asset_kind import AssetKind


def format_bytes(bytes_val: Optional[float]) -> str:
    """Format bytes as human-readable string."""
    if bytes_val is None:
        return "unknown"
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_val < 1024:
            return f"{bytes_val:.1f} {unit}"
        bytes_val /= 1024
    return f"{bytes_val:.1f} PB"


def format_duration(seconds: Optional[float]) -> Optional[str]:
    """Format a duration in seconds as m:ss, e.g. 10.4 -> '0:10'."""
    if seconds is None:
        return None
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


@dataclass(frozen=True)
class AssetStatus:
    """
    Processing status of an asset.

    Attributes:
        state: 'ready' or 'degraded'
        reason: Why enrichment failed (degraded only)
    """
    state: str
    reason: Optional[str] = None

    READY = 'ready'
    DEGRADED = 'degraded'

    @classmethod
    def ready(cls) -> 'AssetStatus':
        return cls(cls.READY)

    @classmethod
    def degraded(cls, reason: str) -> 'AssetStatus':
        return cls(cls.DEGRADED, reason)

    @property
    def is_degraded(self) -> bool:
        return self.state == self.DEGRADED

    def __str__(self) -> str:
        if self.is_degraded:
            return f"Degraded({self.reason})"
        return "Ready"


@dataclass(frozen=True)
class AssetRecord:
    """
    Record for a single asset, published once by its worker task.

    Attributes:
        index: Scan-order index of the candidate this record belongs to
        filename: Base filename
        source_path: Absolute path of the original file
        kind: Image or Video (None if the extension could not be classified)
        format: Format label (uppercase extension)
        file_size: Size of the original in bytes
        width: Pixel width, if known
        height: Pixel height, if known
        duration: Duration in seconds (video only)
        codec: Codec name of the first video stream (video only)
        color_space: EXIF color space (image only)
        thumbnail_path: Path to the generated preview, if any
        status: Ready, or Degraded with a reason
    """
    index: int
    filename: str
    source_path: str
    kind: Optional[AssetKind]
    format: str
    file_size: int
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    codec: Optional[str] = None
    color_space: Optional[str] = None
    thumbnail_path: Optional[str] = None
    status: AssetStatus = AssetStatus.ready()

    @property
    def resolution(self) -> Optional[str]:
        """Resolution as 'WxH', or None when unknown."""
        if self.width is None or self.height is None:
            return None
        return f"{self.width}x{self.height}"

    @property
    def human_size(self) -> str:
        return format_bytes(self.file_size)

    @property
    def duration_label(self) -> Optional[str]:
        return format_duration(self.duration)

    @property
    def is_degraded(self) -> bool:
        return self.status.is_degraded

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        The first five keys are the contract read by the rendering stage.
        """
        return {
            'filename': self.filename,
            'kind': str(self.kind) if self.kind else None,
            'resolution': self.resolution,
            'format': self.format,
            'human_size': self.human_size,
            'thumbnail': self.thumbnail_path,
            'color_space': self.color_space,
            'duration': self.duration_label,
            'status': self.status.state,
            'reason': self.status.reason,
            'index': self.index,
            'source_path': self.source_path,
            'file_size': self.file_size,
            'width': self.width,
            'height': self.height,
            'duration_seconds': self.duration,
            'codec': self.codec,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AssetRecord':
        """Create from dictionary."""
        return cls(
            index=data['index'],
            filename=data['filename'],
            source_path=data['source_path'],
            kind=AssetKind(data['kind']) if data.get('kind') else None,
            format=data['format'],
            file_size=data['file_size'],
            width=data.get('width'),
            height=data.get('height'),
            duration=data.get('duration_seconds'),
            codec=data.get('codec'),
            color_space=data.get('color_space'),
            thumbnail_path=data.get('thumbnail'),
            status=AssetStatus(data.get('status', AssetStatus.READY), data.get('reason')),
        )

    def format_status(self) -> str:
        """
        Format a one-line status string for verbatim output.

        Returns:
            Status string like "a.jpg - Image 2000x3000 (1.2 MB) READY"
        """
        resolution = self.resolution or "-"
        line = f"{self.filename} - {self.kind or 'Unknown'} {resolution} ({self.human_size})"
        if self.is_degraded:
            return f"{line} DEGRADED: {self.status.reason}"
        return f"{line} READY"
