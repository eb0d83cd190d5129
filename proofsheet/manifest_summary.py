"""
ManifestSummary - Totals over the records of a manifest.
"""

from dataclasses import dataclass, asdict

from .asset_record import format_bytes


@dataclass(frozen=True)
class ManifestSummary:
    """
    Summary counts for a manifest.

    Attributes:
        total_files: Number of records
        total_bytes: Sum of original file sizes
        image_count: Number of image records
        video_count: Number of video records
        degraded_count: Number of records with a degraded status
    """
    total_files: int = 0
    total_bytes: int = 0
    image_count: int = 0
    video_count: int = 0
    degraded_count: int = 0

    @property
    def total_size(self) -> str:
        """Human-readable total size."""
        return format_bytes(self.total_bytes)

    @property
    def ready_count(self) -> int:
        return self.total_files - self.degraded_count

    def to_dict(self) -> dict:
        """Convert to dictionary; the first four keys are the rendering contract."""
        return {
            'total_files': self.total_files,
            'total_size': self.total_size,
            'image_count': self.image_count,
            'video_count': self.video_count,
            'total_bytes': self.total_bytes,
            'degraded_count': self.degraded_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ManifestSummary':
        """Create from dictionary."""
        fields = asdict(cls())
        return cls(**{key: data[key] for key in fields if key in data})
