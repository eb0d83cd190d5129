"""
Exception hierarchy for proofsheet.

ScanError and ConfigError are fatal and stop a run before any worker is
dispatched. The remaining errors are per-item: they are caught inside the
worker task that raised them and recorded on the asset as a degraded status.
"""


class ProofsheetError(Exception):
    """Base exception for all proofsheet errors."""
    pass


class ConfigError(ProofsheetError):
    """Raised when the pipeline configuration is invalid."""
    pass


class ScanError(ProofsheetError):
    """Raised when the input directory cannot be scanned or holds no assets."""
    pass


class ClassificationError(ProofsheetError):
    """Raised when a path has no supported asset kind."""
    pass


class MetadataError(ProofsheetError):
    """Raised when dimensions or duration cannot be read from a file."""
    pass


class ThumbnailError(ProofsheetError):
    """Raised when a preview image cannot be produced or written."""
    pass


class VideoProbeError(ProofsheetError):
    """Raised when ffprobe or ffmpeg fails for a single file."""
    pass
