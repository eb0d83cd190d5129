"""
MetadataExtractor - Reads resolution, duration and orientation per asset kind.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from .asset_kind import AssetKind
from .config import PipelineConfig
from .errors import MetadataError, VideoProbeError
from .video_probe import VideoProbe

# EXIF tags
ORIENTATION_TAG = 0x0112
EXIF_IFD_POINTER = 0x8769
COLOR_SPACE_TAG = 0xA001

COLOR_SPACES = {
    1: 'sRGB',
    2: 'Adobe RGB',
    0xFFFF: 'Uncalibrated',
}

# Orientations 5-8 store the image rotated by 90 degrees
TRANSPOSED_ORIENTATIONS = (5, 6, 7, 8)

VIDEO_METADATA_UNAVAILABLE = "video metadata unavailable"

# Errors Pillow raises for unreadable or malformed headers
IMAGE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


@dataclass(frozen=True)
class MediaMetadata:
    """
    Metadata read from a single file.

    Attributes:
        width: Width in pixels (displayed width when auto-orient is on)
        height: Height in pixels (displayed height when auto-orient is on)
        orientation: EXIF orientation tag (1 = normal)
        color_space: EXIF color space name (images)
        duration: Duration in seconds (videos)
        codec: Video codec name (videos)
    """
    width: Optional[int] = None
    height: Optional[int] = None
    orientation: int = 1
    color_space: Optional[str] = None
    duration: Optional[float] = None
    codec: Optional[str] = None


class MetadataExtractor:
    """
    Extracts metadata for images (Pillow header read) and videos (ffprobe).

    Image dimensions come from the header only; the pixel data is never
    decoded here. Video extraction requires a VideoProbe, which is None when
    the startup capability check failed.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        video_probe: Optional[VideoProbe] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config or PipelineConfig()
        self.video_probe = video_probe
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, path: str, kind: AssetKind) -> MediaMetadata:
        """
        Extract metadata for a file of the given kind.

        Raises:
            MetadataError: If the file cannot be read or probed
        """
        if kind is AssetKind.IMAGE:
            return self.extract_image(path)
        return self.extract_video(path)

    def extract_image(self, path: str) -> MediaMetadata:
        """Read dimensions, orientation and color space from an image header."""
        try:
            with Image.open(path) as img:
                width, height = img.size
                exif = img.getexif()
                orientation = exif.get(ORIENTATION_TAG, 1)
                color_code = exif.get_ifd(EXIF_IFD_POINTER).get(COLOR_SPACE_TAG)
        except IMAGE_ERRORS as e:
            raise MetadataError(f"cannot read image header: {e}") from e

        if not isinstance(orientation, int) or not 1 <= orientation <= 8:
            orientation = 1

        if self.config.auto_orient and orientation in TRANSPOSED_ORIENTATIONS:
            width, height = height, width

        return MediaMetadata(
            width=width,
            height=height,
            orientation=orientation,
            color_space=COLOR_SPACES.get(color_code) if color_code is not None else None,
        )

    def extract_video(self, path: str) -> MediaMetadata:
        """Read duration, resolution and codec through ffprobe."""
        if self.video_probe is None:
            raise MetadataError(VIDEO_METADATA_UNAVAILABLE)

        try:
            info = self.video_probe.probe(path)
        except VideoProbeError as e:
            raise MetadataError(f"video probe failed: {e}") from e

        return MediaMetadata(
            width=info.width,
            height=info.height,
            duration=info.duration,
            codec=info.codec,
        )
