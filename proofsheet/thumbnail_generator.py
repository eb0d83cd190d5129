"""
ThumbnailGenerator - Writes bounded-size preview images for assets.
"""

import logging
import os
import tempfile
from typing import Optional

from PIL import Image, ImageOps

from .asset_kind import AssetKind
from .cancellation import CancellationToken
from .config import PipelineConfig
from .errors import ThumbnailError, VideoProbeError
from .metadata_extractor import IMAGE_ERRORS, MediaMetadata
from .video_probe import VideoProbe


class ThumbnailGenerator:
    """
    Generates JPEG thumbnails from images (Pillow) and videos (ffmpeg).

    Each thumbnail is written under a temporary name in the scratch
    directory and renamed into place only when complete, so a failed or
    cancelled generation never leaves a partial file behind.
    """

    def __init__(
        self,
        size: int = 300,
        quality: int = 85,
        auto_orient: bool = False,
        video_probe: Optional[VideoProbe] = None,
        seek_fraction: float = 0.1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            size: Maximum dimension for thumbnails (default: 300)
            quality: JPEG quality for output (default: 85)
            auto_orient: Apply EXIF orientation before resizing
            video_probe: Probe used for frame extraction (None = no video thumbnails)
            seek_fraction: Offset into a video, as a fraction of its duration
            logger: Optional logger instance
        """
        self.size = size
        self.quality = quality
        self.auto_orient = auto_orient
        self.video_probe = video_probe
        self.seek_fraction = seek_fraction
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        video_probe: Optional[VideoProbe] = None,
        logger: Optional[logging.Logger] = None
    ) -> 'ThumbnailGenerator':
        return cls(
            size=config.thumbnail_size,
            quality=config.thumbnail_quality,
            auto_orient=config.auto_orient,
            video_probe=video_probe,
            seek_fraction=config.seek_fraction,
            logger=logger,
        )

    @staticmethod
    def thumbnail_name(index: int) -> str:
        """Thumbnail filename for a scan-order index."""
        return f"{index:04d}.jpg"

    def generate(
        self,
        index: int,
        path: str,
        kind: AssetKind,
        metadata: MediaMetadata,
        scratch_dir: str,
        token: Optional[CancellationToken] = None
    ) -> str:
        """
        Generate the thumbnail for one asset.

        Args:
            index: Scan-order index (determines the output name)
            path: Source file path
            kind: Asset kind
            metadata: Metadata already read for the file
            scratch_dir: Directory receiving the thumbnail
            token: Optional cancellation token checked before decoding and
                before the file is put in place

        Returns:
            Path of the written thumbnail

        Raises:
            ThumbnailError: If the preview cannot be produced
            TaskCancelled: If the token was cancelled at a safe point
        """
        if token is not None:
            token.raise_if_cancelled()

        final_path = os.path.join(scratch_dir, self.thumbnail_name(index))
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{index:04d}-", suffix='.jpg', dir=scratch_dir
            )
            os.close(fd)
        except OSError as e:
            raise ThumbnailError(f"cannot write thumbnail: {e}") from e

        try:
            if kind is AssetKind.IMAGE:
                self._write_image_thumbnail(path, tmp_path)
            else:
                self._write_video_thumbnail(path, metadata.duration, tmp_path)

            if token is not None:
                token.raise_if_cancelled()
            os.replace(tmp_path, final_path)
        except OSError as e:
            self._discard(tmp_path)
            raise ThumbnailError(f"cannot write thumbnail: {e}") from e
        except BaseException:
            self._discard(tmp_path)
            raise

        self.logger.debug(f"Thumbnail written: {final_path}")
        return final_path

    def seek_position(self, duration: Optional[float]) -> float:
        """Timestamp of the preview frame for a video of the given duration."""
        if not duration or duration <= 0:
            return PipelineConfig.FALLBACK_SEEK_SECONDS
        return duration * self.seek_fraction

    def _write_image_thumbnail(self, path: str, dest: str) -> None:
        try:
            with Image.open(path) as img:
                # JPEG only: decode at a reduced scale instead of full resolution
                img.draft('RGB', (self.size, self.size))
                if self.auto_orient:
                    img = ImageOps.exif_transpose(img)
                img = self._convert_color_mode(img)
                img.thumbnail((self.size, self.size), Image.Resampling.LANCZOS)
                img.save(dest, format='JPEG', quality=self.quality, optimize=True)
        except IMAGE_ERRORS as e:
            raise ThumbnailError(f"cannot generate image thumbnail: {e}") from e

    def _write_video_thumbnail(self, path: str, duration: Optional[float], dest: str) -> None:
        if self.video_probe is None:
            raise ThumbnailError("video thumbnails unavailable")
        try:
            self.video_probe.extract_frame(path, self.seek_position(duration), dest, self.size)
        except VideoProbeError as e:
            raise ThumbnailError(f"cannot extract video frame: {e}") from e

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening transparency onto white."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img

    def _discard(self, tmp_path: str) -> None:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
