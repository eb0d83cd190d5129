"""
VideoProbe - ffprobe/ffmpeg wrapper for video metadata and preview frames.
"""

import json
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Optional

import sh

from .errors import VideoProbeError


@dataclass(frozen=True)
class VideoInfo:
    """
    Metadata read from a video container.

    Attributes:
        duration: Duration in seconds
        width: Width of the first video stream
        height: Height of the first video stream
        codec: Codec name of the first video stream
        container: Container format name reported by ffprobe
    """
    duration: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    codec: Optional[str] = None
    container: Optional[str] = None


class VideoProbe:
    """
    Runs ffprobe and ffmpeg as one child process per call.

    Instances hold no per-file state, so a single probe is shared by all
    worker threads. Use detect() once at startup to find out whether the
    tools exist at all.
    """

    def __init__(
        self,
        ffprobe_bin: str,
        ffmpeg_bin: str,
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize probe.

        Args:
            ffprobe_bin: Resolved ffprobe executable
            ffmpeg_bin: Resolved ffmpeg executable
            timeout: Seconds allowed per call
            logger: Optional logger instance
        """
        self.ffprobe_bin = ffprobe_bin
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._ffprobe = sh.Command(ffprobe_bin)
        self._ffmpeg = sh.Command(ffmpeg_bin)

    @classmethod
    def detect(
        cls,
        ffprobe_bin: str = 'ffprobe',
        ffmpeg_bin: str = 'ffmpeg',
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None
    ) -> Optional['VideoProbe']:
        """
        Check once whether ffprobe and ffmpeg are usable.

        Returns:
            A VideoProbe, or None if either tool is missing or broken
        """
        logger = logger or logging.getLogger(__name__)
        resolved_probe = shutil.which(ffprobe_bin)
        resolved_mpeg = shutil.which(ffmpeg_bin)
        if not resolved_probe or not resolved_mpeg:
            missing = ffprobe_bin if not resolved_probe else ffmpeg_bin
            logger.info(f"Video tools unavailable ({missing} not found); videos will be degraded")
            return None

        try:
            output = str(sh.Command(resolved_probe)('-version', _timeout=10, _tty_out=False))
        except (sh.ErrorReturnCode, sh.TimeoutException, sh.CommandNotFound) as e:
            logger.warning(f"ffprobe failed to start: {e}")
            return None

        version = output.split('\n')[0].strip()
        logger.info(f"Video tools detected: {version}")
        return cls(resolved_probe, resolved_mpeg, timeout=timeout, logger=logger)

    def probe(self, path: str) -> VideoInfo:
        """
        Read duration, resolution and codec of a video.

        Raises:
            VideoProbeError: If ffprobe fails or its output cannot be parsed
        """
        try:
            output = str(self._ffprobe(
                '-v', 'quiet',
                '-print_format', 'json',
                '-show_streams', '-show_format',
                path,
                _timeout=self.timeout,
                _tty_out=False,
            ))
            data = json.loads(output)
        except sh.TimeoutException:
            raise VideoProbeError(f"ffprobe timeout after {self.timeout}s") from None
        except sh.ErrorReturnCode as e:
            raise VideoProbeError(f"ffprobe exited with status {e.exit_code}") from None
        except ValueError as e:
            raise VideoProbeError(f"Failed to parse ffprobe output: {e}") from None

        return self.parse_probe_output(data)

    @staticmethod
    def parse_probe_output(data: dict) -> VideoInfo:
        """Build VideoInfo from ffprobe's JSON document."""
        width = height = codec = None
        for stream in data.get('streams') or []:
            if stream.get('codec_type') == 'video':
                width = stream.get('width')
                height = stream.get('height')
                codec = stream.get('codec_name')
                break

        fmt = data.get('format') or {}
        duration = None
        try:
            if fmt.get('duration') is not None:
                duration = float(fmt['duration'])
        except (TypeError, ValueError):
            duration = None

        if width is None and duration is None:
            raise VideoProbeError("No video stream or duration found")

        return VideoInfo(
            duration=duration,
            width=int(width) if width is not None else None,
            height=int(height) if height is not None else None,
            codec=codec,
            container=fmt.get('format_name'),
        )

    def extract_frame(self, path: str, seconds: float, dest: str, size: int) -> None:
        """
        Write a single frame, scaled to fit size x size, to dest.

        Args:
            path: Video file path
            seconds: Timestamp to seek to
            dest: Output image path (extension selects the image format)
            size: Maximum dimension of the output frame

        Raises:
            VideoProbeError: If ffmpeg fails or writes no image
        """
        scale = f"scale={size}:{size}:force_original_aspect_ratio=decrease"
        try:
            self._ffmpeg(
                '-y', '-loglevel', 'error',
                '-ss', f"{seconds:.3f}",
                '-i', path,
                '-frames:v', '1',
                '-vf', scale,
                dest,
                _timeout=self.timeout,
                _tty_out=False,
            )
        except sh.TimeoutException:
            raise VideoProbeError(f"ffmpeg timeout after {self.timeout}s") from None
        except sh.ErrorReturnCode as e:
            raise VideoProbeError(f"ffmpeg exited with status {e.exit_code}") from None

        if not os.path.exists(dest) or os.path.getsize(dest) == 0:
            raise VideoProbeError(f"ffmpeg produced no frame at {seconds:.1f}s")
