"""
Pytest fixtures for proofsheet tests.
"""

import threading

import pytest


class FakeVideoProbe:
    """Stand-in for VideoProbe that never runs ffprobe/ffmpeg and counts calls."""

    def __init__(self, duration=10.4, width=1920, height=1080, codec='h264', fail_paths=()):
        self.duration = duration
        self.width = width
        self.height = height
        self.codec = codec
        self.fail_paths = set(fail_paths)
        self.probe_calls = 0
        self.frame_calls = []
        self._lock = threading.Lock()

    def probe(self, path):
        from proofsheet.errors import VideoProbeError
        from proofsheet.video_probe import VideoInfo

        with self._lock:
            self.probe_calls += 1
        if path in self.fail_paths:
            raise VideoProbeError("ffprobe exited with status 1")
        return VideoInfo(
            duration=self.duration,
            width=self.width,
            height=self.height,
            codec=self.codec,
            container='mov,mp4,m4a,3gp,3g2,mj2',
        )

    def extract_frame(self, path, seconds, dest, size):
        from PIL import Image

        with self._lock:
            self.frame_calls.append((path, seconds))
        Image.new('RGB', (size, size * 9 // 16), color='green').save(dest, format='JPEG')


def write_image(path, size=(100, 100), fmt='JPEG', color='red', orientation=None, mode='RGB'):
    """Write a small image file with Pillow, optionally tagged with an EXIF orientation."""
    from PIL import Image

    img = Image.new(mode, size, color=color)
    kwargs = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[0x0112] = orientation
        kwargs['exif'] = exif
    img.save(str(path), format=fmt, **kwargs)
    return str(path)


@pytest.fixture
def make_image():
    """Fixture providing the image writer."""
    return write_image


@pytest.fixture
def make_video_probe():
    """Fixture providing the FakeVideoProbe class for custom settings."""
    return FakeVideoProbe


@pytest.fixture
def fake_video_probe():
    """Fixture providing a fake video probe (10.4s, 1920x1080 h264)."""
    return FakeVideoProbe()


@pytest.fixture
def delivery_dir(tmp_path):
    """
    Fixture providing a delivery directory with a.jpg (2000x3000),
    b.mp4 (placeholder bytes) and c.png (corrupt).
    """
    root = tmp_path / "delivery"
    root.mkdir()
    write_image(root / "a.jpg", size=(2000, 3000))
    (root / "b.mp4").write_bytes(b'\x00\x00\x00\x18ftypmp42' + b'\x00' * 1000)
    (root / "c.png").write_bytes(b'this is not a png file')
    return root


@pytest.fixture
def image_dir(tmp_path):
    """Fixture providing a directory of five small JPEG images."""
    root = tmp_path / "images"
    root.mkdir()
    for name in ['e.jpg', 'b.jpg', 'd.jpg', 'a.jpg', 'c.jpg']:
        write_image(root / name, size=(120, 80))
    return root


@pytest.fixture
def scratch_dir(tmp_path):
    """Fixture providing an empty thumbnail directory."""
    path = tmp_path / "thumbs"
    path.mkdir()
    return path


@pytest.fixture
def sample_image_record():
    """Fixture providing a ready image record."""
    from proofsheet.asset_kind import AssetKind
    from proofsheet.asset_record import AssetRecord

    return AssetRecord(
        index=0,
        filename='a.jpg',
        source_path='/delivery/a.jpg',
        kind=AssetKind.IMAGE,
        format='JPG',
        file_size=1536000,
        width=2000,
        height=3000,
        color_space='sRGB',
        thumbnail_path='/thumbs/0000.jpg',
    )


@pytest.fixture
def sample_video_record():
    """Fixture providing a ready video record."""
    from proofsheet.asset_kind import AssetKind
    from proofsheet.asset_record import AssetRecord

    return AssetRecord(
        index=1,
        filename='b.mp4',
        source_path='/delivery/b.mp4',
        kind=AssetKind.VIDEO,
        format='MP4',
        file_size=52428800,
        width=1920,
        height=1080,
        duration=10.4,
        codec='h264',
        thumbnail_path='/thumbs/0001.jpg',
    )


@pytest.fixture
def sample_degraded_record():
    """Fixture providing a degraded image record."""
    from proofsheet.asset_kind import AssetKind
    from proofsheet.asset_record import AssetRecord, AssetStatus

    return AssetRecord(
        index=2,
        filename='c.png',
        source_path='/delivery/c.png',
        kind=AssetKind.IMAGE,
        format='PNG',
        file_size=22,
        status=AssetStatus.degraded('cannot read image header: bad file'),
    )


@pytest.fixture
def sample_manifest(sample_image_record, sample_video_record, sample_degraded_record):
    """Fixture providing a manifest with one image, one video and one degraded image."""
    from proofsheet.aggregator import Aggregator
    from proofsheet.manifest import Manifest

    records = [sample_image_record, sample_video_record, sample_degraded_record]
    return Manifest.create_new(
        root='/delivery',
        records=records,
        summary=Aggregator.summarize(records),
        scan_duration_seconds=2.5,
    )


@pytest.fixture
def partial_manifest(sample_image_record):
    """Fixture providing a manifest from a cancelled run."""
    from proofsheet.aggregator import Aggregator
    from proofsheet.manifest import Manifest

    records = [sample_image_record]
    return Manifest.create_new(
        root='/delivery',
        records=records,
        summary=Aggregator.summarize(records),
        expected_total=3,
        partial=True,
    )


@pytest.fixture
def temp_manifest_file(sample_manifest, tmp_path):
    """Fixture providing a temporary manifest file."""
    filepath = tmp_path / "test_manifest.json"
    sample_manifest.save(str(filepath))
    return str(filepath)


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
