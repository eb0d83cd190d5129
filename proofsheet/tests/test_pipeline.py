"""Tests for Pipeline class."""

import os

import pytest
from PIL import Image

from proofsheet.cancellation import CancellationToken
from proofsheet.config import PipelineConfig
from proofsheet.errors import ConfigError, ScanError
from proofsheet.metadata_extractor import VIDEO_METADATA_UNAVAILABLE
from proofsheet.pipeline import Pipeline
from proofsheet.progress_events import Completed, Finished, Started


def content(manifest):
    """Manifest dict without the fields that change from run to run."""
    d = manifest.to_dict()
    d.pop('created_at')
    d.pop('scan_duration_seconds')
    return d


class TestPipeline:
    """Tests for Pipeline class."""

    def test_mixed_delivery(self, delivery_dir, tmp_path, fake_video_probe):
        """Test a mixed directory yields ordered records and correct totals."""
        thumbs = tmp_path / 'out' / 'thumbs'
        events = []

        manifest = Pipeline(video_probe=fake_video_probe, sink=events.append).run(
            str(delivery_dir), str(thumbs))

        a, b, c = manifest.records
        assert (a.filename, a.resolution, a.is_degraded) == ('a.jpg', '2000x3000', False)
        assert (b.filename, b.resolution, b.duration_label) == ('b.mp4', '1920x1080', '0:10')
        assert c.filename == 'c.png' and c.is_degraded

        summary = manifest.summary
        assert (summary.total_files, summary.image_count, summary.video_count) == (3, 2, 1)
        assert summary.degraded_count == 1
        assert not manifest.partial

        with Image.open(a.thumbnail_path) as img:
            assert img.size == (200, 300)
        assert os.path.basename(b.thumbnail_path) == '0001.jpg'
        assert sorted(os.listdir(thumbs)) == ['0000.jpg', '0001.jpg']

        assert isinstance(events[-1], Finished)
        assert events[-1].summary == summary
        assert sum(isinstance(e, Finished) for e in events) == 1

    def test_idempotent(self, delivery_dir, tmp_path, fake_video_probe):
        """Test two runs over an unchanged directory produce the same manifest."""
        thumbs = str(tmp_path / 'thumbs')
        pipeline = Pipeline(video_probe=fake_video_probe)

        first = pipeline.run(str(delivery_dir), thumbs)
        second = pipeline.run(str(delivery_dir), thumbs)

        assert content(first) == content(second)

    def test_worker_count_does_not_change_result(self, image_dir, tmp_path):
        """Test results are the same for one worker and many."""
        one = Pipeline(PipelineConfig(max_workers=1)).run(str(image_dir), str(tmp_path / 't1'))
        many = Pipeline(PipelineConfig(max_workers=8)).run(str(image_dir), str(tmp_path / 't2'))

        assert [r.filename for r in one.records] == [r.filename for r in many.records]
        assert [r.resolution for r in one.records] == [r.resolution for r in many.records]

    def test_no_video_tools(self, delivery_dir, tmp_path, mocker):
        """Test missing tools degrade videos without any probe call."""
        mocker.patch('proofsheet.video_probe.shutil.which', return_value=None)
        command = mocker.patch('proofsheet.video_probe.sh.Command')

        pipeline = Pipeline.with_detected_tools()
        manifest = pipeline.run(str(delivery_dir), str(tmp_path / 'thumbs'))

        assert not pipeline.video_available
        command.assert_not_called()
        video = manifest.records[1]
        assert video.is_degraded
        assert video.status.reason == VIDEO_METADATA_UNAVAILABLE
        assert video.resolution is None
        assert manifest.records[0].thumbnail_path is not None

    def test_detected_tools_are_shared(self, mocker, fake_video_probe):
        """Test with_detected_tools passes the detected probe through."""
        detect = mocker.patch('proofsheet.pipeline.VideoProbe.detect', return_value=fake_video_probe)
        config = PipelineConfig(ffprobe_bin='/opt/ffprobe', ffmpeg_bin='/opt/ffmpeg', probe_timeout=3)

        pipeline = Pipeline.with_detected_tools(config)

        assert pipeline.video_probe is fake_video_probe
        detect.assert_called_once_with(
            ffprobe_bin='/opt/ffprobe', ffmpeg_bin='/opt/ffmpeg', timeout=3, logger=None)

    def test_scan_error_is_fatal(self, tmp_path):
        """Test a missing directory stops the run before any work."""
        events = []

        with pytest.raises(ScanError):
            Pipeline(sink=events.append).run(str(tmp_path / 'missing'), str(tmp_path / 'thumbs'))

        assert events == []
        assert not (tmp_path / 'thumbs').exists()

    def test_invalid_config(self, image_dir, tmp_path):
        """Test invalid configuration raises ConfigError."""
        with pytest.raises(ConfigError, match='Thumbnail size'):
            Pipeline(PipelineConfig(thumbnail_size=1)).run(str(image_dir), str(tmp_path / 'thumbs'))

    def test_cancelled_run_is_partial(self, image_dir, tmp_path):
        """Test cancellation produces a partial manifest and Finished(partial=True)."""
        token = CancellationToken()
        events = []

        def sink(event):
            events.append(event)
            if isinstance(event, Started):
                token.cancel()

        thumbs = tmp_path / 'thumbs'
        manifest = Pipeline(PipelineConfig(max_workers=1), sink=sink, token=token).run(
            str(image_dir), str(thumbs))

        assert manifest.partial
        assert manifest.expected_total == 5
        assert manifest.total_files < 5
        assert events[-1] == Finished(manifest.summary, partial=True)
        assert [f for f in os.listdir(thumbs) if not f.endswith('.jpg') or f.startswith('.')] == []

    def test_cancel_after_completions_keeps_finished_records(self, image_dir, tmp_path):
        """Test records finished before cancellation stay valid and the rest stay empty."""
        token = CancellationToken()
        completed = []

        def sink(event):
            if isinstance(event, Completed):
                completed.append(event.index)
                if len(completed) == 2:
                    token.cancel()

        thumbs = tmp_path / 'thumbs'
        manifest = Pipeline(PipelineConfig(max_workers=1), sink=sink, token=token).run(
            str(image_dir), str(thumbs))

        assert manifest.partial
        assert manifest.expected_total == 5
        assert [r.index for r in manifest.records] == [0, 1]
        assert [r.filename for r in manifest.records] == ['a.jpg', 'b.jpg']
        assert all(not r.is_degraded and r.width == 120 for r in manifest.records)
        assert [r.thumbnail_path for r in manifest.records] == [
            str(thumbs / '0000.jpg'), str(thumbs / '0001.jpg')]
        assert sorted(os.listdir(thumbs)) == ['0000.jpg', '0001.jpg']
        assert manifest.summary.total_files == 2

    def test_prescanned_candidates(self, image_dir, tmp_path):
        """Test run accepts the result of an earlier scan."""
        pipeline = Pipeline(PipelineConfig(generate_thumbnails=False))
        candidates = pipeline.scan(str(image_dir))

        manifest = pipeline.run(str(image_dir), str(tmp_path / 'thumbs'), candidates)

        assert [r.filename for r in manifest.records] == [c.filename for c in candidates]

    def test_manifest_only(self, delivery_dir, tmp_path, fake_video_probe):
        """Test manifest-only runs write no thumbnails and create no directory."""
        thumbs = tmp_path / 'thumbs'
        config = PipelineConfig(generate_thumbnails=False)

        manifest = Pipeline(config, video_probe=fake_video_probe).run(str(delivery_dir), str(thumbs))

        assert all(r.thumbnail_path is None for r in manifest.records)
        assert manifest.summary.degraded_count == 1
        assert not thumbs.exists()
