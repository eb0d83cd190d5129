"""Tests for PipelineProgress class."""

from proofsheet.manifest_summary import ManifestSummary
from proofsheet.pipeline_progress import PipelineProgress
from proofsheet.progress_events import Completed, Failed, Finished, Started


class TestPipelineProgress:
    """Tests for PipelineProgress class."""

    def test_init_defaults(self, logger):
        """Test default initialization."""
        progress = PipelineProgress(logger=logger)

        assert progress.show_files is False
        assert progress.log_interval == 100
        assert progress.finished is None

    def test_completed_show_files(self, logger, sample_image_record, capsys):
        """Test show_files output for a ready asset."""
        progress = PipelineProgress(show_files=True, logger=logger)

        progress(Completed(0, sample_image_record))

        captured = capsys.readouterr()
        assert '[OK]' in captured.out
        assert 'a.jpg' in captured.out
        assert progress.stats.ready == 1

    def test_degraded_show_files(self, logger, sample_degraded_record, capsys):
        """Test show_files output for a degraded asset."""
        progress = PipelineProgress(show_files=True, logger=logger)

        progress(Completed(2, sample_degraded_record))

        captured = capsys.readouterr()
        assert '[DEGRADED]' in captured.out
        assert 'cannot read image header' in captured.out
        assert progress.stats.degraded == 1

    def test_failed_show_files(self, logger, capsys):
        """Test show_files output for a failed task."""
        progress = PipelineProgress(show_files=True, logger=logger)

        progress(Failed(1, 'b.jpg', 'RuntimeError: boom'))

        captured = capsys.readouterr()
        assert '[ERROR] b.jpg -> RuntimeError: boom' in captured.out
        assert progress.stats.error_details == ['b.jpg: RuntimeError: boom']

    def test_quiet_without_show_files(self, logger, sample_image_record, capsys):
        """Test nothing is printed unless show_files is set."""
        progress = PipelineProgress(logger=logger)

        progress(Completed(0, sample_image_record))

        assert capsys.readouterr().out == ''

    def test_out_of_order_events(self, logger, sample_image_record, sample_video_record, sample_degraded_record):
        """Test events arriving in any index order are all counted."""
        progress = PipelineProgress(logger=logger)

        progress(Started(2, 'c.png'))
        progress(Completed(2, sample_degraded_record))
        progress(Started(0, 'a.jpg'))
        progress(Started(1, 'b.mp4'))
        progress(Completed(1, sample_video_record))
        progress(Completed(0, sample_image_record))

        assert progress.stats.completed_count == 3
        assert progress.stats.started == 3
        assert progress.stats.total == 3

    def test_duplicate_index_ignored(self, logger, sample_image_record):
        """Test a repeated index is only counted once."""
        progress = PipelineProgress(logger=logger)

        progress(Completed(0, sample_image_record))
        progress(Completed(0, sample_image_record))

        assert progress.stats.ready == 1

    def test_periodic_log(self, logger, sample_image_record, caplog):
        """Test a progress line is logged every log_interval assets."""
        caplog.set_level('INFO', logger='test')
        progress = PipelineProgress(total=4, log_interval=2, logger=logger)

        progress(Completed(0, sample_image_record))
        assert progress.last_logged == 0
        progress(Failed(1, 'b.jpg', 'boom'))

        assert progress.last_logged == 2
        assert 'Progress: 2/4' in caplog.text

    def test_finished(self, logger, caplog):
        """Test the final event is stored and logged."""
        caplog.set_level('INFO', logger='test')
        progress = PipelineProgress(logger=logger)
        event = Finished(ManifestSummary(total_files=3, image_count=2, video_count=1), partial=True)

        progress(event)

        assert progress.finished is event
        assert 'Run cancelled: 3 assets' in caplog.text
