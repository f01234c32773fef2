"""Tests for logging utilities."""
import argparse
import io
import logging
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(ROOT_DIR))

import playlist_curator.logging_utils as logging_utils
from playlist_curator.logging_utils import (
    ProgressLogger,
    RunSummary,
    add_logging_args,
    configure_logging,
    format_count,
    resolve_log_level,
    stage_timer,
    human_time,
    truncate_list,
)


@pytest.fixture()
def captured_logger():
    """A logger writing INFO and above into a string buffer."""
    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setLevel(logging.INFO)
    logger = logging.getLogger("test_logging_utils_capture")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield logger, buffer
    logger.removeHandler(handler)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_basic(self, monkeypatch):
        monkeypatch.setattr(logging_utils, "_logging_configured", False)
        configure_logging(level='DEBUG', force=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        tagged = [h for h in root.handlers if getattr(h, logging_utils._HANDLER_TAG, False)]
        assert len(tagged) == 1

    def test_configure_logging_with_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logging_utils, "_logging_configured", False)
        log_file = tmp_path / "logs" / "curator.log"
        configure_logging(level='INFO', log_file=str(log_file), force=True)
        try:
            logging.getLogger('test_file').info('Test message')
            for handler in logging.getLogger().handlers:
                handler.flush()
            assert 'Test message' in log_file.read_text(encoding='utf-8')
        finally:
            for handler in logging.getLogger().handlers[:]:
                if getattr(handler, 'baseFilename', None) == str(log_file):
                    handler.close()
                    logging.getLogger().removeHandler(handler)

    def test_configure_logging_idempotent(self, monkeypatch):
        monkeypatch.setattr(logging_utils, "_logging_configured", False)
        configure_logging(level='INFO', force=True)
        handler_count = len(logging.getLogger().handlers)

        # Second call should not add handlers
        configure_logging(level='DEBUG')
        assert len(logging.getLogger().handlers) == handler_count

    def test_env_level_override(self, monkeypatch):
        buf = io.StringIO()
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setattr(logging_utils.sys, "stdout", buf)
        configure_logging(level="DEBUG", force=True)

        logger = logging.getLogger("env_override_test")
        logger.info("info hidden")
        logger.warning("warn shown")
        assert "info hidden" not in buf.getvalue()
        assert "warn shown" in buf.getvalue()


class TestStageTimer:
    def test_stage_timer_completes_normally(self, captured_logger):
        logger, buffer = captured_logger
        with stage_timer("Test stage", logger=logger):
            pass
        assert 'Test stage completed' in buffer.getvalue()

    def test_stage_timer_completes_on_exception(self, captured_logger):
        logger, buffer = captured_logger
        with pytest.raises(ValueError):
            with stage_timer("Failing stage", logger=logger):
                raise ValueError("Test error")
        assert 'Failing stage completed' in buffer.getvalue()


class TestFormatting:
    def test_format_count(self):
        assert format_count(1, 'track') == '1 track'
        assert format_count(0, 'track') == '0 tracks'
        assert format_count(1000, 'track') == '1,000 tracks'
        assert format_count(5, 'category', 'categories') == '5 categories'

    def test_human_time(self):
        assert human_time(0.25) == "250ms"
        assert human_time(4.2) == "4.2s"
        assert human_time(185) == "3m 05s"
        assert human_time(-1) == "0ms"

    def test_truncate_list(self):
        assert truncate_list([]) == '(none)'
        assert truncate_list(['a', 'b']) == 'a, b'
        assert truncate_list(['a', 'b', 'c', 'd', 'e'], max_items=3) == 'a, b, c (+2 more)'
        assert truncate_list([1, 2, 3], format_fn=lambda x: f'#{x}') == '#1, #2, #3'


class TestProgressAndSummary:
    def test_progress_logger(self, captured_logger):
        logger, buffer = captured_logger
        progress = ProgressLogger(logger, total=4, label="Reading tags", unit="files", every_n=2)
        for _ in range(4):
            progress.update()
        progress.finish()

        output = buffer.getvalue()
        assert "Reading tags: 2/4 files" in output
        assert "Reading tags: 4/4 files" in output
        assert "Reading tags complete: 4 files in" in output

    def test_progress_logger_counts_skipped(self, captured_logger):
        logger, buffer = captured_logger
        progress = ProgressLogger(logger, total=3, label="Reading tags")
        progress.update()
        progress.update(skipped=True)
        progress.update()
        progress.finish()
        assert progress.skipped == 1
        assert "Reading tags complete: 3 files (1 skipped)" in buffer.getvalue()

    def test_run_summary(self, captured_logger):
        logger, buffer = captured_logger
        summary = RunSummary("Playlist Generation", logger)
        summary.update({"tracks": 120, "artists": 9})
        summary.increment("by_genres")
        summary.increment("by_genres")
        summary.add("ratio", 0.5)
        summary.log()

        output = buffer.getvalue()
        assert "PLAYLIST GENERATION SUMMARY" in output
        assert "Tracks: 120" in output
        assert "By Genres: 2" in output
        assert "Ratio: 0.50" in output
        assert summary.as_dict() == {"tracks": 120, "artists": 9, "by_genres": 2, "ratio": 0.5}


class TestLoggingArgs:
    def test_add_logging_args(self):
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        args = parser.parse_args(['--log-level', 'DEBUG', '--log-file', 'test.log'])
        assert args.log_level == 'DEBUG'
        assert args.log_file == 'test.log'

    def test_log_level_defaults_to_none(self):
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        assert parser.parse_args([]).log_level is None

    @pytest.mark.parametrize("debug,quiet,level,fallback,expected", [
        (False, False, None, "INFO", "INFO"),
        (False, False, None, "ERROR", "ERROR"),
        (True, True, "ERROR", "INFO", "DEBUG"),
        (False, True, "ERROR", "INFO", "WARNING"),
        (False, False, "ERROR", "DEBUG", "ERROR"),
    ])
    def test_resolve_log_level(self, debug, quiet, level, fallback, expected):
        args = argparse.Namespace(debug=debug, quiet=quiet, log_level=level)
        assert resolve_log_level(args, fallback) == expected
