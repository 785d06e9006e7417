"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from track_insight.logging_config import get_logger, setup_logging
from track_insight.store import RecordStore


class TestSetupLogging:
    def test_default_level(self):
        assert setup_logging().level == logging.WARNING

    def test_verbose(self):
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_quiet_wins(self):
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR

    def test_rich_handler_installed(self):
        setup_logging()
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logging(verbose=True, log_file=str(log_file))
        get_logger("queries").debug("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "track_insight.queries" in log_file.read_text()


class TestGetLogger:
    def test_root(self):
        assert get_logger().name == "track_insight"

    def test_prefixed(self):
        assert get_logger("store").name == "track_insight.store"
        assert get_logger("track_insight.store").name == "track_insight.store"

    def test_library_modules_log_under_package(self, caplog):
        caplog.set_level(logging.INFO, logger="track_insight")
        RecordStore.load([{"artist": "A", "track": "T"}])
        assert any(r.name == "track_insight.store" for r in caplog.records)
