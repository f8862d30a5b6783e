"""Tests for the shared package logger."""

import logging

from race_board.config import Config
from race_board.database.database import Database
from race_board.utils.logger import PACKAGE_LOGGER, setup_logger


class TestSetupLogger:
    def setup_method(self):
        self.package_logger = logging.getLogger(PACKAGE_LOGGER)

    def _fresh_handlers(self, monkeypatch, tmp_path):
        monkeypatch.setattr(Config, "LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setattr(self.package_logger, "handlers", [])

    def _close_handlers(self):
        for handler in self.package_logger.handlers:
            handler.close()

    def test_writes_daily_file_under_log_dir(self, monkeypatch, tmp_path):
        self._fresh_handlers(monkeypatch, tmp_path)
        try:
            setup_logger("race_board.tests").info("roster loaded")
            files = list((tmp_path / "logs").glob("race_board_*.log"))
        finally:
            self._close_handlers()

        assert len(files) == 1
        assert "race_board.tests - INFO - roster loaded" in files[0].read_text(encoding="utf-8")

    def test_module_loggers_share_package_handlers(self, monkeypatch, tmp_path):
        self._fresh_handlers(monkeypatch, tmp_path)
        try:
            setup_logger("race_board.database.database")
            setup_logger("race_board.main")
            handler_count = len(self.package_logger.handlers)
            logging.getLogger("race_board.services.reveal").debug("reveal gated")
            log_file = next((tmp_path / "logs").glob("race_board_*.log"))
        finally:
            self._close_handlers()

        assert handler_count == 2
        assert "reveal gated" in log_file.read_text(encoding="utf-8")

    def test_main_module_is_named_under_package(self, monkeypatch, tmp_path):
        self._fresh_handlers(monkeypatch, tmp_path)
        try:
            assert setup_logger("__main__").name == "race_board.main"
        finally:
            self._close_handlers()


class TestDatabaseSurface:
    def test_sessions_come_from_get_session_only(self):
        db = Database("sqlite:///:memory:")
        assert hasattr(db, "get_session")
        assert not hasattr(db, "session_factory")
