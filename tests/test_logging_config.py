"""Tests for logging setup."""

import logging

import pytest

from src.logging_config import LOG_FILE_NAME, setup_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if getattr(handler, "_trade_referee_handler", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path, clean_root_logger):
        log_file = setup_logging("DEBUG", tmp_path)
        assert log_file == tmp_path / LOG_FILE_NAME
        assert log_file.exists()
        assert clean_root_logger.level == logging.DEBUG

    def test_idempotent(self, tmp_path, clean_root_logger):
        setup_logging("INFO", tmp_path)
        count = len(clean_root_logger.handlers)
        setup_logging("INFO", tmp_path)
        assert len(clean_root_logger.handlers) == count

    def test_records_reach_file(self, tmp_path, clean_root_logger):
        log_file = setup_logging("INFO", tmp_path)
        logging.getLogger("src.trade_engine").warning("lopsided trade flagged")
        for handler in clean_root_logger.handlers:
            handler.flush()
        assert "lopsided trade flagged" in log_file.read_text(encoding="utf-8")
