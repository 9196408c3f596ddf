# SPDX-License-Identifier: MIT
"""Tests for the logging configuration module."""

import logging

import pytest

from zotero_md.logging_config import (
    DETAIL_LOGGER_NAME,
    LOG_FILE_NAME,
    STATUS_LOGGER_NAME,
    FlushingStreamHandler,
    get_detail_logger,
    get_status_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset the application loggers before and after each test."""

    def _clear():
        for name in (DETAIL_LOGGER_NAME, STATUS_LOGGER_NAME):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                handler.close()
            logger.handlers.clear()

    _clear()
    yield
    _clear()


def _flush(logger):
    for handler in logger.handlers:
        handler.flush()


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_creates_log_file(self, tmp_path):
        """Test that the log directory and file are created."""
        log_dir = tmp_path / "logs"
        setup_logging(log_dir)
        assert (log_dir / LOG_FILE_NAME).exists()

    def test_default_directory(self, monkeypatch, tmp_path):
        """Test that the data directory is used when none is given."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        setup_logging()
        assert (tmp_path / "zotero-md" / LOG_FILE_NAME).exists()

    def test_detail_logger_file_only(self, tmp_path):
        """Test the detail logger writes DEBUG records to the file only."""
        detail_logger, _ = setup_logging(tmp_path)

        assert detail_logger.level == logging.DEBUG
        assert detail_logger.propagate is False
        assert len(detail_logger.handlers) == 1
        assert isinstance(detail_logger.handlers[0], logging.FileHandler)

        detail_logger.debug("snapshot copied")
        _flush(detail_logger)
        assert "snapshot copied" in (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")

    def test_status_logger_console_and_file(self, tmp_path, capsys):
        """Test the status logger writes to stderr and the file."""
        _, status_logger = setup_logging(tmp_path)

        assert status_logger.level == logging.INFO
        assert any(isinstance(h, FlushingStreamHandler) for h in status_logger.handlers)

        status_logger.warning("No references found")
        _flush(status_logger)

        assert "No references found" in capsys.readouterr().err
        assert "No references found" in (tmp_path / LOG_FILE_NAME).read_text(
            encoding="utf-8"
        )

    def test_status_logger_skips_debug(self, tmp_path, capsys):
        """Test that debug records do not reach the console."""
        _, status_logger = setup_logging(tmp_path)
        status_logger.debug("internal detail")
        assert "internal detail" not in capsys.readouterr().err

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        """Test that calling setup twice does not duplicate handlers."""
        setup_logging(tmp_path)
        detail_logger, status_logger = setup_logging(tmp_path)
        assert len(detail_logger.handlers) == 1
        assert len(status_logger.handlers) == 2


class TestGetLoggers:
    """Test cases for the logger accessors."""

    def test_names(self):
        """Test that the accessors return the named loggers."""
        assert get_detail_logger().name == "zotero_md.detail"
        assert get_status_logger().name == "zotero_md.status"
        assert get_detail_logger() is logging.getLogger(DETAIL_LOGGER_NAME)
