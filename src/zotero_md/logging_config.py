# SPDX-License-Identifier: MIT
"""Logging configuration for zotero-md.

This module provides a dual-logger system:
1. Detail Logger: Captures all debug/info logs to file only (for troubleshooting)
2. Status Logger: Outputs user-facing progress/status to console (stderr) and file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Logger names
DETAIL_LOGGER_NAME = "zotero_md.detail"
STATUS_LOGGER_NAME = "zotero_md.status"

LOG_FILE_NAME = "zotero-md.log"


class FlushingStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler that flushes after every record."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        # Only flush if the stream is not closed
        if self.stream and not self.stream.closed:
            self.flush()


def setup_logging(log_dir: Path | None = None) -> tuple[logging.Logger, logging.Logger]:
    """Configure dual logging system with detail and status loggers.

    Detail Logger:
        - Captures all DEBUG and above messages
        - Writes to file only
        - Used for SQL timing, snapshot copies, cache hits and misses

    Status Logger:
        - Outputs user-facing progress and status information
        - Writes to both stderr (console) and file
        - Used for warnings such as an empty library or a load already running

    Args:
        log_dir: Directory for log file. If None, uses the application data directory

    Returns:
        Tuple of (detail_logger, status_logger)
    """
    if log_dir is None:
        # Local import to avoid circular dependency (config -> logging_config)
        from .config import default_data_dir

        log_dir = default_data_dir()

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    # Create shared file handler for both loggers
    # Mode 'w' overwrites the file each time
    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # ===== Detail Logger Setup =====
    detail_logger = logging.getLogger(DETAIL_LOGGER_NAME)
    detail_logger.setLevel(logging.DEBUG)
    for handler in detail_logger.handlers[:]:
        handler.close()
    detail_logger.handlers.clear()
    detail_logger.addHandler(file_handler)
    detail_logger.propagate = False  # Don't propagate to root logger

    # ===== Status Logger Setup =====
    status_logger = logging.getLogger(STATUS_LOGGER_NAME)
    status_logger.setLevel(logging.INFO)
    for handler in status_logger.handlers[:]:
        handler.close()
    status_logger.handlers.clear()

    console_handler = FlushingStreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    status_logger.addHandler(console_handler)
    status_logger.addHandler(file_handler)
    status_logger.propagate = False  # Don't propagate to root logger

    detail_logger.info(f"Logging initialized. Log file: {log_file}")

    return detail_logger, status_logger


def get_detail_logger() -> logging.Logger:
    """Get the detail logger for verbose technical logging.

    Use this logger for:
    - Debug information
    - Query text and timing
    - Snapshot and cache file activity
    - Internal state changes

    Returns:
        The detail logger instance
    """
    return logging.getLogger(DETAIL_LOGGER_NAME)


def get_status_logger() -> logging.Logger:
    """Get the status logger for user-facing progress and status.

    Use this logger for:
    - Load progress and outcome
    - User-facing warnings
    - Error messages

    Returns:
        The status logger instance
    """
    return logging.getLogger(STATUS_LOGGER_NAME)
