# SPDX-License-Identifier: MIT
"""Durable cache file holding the last successful load."""

import contextlib
import json
import os
from pathlib import Path

from pydantic import ValidationError

from ..exceptions import CacheReadError, CacheWriteError
from ..logging_config import get_detail_logger, get_status_logger
from ..models import CacheEntry


detail_logger = get_detail_logger()
status_logger = get_status_logger()


class CacheFileStore:
    """Reads and writes `CacheEntry` objects as JSON."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> CacheEntry:
        """Read the cache file.

        Raises:
            CacheReadError: If the file is missing, unreadable or malformed
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise CacheReadError(f"Cannot read cache file: {e}", self.path) from e
        except UnicodeDecodeError as e:
            raise CacheReadError(f"Malformed cache file: {e}", self.path) from e

        try:
            return CacheEntry.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CacheReadError(f"Malformed cache file: {e}", self.path) from e

    def read(self) -> CacheEntry | None:
        """Read the cache file, treating any failure as a cache miss."""
        try:
            entry = self.load()
        except CacheReadError as e:
            detail_logger.debug(f"Cache file unavailable: {e}")
            return None
        detail_logger.debug(
            f"Read {len(entry.references)} references from {self.path}"
        )
        return entry

    def save(self, entry: CacheEntry) -> None:
        """Write the cache file atomically.

        Raises:
            CacheWriteError: If the directory or file cannot be written
        """
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(entry.model_dump_json(), encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise CacheWriteError(f"Failed to write cache file: {e}", self.path) from e

    def write(self, entry: CacheEntry) -> bool:
        """Write the cache file, logging instead of raising on failure."""
        try:
            self.save(entry)
        except CacheWriteError as e:
            status_logger.error(str(e))
            detail_logger.debug(f"Cache write failed for {self.path}: {e}")
            return False
        detail_logger.debug(f"Wrote {len(entry.references)} references to {self.path}")
        return True
