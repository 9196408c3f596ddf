# SPDX-License-Identifier: MIT
"""Private snapshot of the Zotero database.

Zotero keeps ``zotero.sqlite`` open and locked while it runs. Reading a
byte-for-byte copy avoids opening the original under any lock mode.
"""

import os
import shutil
from pathlib import Path

from ..constants import SNAPSHOT_FILE_NAME
from ..exceptions import SnapshotCopyError, SourceNotFoundError
from ..logging_config import get_detail_logger


detail_logger = get_detail_logger()


class SnapshotManager:
    """Maintains a copy of the source database refreshed on modification."""

    def __init__(self, snapshot_dir: Path, file_name: str = SNAPSHOT_FILE_NAME):
        self.snapshot_path = Path(snapshot_dir) / file_name
        self._source_path: Path | None = None
        self._source_mtime: float | None = None

    @property
    def source_mtime(self) -> float | None:
        """Modification time of the source when it was last copied."""
        return self._source_mtime

    def needs_copy(self, source_path: Path, mtime: float) -> bool:
        if not self.snapshot_path.exists():
            return True
        if self._source_path != source_path or self._source_mtime is None:
            return True
        return mtime > self._source_mtime

    def ensure_snapshot(self, source_path: Path | str) -> Path:
        """Return a snapshot path that is at least as new as the source.

        Args:
            source_path: Path to the Zotero database

        Returns:
            Path to the private snapshot

        Raises:
            SourceNotFoundError: If the source cannot be accessed
            SnapshotCopyError: If copying fails (permissions, disk space, ...)
        """
        source = Path(source_path)
        try:
            mtime = source.stat().st_mtime
        except FileNotFoundError as e:
            raise SourceNotFoundError(source) from e
        except OSError as e:
            raise SnapshotCopyError(
                f"Cannot access Zotero database {source}: {e}", source
            ) from e

        if not self.needs_copy(source, mtime):
            detail_logger.debug(f"Reusing snapshot {self.snapshot_path}")
            return self.snapshot_path

        self._copy(source)
        self._source_path = source
        self._source_mtime = mtime
        return self.snapshot_path

    def _copy(self, source: Path) -> None:
        """Copy to a sibling temp file and rename it over the snapshot."""
        temp_path = self.snapshot_path.with_name(self.snapshot_path.name + ".part")
        detail_logger.debug(f"Copying {source} to {self.snapshot_path}")
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, temp_path)
            os.replace(temp_path, self.snapshot_path)
        except FileNotFoundError as e:
            temp_path.unlink(missing_ok=True)
            raise SourceNotFoundError(source) from e
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise SnapshotCopyError(
                f"Failed to copy database to temp location: {e}", source
            ) from e

    def reset(self) -> None:
        """Forget the recorded copy so the next call copies again."""
        self._source_path = None
        self._source_mtime = None
