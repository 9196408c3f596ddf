# SPDX-License-Identifier: MIT
"""Standard exceptions for zotero-md."""

from pathlib import Path


class ZoteroMdError(Exception):
    """Base class for all zotero-md exceptions."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class SourceNotFoundError(ZoteroMdError):
    """Raised when the configured Zotero database cannot be read."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Zotero database not found at: {path}", path)


class SnapshotCopyError(ZoteroMdError):
    """Raised when the private snapshot of the database cannot be created."""

    pass


class QueryError(ZoteroMdError):
    """Raised when the SQL engine reports an error."""

    def __init__(
        self, message: str, query: str | None = None, path: Path | str | None = None
    ) -> None:
        self.query = query
        summary = _first_line(query) if query else None
        msg = f"{message} (query: {summary})" if summary else message
        super().__init__(msg, path)


class CacheReadError(ZoteroMdError):
    """Raised when the persisted cache file is missing or malformed."""

    pass


class CacheWriteError(ZoteroMdError):
    """Raised when the persisted cache file cannot be written."""

    pass


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
