# SPDX-License-Identifier: MIT
"""Centralized SQLite connection configuration for snapshot reads.

Every connection opened by zotero-md is read-only: the snapshot is a
private copy and nothing is ever written back to the Zotero database.
Use `get_readonly_connection()` instead of calling `sqlite3.connect()`
directly.
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..logging_config import get_detail_logger


detail_logger = get_detail_logger()


def configure_readonly_connection(conn: sqlite3.Connection) -> None:
    """Apply PRAGMA settings suited to one-shot analytical reads.

    Args:
        conn: SQLite database connection to configure
    """
    conn.execute("PRAGMA query_only = ON")
    conn.execute("PRAGMA cache_size = 10000")
    conn.execute("PRAGMA temp_store = MEMORY")
    detail_logger.debug("Configured read-only SQLite connection")


@contextmanager
def get_readonly_connection(
    db_path: str | Path,
    timeout: float = 30.0,
) -> Iterator[sqlite3.Connection]:
    """Open a read-only SQLite connection and close it afterwards.

    The database is opened through a ``mode=ro`` URI so SQLite never
    creates journal files next to it.

    Args:
        db_path: Path to the SQLite database file
        timeout: Busy timeout in seconds (default: 30.0)

    Yields:
        Configured SQLite connection

    Example:
        ```python
        with get_readonly_connection(snapshot_path) as conn:
            rows = conn.execute("SELECT COUNT(*) FROM items").fetchall()
        ```
    """
    uri = Path(db_path).resolve().as_uri() + "?mode=ro"
    detail_logger.debug(f"Opening read-only SQLite connection to {db_path}")

    conn = sqlite3.connect(uri, timeout=timeout, uri=True)
    try:
        configure_readonly_connection(conn)
        yield conn
    finally:
        conn.close()
        detail_logger.debug(f"Closed SQLite connection to {db_path}")
