# SPDX-License-Identifier: MIT
"""Read-only access to the Zotero database.

- SnapshotManager: keeps a private, lock-free copy of the database file
- QueryExecutor: runs read-only queries against that copy
"""

from .executor import QueryExecutor, parse_delimited_output
from .snapshot import SnapshotManager


__all__ = [
    "QueryExecutor",
    "SnapshotManager",
    "parse_delimited_output",
]
