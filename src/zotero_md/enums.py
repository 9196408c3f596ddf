# SPDX-License-Identifier: MIT
"""Enums for zotero-md."""

from enum import Enum


class LoadStatus(str, Enum):
    """Outcome of a reference load request."""

    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"
    ALREADY_LOADING = "already_loading"


class LoadSource(str, Enum):
    """Where a served reference list came from."""

    MEMORY = "memory"
    FILE = "file"
    DATABASE = "database"


class QueryEngine(str, Enum):
    """How queries are executed against the snapshot."""

    NATIVE = "native"  # Python sqlite3 module
    CLI = "cli"  # external sqlite3 binary


class HighlightGroup(str, Enum):
    """Semantic categories attached to rendered placeholder values."""

    TITLE = "title"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    STRING = "string"
    COMMENT = "comment"
    INCLUDE = "include"
    UNDERLINED = "underlined"
    SPECIAL = "special"
