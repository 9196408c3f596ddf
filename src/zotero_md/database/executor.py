# SPDX-License-Identifier: MIT
"""Read-only query execution against the database snapshot."""

import sqlite3
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from ..constants import (
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_SQLITE_BINARY,
    FIELD_SEPARATOR,
    RECORD_SEPARATOR,
)
from ..enums import QueryEngine
from ..exceptions import QueryError
from ..logging_config import get_detail_logger
from .connection_utils import get_readonly_connection
from .snapshot import SnapshotManager


detail_logger = get_detail_logger()

Row = tuple[str | None, ...]
Params = Sequence[str | int | float | None]


def parse_delimited_output(
    output: str,
    field_separator: str = FIELD_SEPARATOR,
    record_separator: str = RECORD_SEPARATOR,
) -> list[Row]:
    """Split sqlite3 shell output into rows.

    Records are separated by ``record_separator`` and fields by
    ``field_separator``; both are ASCII control characters so commas,
    pipes and newlines inside values survive intact.

    Args:
        output: Raw standard output of the sqlite3 shell
        field_separator: Character between fields
        record_separator: Character between records

    Returns:
        List of rows, each a tuple of field strings
    """
    records = output.split(record_separator)
    # Only the piece after the final separator can be an artifact
    if records[-1] in ("", "\n"):
        records.pop()

    rows: list[Row] = []
    for record in records:
        fields = record.split(field_separator)
        fields[-1] = fields[-1].removesuffix("\n")
        rows.append(tuple(fields))
    return rows


def _sql_literal(value: str | int | float | None) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (int, float)):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


def bind_parameters(query: str, params: Params) -> str:
    """Inline ``?`` parameters as SQL literals for the sqlite3 shell.

    Queries passed here never contain ``?`` inside string literals.
    """
    parts = query.split("?")
    if len(parts) - 1 != len(params):
        raise QueryError(
            f"Expected {len(parts) - 1} parameters, got {len(params)}", query
        )
    bound = [parts[0]]
    for value, part in zip(params, parts[1:]):
        bound.append(_sql_literal(value))
        bound.append(part)
    return "".join(bound)


class QueryExecutor:
    """Runs read-only queries, re-validating the snapshot before each one."""

    def __init__(
        self,
        snapshots: SnapshotManager,
        engine: QueryEngine = QueryEngine.NATIVE,
        sqlite_binary: str = DEFAULT_SQLITE_BINARY,
        timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        self.snapshots = snapshots
        self.engine = QueryEngine(engine)
        self.sqlite_binary = sqlite_binary
        self.timeout = timeout

    def run(
        self, source_path: Path | str, query: str, params: Params = ()
    ) -> list[Row]:
        """Execute a query against a fresh-enough snapshot of ``source_path``.

        Args:
            source_path: Path to the Zotero database
            query: SQL text, with ``?`` placeholders for ``params``
            params: Positional query parameters

        Returns:
            Result rows; NULL is returned as None by the native engine and
            as an empty string by the cli engine

        Raises:
            SourceNotFoundError: If the database does not exist
            SnapshotCopyError: If the snapshot cannot be refreshed
            QueryError: If the engine reports an error
        """
        snapshot_path = self.snapshots.ensure_snapshot(source_path)
        started = time.perf_counter()

        if self.engine is QueryEngine.CLI:
            rows = self._run_cli(snapshot_path, query, params)
        else:
            rows = self._run_native(snapshot_path, query, params)

        elapsed_ms = (time.perf_counter() - started) * 1000
        detail_logger.debug(
            f"Query returned {len(rows)} rows in {elapsed_ms:.1f}ms "
            f"({self.engine.value} engine)"
        )
        return rows

    def _run_native(
        self, snapshot_path: Path, query: str, params: Params
    ) -> list[Row]:
        try:
            with get_readonly_connection(snapshot_path, self.timeout) as conn:
                cursor = conn.execute(query, tuple(params))
                return [
                    tuple(None if value is None else str(value) for value in row)
                    for row in cursor.fetchall()
                ]
        except sqlite3.Error as e:
            detail_logger.debug(f"SQLite error: {e}")
            raise QueryError(f"Error: {e}", query, snapshot_path) from e

    def _run_cli(self, snapshot_path: Path, query: str, params: Params) -> list[Row]:
        sql = bind_parameters(query, params) if params else query
        command = [
            self.sqlite_binary,
            "-readonly",
            "-cmd",
            f".separator {FIELD_SEPARATOR} {RECORD_SEPARATOR}",
            str(snapshot_path),
            sql,
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise QueryError(
                f"Failed to execute query: {e}", query, snapshot_path
            ) from e
        except UnicodeDecodeError as e:
            raise QueryError(
                f"Query output is not valid UTF-8: {e}", query, snapshot_path
            ) from e

        # The shell reports failures on stderr; values on stdout may contain anything
        if completed.returncode != 0 or "Error:" in completed.stderr:
            message = (completed.stderr or completed.stdout).strip()
            raise QueryError(message or "Query failed", query, snapshot_path)

        return parse_delimited_output(completed.stdout)
