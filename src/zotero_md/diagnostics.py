# SPDX-License-Identifier: MIT
"""Troubleshooting report for the database connection and extraction."""

from collections import Counter
from pathlib import Path

from pydantic import BaseModel, Field

from .constants import DIAGNOSTIC_SAMPLE_SIZE, UNTITLED
from .database.executor import QueryExecutor
from .database.queries import (
    COUNT_ITEMS_QUERY,
    ITEM_SUMMARY_BY_KEY_QUERY,
    RAW_FIELDS_BY_KEY_QUERY,
)
from .exceptions import ZoteroMdError
from .extractor import ReferenceExtractor
from .logging_config import get_detail_logger
from .models import ReferenceRecord


detail_logger = get_detail_logger()

SUMMARY_COLUMNS = ("key", "title", "date", "publication")


class DiagnosticReport(BaseModel):
    """Everything an operator needs to see why references do not show up."""

    source_path: str
    source_exists: bool = False
    total_items: int | None = Field(None, description="Non-deleted items in the source")
    error: str | None = None
    load_ok: bool = False
    loaded_count: int = 0
    untitled_count: int = 0
    untitled_by_type: dict[str, int] = Field(default_factory=dict)
    samples: list[ReferenceRecord] = Field(default_factory=list)
    key: str | None = None
    match: ReferenceRecord | None = None
    raw_fields: list[tuple[str, str]] | None = None
    raw_error: str | None = None
    summary: dict[str, str | None] | None = None
    summary_error: str | None = None


def run_diagnostics(
    source_path: Path,
    executor: QueryExecutor,
    extractor: ReferenceExtractor,
    key: str | None = None,
) -> DiagnosticReport:
    """Probe the database and the extraction pipeline.

    Never raises for database problems; failures are recorded on the
    report so they can be shown to the operator.

    Args:
        source_path: Path to the Zotero database
        executor: Executor used for the count and per-key queries
        extractor: Extractor used for the trial load
        key: Optional item key to inspect in detail

    Returns:
        Populated DiagnosticReport
    """
    report = DiagnosticReport(source_path=str(source_path), key=key or None)
    report.source_exists = source_path.is_file()
    if not report.source_exists:
        return report

    try:
        rows = executor.run(source_path, COUNT_ITEMS_QUERY)
        report.total_items = int(rows[0][0] or 0) if rows else 0
    except ZoteroMdError as e:
        report.error = str(e)
        return report

    try:
        references = extractor.load_all(source_path)
    except ZoteroMdError as e:
        report.error = str(e)
        return report

    report.load_ok = True
    report.loaded_count = len(references)
    detail_logger.debug(f"Diagnostics loaded {len(references)} references")

    if report.key is not None:
        _inspect_key(report, report.key, references, source_path, executor)
        return report

    untitled = Counter(ref.item_type for ref in references if ref.title == UNTITLED)
    report.untitled_count = sum(untitled.values())
    report.untitled_by_type = dict(untitled)
    report.samples = references[:DIAGNOSTIC_SAMPLE_SIZE]
    return report


def _inspect_key(
    report: DiagnosticReport,
    key: str,
    references: list[ReferenceRecord],
    source_path: Path,
    executor: QueryExecutor,
) -> None:
    report.match = next((ref for ref in references if ref.item_key == key), None)
    if report.match is None:
        return

    try:
        rows = executor.run(source_path, RAW_FIELDS_BY_KEY_QUERY, (key,))
        report.raw_fields = [(row[0] or "", row[1] or "") for row in rows]
    except ZoteroMdError as e:
        report.raw_error = str(e)

    try:
        rows = executor.run(source_path, ITEM_SUMMARY_BY_KEY_QUERY, (key,))
        if rows:
            report.summary = dict(zip(SUMMARY_COLUMNS, rows[0]))
        else:
            report.summary = {}
    except ZoteroMdError as e:
        report.summary_error = str(e)
