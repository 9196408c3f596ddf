# SPDX-License-Identifier: MIT
"""Two-query extraction of references from the Zotero database.

All creators are fetched in one pass and grouped in memory, then all
items are fetched in a second pass and joined against that mapping, so a
load costs two queries regardless of library size.
"""

from pathlib import Path

from .constants import DEFAULT_BATCH_LIMIT, MAX_AUTHORS, UNTITLED
from .database.executor import QueryExecutor, Row
from .database.queries import AUTHORS_QUERY, ITEMS_QUERY
from .exceptions import SourceNotFoundError
from .logging_config import get_detail_logger, get_status_logger
from .models import Creator, ReferenceRecord
from .parser import extract_year, parse_extra_field


detail_logger = get_detail_logger()
status_logger = get_status_logger()


def _text(row: Row, index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    return value if value is not None else ""


def build_authors_map(
    rows: list[Row], max_authors: int = MAX_AUTHORS
) -> dict[str, list[Creator]]:
    """Group creator rows by item id, keeping the first ``max_authors``.

    Rows must arrive ordered by item, role priority and position; entries
    past the cap are dropped as they arrive. Creators without a family name
    (single-field names stored elsewhere) are skipped.
    """
    authors_map: dict[str, list[Creator]] = {}
    for row in rows:
        if len(row) < 2:
            continue
        item_id = _text(row, 0)
        last_name = _text(row, 1)
        if not last_name:
            continue
        authors = authors_map.setdefault(item_id, [])
        if len(authors) < max_authors:
            authors.append(Creator(last_name=last_name, first_name=_text(row, 2)))
    return authors_map


def build_reference(row: Row, authors_map: dict[str, list[Creator]]) -> ReferenceRecord:
    """Assemble one normalized record from an items-query row."""
    item_id = _text(row, 0)
    date = _text(row, 5)
    return ReferenceRecord(
        item_id=item_id,
        item_key=_text(row, 1),
        item_type=_text(row, 2),
        title=_text(row, 4) or UNTITLED,
        date=date,
        year=extract_year(date),
        publication=_text(row, 6),
        url=_text(row, 7),
        extra_fields=parse_extra_field(_text(row, 8)),
        abstract=_text(row, 9),
        authors=list(authors_map.get(item_id, [])),
    )


class ReferenceExtractor:
    """Loads every regular item of a Zotero library as ReferenceRecords."""

    def __init__(self, executor: QueryExecutor, batch_limit: int = DEFAULT_BATCH_LIMIT):
        self.executor = executor
        self.batch_limit = batch_limit

    def load_all(self, source_path: Path | str) -> list[ReferenceRecord]:
        """Run the authors and items queries and join them.

        Args:
            source_path: Path to the Zotero database

        Returns:
            Normalized references, most recently modified first. An empty
            list means the library has no regular items.

        Raises:
            SourceNotFoundError: If the database file is not readable
            SnapshotCopyError: If the snapshot cannot be refreshed
            QueryError: If either query fails
        """
        source = Path(source_path)
        if not source.is_file():
            raise SourceNotFoundError(source)

        detail_logger.debug(f"Loading references from {source}")
        author_rows = self.executor.run(source, AUTHORS_QUERY)
        authors_map = build_authors_map(author_rows)
        detail_logger.debug(
            f"Collected creators for {len(authors_map)} items from {len(author_rows)} rows"
        )

        item_rows = self.executor.run(source, ITEMS_QUERY, (self.batch_limit,))
        if not item_rows:
            status_logger.warning(
                "No items found in Zotero database. Make sure Zotero has references."
            )
            return []

        references: list[ReferenceRecord] = []
        seen_keys: set[str] = set()
        for row in item_rows:
            if len(row) < 3 or not _text(row, 1):
                continue
            reference = build_reference(row, authors_map)
            if reference.item_key in seen_keys:
                detail_logger.warning(f"Skipping duplicate item key {reference.item_key}")
                continue
            seen_keys.add(reference.item_key)
            references.append(reference)

        if len(item_rows) >= self.batch_limit:
            detail_logger.info(
                f"Item query hit the batch limit of {self.batch_limit}; "
                "older items are not loaded"
            )
        detail_logger.debug(f"Extracted {len(references)} references")
        return references
