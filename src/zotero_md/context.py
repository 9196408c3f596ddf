# SPDX-License-Identifier: MIT
"""Application context owning every stateful component.

A host (editor plugin, CLI, ...) creates one `ZoteroContext` and calls the
consumer operations on it. There is no module-level state: two contexts
never share snapshots, caches or loading flags.
"""

import asyncio
import time
from collections.abc import Callable

from .cache import CacheFileStore, ReferenceCache
from .config import AppConfig
from .database import QueryExecutor, SnapshotManager
from .diagnostics import DiagnosticReport, run_diagnostics
from .extractor import ReferenceExtractor
from .formatter import build_search_text, render_citation, render_preview
from .logging_config import get_detail_logger, get_status_logger
from .models import LoadResult, ReferenceRecord, RenderResult


class ZoteroContext:
    """Snapshot, extraction, cache and formatting for one Zotero library."""

    def __init__(
        self,
        config: AppConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or AppConfig()
        self.clock = clock
        self.detail_logger = get_detail_logger()
        self.status_logger = get_status_logger()

        db_config = self.config.database
        self.snapshots = SnapshotManager(db_config.snapshot_dir)
        self.executor = QueryExecutor(
            self.snapshots,
            engine=db_config.engine,
            sqlite_binary=db_config.sqlite_binary,
            timeout=db_config.timeout,
        )
        self.extractor = ReferenceExtractor(self.executor, db_config.batch_limit)
        self.store = CacheFileStore(self.config.cache.file)
        self.cache = ReferenceCache(
            self.store,
            loader=self._load_from_database,
            expiration=self.config.cache.expiration,
            clock=clock,
        )
        self._last_auto_update: float | None = None

    def _load_from_database(self) -> list[ReferenceRecord]:
        return self.extractor.load_all(self.config.database.path)

    async def get_references(self, force: bool = False) -> LoadResult:
        """Current reference list, loading it when the cache is stale."""
        return await self.cache.get_or_load(force=force)

    def refresh(self) -> "asyncio.Task[LoadResult]":
        """Start a forced background load on the running event loop."""
        self.detail_logger.debug("Scheduling background refresh")
        return self.cache.schedule_refresh()

    async def preload(self) -> LoadResult | None:
        """Refresh once after the configured start-up delay, if enabled."""
        refresh_config = self.config.refresh
        if not refresh_config.preload:
            return None
        await asyncio.sleep(refresh_config.preload_delay / 1000)
        return await self.refresh()

    def refresh_if_due(self, now: float | None = None) -> "asyncio.Task[LoadResult] | None":
        """Throttled refresh for host activity events (e.g. opening a file).

        Starts at most one refresh per ``auto_update_interval`` seconds.

        Returns:
            The refresh task, or None when auto-update is off or not yet due
        """
        refresh_config = self.config.refresh
        if not refresh_config.auto_update:
            return None
        current = self.clock() if now is None else now
        if (
            self._last_auto_update is not None
            and current - self._last_auto_update < refresh_config.auto_update_interval
        ):
            return None
        self._last_auto_update = current
        return self.refresh()

    def find_by_key(self, item_key: str) -> ReferenceRecord | None:
        """Look up a cached reference by its Zotero item key."""
        for reference in self.cache.references or []:
            if reference.item_key == item_key:
                return reference
        return None

    def render_citation(self, reference: ReferenceRecord) -> RenderResult:
        return render_citation(self.config.format.citation, reference)

    def render_preview(self, reference: ReferenceRecord) -> RenderResult:
        return render_preview(self.config.format.preview, reference)

    def search_text(self, reference: ReferenceRecord) -> str:
        return build_search_text(reference, self.config.format.search_fields)

    def diagnostics(self, key: str | None = None) -> DiagnosticReport:
        """Run the troubleshooting probe against the configured database."""
        return run_diagnostics(
            self.config.database.path, self.executor, self.extractor, key
        )
