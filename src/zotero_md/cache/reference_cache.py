# SPDX-License-Identifier: MIT
"""In-memory reference cache with file fallback and single-flight loading."""

import asyncio
import time
from collections.abc import Callable

from ..enums import LoadSource, LoadStatus
from ..exceptions import ZoteroMdError
from ..logging_config import get_detail_logger, get_status_logger
from ..models import CacheEntry, LoadResult, ReferenceRecord
from .store import CacheFileStore


Loader = Callable[[], list[ReferenceRecord]]


class ReferenceCache:
    """Serves references from memory, then the cache file, then the loader.

    The loading flag is the only coordination primitive. It is checked and
    set before the first ``await`` of `get_or_load`, so on a single event
    loop no two requests can both observe it as unset.
    """

    def __init__(
        self,
        store: CacheFileStore,
        loader: Loader,
        expiration: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.loader = loader
        self.expiration = expiration
        self.clock = clock
        self.detail_logger = get_detail_logger()
        self.status_logger = get_status_logger()
        self._references: list[ReferenceRecord] | None = None
        self._last_update: int = 0
        self._loading = False

    @property
    def references(self) -> list[ReferenceRecord] | None:
        return self._references

    @property
    def last_update(self) -> int:
        return self._last_update

    def is_loading(self) -> bool:
        return self._loading

    def age(self) -> int:
        """Seconds since the in-memory list was stored."""
        return int(self.clock()) - self._last_update

    def is_valid(self) -> bool:
        return self._references is not None and self.age() < self.expiration

    def invalidate(self) -> None:
        """Drop the in-memory list; the cache file is left alone."""
        self._references = None
        self._last_update = 0

    def _store_in_memory(self, references: list[ReferenceRecord], timestamp: int) -> None:
        self._references = references
        self._last_update = timestamp

    def _read_file(self) -> list[ReferenceRecord] | None:
        entry = self.store.read()
        if entry is None:
            return None
        if int(self.clock()) - entry.timestamp >= self.expiration:
            self.detail_logger.debug("Cache file is older than the expiration window")
            return None
        self._store_in_memory(entry.references, entry.timestamp)
        return entry.references

    async def get_or_load(self, force: bool = False) -> LoadResult:
        """Return references from the freshest layer that is still valid.

        Args:
            force: Skip memory and file layers and query the database

        Returns:
            LoadResult tagged with the outcome and the layer that served it
        """
        if not force:
            if self.is_valid():
                self.detail_logger.debug(f"Cache hit (memory, age {self.age()}s)")
                return _served(self._references or [], LoadSource.MEMORY)

            cached = self._read_file()
            if cached is not None:
                self.detail_logger.debug("Cache hit (file)")
                return _served(cached, LoadSource.FILE)

        if self._loading:
            self.detail_logger.info("Reference load already in progress, skipping")
            return LoadResult(status=LoadStatus.ALREADY_LOADING)

        self._loading = True
        try:
            # Yield once so the caller's loop can run before the blocking load
            await asyncio.sleep(0)
            return self._load_from_source()
        finally:
            self._loading = False

    def _load_from_source(self) -> LoadResult:
        try:
            references = self.loader()
        except ZoteroMdError as e:
            self.status_logger.error(f"Failed to load references: {e}")
            return LoadResult(
                status=LoadStatus.FAILED,
                source=LoadSource.DATABASE,
                error=str(e),
            )

        timestamp = int(self.clock())
        self._store_in_memory(references, timestamp)
        self.store.write(CacheEntry(timestamp=timestamp, references=references))
        self.detail_logger.info(f"Loaded {len(references)} references from database")
        return _served(references, LoadSource.DATABASE)

    def schedule_refresh(self) -> "asyncio.Task[LoadResult]":
        """Start a forced load on the running event loop.

        A refresh requested while one is running resolves to
        ``ALREADY_LOADING`` without touching the database.
        """
        return asyncio.get_running_loop().create_task(self.get_or_load(force=True))


def _served(references: list[ReferenceRecord], source: LoadSource) -> LoadResult:
    status = LoadStatus.SUCCESS if references else LoadStatus.EMPTY
    return LoadResult(status=status, references=references, source=source)
