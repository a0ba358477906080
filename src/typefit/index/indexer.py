"""Background catalog maintenance.

One worker task owns all re-extraction. ``queue_paths`` only records paths
and wakes it; the worker waits until no path has been queued for
``debounce_seconds``, then hands the whole batch to a thread pool. A batch
replaces or removes each file in the ``CatalogStore`` individually, so
scoring requests running meanwhile see every file either before or after
its update.

Scoring code that must not use a stale catalog awaits ``wait_until_fresh``.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
import time
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog

from typefit.core.errors import InternalError
from typefit.index.scanner import CatalogBuilder, ScanStats
from typefit.matching.catalog import CatalogStore

logger = structlog.get_logger()

OnComplete = Callable[[ScanStats], Awaitable[None]]


class IndexerState(Enum):
    IDLE = "idle"
    INDEXING = "indexing"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class CatalogStats:
    """Size of the live catalog."""

    files: int
    types: int
    version: int


@dataclass
class IndexerStatus:
    """Point-in-time view of the indexer, for the CLI and logs."""

    state: IndexerState
    queue_size: int
    catalog: CatalogStats
    last_stats: ScanStats | None = None
    last_error: str | None = None


@dataclass
class BackgroundCatalogIndexer:
    """Keeps a ``CatalogStore`` in step with files reported as changed.

    Usage::

        indexer = BackgroundCatalogIndexer(store, builder)
        indexer.start()
        indexer.queue_paths([Path("src/types/user.ts")])
        await indexer.wait_until_fresh(5.0)
        await indexer.stop()
    """

    store: CatalogStore
    builder: CatalogBuilder = field(default_factory=CatalogBuilder)
    debounce_seconds: float = 0.5
    max_workers: int = 1

    _executor: ThreadPoolExecutor | None = field(default=None, init=False)
    _worker: asyncio.Task[None] | None = field(default=None, init=False)
    _queued: set[Path] = field(default_factory=set, init=False)
    _queued_lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _last_queued_at: float = field(default=0.0, init=False)
    _wake: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _fresh: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _refreshing: bool = field(default=False, init=False)
    _stopping: bool = field(default=False, init=False)
    _stopped: bool = field(default=False, init=False)
    _last_stats: ScanStats | None = field(default=None, init=False)
    _last_error: str | None = field(default=None, init=False)
    _on_complete: OnComplete | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._fresh.set()

    @property
    def state(self) -> IndexerState:
        if self._stopped:
            return IndexerState.STOPPED
        if self._stopping:
            return IndexerState.STOPPING
        if self._refreshing:
            return IndexerState.INDEXING
        return IndexerState.IDLE

    def start(self) -> None:
        """Start the worker. Must be called from a running event loop."""
        if self._worker is not None:
            return
        self._stopping = self._stopped = False
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="typefit-indexer"
        )
        self._worker = asyncio.get_running_loop().create_task(self._run())
        logger.info("background_indexer_started", max_workers=self.max_workers)

    async def stop(self) -> None:
        """Stop the worker, letting a batch already extracting finish."""
        self._stopping = True
        worker, self._worker = self._worker, None
        if worker is not None:
            if self._refreshing:
                # The loop exits on its own once the batch is stored
                self._wake.set()
                await worker
            else:
                worker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await worker

        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

        with self._queued_lock:
            dropped = len(self._queued)
            self._queued.clear()
        self._fresh.set()
        self._stopped = True
        logger.info("background_indexer_stopped", dropped_paths=dropped)

    def queue_paths(self, paths: list[Path]) -> None:
        """Record changed paths; extraction happens once changes go quiet."""
        if not paths:
            return
        with self._queued_lock:
            self._queued.update(paths)
            pending = len(self._queued)
        self._last_queued_at = time.monotonic()
        self._fresh.clear()
        self._wake.set()
        logger.debug("paths_queued", new_paths=len(paths), total_pending=pending)

    async def wait_until_fresh(self, timeout: float | None = None) -> bool:
        """Wait until nothing is queued or extracting.

        Returns False when ``timeout`` runs out first; callers then score
        against whatever snapshot is current.
        """
        if self._fresh.is_set():
            return True
        try:
            await asyncio.wait_for(self._fresh.wait(), timeout)
        except TimeoutError:
            err = InternalError.timeout("catalog refresh", timeout or 0.0)
            logger.warning(
                "catalog_not_fresh", error=err.error_name, queue_size=self.status.queue_size
            )
            return False
        return True

    def set_on_complete(self, callback: OnComplete) -> None:
        """Await ``callback(stats)`` after each stored batch."""
        self._on_complete = callback

    @property
    def status(self) -> IndexerStatus:
        with self._queued_lock:
            queue_size = len(self._queued)
        catalog = self.store.snapshot()
        return IndexerStatus(
            state=self.state,
            queue_size=queue_size,
            catalog=CatalogStats(
                files=len(catalog.files), types=len(catalog), version=self.store.version
            ),
            last_stats=self._last_stats,
            last_error=self._last_error,
        )

    async def _run(self) -> None:
        while not self._stopping:
            await self._wake.wait()
            if self._stopping:
                break
            await self._settle()
            self._wake.clear()
            await self._refresh_queued()

    async def _settle(self) -> None:
        """Sleep until ``debounce_seconds`` have passed since the last queued path."""
        while (remaining := self._last_queued_at + self.debounce_seconds - time.monotonic()) > 0:
            await asyncio.sleep(remaining)

    async def _refresh_queued(self) -> None:
        with self._queued_lock:
            paths = sorted(self._queued)
            self._queued.clear()

        if paths:
            self._refreshing = True
            try:
                loop = asyncio.get_running_loop()
                stats = await loop.run_in_executor(self._executor, self._refresh_sync, paths)
                self._last_stats = stats
                self._last_error = None
                logger.info(
                    "catalog_refreshed",
                    files=stats.files_scanned,
                    removed=stats.files_removed,
                    failed=stats.files_failed,
                    types=stats.types_found,
                    duration_s=round(stats.duration_seconds, 3),
                )
                if self._on_complete is not None:
                    await self._on_complete(stats)
            except Exception as e:
                err = InternalError.unexpected(str(e), paths=len(paths))
                self._last_error = str(err)
                logger.error("indexing_failed", error=err.error_name, reason=str(e))
            finally:
                self._refreshing = False

        if not self._wake.is_set():
            self._fresh.set()

    def _refresh_sync(self, paths: list[Path]) -> ScanStats:
        """Runs in the thread pool."""
        start = time.perf_counter()
        stats = ScanStats()
        for path in paths:
            key = str(path)
            declared = self.builder.refresh_file(path, stats, known=key in self.store.snapshot())
            if declared is None:
                self.store.remove_file(key)
            else:
                self.store.replace_file(key, declared)
        stats.duration_seconds = time.perf_counter() - start
        return stats
