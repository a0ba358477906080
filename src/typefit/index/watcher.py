"""Filesystem watching for the catalog.

watchfiles is given the explicit list of directories the scanner would visit
(non-recursive), so pruned trees such as ``node_modules`` cost nothing. When
a new directory appears the watch is rebuilt to include it.

Changed files are batched: a batch is delivered once no change has arrived
for ``debounce_window`` seconds, or ``max_debounce_wait`` seconds after its
first change, whichever comes first.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from typefit.core.excludes import should_prune_dir
from typefit.core.progress import pluralize
from typefit.index.scanner import DEFAULT_EXTENSIONS

logger = structlog.get_logger()

DEBOUNCE_WINDOW_SEC = 0.3
MAX_DEBOUNCE_WAIT_SEC = 2.0
_POLL_SEC = 0.1
_RETRY_SEC = 1.0


def collect_watch_dirs(root: Path, *, include_node_modules: bool = False) -> list[Path]:
    """``root`` and every directory below it that is not pruned."""
    found = [root]
    for dirpath, dirnames, _ in os.walk(root, onerror=lambda _err: None):
        dirnames[:] = [
            name
            for name in dirnames
            if not should_prune_dir(name, include_node_modules=include_node_modules)
        ]
        found.extend(Path(dirpath, name) for name in dirnames)
    return found


def summarize_changes(paths: Iterable[Path]) -> str:
    """``"2 .ts files, 1 .tsx file"``"""
    by_suffix = Counter(path.suffix.lower() for path in paths)
    return ", ".join(pluralize(n, f"{suffix} file") for suffix, n in by_suffix.most_common())


@dataclass
class _Batch:
    """Changed paths waiting to be delivered."""

    paths: set[Path] = field(default_factory=set)
    opened_at: float = 0.0
    touched_at: float = 0.0

    def add(self, path: Path) -> None:
        now = time.monotonic()
        if not self.paths:
            self.opened_at = now
        self.paths.add(path)
        self.touched_at = now

    def is_due(self, quiet_for: float, max_age: float) -> bool:
        if not self.paths:
            return False
        now = time.monotonic()
        return now - self.touched_at >= quiet_for or now - self.opened_at >= max_age

    def take(self) -> list[Path]:
        paths = sorted(self.paths)
        self.paths.clear()
        return paths


@dataclass
class CatalogWatcher:
    """Reports changed TypeScript files under ``root`` in debounced batches.

    ``on_change`` receives absolute paths of added, modified and deleted
    files. It is called from the event loop and should not block.
    """

    root: Path
    on_change: Callable[[list[Path]], None]
    extensions: Sequence[str] = DEFAULT_EXTENSIONS
    include_node_modules: bool = False
    debounce_window: float = DEBOUNCE_WINDOW_SEC
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC

    _batch: _Batch = field(default_factory=_Batch, init=False)
    _watched: set[Path] = field(default_factory=set, init=False)
    _stop: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _tasks: list[asyncio.Task[None]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()
        self._suffixes = frozenset(ext.lower() for ext in self.extensions)

    async def start(self) -> None:
        if self._tasks:
            return
        self._stop.clear()
        self._tasks = [
            asyncio.create_task(self._deliver_loop()),
            asyncio.create_task(self._watch_loop()),
        ]
        logger.info(
            "catalog_watcher_started", root=str(self.root), debounce_window=self.debounce_window
        )

    async def stop(self) -> None:
        """Stop watching; changes not yet delivered are delivered now."""
        self._stop.set()
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(task, timeout=2.0)
        self._flush_pending()
        logger.info("catalog_watcher_stopped")

    def is_relevant(self, path: Path) -> bool:
        """A source file under ``root`` and outside every pruned directory."""
        if path.suffix.lower() not in self._suffixes:
            return False
        try:
            parents = path.relative_to(self.root).parts[:-1]
        except ValueError:
            return False
        return not any(
            should_prune_dir(part, include_node_modules=self.include_node_modules)
            for part in parents
        )

    def handle_changes(self, changes: set[tuple[Change, str]]) -> bool:
        """Batch the relevant changes from one awatch yield.

        Returns True when a new directory must be added to the watch.
        """
        rewatch = False
        for change, raw_path in changes:
            path = Path(raw_path)
            if change == Change.added and path.is_dir():
                if path not in self._watched and not should_prune_dir(
                    path.name, include_node_modules=self.include_node_modules
                ):
                    logger.info("new_directory_detected", path=raw_path)
                    rewatch = True
            elif self.is_relevant(path):
                self._batch.add(path)
                logger.debug("path_queued", path=raw_path, change_type=change.name)
        return rewatch

    def _should_flush(self) -> bool:
        return self._batch.is_due(self.debounce_window, self.max_debounce_wait)

    def _flush_pending(self) -> None:
        if not self._batch.paths:
            return
        paths = self._batch.take()
        logger.info("changes_detected", count=len(paths), summary=summarize_changes(paths))
        self.on_change(paths)

    async def _deliver_loop(self) -> None:
        while not self._stop.is_set():
            await asyncio.sleep(_POLL_SEC)
            if self._should_flush():
                self._flush_pending()

    async def _watch_loop(self) -> None:
        while not self._stop.is_set():
            dirs = collect_watch_dirs(self.root, include_node_modules=self.include_node_modules)
            self._watched = set(dirs)
            logger.debug("watch_dirs_collected", count=len(dirs))
            try:
                await self._watch(dirs)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if self._stop.is_set():
                    return
                logger.error("watcher_error", error=str(e))
                await asyncio.sleep(_RETRY_SEC)

    async def _watch(self, dirs: list[Path]) -> None:
        """Consume awatch until stopped or a new directory needs watching."""
        async for changes in awatch(
            *dirs, recursive=False, stop_event=self._stop, ignore_permission_denied=True
        ):
            if self.handle_changes(changes):
                logger.info("watcher_restart_requested", reason="new_directories")
                return
