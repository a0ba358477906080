"""Catalog maintenance: discovery, full builds, background refresh, watching."""

from typefit.index.indexer import (
    BackgroundCatalogIndexer,
    CatalogStats,
    IndexerState,
    IndexerStatus,
)
from typefit.index.scanner import CatalogBuilder, ScanStats, discover_type_files
from typefit.index.watcher import CatalogWatcher, collect_watch_dirs

__all__ = [
    "BackgroundCatalogIndexer",
    "CatalogBuilder",
    "CatalogStats",
    "CatalogWatcher",
    "IndexerState",
    "IndexerStatus",
    "ScanStats",
    "collect_watch_dirs",
    "discover_type_files",
]
