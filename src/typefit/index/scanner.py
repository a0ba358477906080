"""Type-file discovery and catalog builds.

A file that cannot be read or parsed is logged and left out; it never aborts
the scan.
"""

from __future__ import annotations

import os
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from typefit.config.models import IndexConfig
from typefit.core.errors import ExtractionError
from typefit.core.excludes import should_prune_dir
from typefit.core.logging import clear_scan_id, set_scan_id
from typefit.extraction.declarations import DeclarationExtractor
from typefit.matching.catalog import TypeCatalog
from typefit.matching.models import DeclaredType

logger = structlog.get_logger()

DEFAULT_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")


def discover_type_files(
    root: Path,
    *,
    include_node_modules: bool = False,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    max_file_size_mb: int = 10,
) -> list[Path]:
    """All scannable source files under ``root``, sorted.

    VCS, build and cache directories are pruned. ``.d.ts`` files match the
    ``.ts`` extension and are included.
    """
    wanted = {ext.lower() for ext in extensions}
    max_bytes = max_file_size_mb * 1024 * 1024
    found: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [
            d
            for d in dirnames
            if not should_prune_dir(d, include_node_modules=include_node_modules)
        ]
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.suffix.lower() not in wanted:
                continue
            try:
                size = path.stat().st_size
            except OSError:
                continue
            if size > max_bytes:
                logger.debug("file_too_large", path=str(path), size_bytes=size)
                continue
            found.append(path)

    return sorted(found)


@dataclass
class ScanStats:
    """Statistics from one scan or incremental refresh."""

    files_scanned: int = 0
    files_failed: int = 0
    files_removed: int = 0
    types_found: int = 0
    duration_seconds: float = 0.0
    failed_paths: list[str] = field(default_factory=list)


class CatalogBuilder:
    """Extract declared types from files into catalog snapshots.

    Usage::

        builder = CatalogBuilder()
        catalog, stats = builder.build(root)
        catalog, stats = builder.refresh_paths(catalog, [changed_file])
    """

    def __init__(
        self,
        config: IndexConfig | None = None,
        extractor: DeclarationExtractor | None = None,
    ) -> None:
        self.config = config or IndexConfig()
        self._extractor = extractor or DeclarationExtractor()

    def discover(self, root: Path) -> list[Path]:
        return discover_type_files(
            root,
            include_node_modules=self.config.include_node_modules,
            extensions=self.config.extensions,
            max_file_size_mb=self.config.max_file_size_mb,
        )

    def extract_file(self, path: Path) -> list[DeclaredType] | None:
        """Declared types of one file, or None when extraction fails."""
        try:
            return self._extractor.extract(path)
        except ExtractionError as e:
            error = e
        except RecursionError:
            error = ExtractionError.parse_failed(str(path), "type nesting too deep")
        logger.warning(
            "extraction_failed", path=str(path), error=error.error_name, reason=error.message
        )
        return None

    def refresh_file(
        self, path: Path, stats: ScanStats, *, known: bool = False
    ) -> list[DeclaredType] | None:
        """Declarations to store for ``path``, or None to evict it.

        Updates ``stats`` for the file. ``known`` tells whether the catalog
        holds ``path`` now, which makes a vanished file count as removed.
        """
        if not path.is_file():
            if known:
                stats.files_removed += 1
            return None

        declared = self.extract_file(path)
        stats.files_scanned += 1
        if declared is None:
            stats.files_failed += 1
            stats.failed_paths.append(str(path))
            return None
        stats.types_found += len(declared)
        return declared

    def build(self, root: Path) -> tuple[TypeCatalog, ScanStats]:
        """Full scan of ``root``."""
        set_scan_id()
        try:
            start = time.perf_counter()
            catalog, stats = self.refresh_paths(TypeCatalog(), self.discover(root))
            stats.duration_seconds = time.perf_counter() - start
            logger.info(
                "catalog_built",
                root=str(root),
                files=stats.files_scanned,
                failed=stats.files_failed,
                types=stats.types_found,
                duration_s=round(stats.duration_seconds, 3),
            )
            return catalog, stats
        finally:
            clear_scan_id()

    def refresh_paths(
        self, catalog: TypeCatalog, paths: Iterable[Path]
    ) -> tuple[TypeCatalog, ScanStats]:
        """Re-extract ``paths`` on top of ``catalog``.

        Deleted and failing files are evicted; the rest replace their entry.
        """
        start = time.perf_counter()
        stats = ScanStats()
        for path in paths:
            key = str(path)
            declared = self.refresh_file(path, stats, known=key in catalog)
            if declared is None:
                catalog = catalog.without_file(key)
            else:
                catalog = catalog.with_file(key, declared)
        stats.duration_seconds = time.perf_counter() - start
        return catalog, stats
