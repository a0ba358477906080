"""Declared-type catalog: immutable snapshots and their owner.

``TypeCatalog`` maps file path -> declared types in declaration order. It is
never mutated; ``with_file``/``without_file`` return new snapshots that share
the untouched per-file tuples. ``CatalogStore`` owns the current snapshot and
swaps it under a lock, so readers see either the old or the new list for a
file and never a partial one.

Name lookup is explicit about ambiguity. Two files may declare the same name;
candidates are ordered by path distance to a reference file when one is
given, then by path, then by declaration order.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import structlog

from typefit.matching.compat import strip_generics
from typefit.matching.models import DeclaredType
from typefit.matching.proximity import path_distance

logger = structlog.get_logger()


class TypeCatalog:
    """Read-only snapshot of declared types keyed by file path."""

    __slots__ = ("_files", "_by_name")

    def __init__(self, files: Mapping[str, Iterable[DeclaredType]] | None = None) -> None:
        frozen = {path: tuple(declared) for path, declared in (files or {}).items()}
        self._files: Mapping[str, tuple[DeclaredType, ...]] = MappingProxyType(
            {path: frozen[path] for path in sorted(frozen) if frozen[path]}
        )
        by_name: dict[str, list[DeclaredType]] = {}
        for declared in self.iter_declared():
            by_name.setdefault(declared.name, []).append(declared)
        self._by_name: Mapping[str, tuple[DeclaredType, ...]] = MappingProxyType(
            {name: tuple(candidates) for name, candidates in by_name.items()}
        )

    @classmethod
    def from_declared(cls, declared: Iterable[DeclaredType]) -> TypeCatalog:
        """Group declared types by their ``file_path``."""
        files: dict[str, list[DeclaredType]] = {}
        for d in declared:
            files.setdefault(d.file_path, []).append(d)
        return cls(files)

    @property
    def files(self) -> list[str]:
        return list(self._files)

    def __len__(self) -> int:
        return sum(len(declared) for declared in self._files.values())

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def declared_in(self, path: str) -> tuple[DeclaredType, ...]:
        return self._files.get(path, ())

    def iter_declared(self) -> Iterator[DeclaredType]:
        """All declared types, path order then declaration order."""
        for declared in self._files.values():
            yield from declared

    def candidates(self, name: str, near: str | None = None) -> list[DeclaredType]:
        """Every declared type called ``name`` (generic args ignored), best first."""
        found = list(self._by_name.get(strip_generics(name), ()))
        if near is not None and len(found) > 1:
            # sorted() is stable: ties keep path then declaration order
            found.sort(key=lambda d: path_distance(d.file_path, near))
        return found

    def lookup_by_name(self, name: str, near: str | None = None) -> DeclaredType | None:
        """First declared type called ``name``, or None."""
        found = self.candidates(name, near)
        if len(found) > 1:
            logger.debug(
                "ambiguous_type_name",
                name=name,
                candidates=[d.file_path for d in found],
                chosen=found[0].file_path,
            )
        return found[0] if found else None

    def with_file(self, path: str, declared: Iterable[DeclaredType]) -> TypeCatalog:
        """New snapshot with ``path``'s declarations replaced."""
        files = dict(self._files)
        files[path] = tuple(declared)
        return TypeCatalog(files)

    def without_file(self, path: str) -> TypeCatalog:
        """New snapshot with ``path`` removed."""
        if path not in self._files:
            return self
        files = dict(self._files)
        del files[path]
        return TypeCatalog(files)


class CatalogStore:
    """Owner of the current catalog snapshot.

    Writers replace whole files; readers take ``snapshot()`` once per scoring
    request and keep using it even if a swap happens meanwhile.
    """

    def __init__(self, catalog: TypeCatalog | None = None) -> None:
        self._catalog = catalog or TypeCatalog()
        self._lock = threading.Lock()
        self._version = 0

    @property
    def version(self) -> int:
        """Incremented on every swap."""
        return self._version

    def snapshot(self) -> TypeCatalog:
        return self._catalog

    def swap(self, catalog: TypeCatalog) -> None:
        with self._lock:
            self._catalog = catalog
            self._version += 1
        logger.debug("catalog_swapped", files=len(catalog.files), types=len(catalog))

    def replace_file(self, path: str, declared: Iterable[DeclaredType]) -> None:
        with self._lock:
            self._catalog = self._catalog.with_file(path, declared)
            self._version += 1

    def remove_file(self, path: str) -> None:
        with self._lock:
            self._catalog = self._catalog.without_file(path)
            self._version += 1
