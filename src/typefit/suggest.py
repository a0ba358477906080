"""Suggestion service: untyped literals in a file, each with ranked matches.

Usage::

    service = SuggestionService(Path("."))
    service.build()
    result = service.suggest_file(Path("src/app.ts"))
    for item in result.literals:
        print(item.untyped.name, [m.type_name for m in item.matches])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from typefit.config.models import TypeFitConfig
from typefit.extraction.declarations import DeclarationExtractor
from typefit.extraction.literals import LiteralExtractor, UntypedObject
from typefit.extraction.parser import TypeScriptParser
from typefit.index.indexer import BackgroundCatalogIndexer
from typefit.index.scanner import CatalogBuilder, ScanStats
from typefit.matching.catalog import CatalogStore
from typefit.matching.models import CompatibilityMatch
from typefit.matching.ops import MatchOps

logger = structlog.get_logger()


@dataclass
class LiteralSuggestions:
    """One untyped literal and its ranked candidate types."""

    untyped: UntypedObject
    matches: list[CompatibilityMatch]

    def to_dict(self) -> dict[str, Any]:
        loc = self.untyped.location
        return {
            "name": self.untyped.name,
            "line": loc.line + 1,
            "column": loc.column + 1,
            "properties": list(self.untyped.shape.property_names),
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass
class FileSuggestions:
    """Suggestions for every untyped literal in one file."""

    path: str
    literals: list[LiteralSuggestions] = field(default_factory=list)

    @property
    def match_count(self) -> int:
        return sum(len(item.matches) for item in self.literals)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "literals": [item.to_dict() for item in self.literals]}


class SuggestionService:
    """Owns the catalog for one project root and answers suggestion queries."""

    def __init__(self, root: Path, config: TypeFitConfig | None = None) -> None:
        self.root = root.resolve()
        self.config = config or TypeFitConfig()
        self.store = CatalogStore()
        self.builder = CatalogBuilder(self.config.index, DeclarationExtractor(TypeScriptParser()))
        self.ops = MatchOps(self.store, self.config.matching)
        self._literals = LiteralExtractor(TypeScriptParser())
        self._indexer: BackgroundCatalogIndexer | None = None

    @property
    def indexer(self) -> BackgroundCatalogIndexer | None:
        return self._indexer

    def build(self) -> ScanStats:
        """Full scan of the root; replaces the live catalog."""
        catalog, stats = self.builder.build(self.root)
        self.ops.refresh(catalog)
        return stats

    def create_indexer(self) -> BackgroundCatalogIndexer:
        """Attach a background indexer sharing this service's store."""
        if self._indexer is None:
            self._indexer = BackgroundCatalogIndexer(
                store=self.store,
                builder=self.builder,
                debounce_seconds=self.config.indexer.debounce_sec,
                max_workers=self.config.indexer.max_workers,
            )
        return self._indexer

    def suggest_file(self, path: Path, content: bytes | None = None) -> FileSuggestions:
        """Suggestions against the current catalog snapshot.

        Raises:
            ExtractionError: ``path`` cannot be read or is not TypeScript.
        """
        path = path.resolve()
        current_path = str(path)
        result = FileSuggestions(path=current_path)
        for untyped in self._literals.extract(path, content):
            matches = self.ops.suggest(untyped.shape, current_path)
            result.literals.append(LiteralSuggestions(untyped, matches))

        logger.debug(
            "file_suggestions",
            path=current_path,
            literals=len(result.literals),
            matches=result.match_count,
        )
        return result

    async def suggest_file_when_fresh(
        self, path: Path, content: bytes | None = None
    ) -> FileSuggestions:
        """Like ``suggest_file``, after pending catalog updates settle."""
        if self._indexer is not None:
            await self._indexer.wait_until_fresh(self.config.indexer.freshness_timeout_sec)
        return self.suggest_file(path, content)
