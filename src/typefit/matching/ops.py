"""Matching operations: score a shape against the whole catalog.

``score_all`` is the pure entry point. ``MatchOps`` binds it to a
``CatalogStore`` and the user's matching settings.
"""

from __future__ import annotations

import time

import structlog

from typefit.config.models import MatchingConfig
from typefit.matching.catalog import CatalogStore, TypeCatalog
from typefit.matching.models import CompatibilityMatch, InferredShape
from typefit.matching.proximity import proximity_key
from typefit.matching.ranker import SecondaryKey, rank_matches
from typefit.matching.scorer import CompatibilityScorer

logger = structlog.get_logger()


def score_all(
    shape: InferredShape,
    catalog: TypeCatalog,
    *,
    secondary: SecondaryKey | None = None,
    scorer: CompatibilityScorer | None = None,
) -> list[CompatibilityMatch]:
    """Score every declared type in ``catalog`` and rank the non-zero ones."""
    if scorer is None:
        scorer = CompatibilityScorer(catalog)
    if not shape.properties:
        return []
    matches = [scorer.score(shape, declared) for declared in catalog.iter_declared()]
    return rank_matches(matches, secondary)


class MatchOps:
    """Suggestion queries over the current catalog snapshot."""

    def __init__(self, store: CatalogStore, config: MatchingConfig | None = None) -> None:
        self._store = store
        self._config = config or MatchingConfig()

    @property
    def store(self) -> CatalogStore:
        return self._store

    def _scorer(self, catalog: TypeCatalog) -> CompatibilityScorer:
        return CompatibilityScorer(
            catalog,
            max_depth=self._config.max_nesting_depth,
            depth_limit_score=self._config.depth_limit_score,
        )

    def score_all(self, shape: InferredShape) -> list[CompatibilityMatch]:
        """All non-zero matches, best first."""
        catalog = self._store.snapshot()
        return score_all(shape, catalog, scorer=self._scorer(catalog))

    def suggest(
        self, shape: InferredShape, current_path: str | None = None
    ) -> list[CompatibilityMatch]:
        """Top matches above ``minimum_score``, nearer files first on ties."""
        catalog = self._store.snapshot()
        if current_path is None and shape.location is not None:
            current_path = shape.location.path

        start = time.perf_counter()
        secondary = proximity_key(current_path) if current_path else None
        ranked = score_all(shape, catalog, secondary=secondary, scorer=self._scorer(catalog))
        suggestions = [
            m for m in ranked if m.compatibility_score >= self._config.minimum_score
        ][: self._config.max_suggestions]

        logger.debug(
            "suggestions_computed",
            properties=len(shape.properties),
            candidates=len(catalog),
            matched=len(ranked),
            returned=len(suggestions),
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return suggestions

    def refresh(self, catalog: TypeCatalog) -> None:
        """Install a freshly built catalog."""
        self._store.swap(catalog)
