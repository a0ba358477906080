"""Order candidate matches for presentation."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from typefit.matching.models import CompatibilityMatch

SecondaryKey = Callable[[CompatibilityMatch], Any]


def rank_matches(
    matches: Iterable[CompatibilityMatch],
    secondary: SecondaryKey | None = None,
) -> list[CompatibilityMatch]:
    """Drop zero scores and sort by score descending.

    ``secondary`` only orders matches whose scores are equal (ascending key).
    """
    candidates = [m for m in matches if m.compatibility_score > 0]
    if secondary is None:
        return sorted(candidates, key=lambda m: -m.compatibility_score)
    return sorted(candidates, key=lambda m: (-m.compatibility_score, secondary(m)))
