"""Path proximity between a declared type's file and a reference point."""

from __future__ import annotations

import os
from collections.abc import Callable

from typefit.matching.models import CompatibilityMatch


def path_distance(match_path: str, current_path: str) -> int:
    """0 for the same file, 1 for the same directory, else relative hops + 2."""
    norm_match = os.path.normpath(match_path)
    norm_current = os.path.normpath(current_path)
    if norm_match == norm_current:
        return 0

    match_dir = os.path.dirname(norm_match)
    current_dir = os.path.dirname(norm_current)
    if match_dir == current_dir:
        return 1

    try:
        relative = os.path.relpath(match_dir, current_dir)
    except ValueError:
        # Different drives on Windows
        return len(norm_match.split(os.sep)) + 2
    return len(relative.split(os.sep)) + 2


def proximity_key(current_path: str) -> Callable[[CompatibilityMatch], int]:
    """Secondary ranking key: nearer declarations first."""

    def key(match: CompatibilityMatch) -> int:
        return path_distance(match.file_path, current_path)

    return key
