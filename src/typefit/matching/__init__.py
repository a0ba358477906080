"""Structural type-compatibility matcher."""

from typefit.matching.catalog import CatalogStore, TypeCatalog
from typefit.matching.compat import is_compatible, strip_generics
from typefit.matching.inline import parse_inline_object, split_top_level
from typefit.matching.models import (
    CompatibilityMatch,
    DeclaredType,
    InferredShape,
    NestedMatch,
    PropertySignature,
    SourceLocation,
)
from typefit.matching.normalizer import (
    TypeMember,
    TypeNode,
    TypeNodeKind,
    format_inline_object,
    normalize_type,
)
from typefit.matching.ops import MatchOps, score_all
from typefit.matching.proximity import path_distance, proximity_key
from typefit.matching.ranker import rank_matches
from typefit.matching.scorer import CompatibilityScorer, compare_properties

__all__ = [
    "CatalogStore",
    "CompatibilityMatch",
    "CompatibilityScorer",
    "DeclaredType",
    "InferredShape",
    "MatchOps",
    "NestedMatch",
    "PropertySignature",
    "SourceLocation",
    "TypeCatalog",
    "TypeMember",
    "TypeNode",
    "TypeNodeKind",
    "compare_properties",
    "format_inline_object",
    "is_compatible",
    "normalize_type",
    "parse_inline_object",
    "path_distance",
    "proximity_key",
    "rank_matches",
    "score_all",
    "split_top_level",
    "strip_generics",
]
