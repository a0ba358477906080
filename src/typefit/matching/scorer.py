"""Structural compatibility scoring.

Scores an inferred literal shape against one declared type.

Per property, with a same-named declared property on the other side:
- 1.0 when the type strings are compatible (see ``compat``)
- nested match when the literal value is an object and the declared type is
  not ``object``:
    - reference resolvable in the catalog: recurse into its properties
      (0.1 if the literal carried no nested properties)
    - inline object type: parse and recurse (0.1 if either side is empty)
    - anything else: 0.5
- 0.3 otherwise

A property list scores as a weighted mean: each declared property weighs 1
and contributes its property score, 0.5 if optional and absent, 0 if required
and absent. Each literal property unknown to the declared type adds 1 weight
and nothing to the sum.

Recursion follows literal nesting and is capped at ``max_depth``; past the cap
a nested property earns ``depth_limit_score`` without being inspected.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from typefit.matching.catalog import TypeCatalog
from typefit.matching.compat import is_compatible
from typefit.matching.inline import parse_inline_object
from typefit.matching.models import (
    OBJECT_TYPE,
    CompatibilityMatch,
    DeclaredType,
    InferredShape,
    NestedMatch,
    PropertySignature,
)

logger = structlog.get_logger()

EXACT_SCORE = 1.0
MISMATCH_SCORE = 0.3
OPAQUE_NESTED_SCORE = 0.5
UNKNOWN_SHAPE_SCORE = 0.1
MISSING_OPTIONAL_SCORE = 0.5

DEFAULT_MAX_DEPTH = 32
DEFAULT_DEPTH_LIMIT_SCORE = 0.5


@dataclass
class _Tally:
    """Running weighted sum for one property list."""

    total: float = 0.0
    weight: int = 0

    @property
    def score(self) -> float:
        if self.weight == 0:
            return 0.0
        return max(0.0, min(1.0, self.total / self.weight))


def compare_properties(
    shape: InferredShape, declared: DeclaredType
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Missing required names and extra literal names, in source order."""
    present = {p.name for p in shape.properties}
    declared_names = {p.name for p in declared.properties}

    missing: dict[str, None] = {}
    for prop in declared.properties:
        if not prop.optional and prop.name not in present:
            missing[prop.name] = None

    extra: dict[str, None] = {}
    for prop in shape.properties:
        if prop.name not in declared_names:
            extra[prop.name] = None

    return tuple(missing), tuple(extra)


class CompatibilityScorer:
    """Scores shapes against declared types using one catalog snapshot.

    Usage::

        scorer = CompatibilityScorer(store.snapshot())
        match = scorer.score(shape, declared)
    """

    def __init__(
        self,
        catalog: TypeCatalog,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        depth_limit_score: float = DEFAULT_DEPTH_LIMIT_SCORE,
    ) -> None:
        self._catalog = catalog
        self._max_depth = max_depth
        self._depth_limit_score = depth_limit_score

    @property
    def catalog(self) -> TypeCatalog:
        return self._catalog

    def score(self, shape: InferredShape, declared: DeclaredType) -> CompatibilityMatch:
        """Full match record for one declared type."""
        score, nested = self.shape_score(shape, declared)
        missing, extra = compare_properties(shape, declared)
        return CompatibilityMatch(
            type_name=declared.name,
            file_path=declared.file_path,
            location=declared.location,
            compatibility_score=score,
            missing_properties=missing,
            extra_properties=extra,
            is_exact_match=not missing and not extra,
            nested_matches=tuple(nested),
        )

    def shape_score(
        self, shape: InferredShape, declared: DeclaredType
    ) -> tuple[float, list[NestedMatch]]:
        """Top-level score plus per-property detail.

        A shape sharing no property name with the declared type scores 0,
        even when the declared properties are all optional.
        """
        shape_names = {p.name for p in shape.properties}
        if not any(p.name in shape_names for p in declared.properties):
            return 0.0, []

        details: list[NestedMatch] = []
        tally = self._tally(
            shape.properties,
            declared.properties,
            depth=0,
            near=declared.file_path,
            details=details,
        )
        logger.debug(
            "shape_scored",
            type_name=declared.name,
            file_path=declared.file_path,
            total=tally.total,
            weight=tally.weight,
            score=tally.score,
        )
        return tally.score, details

    def nested_score(
        self,
        obj_props: Sequence[PropertySignature],
        decl_props: Sequence[PropertySignature],
        depth: int = 0,
        near: str | None = None,
    ) -> float:
        """Score two property lists: 1.0 if both empty, 0.0 if one is."""
        if not obj_props and not decl_props:
            return 1.0
        if not obj_props or not decl_props:
            return 0.0
        return self._tally(obj_props, decl_props, depth=depth, near=near).score

    def property_score(
        self,
        obj_prop: PropertySignature,
        decl_prop: PropertySignature,
        depth: int = 0,
        near: str | None = None,
    ) -> float:
        """Score one same-named property pair."""
        return self._property_score(obj_prop, decl_prop, depth, near)[0]

    def match_nested(
        self,
        obj_prop: PropertySignature,
        decl_prop: PropertySignature,
        depth: int = 0,
        near: str | None = None,
    ) -> float:
        """Score an object-literal property against a non-``object`` declared type."""
        if depth >= self._max_depth:
            logger.debug("nested_depth_limit", property=obj_prop.name, depth=depth)
            return self._depth_limit_score

        referenced = self._catalog.lookup_by_name(decl_prop.type, near=near)
        if referenced is not None:
            if obj_prop.nested_properties is None:
                return UNKNOWN_SHAPE_SCORE
            score = self.nested_score(
                obj_prop.nested_properties,
                referenced.properties,
                depth=depth + 1,
                near=referenced.file_path,
            )
            logger.debug(
                "nested_match",
                property=obj_prop.name,
                referenced=referenced.name,
                file_path=referenced.file_path,
                score=score,
            )
            return score

        if "{" in decl_prop.type:
            inline_props = parse_inline_object(decl_prop.type)
            if obj_prop.nested_properties is not None and inline_props:
                score = self.nested_score(
                    obj_prop.nested_properties, inline_props, depth=depth + 1, near=near
                )
                logger.debug(
                    "nested_match",
                    property=obj_prop.name,
                    inline_fields=len(inline_props),
                    score=score,
                )
                return score
            return UNKNOWN_SHAPE_SCORE

        return OPAQUE_NESTED_SCORE

    def _property_score(
        self,
        obj_prop: PropertySignature,
        decl_prop: PropertySignature,
        depth: int,
        near: str | None,
    ) -> tuple[float, bool]:
        if is_compatible(obj_prop.type, decl_prop.type):
            return EXACT_SCORE, False
        if obj_prop.type == OBJECT_TYPE and decl_prop.type != OBJECT_TYPE:
            return self.match_nested(obj_prop, decl_prop, depth, near), True
        logger.debug(
            "property_mismatch",
            property=obj_prop.name,
            inferred=obj_prop.type,
            declared=decl_prop.type,
        )
        return MISMATCH_SCORE, False

    def _tally(
        self,
        obj_props: Sequence[PropertySignature],
        decl_props: Sequence[PropertySignature],
        *,
        depth: int,
        near: str | None,
        details: list[NestedMatch] | None = None,
    ) -> _Tally:
        obj_by_name = {p.name: p for p in obj_props}
        decl_by_name = {p.name: p for p in decl_props}
        tally = _Tally()

        for name, decl_prop in decl_by_name.items():
            tally.weight += 1
            obj_prop = obj_by_name.get(name)
            if obj_prop is not None:
                score, is_nested = self._property_score(obj_prop, decl_prop, depth, near)
                tally.total += score
                if details is not None:
                    details.append(NestedMatch(name, score, is_nested))
            elif decl_prop.optional:
                tally.total += MISSING_OPTIONAL_SCORE

        tally.weight += sum(1 for name in obj_by_name if name not in decl_by_name)
        return tally
