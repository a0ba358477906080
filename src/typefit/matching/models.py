"""Value types shared by the matcher and its collaborators.

All records are frozen: an inferred shape is built once per literal, declared
types are replaced wholesale when their file changes, and a match is produced
fresh for every (shape, declared type) pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# Canonical type strings are plain ``str``: a primitive tag, ``X[]``, an inline
# object ``{ a?: t; b: u }``, a reference name (generic arguments kept
# verbatim) or a union ``A | B``.
CanonicalTypeString = str

PRIMITIVE_TYPES: frozenset[str] = frozenset(
    ("string", "number", "boolean", "any", "void", "null", "undefined", "object")
)

ANY_TYPE = "any"
OBJECT_TYPE = "object"

DeclarationKind = Literal["interface", "type_alias"]


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Zero-based span in a source file."""

    path: str
    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class PropertySignature:
    """A named property and its canonical type.

    ``nested_properties`` is set only when the property value was itself an
    object literal; it stays ``None`` for primitives, arrays and ``any``.
    """

    name: str
    type: CanonicalTypeString
    optional: bool = False
    nested_properties: tuple[PropertySignature, ...] | None = None


@dataclass(frozen=True, slots=True)
class InferredShape:
    """Structure inferred from one untyped object literal."""

    properties: tuple[PropertySignature, ...]
    location: SourceLocation | None = None

    @property
    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]


@dataclass(frozen=True, slots=True)
class DeclaredType:
    """An interface or object type alias found in project source.

    Names are unique per file only; two files may declare the same name.
    """

    name: str
    properties: tuple[PropertySignature, ...]
    file_path: str
    location: SourceLocation | None = None
    kind: DeclarationKind = "interface"


@dataclass(frozen=True, slots=True)
class NestedMatch:
    """Per-property score of a declared property present in the shape."""

    property_name: str
    score: float
    is_nested: bool


@dataclass(frozen=True, slots=True)
class CompatibilityMatch:
    """Score and detail for one candidate declared type."""

    type_name: str
    file_path: str
    location: SourceLocation | None
    compatibility_score: float
    missing_properties: tuple[str, ...] = ()
    extra_properties: tuple[str, ...] = ()
    is_exact_match: bool = False
    nested_matches: tuple[NestedMatch, ...] = field(default_factory=tuple)

    @property
    def percentage(self) -> int:
        """Score as a rounded percentage, as shown to users."""
        return round(self.compatibility_score * 100)

    def to_dict(self) -> dict[str, object]:
        """Serialize for JSON output."""
        return {
            "type_name": self.type_name,
            "file_path": self.file_path,
            "line": self.location.line if self.location else None,
            "compatibility_score": self.compatibility_score,
            "missing_properties": list(self.missing_properties),
            "extra_properties": list(self.extra_properties),
            "is_exact_match": self.is_exact_match,
            "nested_matches": [
                {"property_name": m.property_name, "score": m.score, "is_nested": m.is_nested}
                for m in self.nested_matches
            ],
        }
