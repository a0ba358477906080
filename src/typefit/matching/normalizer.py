"""Canonical type strings from type syntax.

The syntax collaborator hands over a small ``TypeNode`` tree; this module
turns it into the canonical string form the scorer compares:

    string, number, ...        primitive keywords map 1:1
    Foo[]                      arrays recurse on the element type
    Foo<Bar>                   references keep their text, generics included
    { a?: string; b: number }  inline objects, ``; `` separated
    <raw text>                 anything else, ``any`` when there is no text

Generic arguments are only stripped at catalog lookup time.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from typefit.matching.models import ANY_TYPE, PropertySignature

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


class TypeNodeKind(Enum):
    """Syntactic category of a type node."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    REFERENCE = "reference"
    OBJECT = "object"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class TypeMember:
    """A property member of an inline object type."""

    name: str
    type: TypeNode | None
    optional: bool = False


@dataclass(frozen=True, slots=True)
class TypeNode:
    """Parser-neutral view of a type annotation.

    ``element`` is set for arrays, ``members`` for inline objects. ``text``
    holds the keyword, the reference text, or the raw source for anything
    the normalizer does not model.
    """

    kind: TypeNodeKind
    text: str = ""
    element: TypeNode | None = None
    members: tuple[TypeMember, ...] = field(default_factory=tuple)

    @classmethod
    def primitive(cls, keyword: str) -> TypeNode:
        return cls(TypeNodeKind.PRIMITIVE, text=keyword)

    @classmethod
    def array(cls, element: TypeNode | None) -> TypeNode:
        return cls(TypeNodeKind.ARRAY, element=element)

    @classmethod
    def reference(cls, text: str) -> TypeNode:
        return cls(TypeNodeKind.REFERENCE, text=text)

    @classmethod
    def object_type(cls, members: Iterable[TypeMember]) -> TypeNode:
        return cls(TypeNodeKind.OBJECT, members=tuple(members))

    @classmethod
    def other(cls, text: str) -> TypeNode:
        return cls(TypeNodeKind.OTHER, text=text)


def normalize_type(node: TypeNode | None) -> str:
    """Convert a type node to its canonical string. Never raises."""
    if node is None:
        return ANY_TYPE

    if node.kind is TypeNodeKind.ARRAY:
        return f"{normalize_type(node.element)}[]"

    if node.kind is TypeNodeKind.OBJECT:
        return format_inline_object(member_properties(node.members))

    # Primitive keywords, references and unrecognized syntax all keep their text
    return node.text.strip() or ANY_TYPE


def member_properties(members: Iterable[TypeMember]) -> list[PropertySignature]:
    """Normalize inline-object members into property signatures."""
    return [
        PropertySignature(name=m.name, type=normalize_type(m.type), optional=m.optional)
        for m in members
    ]


def format_property_name(name: str) -> str:
    """Quote names that are not plain identifiers (``'content-type'``)."""
    if _IDENTIFIER_RE.match(name):
        return name
    return "'" + name.replace("'", "\\'") + "'"


def format_inline_object(properties: Iterable[PropertySignature]) -> str:
    """Serialize properties as ``{ a?: t; b: u }``."""
    fields = [
        f"{format_property_name(p.name)}{'?' if p.optional else ''}: {p.type}" for p in properties
    ]
    return "{ " + "; ".join(fields) + " }"
