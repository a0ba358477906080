"""Declared-type extraction from TypeScript sources.

Collects ``interface`` declarations and ``type`` aliases whose value is an
object type, at any nesting level (exports and namespaces included). Each
property signature's type annotation becomes a ``TypeNode`` and is normalized.
Methods, call signatures and index signatures are not properties and are
skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from typefit.extraction.nodes import location, property_name, walk
from typefit.extraction.parser import ParseResult, TypeScriptParser
from typefit.matching.models import DeclarationKind, DeclaredType
from typefit.matching.normalizer import TypeMember, TypeNode, member_properties

logger = structlog.get_logger()

# interface_body is the object_type alias used by recent grammar releases
_OBJECT_BODIES = frozenset(("object_type", "interface_body"))

_PRIMITIVE_KEYWORDS = frozenset(
    ("string", "number", "boolean", "any", "void", "object", "null", "undefined")
)

# Array and inline-object levels converted per property type
MAX_TYPE_DEPTH = 64


def to_type_node(result: ParseResult, node: Any, depth: int = 0) -> TypeNode | None:
    """Convert a tree-sitter type node into a parser-neutral ``TypeNode``.

    Arrays and inline objects nested deeper than ``MAX_TYPE_DEPTH`` become
    ``TypeNode.other`` with their source text.
    """
    if node is None:
        return None

    if node.type == "type_annotation":
        inner = node.named_children
        if not inner:
            return None
        node = inner[0]

    if node.type == "predefined_type":
        text = result.text(node)
        if text in _PRIMITIVE_KEYWORDS:
            return TypeNode.primitive(text)
        return TypeNode.other(text)

    if node.type in _OBJECT_BODIES or node.type == "array_type":
        if depth >= MAX_TYPE_DEPTH:
            return TypeNode.other(result.text(node))

    if node.type == "array_type":
        inner = node.named_children
        return TypeNode.array(to_type_node(result, inner[0], depth + 1) if inner else None)

    if node.type in ("type_identifier", "nested_type_identifier", "generic_type"):
        return TypeNode.reference(result.text(node))

    if node.type in _OBJECT_BODIES:
        return TypeNode.object_type(_members(result, node, depth + 1))

    return TypeNode.other(result.text(node))


def _members(result: ParseResult, body: Any, depth: int = 0) -> list[TypeMember]:
    members: list[TypeMember] = []
    for child in body.named_children:
        if child.type != "property_signature":
            continue
        name = property_name(result, child.child_by_field_name("name"))
        if name is None:
            continue
        optional = any(c.type == "?" for c in child.children)
        members.append(
            TypeMember(
                name=name,
                type=to_type_node(result, child.child_by_field_name("type"), depth),
                optional=optional,
            )
        )
    return members


class DeclarationExtractor:
    """Extract structural type declarations from one file.

    Usage::

        extractor = DeclarationExtractor()
        declared = extractor.extract(Path("src/types/user.ts"))
    """

    def __init__(self, parser: TypeScriptParser | None = None) -> None:
        self._parser = parser or TypeScriptParser()

    def extract(self, path: Path, content: bytes | None = None) -> list[DeclaredType]:
        """Declared types in ``path``, in source order.

        Raises:
            ExtractionError: The file cannot be read or has no grammar.
        """
        result = self._parser.parse(path, content)
        file_path = str(path)
        declared: list[DeclaredType] = []

        for node in walk(result.root_node):
            if node.type == "interface_declaration":
                found = self._declaration(result, file_path, node, "body", "interface")
            elif node.type == "type_alias_declaration":
                found = self._declaration(result, file_path, node, "value", "type_alias")
            else:
                continue
            if found is not None:
                declared.append(found)

        logger.debug("declarations_extracted", path=file_path, count=len(declared))
        return declared

    def _declaration(
        self,
        result: ParseResult,
        file_path: str,
        node: Any,
        body_field: str,
        kind: DeclarationKind,
    ) -> DeclaredType | None:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name(body_field)
        if name_node is None or body is None or body.type not in _OBJECT_BODIES:
            return None

        properties = tuple(member_properties(_members(result, body)))
        return DeclaredType(
            name=result.text(name_node),
            properties=properties,
            file_path=file_path,
            location=location(file_path, name_node),
            kind=kind,
        )
