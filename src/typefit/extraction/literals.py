"""Untyped object literal extraction.

Finds ``const x = { ... }`` style declarators that have no type annotation
and an object literal initializer, and infers each literal's shape. Nested
object literals are inferred recursively into ``nested_properties``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from typefit.extraction.nodes import location, property_name, walk
from typefit.extraction.parser import ParseResult, TypeScriptParser
from typefit.matching.models import (
    ANY_TYPE,
    OBJECT_TYPE,
    InferredShape,
    PropertySignature,
    SourceLocation,
)

logger = structlog.get_logger()

_VALUE_TYPES: dict[str, str] = {
    "string": "string",
    "template_string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
    "null": "null",
    "undefined": "undefined",
    "array": "any[]",
}

# Nested object literal levels inferred below a declarator
MAX_LITERAL_DEPTH = 64


@dataclass(frozen=True, slots=True)
class UntypedObject:
    """A variable initialized with an object literal and no annotation."""

    name: str
    shape: InferredShape
    location: SourceLocation


def _unwrap(node: Any) -> Any:
    """Strip parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def infer_value_type(result: ParseResult, node: Any) -> str:
    """Canonical type of a literal value; ``any`` when unknown."""
    node = _unwrap(node)
    if node is None:
        return ANY_TYPE
    if node.type in _VALUE_TYPES:
        return _VALUE_TYPES[node.type]
    if node.type == "object":
        return OBJECT_TYPE
    if node.type == "new_expression":
        constructor = node.child_by_field_name("constructor")
        if constructor is not None:
            return result.text(constructor)
    if node.type == "unary_expression":
        argument = node.child_by_field_name("argument")
        if argument is not None and argument.type == "number":
            return "number"
    return ANY_TYPE


def infer_properties(
    result: ParseResult, obj: Any, depth: int = 0
) -> tuple[PropertySignature, ...]:
    """Property signatures of an object literal node.

    Object values nested deeper than ``MAX_LITERAL_DEPTH`` keep no nested
    properties; they still infer as ``object``.
    """
    properties: list[PropertySignature] = []
    for child in obj.named_children:
        if child.type == "pair":
            name = property_name(result, child.child_by_field_name("key"))
            if name is None:
                continue
            value = child.child_by_field_name("value")
            value_type = infer_value_type(result, value)
            nested = None
            if value_type == OBJECT_TYPE and depth < MAX_LITERAL_DEPTH:
                nested = infer_properties(result, _unwrap(value), depth + 1)
            properties.append(
                PropertySignature(name=name, type=value_type, nested_properties=nested)
            )
        elif child.type == "shorthand_property_identifier":
            properties.append(PropertySignature(name=result.text(child), type=ANY_TYPE))
    return tuple(properties)


class LiteralExtractor:
    """Find untyped object literals in one file.

    Usage::

        extractor = LiteralExtractor()
        for untyped in extractor.extract(Path("src/app.ts")):
            print(untyped.name, untyped.shape.property_names)
    """

    def __init__(self, parser: TypeScriptParser | None = None) -> None:
        self._parser = parser or TypeScriptParser()

    def extract(self, path: Path, content: bytes | None = None) -> list[UntypedObject]:
        """Untyped object literals in ``path``, in source order.

        Raises:
            ExtractionError: The file cannot be read or has no grammar.
        """
        result = self._parser.parse(path, content)
        file_path = str(path)
        found: list[UntypedObject] = []

        for node in walk(result.root_node):
            if node.type != "variable_declarator":
                continue
            name_node = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if name_node is None or name_node.type != "identifier":
                continue
            if node.child_by_field_name("type") is not None:
                continue
            if value is None or value.type != "object":
                continue

            properties = infer_properties(result, value)
            if not properties:
                continue
            found.append(
                UntypedObject(
                    name=result.text(name_node),
                    shape=InferredShape(properties, location(file_path, value)),
                    location=location(file_path, name_node),
                )
            )

        logger.debug("untyped_literals_extracted", path=file_path, count=len(found))
        return found
