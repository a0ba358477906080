"""Small helpers over tree-sitter nodes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from typefit.extraction.parser import ParseResult
from typefit.matching.models import SourceLocation

# Property keys that name nothing statically
_DYNAMIC_KEYS = frozenset(("computed_property_name",))


def walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal of named nodes."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.named_children))


def location(path: str, node: Any) -> SourceLocation:
    return SourceLocation(
        path=path,
        line=node.start_point[0],
        column=node.start_point[1],
        end_line=node.end_point[0],
        end_column=node.end_point[1],
    )


def property_name(result: ParseResult, node: Any) -> str | None:
    """Key text of a property, unquoted. None for computed keys."""
    if node is None or node.type in _DYNAMIC_KEYS:
        return None
    text = result.text(node)
    if node.type == "string" and len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
        return text[1:-1]
    return text
