"""Parse canonical inline object types back into property lists.

Inverse of ``format_inline_object``. The parser is forgiving: fields that do
not look like ``name?: type`` are dropped, and input without a balanced
``{...}`` span yields an empty list.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from typefit.matching.models import PropertySignature

_FIELD_RE = re.compile(
    r"""^\s*(?:(?P<quote>['"])(?P<quoted>(?:\\.|(?!(?P=quote)).)+)(?P=quote)"""
    r"""|(?P<name>[\w$]+))"""
    r"""\s*(?P<optional>\??)\s*:\s*(?P<type>.+)$""",
    re.DOTALL,
)

_QUOTES = "'\""


def _unquoted(text: str) -> Iterator[tuple[int, str]]:
    """``(index, char)`` for characters outside string literals.

    Quoted names like ``'a;b'`` and literal types like ``'{'`` never count
    as delimiters or braces.
    """
    quote: str | None = None
    escaped = False
    for i, char in enumerate(text):
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in _QUOTES:
            quote = char
            continue
        yield i, char


def find_outer_braces(text: str) -> tuple[int, int] | None:
    """Index span of the first ``{`` and its matching ``}``.

    Returns None when there is no ``{`` or it is never closed.
    """
    start: int | None = None
    depth = 0
    for i, char in _unquoted(text):
        if char == "{":
            if start is None:
                start = i
            depth += 1
        elif char == "}" and start is not None:
            depth -= 1
            if depth == 0:
                return start, i
    return None


def split_top_level(content: str, delimiter: str = ";") -> list[str]:
    """Split on ``delimiter`` only where brace depth is zero."""
    parts: list[str] = []
    last = 0
    depth = 0
    for i, char in _unquoted(content):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == delimiter and depth == 0:
            parts.append(content[last:i])
            last = i + 1
    tail = content[last:]
    if tail.strip():
        parts.append(tail)
    return parts



def parse_field(text: str) -> PropertySignature | None:
    """Parse one ``name?: type`` field, None when malformed."""
    match = _FIELD_RE.match(text.strip())
    if match is None:
        return None
    type_text = match.group("type").strip()
    if not type_text:
        return None
    name = match.group("name") or match.group("quoted").replace("\\'", "'")
    return PropertySignature(
        name=name,
        type=type_text,
        optional=match.group("optional") == "?",
    )


def parse_inline_object(text: str) -> list[PropertySignature]:
    """Parse ``{ a: string; b?: { c: number } }`` into its top-level fields."""
    span = find_outer_braces(text)
    if span is None:
        return []
    start, end = span
    content = text[start + 1 : end].strip()
    if not content:
        return []

    properties: list[PropertySignature] = []
    for part in split_top_level(content, ";"):
        if not part.strip():
            continue
        prop = parse_field(part)
        if prop is not None:
            properties.append(prop)
    return properties
