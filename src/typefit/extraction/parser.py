"""Tree-sitter parsing for TypeScript sources.

Grammars come from the ``tree_sitter_typescript`` package, which ships two
languages: ``typescript`` and ``tsx``.
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import tree_sitter

from typefit.core.errors import ExtractionError

logger = structlog.get_logger()

GRAMMAR_MODULE = "tree_sitter_typescript"

# extension -> (grammar name, language function in GRAMMAR_MODULE)
GRAMMARS: dict[str, tuple[str, str]] = {
    ".ts": ("typescript", "language_typescript"),
    ".mts": ("typescript", "language_typescript"),
    ".cts": ("typescript", "language_typescript"),
    ".tsx": ("tsx", "language_tsx"),
}


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    root_node: Any  # Tree-sitter Node
    language: str
    content: bytes
    error_count: int

    def text(self, node: Any) -> str:
        """Source text of ``node``."""
        return self.content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in GRAMMARS


@dataclass
class TypeScriptParser:
    """
    Tree-sitter parser for TypeScript and TSX files.

    Usage::

        parser = TypeScriptParser()
        result = parser.parse(Path("src/types.ts"))
        for child in result.root_node.named_children:
            ...
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, grammar: str, language_func: str) -> Any:
        """Get or load a Tree-sitter language."""
        if grammar in self._languages:
            return self._languages[grammar]
        try:
            mod = importlib.import_module(GRAMMAR_MODULE)
            lang = tree_sitter.Language(getattr(mod, language_func)())
        except (ImportError, AttributeError) as err:
            raise ExtractionError.parse_failed(grammar, f"grammar not available: {err}") from err
        self._languages[grammar] = lang
        return lang

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (used for grammar selection)
            content: File content as bytes. If None, reads from path.

        Raises:
            ExtractionError: Unsupported extension or unreadable file.
        """
        ext = path.suffix.lower()
        if ext not in GRAMMARS:
            raise ExtractionError.unsupported_language(str(path))

        if content is None:
            try:
                content = path.read_bytes()
            except OSError as e:
                raise ExtractionError.read_failed(str(path), str(e)) from e

        grammar, language_func = GRAMMARS[ext]
        # One tree_sitter.Parser per instance; indexer workers may share it
        with self._lock:
            self._parser.language = self._get_language(grammar, language_func)
            tree = self._parser.parse(content)

        error_count = 0
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        if error_count:
            logger.debug("parse_errors", path=str(path), error_count=error_count)

        return ParseResult(
            tree=tree,
            root_node=tree.root_node,
            language=grammar,
            content=content,
            error_count=error_count,
        )
