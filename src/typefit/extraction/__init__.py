"""TypeScript source extraction: declared types and untyped literals."""

from typefit.extraction.declarations import DeclarationExtractor, to_type_node
from typefit.extraction.literals import LiteralExtractor, UntypedObject, infer_value_type
from typefit.extraction.parser import GRAMMARS, ParseResult, TypeScriptParser, is_supported

__all__ = [
    "GRAMMARS",
    "DeclarationExtractor",
    "LiteralExtractor",
    "ParseResult",
    "TypeScriptParser",
    "UntypedObject",
    "infer_value_type",
    "is_supported",
    "to_type_node",
]
