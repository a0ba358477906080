"""Tests for declared-type extraction with tree-sitter."""

from __future__ import annotations

from pathlib import Path

import pytest

from typefit.core.errors import ErrorCode, ExtractionError
from typefit.extraction.declarations import DeclarationExtractor
from typefit.extraction.parser import TypeScriptParser, is_supported
from typefit.matching.models import PropertySignature


@pytest.fixture
def extractor() -> DeclarationExtractor:
    return DeclarationExtractor()


def _extract(extractor: DeclarationExtractor, source: str, name: str = "types.ts"):
    return extractor.extract(Path(f"/virtual/{name}"), source.encode())


class TestParser:
    """TypeScriptParser grammar selection and failures."""

    @pytest.mark.parametrize(
        ("filename", "supported"),
        [("a.ts", True), ("a.d.ts", True), ("a.tsx", True), ("a.mts", True), ("a.js", False)],
    )
    def test_is_supported(self, filename: str, supported: bool) -> None:
        assert is_supported(Path(filename)) is supported

    def test_tsx_uses_tsx_grammar(self) -> None:
        result = TypeScriptParser().parse(Path("/v/a.tsx"), b"const a = <div />;")
        assert result.language == "tsx"
        assert result.error_count == 0

    def test_unsupported_extension_raises(self) -> None:
        with pytest.raises(ExtractionError) as exc:
            TypeScriptParser().parse(Path("/v/a.py"), b"")
        assert exc.value.code == ErrorCode.EXTRACTION_UNSUPPORTED_LANGUAGE

    def test_unreadable_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError) as exc:
            TypeScriptParser().parse(tmp_path / "missing.ts")
        assert exc.value.code == ErrorCode.EXTRACTION_READ_FAILED
        assert exc.value.retryable


class TestDeclarationExtractor:
    """Interfaces and object type aliases."""

    def test_interface_properties(self, extractor: DeclarationExtractor) -> None:
        declared = _extract(
            extractor,
            "interface BasicUser {\n  id: number;\n  name: string;\n  email?: string;\n}\n",
        )

        assert len(declared) == 1
        user = declared[0]
        assert user.name == "BasicUser"
        assert user.kind == "interface"
        assert user.properties == (
            PropertySignature("id", "number"),
            PropertySignature("name", "string"),
            PropertySignature("email", "string", optional=True),
        )
        assert user.location is not None
        assert user.location.line == 0

    def test_exported_type_alias(self, extractor: DeclarationExtractor) -> None:
        declared = _extract(extractor, "export type Point = { x: number; y: number };\n")

        assert [d.name for d in declared] == ["Point"]
        assert declared[0].kind == "type_alias"
        assert [p.name for p in declared[0].properties] == ["x", "y"]

    def test_non_object_alias_skipped(self, extractor: DeclarationExtractor) -> None:
        declared = _extract(extractor, "type Id = string;\ntype Mode = 'a' | 'b';\n")
        assert declared == []

    def test_type_normalization(self, extractor: DeclarationExtractor) -> None:
        source = """\
interface Shapes {
  tags: string[];
  owner: User;
  page: Page<User>;
  theme: 'light' | 'dark';
  layout: { columns: number; dense?: boolean };
  created: Date;
}
"""
        (shapes,) = _extract(extractor, source)
        types = {p.name: p.type for p in shapes.properties}

        assert types == {
            "tags": "string[]",
            "owner": "User",
            "page": "Page<User>",
            "theme": "'light' | 'dark'",
            "layout": "{ columns: number; dense?: boolean }",
            "created": "Date",
        }

    def test_quoted_property_names(self, extractor: DeclarationExtractor) -> None:
        (headers,) = _extract(extractor, "interface Headers { 'content-type': string; }\n")
        assert headers.properties == (PropertySignature("content-type", "string"),)

    def test_methods_and_index_signatures_ignored(self, extractor: DeclarationExtractor) -> None:
        source = """\
interface Repo {
  name: string;
  save(): void;
  [key: string]: unknown;
}
"""
        (repo,) = _extract(extractor, source)
        assert [p.name for p in repo.properties] == ["name"]

    def test_declarations_inside_namespace(self, extractor: DeclarationExtractor) -> None:
        source = "namespace Api {\n  export interface Reply { ok: boolean; }\n}\n"
        assert [d.name for d in _extract(extractor, source)] == ["Reply"]

    def test_source_order(self, extractor: DeclarationExtractor) -> None:
        source = "interface B { b: string }\ninterface A { a: string }\n"
        assert [d.name for d in _extract(extractor, source)] == ["B", "A"]

    def test_file_path_recorded(self, extractor: DeclarationExtractor) -> None:
        (point,) = _extract(extractor, "interface P { x: number }", name="geo.ts")
        assert point.file_path == str(Path("/virtual/geo.ts"))

    def test_syntax_errors_do_not_hide_other_declarations(
        self, extractor: DeclarationExtractor
    ) -> None:
        """Tree-sitter recovers; the broken statement is only counted."""
        source = "interface A { a: string }\nlet x = ;\ninterface B { b: number }\n"

        result = TypeScriptParser().parse(Path("/virtual/broken.ts"), source.encode())
        declared = _extract(extractor, source)

        assert result.error_count > 0
        assert [d.name for d in declared] == ["A", "B"]

    def test_deep_inline_objects_fall_back_to_source_text(
        self, extractor: DeclarationExtractor
    ) -> None:
        depth = 400
        source = "type Deep = " + "{ a: " * depth + "number" + " }" * depth + ";\n"

        (deep,) = _extract(extractor, source)

        (member,) = deep.properties
        assert member.name == "a"
        assert member.type.startswith("{ a: { a: ")
        assert "number" in member.type
