"""Tests for the type compatibility rule."""

import pytest

from typefit.matching.compat import is_compatible, strip_generics, union_members


class TestIsCompatible:
    """is_compatible(inferred, declared)."""

    @pytest.mark.parametrize(
        ("inferred", "declared"),
        [
            ("string", "string"),
            ("any", "number"),
            ("number", "any"),
            ("Date", "Date"),
            ("ReadonlyDate", "Date"),
            ("string[]", "string[]"),
            ("any[]", "User[]"),
            ("number", "string | number"),
            ("null", "User | null"),
            ("string[][]", "string[][]"),
        ],
    )
    def test_compatible_pairs(self, inferred: str, declared: str) -> None:
        assert is_compatible(inferred, declared)

    @pytest.mark.parametrize(
        ("inferred", "declared"),
        [
            ("string", "number"),
            ("string[]", "number[]"),
            ("string", "string[]"),
            ("boolean", "string | number"),
            ("object", "User"),
        ],
    )
    def test_incompatible_pairs(self, inferred: str, declared: str) -> None:
        assert not is_compatible(inferred, declared)

    def test_string_does_not_match_string_literal_union(self) -> None:
        """Union members compare textually, so a primitive never equals a literal member."""
        assert not is_compatible("string", "'light' | 'dark' | 'auto'")

    def test_union_member_text_must_match_exactly(self) -> None:
        assert is_compatible("'light'", "'light' | 'dark'")


class TestHelpers:
    """strip_generics() and union_members()."""

    def test_strip_generics(self) -> None:
        assert strip_generics("Page<User>") == "Page"
        assert strip_generics("Map<string, Array<User>>") == "Map"
        assert strip_generics("User") == "User"

    def test_union_members_trimmed(self) -> None:
        assert union_members("A |B| C") == ["A", "B", "C"]
