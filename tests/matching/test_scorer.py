"""Tests for CompatibilityScorer.

Scenarios use the BasicUser / User / UserProfile family of types, declared in
one file the way a small app would.
"""

from __future__ import annotations

import pytest

from typefit.matching.catalog import TypeCatalog
from typefit.matching.models import DeclaredType, InferredShape, PropertySignature
from typefit.matching.scorer import CompatibilityScorer, compare_properties

TYPES_PATH = "/app/src/types.ts"


def p(name: str, type_: str, *, optional: bool = False, nested=None) -> PropertySignature:
    nested_props = tuple(nested) if nested is not None else None
    return PropertySignature(name, type_, optional=optional, nested_properties=nested_props)


def declared(name: str, *props: PropertySignature, path: str = TYPES_PATH) -> DeclaredType:
    return DeclaredType(name=name, properties=props, file_path=path)


def shape(*props: PropertySignature) -> InferredShape:
    return InferredShape(props)


BASIC_USER = declared("BasicUser", p("id", "number"), p("name", "string"), p("email", "string"))
USER_PROFILE = declared(
    "UserProfile", p("avatar", "string"), p("bio", "string"), p("socialLinks", "string[]")
)
USER = declared("User", p("id", "number"), p("name", "string"), p("profile", "UserProfile"))


@pytest.fixture
def scorer() -> CompatibilityScorer:
    return CompatibilityScorer(TypeCatalog.from_declared([BASIC_USER, USER_PROFILE, USER]))


class TestEndToEndScenarios:
    """Reference scenarios."""

    def test_exact_shape_scores_one(self, scorer: CompatibilityScorer) -> None:
        """Given all properties present with matching types, then score 1.0 and exact."""
        match = scorer.score(
            shape(p("id", "number"), p("name", "string"), p("email", "string")), BASIC_USER
        )

        assert match.compatibility_score == 1.0
        assert match.is_exact_match
        assert match.missing_properties == ()
        assert match.extra_properties == ()

    def test_missing_required_property(self, scorer: CompatibilityScorer) -> None:
        """Given email missing, then 2/3 and email reported missing."""
        match = scorer.score(shape(p("id", "number"), p("name", "string")), BASIC_USER)

        assert match.compatibility_score == pytest.approx(2 / 3)
        assert match.missing_properties == ("email",)
        assert not match.is_exact_match

    def test_nested_reference_gives_fractional_credit(self, scorer: CompatibilityScorer) -> None:
        """Given profile has 1 of 3 UserProfile properties, then nested credit is 1/3."""
        literal = shape(
            p("id", "number"),
            p("name", "string"),
            p("profile", "object", nested=[p("bio", "string")]),
        )

        match = scorer.score(literal, USER)

        assert match.compatibility_score == pytest.approx((1 + 1 + 1 / 3) / 3)
        profile = next(m for m in match.nested_matches if m.property_name == "profile")
        assert profile.is_nested
        assert profile.score == pytest.approx(1 / 3)
        assert match.is_exact_match


class TestExactMatchFlag:
    """is_exact_match depends on names only."""

    def test_type_mismatch_still_exact(self, scorer: CompatibilityScorer) -> None:
        """Given age is a string but declared number, then exact with score below 1."""
        person = declared("Person", p("name", "string"), p("age", "number"))

        match = scorer.score(shape(p("name", "string"), p("age", "string")), person)

        assert match.is_exact_match
        assert match.compatibility_score == pytest.approx((1 + 0.3) / 2)

    def test_extra_property_not_exact(self, scorer: CompatibilityScorer) -> None:
        literal = shape(
            p("id", "number"), p("name", "string"), p("email", "string"), p("role", "string")
        )

        match = scorer.score(literal, BASIC_USER)

        assert match.extra_properties == ("role",)
        assert not match.is_exact_match
        assert match.compatibility_score == pytest.approx(3 / 4)


class TestPropertyScoring:
    """Per-property rules."""

    def test_union_with_string_literals_rejects_string(self, scorer: CompatibilityScorer) -> None:
        """Given inferred string vs 'light' | 'dark' | 'auto', then scored as a mismatch."""
        settings = declared("Settings", p("theme", "'light' | 'dark' | 'auto'"))

        match = scorer.score(shape(p("theme", "string")), settings)

        assert match.compatibility_score == pytest.approx(0.3)

    def test_missing_optional_gets_half_credit(self, scorer: CompatibilityScorer) -> None:
        opts = declared("Opts", p("a", "string"), p("b", "number", optional=True))

        match = scorer.score(shape(p("a", "string")), opts)

        assert match.compatibility_score == pytest.approx(1.5 / 2)
        assert match.missing_properties == ()
        assert match.is_exact_match

    def test_unresolvable_reference_gets_default_credit(self, scorer: CompatibilityScorer) -> None:
        """Unknown names are not an error: the nested property earns 0.5."""
        order = declared("Order", p("customer", "Customer"))

        match = scorer.score(shape(p("customer", "object", nested=[p("id", "number")])), order)

        assert match.compatibility_score == pytest.approx(0.5)

    def test_reference_without_nested_properties(self, scorer: CompatibilityScorer) -> None:
        holder = declared("Holder", p("profile", "UserProfile"))

        match = scorer.score(shape(p("profile", "object")), holder)

        assert match.compatibility_score == pytest.approx(0.1)

    def test_inline_object_type_recurses(self, scorer: CompatibilityScorer) -> None:
        settings = declared("Settings", p("layout", "{ columns: number; dense?: boolean }"))
        literal = shape(p("layout", "object", nested=[p("columns", "number")]))

        match = scorer.score(literal, settings)

        assert match.compatibility_score == pytest.approx(1.5 / 2)

    def test_empty_inline_object_type(self, scorer: CompatibilityScorer) -> None:
        settings = declared("Settings", p("layout", "{  }"))
        literal = shape(p("layout", "object", nested=[p("columns", "number")]))

        assert scorer.score(literal, settings).compatibility_score == pytest.approx(0.1)

    def test_object_against_object_is_compatible(self, scorer: CompatibilityScorer) -> None:
        bag = declared("Bag", p("meta", "object"))

        match = scorer.score(shape(p("meta", "object", nested=[p("k", "string")])), bag)

        assert match.compatibility_score == 1.0

    def test_any_is_always_compatible(self, scorer: CompatibilityScorer) -> None:
        loose = declared("Loose", p("value", "any"))
        assert scorer.score(shape(p("value", "boolean")), loose).compatibility_score == 1.0


class TestNestedScore:
    """nested_score() edge cases."""

    def test_both_empty_is_one(self, scorer: CompatibilityScorer) -> None:
        assert scorer.nested_score([], []) == 1.0

    def test_one_side_empty_is_zero(self, scorer: CompatibilityScorer) -> None:
        assert scorer.nested_score([p("a", "string")], []) == 0.0
        assert scorer.nested_score([], [p("a", "string")]) == 0.0

    def test_depth_limit_returns_configured_credit(self) -> None:
        """Past max_depth, nested properties earn depth_limit_score without recursion."""
        node = declared("Node", p("child", "Node"), p("value", "number"))
        scorer = CompatibilityScorer(
            TypeCatalog.from_declared([node]), max_depth=2, depth_limit_score=0.25
        )

        leaf = [p("value", "number")]
        level2 = [p("child", "object", nested=leaf), p("value", "number")]
        level1 = [p("child", "object", nested=level2), p("value", "number")]
        literal = shape(p("child", "object", nested=level1), p("value", "number"))

        # depth 0 -> 1 -> 2 recurse; the child at depth 2 is capped
        inner = (0.25 + 1) / 2
        middle = (inner + 1) / 2
        outer = (middle + 1) / 2
        assert scorer.score(literal, node).compatibility_score == pytest.approx(outer)

    def test_self_referential_type_terminates(self) -> None:
        node = declared("Node", p("next", "Node"))
        scorer = CompatibilityScorer(TypeCatalog.from_declared([node]))

        literal: list[PropertySignature] = [p("next", "object", nested=[])]
        for _ in range(100):
            literal = [p("next", "object", nested=literal)]

        score = scorer.score(InferredShape(tuple(literal)), node).compatibility_score
        assert 0.0 <= score <= 1.0


class TestScoreInvariants:
    """Range, exclusion and determinism."""

    def test_no_shared_names_scores_zero(self, scorer: CompatibilityScorer) -> None:
        match = scorer.score(shape(p("title", "string"), p("body", "string")), BASIC_USER)
        assert match.compatibility_score == 0.0

    def test_no_shared_names_with_all_optional_declared(self, scorer: CompatibilityScorer) -> None:
        opts = declared("Opts", p("a", "string", optional=True))
        assert scorer.score(shape(p("z", "string")), opts).compatibility_score == 0.0

    @pytest.mark.parametrize(
        "literal",
        [
            shape(p("id", "string")),
            shape(p("id", "number"), *[p(f"extra{i}", "any") for i in range(10)]),
            shape(p("profile", "object", nested=[p("bio", "number")])),
            shape(p("name", "object")),
        ],
    )
    def test_scores_within_unit_interval(
        self, scorer: CompatibilityScorer, literal: InferredShape
    ) -> None:
        for target in (BASIC_USER, USER, USER_PROFILE):
            assert 0.0 <= scorer.score(literal, target).compatibility_score <= 1.0

    def test_repeated_scoring_is_identical(self, scorer: CompatibilityScorer) -> None:
        literal = shape(p("id", "number"), p("profile", "object", nested=[p("bio", "string")]))
        assert scorer.score(literal, USER) == scorer.score(literal, USER)


class TestCompareProperties:
    """compare_properties() names."""

    def test_missing_excludes_optional(self) -> None:
        target = declared("T", p("a", "string"), p("b", "string", optional=True))
        missing, extra = compare_properties(shape(p("c", "string")), target)
        assert missing == ("a",)
        assert extra == ("c",)
