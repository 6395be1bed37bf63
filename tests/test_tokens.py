"""Tests for retemplate.tokens."""

import pytest

from retemplate.errors import (
    DuplicatePlaceholderError,
    TemplateSyntaxError,
    UnknownPlaceholderError,
    UnusedInterpolationError,
)
from retemplate.models import Location
from retemplate.tokens import Literal, Placeholder, tokenize


class TestTokenize:
    def test_literal_only(self):
        tokens = tokenize("no placeholders here")
        assert tokens.tokens == (Literal("no placeholders here"),)
        assert tokens.names == []

    def test_literal_and_placeholders(self):
        tokens = tokenize("foo${x}bar${y}", known_names=["x", "y"])
        assert tokens.tokens == (
            Literal("foo"),
            Placeholder("x", 0),
            Literal("bar"),
            Placeholder("y", 1),
        )

    def test_adjacent_placeholders(self):
        tokens = tokenize("${a}${b}")
        assert tokens.tokens == (Placeholder("a", 0), Placeholder("b", 1))

    def test_empty_template(self):
        assert tokenize("").tokens == ()

    def test_dollar_escape(self):
        tokens = tokenize("cost: $$${x}")
        assert tokens.tokens == (Literal("cost: $"), Placeholder("x", 0))

    def test_str_is_template_text(self):
        assert str(tokenize("a${x}b")) == "a${x}b"

    def test_lone_dollar_rejected(self):
        with pytest.raises(TemplateSyntaxError, match=r"Expect \$ or \{ after every \$"):
            tokenize("price $5")

    def test_trailing_dollar_rejected(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("end$")

    def test_unterminated_placeholder(self):
        with pytest.raises(TemplateSyntaxError, match="Unterminated"):
            tokenize("foo${x")

    def test_invalid_name(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid interpolation name"):
            tokenize("${1x}")

    def test_empty_name(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("${}")

    def test_unknown_name(self):
        loc = Location("cfg.yaml", 3)
        with pytest.raises(UnknownPlaceholderError) as exc_info:
            tokenize("a${x}b${y}", known_names=["x"], location=loc)
        assert exc_info.value.name == "y"
        assert exc_info.value.location == loc

    def test_known_names_none_skips_check(self):
        tokens = tokenize("b${y}a", known_names=None)
        assert tokens.names == ["y"]

    def test_duplicate_rejected_by_default(self):
        with pytest.raises(DuplicatePlaceholderError) as exc_info:
            tokenize("${x}-${x}", known_names=["x"])
        assert exc_info.value.name == "x"

    def test_duplicate_allowed_with_repeated_groups(self):
        tokens = tokenize("${x}-${x}", known_names=["x"], repeated_groups=True)
        assert tokens.placeholders == [Placeholder("x", 0), Placeholder("x", 1)]
        assert tokens.names == ["x"]


class TestValidateUnused:
    def test_all_used(self):
        tokenize("${x}${y}").validate_unused(["x", "y"])

    def test_reports_every_unused_name(self):
        with pytest.raises(UnusedInterpolationError) as exc_info:
            tokenize("${x}").validate_unused(["x", "y", "z"])
        assert exc_info.value.names == ["y", "z"]
        assert "defined but not used" in str(exc_info.value)

    def test_validate_known(self):
        with pytest.raises(UnknownPlaceholderError):
            tokenize("${q}").validate_known(["x"])
