"""Tests for version-name filter expressions."""

import pytest

from sncopy._filter import (
    FALSE,
    TRUE,
    And,
    Contains,
    EndsWith,
    Not,
    Or,
    StartsWith,
    evaluate,
    negate,
    parse,
    parse_factor,
    parse_include_exclude,
    parse_term,
)


# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------

class TestParseFactor:
    def test_prefix(self):
        assert parse_factor("^v2") == StartsWith("v2")

    def test_suffix(self):
        assert parse_factor("rc$") == EndsWith("rc")

    def test_contains(self):
        assert parse_factor("beta") == Contains("beta")

    def test_lowercased(self):
        assert parse_factor("^V2") == StartsWith("v2")


# ---------------------------------------------------------------------------
# Terms and expressions
# ---------------------------------------------------------------------------

class TestParse:
    def test_term_factors_anded_by_default(self):
        expr = parse_term("^v2 rc$")
        assert expr == And(StartsWith("v2"), EndsWith("rc"))
        assert evaluate(expr, "v2.1-rc") is True
        assert evaluate(expr, "v2.1") is False

    def test_term_factors_ored(self):
        expr = parse_term("^v2 rc$", factors="or")
        assert evaluate(expr, "v2.1") is True
        assert evaluate(expr, "v3-rc") is True
        assert evaluate(expr, "v3") is False

    def test_invalid_factor_mode(self):
        with pytest.raises(ValueError):
            parse_term("a", factors="xor")

    def test_terms_ored(self):
        expr = parse("^v2;^v3")
        assert expr == Or(StartsWith("v2"), StartsWith("v3"))
        assert evaluate(expr, "v3.0") is True
        assert evaluate(expr, "v4.0") is False

    def test_blank_terms_ignored(self):
        expr = parse("^v2; ;")
        assert expr == StartsWith("v2")

    def test_extra_spaces_ignored(self):
        assert parse_term("  ^v2   rc$ ") == And(StartsWith("v2"), EndsWith("rc"))

    def test_empty_expression_matches_all(self):
        assert parse("") == TRUE


class TestEvaluate:
    def test_case_insensitive(self):
        assert evaluate(parse("^v2"), "V2-Release") is True

    def test_not(self):
        assert evaluate(Not(Contains("beta")), "v2-beta") is False
        assert evaluate(Not(Contains("beta")), "v2") is True

    def test_constants(self):
        assert evaluate(TRUE, "anything") is True
        assert evaluate(FALSE, "anything") is False

    def test_rejects_unknown_node(self):
        with pytest.raises(TypeError):
            evaluate("not an expression", "v1")

    def test_str(self):
        assert str(And(StartsWith("a"), Not(Contains("b")))) == \
            "(StartsWith (a) && !Contains (b))"


class TestNegate:
    def test_double_negation(self):
        assert negate(Not(Contains("x"))) == Contains("x")

    def test_constant(self):
        assert negate(TRUE) == FALSE


# ---------------------------------------------------------------------------
# Include / exclude
# ---------------------------------------------------------------------------

class TestIncludeExclude:
    def test_both_empty_accepts_everything(self):
        expr = parse_include_exclude("", "")
        assert expr == TRUE
        assert evaluate(expr, "whatever") is True

    def test_none_treated_as_empty(self):
        assert parse_include_exclude(None, None) == TRUE

    def test_include_only(self):
        expr = parse_include_exclude("^v2", "")
        assert evaluate(expr, "v2.0") is True
        assert evaluate(expr, "v20") is True
        assert evaluate(expr, "v1.9") is False
        assert evaluate(expr, "old-v2") is False

    def test_exclude_only(self):
        expr = parse_include_exclude("", "beta")
        assert evaluate(expr, "v2.0") is True
        assert evaluate(expr, "v2.0-beta") is False

    def test_include_and_not_exclude(self):
        expr = parse_include_exclude("^v2", "beta$")
        assert evaluate(expr, "v2.0") is True
        assert evaluate(expr, "v2.0-beta") is False
        assert evaluate(expr, "v3.0") is False

    def test_factor_mode_passed_through(self):
        expr = parse_include_exclude("^v2 rc$", "", factors="or")
        assert evaluate(expr, "v2.0") is True
