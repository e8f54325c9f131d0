# ============================================================================
# LITERAL FORMATTING TESTS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Tests - Type classification and literal rendering
# PURPOSE: Verify NULL, integer, boolean and quoted literal forms
# CREATED: 19 OCT 2026
# ============================================================================
"""
Literal Formatting Tests

Run with:
    pytest tests/test_literals.py -v
"""

import pytest

from core.contracts import LiteralKind
from core.errors import RenderError
from core.schema.literals import LiteralFormatter, classify_type, type_name_for_oid


# ============================================================================
# CLASSIFICATION
# ============================================================================

class TestClassifyType:
    """Type name -> literal class."""

    @pytest.mark.parametrize("name", ["int2", "int4"])
    def test_integer_family(self, name):
        assert classify_type(name) == LiteralKind.INTEGER

    def test_bigint(self):
        assert classify_type("int8") == LiteralKind.BIGINT

    def test_boolean(self):
        assert classify_type("bool") == LiteralKind.BOOLEAN

    @pytest.mark.parametrize("name", [
        "numeric", "float8", "text", "varchar", "date", "timestamptz",
        "json", "jsonb", "uuid", "bytea", "bit", "interval",
    ])
    def test_quoted_types(self, name):
        assert classify_type(name) == LiteralKind.QUOTED

    def test_arrays_and_unknown_are_quoted(self):
        assert classify_type("_int4") == LiteralKind.QUOTED
        assert classify_type("my_enum") == LiteralKind.QUOTED
        assert classify_type("") == LiteralKind.QUOTED

    def test_oid_lookup(self):
        assert type_name_for_oid(23) == "int4"
        assert type_name_for_oid(20) == "int8"
        assert type_name_for_oid(16) == "bool"
        assert type_name_for_oid(25) == "text"

    def test_unknown_oid(self):
        assert type_name_for_oid(999999) == "unknown"


# ============================================================================
# FORMATTER
# ============================================================================

class TestLiteralFormatter:
    """Value -> SQL literal text."""

    @pytest.fixture
    def fmt(self):
        return LiteralFormatter()

    @pytest.mark.parametrize("kind", list(LiteralKind))
    def test_null_for_every_kind(self, fmt, kind):
        assert fmt.format(None, kind) == "NULL"

    def test_integer_unquoted(self, fmt):
        assert fmt.format("42", LiteralKind.INTEGER) == "42"
        assert fmt.format("-7", LiteralKind.INTEGER) == "-7"

    def test_bigint_beyond_32_bits(self, fmt):
        assert fmt.format("9223372036854775807", LiteralKind.BIGINT) == "9223372036854775807"

    def test_non_integer_in_integer_column(self, fmt):
        with pytest.raises(RenderError):
            fmt.format("4.2", LiteralKind.INTEGER, column="qty")

    @pytest.mark.parametrize("raw,expected", [
        ("t", "true"), ("f", "false"), ("true", "true"), ("FALSE", "false"),
    ])
    def test_boolean_text(self, fmt, raw, expected):
        assert fmt.format(raw, LiteralKind.BOOLEAN) == expected

    def test_boolean_python_values(self, fmt):
        assert fmt.format(True, LiteralKind.BOOLEAN) == "true"
        assert fmt.format(False, LiteralKind.BOOLEAN) == "false"

    def test_invalid_boolean(self, fmt):
        with pytest.raises(RenderError):
            fmt.format("maybe", LiteralKind.BOOLEAN)

    def test_quoted_plain(self, fmt):
        assert fmt.format("hello", LiteralKind.QUOTED) == "'hello'"
        assert fmt.format("12.50", LiteralKind.QUOTED) == "'12.50'"

    def test_backslash_escaping(self, fmt):
        assert fmt.format("O'Brien", LiteralKind.QUOTED) == "'O\\'Brien'"

    def test_backslash_doubled_before_quote(self, fmt):
        # a value ending in a backslash must not escape the closing quote
        assert fmt.format("C:\\", LiteralKind.QUOTED) == "'C:\\\\'"
        assert fmt.format("a\\'b", LiteralKind.QUOTED) == "'a\\\\\\'b'"

    def test_standard_escaping(self):
        fmt = LiteralFormatter("standard")
        assert fmt.format("O'Brien", LiteralKind.QUOTED) == "'O''Brien'"
        assert fmt.format("C:\\", LiteralKind.QUOTED) == "'C:\\'"

    def test_bytes_decoded(self, fmt):
        assert fmt.format(b"abc", LiteralKind.QUOTED) == "'abc'"

    def test_unknown_escape_style(self):
        with pytest.raises(ValueError):
            LiteralFormatter("shell")
