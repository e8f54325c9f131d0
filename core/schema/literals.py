# ============================================================================
# LITERAL FORMATTING
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Type-aware SQL literal rendering
# PURPOSE: Classify PostgreSQL column types and format INSERT values
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TYPE_LITERAL_MAP, classify_type, type_name_for_oid, LiteralFormatter
# DEPENDENCIES: psycopg
# ============================================================================
"""
Literal Formatting.

Every built-in PostgreSQL type is classified explicitly into one of the
LiteralKind classes. Anything not listed (user enums, domains, extension
types, arrays) is QUOTED, which is always a safe replay form.

Values arrive as PostgreSQL's canonical text (see repositories.row_repo),
so formatting never has to guess Python-side representations.

Escape styles:
    backslash  O'Brien -> 'O\\'Brien'   (backslashes doubled first)
    standard   O'Brien -> 'O''Brien'
"""

from typing import Optional

from psycopg.postgres import types as pg_types

from core.config.options import ESCAPE_BACKSLASH, ESCAPE_STANDARD
from core.contracts import LiteralKind
from core.errors import RenderError


# ============================================================================
# TYPE CATALOG
# ============================================================================

TYPE_LITERAL_MAP = {
    # Integer family (32-bit and below)
    "int2": LiteralKind.INTEGER,
    "int4": LiteralKind.INTEGER,
    "smallint": LiteralKind.INTEGER,
    "integer": LiteralKind.INTEGER,

    # Large integer family
    "int8": LiteralKind.BIGINT,
    "bigint": LiteralKind.BIGINT,

    # Boolean
    "bool": LiteralKind.BOOLEAN,
    "boolean": LiteralKind.BOOLEAN,

    # Exact and approximate numerics stay quoted: NaN/Infinity and
    # arbitrary precision survive only as text
    "numeric": LiteralKind.QUOTED,
    "float4": LiteralKind.QUOTED,
    "float8": LiteralKind.QUOTED,
    "money": LiteralKind.QUOTED,

    # Object identifiers
    "oid": LiteralKind.QUOTED,
    "regproc": LiteralKind.QUOTED,
    "regclass": LiteralKind.QUOTED,
    "regtype": LiteralKind.QUOTED,
    "xid": LiteralKind.QUOTED,
    "cid": LiteralKind.QUOTED,
    "tid": LiteralKind.QUOTED,

    # Character types
    "text": LiteralKind.QUOTED,
    "varchar": LiteralKind.QUOTED,
    "bpchar": LiteralKind.QUOTED,
    "char": LiteralKind.QUOTED,
    "name": LiteralKind.QUOTED,
    "citext": LiteralKind.QUOTED,

    # Binary
    "bytea": LiteralKind.QUOTED,

    # Bit strings (B'0101' text form)
    "bit": LiteralKind.QUOTED,
    "varbit": LiteralKind.QUOTED,

    # Date / time
    "date": LiteralKind.QUOTED,
    "time": LiteralKind.QUOTED,
    "timetz": LiteralKind.QUOTED,
    "timestamp": LiteralKind.QUOTED,
    "timestamptz": LiteralKind.QUOTED,
    "interval": LiteralKind.QUOTED,

    # Documents
    "json": LiteralKind.QUOTED,
    "jsonb": LiteralKind.QUOTED,
    "jsonpath": LiteralKind.QUOTED,
    "xml": LiteralKind.QUOTED,

    # Identifiers / network
    "uuid": LiteralKind.QUOTED,
    "inet": LiteralKind.QUOTED,
    "cidr": LiteralKind.QUOTED,
    "macaddr": LiteralKind.QUOTED,
    "macaddr8": LiteralKind.QUOTED,

    # Geometric
    "point": LiteralKind.QUOTED,
    "line": LiteralKind.QUOTED,
    "lseg": LiteralKind.QUOTED,
    "box": LiteralKind.QUOTED,
    "path": LiteralKind.QUOTED,
    "polygon": LiteralKind.QUOTED,
    "circle": LiteralKind.QUOTED,

    # Full text search
    "tsvector": LiteralKind.QUOTED,
    "tsquery": LiteralKind.QUOTED,

    # Ranges and multiranges
    "int4range": LiteralKind.QUOTED,
    "int8range": LiteralKind.QUOTED,
    "numrange": LiteralKind.QUOTED,
    "daterange": LiteralKind.QUOTED,
    "tsrange": LiteralKind.QUOTED,
    "tstzrange": LiteralKind.QUOTED,
    "int4multirange": LiteralKind.QUOTED,
    "int8multirange": LiteralKind.QUOTED,
    "nummultirange": LiteralKind.QUOTED,
    "datemultirange": LiteralKind.QUOTED,
    "tsmultirange": LiteralKind.QUOTED,
    "tstzmultirange": LiteralKind.QUOTED,
}

_BOOLEAN_TEXT = {
    "t": "true",
    "true": "true",
    "f": "false",
    "false": "false",
}


def type_name_for_oid(oid: int) -> str:
    """Resolve a column type OID to its catalog name ('unknown' if not built-in)."""
    info = pg_types.get(oid)
    return info.name if info is not None else "unknown"


def classify_type(type_name: str) -> LiteralKind:
    """
    Map a PostgreSQL type name to its literal class.

    Array types (``_int4``) and anything not in TYPE_LITERAL_MAP are QUOTED.
    """
    if not type_name or type_name.startswith("_"):
        return LiteralKind.QUOTED
    return TYPE_LITERAL_MAP.get(type_name.lower(), LiteralKind.QUOTED)


# ============================================================================
# FORMATTER
# ============================================================================

class LiteralFormatter:
    """
    Render one value as an SQL literal.

    Args:
        escape_style: 'backslash' (default) or 'standard'
    """

    def __init__(self, escape_style: str = ESCAPE_BACKSLASH):
        if escape_style not in (ESCAPE_BACKSLASH, ESCAPE_STANDARD):
            raise ValueError(f"Unknown escape style: {escape_style}")
        self.escape_style = escape_style

    def quote(self, text: str) -> str:
        """Single-quote a text value with every embedded quote escaped."""
        if self.escape_style == ESCAPE_BACKSLASH:
            escaped = text.replace("\\", "\\\\").replace("'", "\\'")
        else:
            escaped = text.replace("'", "''")
        return f"'{escaped}'"

    def format(self, value: Optional[object], kind: LiteralKind, column: str = "") -> str:
        """
        Format a value according to its column's literal class.

        Raises:
            RenderError: value does not fit an unquoted class
        """
        if value is None:
            return "NULL"

        if isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value).decode("utf-8")

        if kind in (LiteralKind.INTEGER, LiteralKind.BIGINT):
            if isinstance(value, bool):
                raise RenderError(f"Boolean value in integer column {column!r}", operation="format_literal")
            try:
                return str(int(str(value).strip()))
            except ValueError as e:
                raise RenderError(
                    f"Non-integer value {value!r} in integer column {column!r}",
                    operation="format_literal",
                ) from e

        if kind == LiteralKind.BOOLEAN:
            if isinstance(value, bool):
                return "true" if value else "false"
            rendered = _BOOLEAN_TEXT.get(str(value).strip().lower())
            if rendered is None:
                raise RenderError(
                    f"Non-boolean value {value!r} in boolean column {column!r}",
                    operation="format_literal",
                )
            return rendered

        return self.quote(str(value))


__all__ = [
    "TYPE_LITERAL_MAP",
    "type_name_for_oid",
    "classify_type",
    "LiteralFormatter",
]
