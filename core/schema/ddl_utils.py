# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Shared helpers for rendered SQL text
# PURPOSE: Marker comments, IF NOT EXISTS rewriting, identifier quoting
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SQL_START_PATTERN, SQL_END_PATTERN, MarkerBuilder, add_if_not_exists, render_identifier
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared Text Patterns.

Every block of the export script is bracketed by matching start/end
marker comments naming the object, e.g.

    --
    -- start  table dump : orders
    --

    CREATE TABLE IF NOT EXISTS public.orders (...);

    --
    -- end  table dump : orders
    --

Identifiers go through psycopg.sql so quoting rules match the server's.

Usage:
    from core.schema.ddl_utils import MarkerBuilder, add_if_not_exists

    text = add_if_not_exists("CREATE TABLE public.t (id integer);")
    block = MarkerBuilder.wrap(text, "table dump", "t")
"""

import re
from typing import Optional

from psycopg import sql
from psycopg.abc import AdaptContext


# ============================================================================
# MARKERS
# ============================================================================

SQL_START_PATTERN = "-- start"
SQL_END_PATTERN = "-- end"

SEQUENCE_DUMP = "sequence dump"
TABLE_DUMP = "table dump"
TABLE_INSERT = "table insert"


class MarkerBuilder:
    """
    Builder for start/end marker comments.

    All methods are static and return plain text.
    """

    @staticmethod
    def start(label: str, name: str) -> str:
        return f"{SQL_START_PATTERN}  {label} : {name}"

    @staticmethod
    def end(label: str, name: str) -> str:
        return f"{SQL_END_PATTERN}  {label} : {name}"

    @staticmethod
    def wrap(body: str, label: str, name: str) -> str:
        """
        Bracket a DDL body with blank-line padded marker comments.

        Returns an empty string for an empty body so missing objects
        leave no trace in the document.
        """
        if not body:
            return ""
        return (
            "\n\n--\n"
            f"{MarkerBuilder.start(label, name)}\n"
            "--\n\n"
            f"{body}"
            "\n\n--\n"
            f"{MarkerBuilder.end(label, name)}\n"
            "--\n\n"
        )

    @staticmethod
    def wrap_compact(body: str, label: str, name: str) -> str:
        """Bracket a data body; markers sit directly against the statement."""
        if not body:
            return ""
        return (
            "\n--\n"
            f"{MarkerBuilder.start(label, name)}\n"
            "--\n"
            f"{body}"
            "\n--\n"
            f"{MarkerBuilder.end(label, name)}\n"
            "--\n"
        )


# ============================================================================
# IDEMPOTENCY
# ============================================================================

_LEADING_CREATE = re.compile(
    r"^(?P<lead>\s*CREATE\s+(?P<kind>SEQUENCE|TABLE))(?P<sep>\s+)(?!\s*IF\s+NOT\s+EXISTS\b)",
    re.IGNORECASE,
)


def add_if_not_exists(text: str) -> str:
    """
    Rewrite a leading ``CREATE SEQUENCE`` / ``CREATE TABLE`` into its
    ``IF NOT EXISTS`` form.

    Only the statement's leading keywords are touched, so identifiers or
    default expressions containing those words pass through. Text that
    already carries the guard is returned unchanged.
    """
    if not text:
        return text
    return _LEADING_CREATE.sub(
        lambda m: f"{m.group('lead')} IF NOT EXISTS{m.group('sep')}",
        text,
        count=1,
    )


# ============================================================================
# IDENTIFIERS
# ============================================================================

def render_identifier(*parts: str, context: Optional[AdaptContext] = None) -> str:
    """
    Quote a (possibly schema-qualified) identifier.

    Example:
        render_identifier("public", "orders") -> '"public"."orders"'
    """
    return sql.Identifier(*parts).as_string(context)


__all__ = [
    "SQL_START_PATTERN",
    "SQL_END_PATTERN",
    "SEQUENCE_DUMP",
    "TABLE_DUMP",
    "TABLE_INSERT",
    "MarkerBuilder",
    "add_if_not_exists",
    "render_identifier",
]
