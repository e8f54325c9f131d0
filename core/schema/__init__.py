# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - SQL text rendering
# PURPOSE: DDL rendering, marker comments, literal formatting
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.schema.ddl_utils import (
    SQL_START_PATTERN,
    SQL_END_PATTERN,
    MarkerBuilder,
    add_if_not_exists,
    render_identifier,
)
from core.schema.literals import (
    TYPE_LITERAL_MAP,
    LiteralFormatter,
    classify_type,
    type_name_for_oid,
)
from core.schema.sql_generator import DdlGenerator, render_ddl, render_sequence_sql

__all__ = [
    # Generator
    "DdlGenerator",
    "render_ddl",
    "render_sequence_sql",
    # Utilities
    "SQL_START_PATTERN",
    "SQL_END_PATTERN",
    "MarkerBuilder",
    "add_if_not_exists",
    "render_identifier",
    # Literals
    "TYPE_LITERAL_MAP",
    "LiteralFormatter",
    "classify_type",
    "type_name_for_oid",
]
