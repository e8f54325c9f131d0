# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Foundation - Core enums for the export engine
# PURPOSE: Export run states, schema object kinds, literal classes
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ExportState, SchemaObjectKind, LiteralKind, SectionKind, ALLOWED_TRANSITIONS,
#          is_allowed_transition
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the SQL export engine.

These enums cross every layer:
- Repositories tag catalog rows with SchemaObjectKind
- The literal formatter classifies columns with LiteralKind
- The orchestrator walks ExportState strictly forward
"""

from enum import Enum
from typing import Dict, Set


# ============================================================================
# STATUS ENUMS
# ============================================================================

class ExportState(str, Enum):
    """
    Export run lifecycle.

    State transitions:
        IDLE -> CONNECTED -> HELPER_INSTALLED -> SEQUENCES_DUMPED
             -> TABLES_DUMPED -> HELPER_REMOVED -> ASSEMBLED -> TERMINAL

    A run may also jump to TERMINAL from IDLE (invalid config) or from any
    state after HELPER_REMOVED has been reached (table listing failure).
    """
    IDLE = "idle"                            # Nothing opened yet
    CONNECTED = "connected"                  # Connection established
    HELPER_INSTALLED = "helper_installed"    # DDL helper routine created
    SEQUENCES_DUMPED = "sequences_dumped"    # Sequence blocks rendered
    TABLES_DUMPED = "tables_dumped"          # DDL + data rendered per table
    HELPER_REMOVED = "helper_removed"        # DDL helper routine dropped
    ASSEMBLED = "assembled"                  # Document text final
    TERMINAL = "terminal"                    # Run over (success or abort)

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self is ExportState.TERMINAL


ALLOWED_TRANSITIONS: Dict[ExportState, Set[ExportState]] = {
    ExportState.IDLE: {ExportState.CONNECTED, ExportState.TERMINAL},
    ExportState.CONNECTED: {ExportState.HELPER_INSTALLED, ExportState.TERMINAL},
    ExportState.HELPER_INSTALLED: {ExportState.SEQUENCES_DUMPED, ExportState.HELPER_REMOVED},
    ExportState.SEQUENCES_DUMPED: {ExportState.TABLES_DUMPED, ExportState.HELPER_REMOVED},
    ExportState.TABLES_DUMPED: {ExportState.HELPER_REMOVED},
    ExportState.HELPER_REMOVED: {ExportState.ASSEMBLED, ExportState.TERMINAL},
    ExportState.ASSEMBLED: {ExportState.TERMINAL},
    ExportState.TERMINAL: set(),
}


def is_allowed_transition(current: ExportState, new: ExportState) -> bool:
    """Check a state change against ALLOWED_TRANSITIONS. No-op is allowed."""
    if current == new:
        return True
    return new in ALLOWED_TRANSITIONS.get(current, set())


class SchemaObjectKind(str, Enum):
    """Tag for the SchemaObject variants."""
    TABLE = "table"
    SEQUENCE = "sequence"


class LiteralKind(str, Enum):
    """
    How a column's values are written into an INSERT tuple.

    NULL is not a column class: any absent value renders as NULL
    regardless of the column's kind.
    """
    INTEGER = "integer"      # unquoted, 32-bit family
    BIGINT = "bigint"        # unquoted, may exceed 32-bit range
    BOOLEAN = "boolean"      # unquoted true/false
    QUOTED = "quoted"        # single-quoted canonical text


class SectionKind(str, Enum):
    """Kinds of blocks an export document is made of."""
    HEADER = "header"
    SEQUENCE = "sequence"
    TABLE_DDL = "table_ddl"
    TABLE_DATA = "table_data"
