# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and schema rendering
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import ExportState, LiteralKind, SchemaObjectKind, SectionKind
from core.models import (
    SequenceObject,
    TableObject,
    SchemaObject,
    ColumnInfo,
    RowBatch,
    ExportDocument,
)
from core.schema import DdlGenerator, LiteralFormatter

__all__ = [
    # Enums
    "ExportState",
    "LiteralKind",
    "SchemaObjectKind",
    "SectionKind",
    # Models
    "SequenceObject",
    "TableObject",
    "SchemaObject",
    "ColumnInfo",
    "RowBatch",
    "ExportDocument",
    # Schema
    "DdlGenerator",
    "LiteralFormatter",
]
