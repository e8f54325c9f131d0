# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Model exports
# PURPOSE: Central export point for export engine models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Schema objects (tagged union of tables and sequences), the per-table
row batch, and the assembled export document.
"""

from core.models.schema_objects import SequenceObject, TableObject, SchemaObject
from core.models.row_batch import ColumnInfo, RowBatch
from core.models.document import DocumentSection, ExportDocument, DocumentBuilder

__all__ = [
    # Schema objects
    "SequenceObject",
    "TableObject",
    "SchemaObject",
    # Rows
    "ColumnInfo",
    "RowBatch",
    # Document
    "DocumentSection",
    "ExportDocument",
    "DocumentBuilder",
]
