# ============================================================================
# ROW BATCH MODEL
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core model - Per-table row set
# PURPOSE: Column metadata plus the rows of one table
# CREATED: 19 OCT 2026
# EXPORTS: ColumnInfo, RowBatch
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Row Batch Model

A RowBatch is produced by a fetch strategy, consumed by the data
serializer, and discarded before the next table. Values are PostgreSQL's
canonical text form (or None for SQL null).

``rows`` is any iterable so a streaming strategy can hand over a
generator; the snapshot strategy hands over a list.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from core.contracts import LiteralKind


@dataclass(frozen=True)
class ColumnInfo:
    """One result column: name and declared type."""
    name: str
    type_oid: int = 0
    type_name: str = "unknown"
    literal_kind: LiteralKind = LiteralKind.QUOTED


@dataclass
class RowBatch:
    """Rows of one table plus the column metadata read before them."""
    schema_name: str
    table_name: str
    columns: List[ColumnInfo] = field(default_factory=list)
    rows: Iterable[Tuple[Optional[Any], ...]] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


__all__ = [
    "ColumnInfo",
    "RowBatch",
]
