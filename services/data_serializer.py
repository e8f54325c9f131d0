# ============================================================================
# DATA SERIALIZER
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Service - Row data to INSERT text
# PURPOSE: Render every row of a table as one multi-row INSERT statement
# CREATED: 19 OCT 2026
# ============================================================================
"""
Data Serializer

Turns a table's rows into a single INSERT block:

    --
    -- Inserts of users
    --


    --
    -- start  table insert : users
    --
    INSERT INTO "public"."users" ("id", "name") VALUES
    (1, 'ann'),
    (2, NULL);
    --
    -- end  table insert : users
    --

Empty tables produce no text at all. Literal rendering is delegated to
LiteralFormatter using each column's literal class.
"""

from typing import Iterable, List, Optional

from core.models import ColumnInfo, RowBatch, TableObject
from core.logging import ComponentType, get_logger
from core.schema.ddl_utils import TABLE_INSERT, MarkerBuilder, render_identifier
from core.schema.literals import LiteralFormatter
from repositories.row_repo import RowFetchStrategy, SnapshotFetchStrategy

logger = get_logger(__name__, ComponentType.SERVICE)


class DataSerializer:
    """
    Data serializer for one connection.

    Args:
        conn: Open connection the fetch strategy reads through
        fetch_strategy: How rows are read (snapshot by default)
        formatter: Literal formatter (backslash escaping by default)
    """

    def __init__(
        self,
        conn,
        fetch_strategy: Optional[RowFetchStrategy] = None,
        formatter: Optional[LiteralFormatter] = None,
    ):
        self.conn = conn
        self.fetch_strategy = fetch_strategy or SnapshotFetchStrategy()
        self.formatter = formatter or LiteralFormatter()

    def render_inserts(self, table: TableObject) -> str:
        """
        INSERT block for every row of ``table`` ("" when it has none).

        Raises:
            RowFetchError: Rows could not be read
            RenderError: A value does not fit its column's literal class
        """
        batch = self.fetch_strategy.fetch(self.conn, table)
        return self.render_batch(batch)

    def render_batch(self, batch: RowBatch) -> str:
        """Render an already fetched batch."""
        rows = iter(batch.rows)
        first = next(rows, None)
        if first is None:
            logger.debug(f"{batch.qualified_name} is empty; no INSERT emitted")
            return ""

        tuples = [self._render_row(first, batch.columns)]
        tuples.extend(self._render_row(row, batch.columns) for row in rows)

        column_list = ", ".join(render_identifier(c.name) for c in batch.columns)
        statement = (
            f"INSERT INTO {render_identifier(batch.schema_name, batch.table_name)} "
            f"({column_list}) VALUES \n"
            + ",\n".join(tuples)
            + ";"
        )

        logger.debug(f"Rendered {len(tuples)} row(s) for {batch.qualified_name}")
        banner = f"\n--\n-- Inserts of {batch.table_name}\n--\n\n"
        return banner + MarkerBuilder.wrap_compact(statement, TABLE_INSERT, batch.table_name)

    def _render_row(self, row: Iterable, columns: List[ColumnInfo]) -> str:
        values = [
            self.formatter.format(value, column.literal_kind, column.name)
            for value, column in zip(row, columns)
        ]
        return f"({', '.join(values)})"


__all__ = ["DataSerializer"]
