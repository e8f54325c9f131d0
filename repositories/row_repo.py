# ============================================================================
# ROW REPOSITORY
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Domain - Table row access
# PURPOSE: Read every row of a table as canonical text
# CREATED: 19 OCT 2026
# ============================================================================
"""
Row Repository

Fetch strategies that turn one table into a RowBatch:

- SnapshotFetchStrategy: whole table in one round trip (small tables,
  matches a plain ``SELECT *``)
- ServerCursorFetchStrategy: named server-side cursor read in batches,
  rows handed over as a generator so memory stays bounded

Both first probe the table with ``LIMIT 0`` to learn its columns, then
register psycopg's TextLoader for every column type so values come back
in PostgreSQL's own text form instead of Python objects. The server
cursor strategy needs an open transaction; the orchestrator provides one
per table.
"""

import itertools
from abc import abstractmethod
from typing import Iterator, List, Optional, Tuple

from psycopg import sql
from psycopg.types.string import TextLoader

from core.config.options import FETCH_SERVER_CURSOR, ExportOptions
from core.errors import RowFetchError
from core.models import ColumnInfo, RowBatch, TableObject
from core.schema.literals import classify_type, type_name_for_oid
from infrastructure.base_repository import BaseRepository

_cursor_ids = itertools.count(1)


def _select_all(table: TableObject) -> sql.Composed:
    return sql.SQL("SELECT * FROM {}").format(sql.Identifier(table.schema_name, table.table_name))


def _columns_from_description(description) -> List[ColumnInfo]:
    columns = []
    for col in description or []:
        type_name = type_name_for_oid(col.type_code)
        columns.append(ColumnInfo(
            name=col.name,
            type_oid=col.type_code,
            type_name=type_name,
            literal_kind=classify_type(type_name),
        ))
    return columns


def _register_text_loaders(cur, columns: List[ColumnInfo]) -> None:
    for oid in {c.type_oid for c in columns}:
        cur.adapters.register_loader(oid, TextLoader)


class RowFetchStrategy(BaseRepository):
    """Reads one table into a RowBatch."""

    @abstractmethod
    def fetch(self, conn, table: TableObject) -> RowBatch:
        """
        Read ``table`` through ``conn``.

        Raises:
            RowFetchError: Table unreadable
        """
        pass

    def describe(self, conn, table: TableObject) -> List[ColumnInfo]:
        """Column metadata of ``table`` without reading any row."""
        probe = sql.SQL("{} LIMIT 0").format(_select_all(table))
        with self._error_context("describe table", RowFetchError, table.qualified_name):
            with conn.cursor() as cur:
                cur.execute(probe)
                return _columns_from_description(cur.description)


class SnapshotFetchStrategy(RowFetchStrategy):
    """Read the whole table with one SELECT."""

    def fetch(self, conn, table: TableObject) -> RowBatch:
        """
        Raises:
            RowFetchError: Table unreadable
        """
        columns = self.describe(conn, table)
        with self._error_context("fetch rows", RowFetchError, table.qualified_name):
            with conn.cursor() as cur:
                _register_text_loaders(cur, columns)
                cur.execute(_select_all(table))
                rows = cur.fetchall()

        self.logger.debug(f"Fetched {len(rows)} row(s) from {table.qualified_name}")
        return RowBatch(
            schema_name=table.schema_name,
            table_name=table.table_name,
            columns=columns,
            rows=rows,
        )


class ServerCursorFetchStrategy(RowFetchStrategy):
    """
    Stream the table through a named cursor.

    Args:
        batch_size: Rows per round trip (cursor itersize)
    """

    def __init__(self, batch_size: int = 2000):
        super().__init__()
        self.batch_size = batch_size

    def fetch(self, conn, table: TableObject) -> RowBatch:
        """
        Rows are produced lazily; a failure while iterating raises
        RowFetchError from the iterator.
        """
        columns = self.describe(conn, table)
        return RowBatch(
            schema_name=table.schema_name,
            table_name=table.table_name,
            columns=columns,
            rows=self._iter_rows(conn, table, columns),
        )

    def _iter_rows(
        self, conn, table: TableObject, columns: List[ColumnInfo]
    ) -> Iterator[Tuple[Optional[str], ...]]:
        name = f"pgsql_export_{next(_cursor_ids)}"
        with self._error_context("stream rows", RowFetchError, table.qualified_name):
            with conn.cursor(name=name) as cur:
                cur.itersize = self.batch_size
                _register_text_loaders(cur, columns)
                cur.execute(_select_all(table))
                count = 0
                for row in cur:
                    count += 1
                    yield row
        self.logger.debug(f"Streamed {count} row(s) from {table.qualified_name}")


def build_fetch_strategy(options: ExportOptions) -> RowFetchStrategy:
    """Strategy selected by FETCH_STRATEGY."""
    if options.fetch_strategy == FETCH_SERVER_CURSOR:
        return ServerCursorFetchStrategy(batch_size=options.fetch_batch_size)
    return SnapshotFetchStrategy()


__all__ = [
    "RowFetchStrategy",
    "SnapshotFetchStrategy",
    "ServerCursorFetchStrategy",
    "build_fetch_strategy",
]
