# ============================================================================
# CATALOG REPOSITORY
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Domain - Schema enumeration
# PURPOSE: List sequences and tables, fetch table DDL through the helper
# CREATED: 19 OCT 2026
# ============================================================================
"""
Catalog Repository

Reads the system catalog of the connected database:
- Sequences from ``information_schema.sequences``
- Base tables from ``pg_catalog.pg_tables``
- CREATE TABLE text from the installed DDL helper

System schemas are excluded. Both listings are ordered by schema then
name, so two runs over an unchanged database enumerate identically.
"""

from typing import Any, Dict, List, Optional

from psycopg.rows import dict_row
from pydantic import ValidationError

from core.errors import SchemaQueryError
from core.models import SequenceObject, TableObject
from infrastructure.base_repository import BaseRepository
from infrastructure.ddl_helper import DdlHelper

SYSTEM_SCHEMAS = ("pg_catalog", "information_schema")

LIST_SEQUENCES_SQL = """
    SELECT sequence_schema, sequence_name, start_value, minimum_value,
           maximum_value, increment, cycle_option
      FROM information_schema.sequences
     WHERE sequence_schema::text <> ALL(%s::text[])
     ORDER BY sequence_schema, sequence_name
"""

LIST_TABLES_SQL = """
    SELECT schemaname, tablename
      FROM pg_catalog.pg_tables
     WHERE schemaname::text <> ALL(%s::text[])
     ORDER BY schemaname, tablename
"""


def _to_int(value: Any) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return int(value)


class CatalogRepository(BaseRepository):
    """
    Schema enumerator over one open connection.

    Args:
        conn: Open psycopg connection
        helper: Installed DdlHelper; required only by fetch_table_ddl
    """

    def __init__(self, conn, helper: Optional[DdlHelper] = None):
        super().__init__()
        self.conn = conn
        self.helper = helper

    def list_sequences(self) -> List[SequenceObject]:
        """
        List user sequences.

        Rows that do not form a valid sequence (unparseable bounds, zero
        increment, start outside bounds) are logged and skipped.

        Raises:
            SchemaQueryError: Catalog query failed
        """
        with self._error_context("list sequences", SchemaQueryError):
            with self.conn.cursor(row_factory=dict_row) as cur:
                cur.execute(LIST_SEQUENCES_SQL, (list(SYSTEM_SCHEMAS),))
                rows = cur.fetchall()

        sequences = []
        for row in rows:
            seq = self._row_to_sequence(row)
            if seq is not None:
                sequences.append(seq)

        self.logger.debug(f"Found {len(sequences)} sequence(s)")
        return sequences

    def list_tables(self) -> List[TableObject]:
        """
        List user base tables.

        Raises:
            SchemaQueryError: Catalog query failed
        """
        with self._error_context("list tables", SchemaQueryError):
            with self.conn.cursor(row_factory=dict_row) as cur:
                cur.execute(LIST_TABLES_SQL, (list(SYSTEM_SCHEMAS),))
                rows = cur.fetchall()

        tables = [
            TableObject(schema_name=row["schemaname"], table_name=row["tablename"])
            for row in rows
        ]
        self.logger.debug(f"Found {len(tables)} table(s)")
        return tables

    def fetch_table_ddl(self, table: TableObject) -> str:
        """
        CREATE TABLE text for ``table``, or "" if the helper returns nothing.

        Raises:
            SchemaQueryError: Helper not installed or the call failed
        """
        if self.helper is None or not self.helper.installed:
            raise SchemaQueryError(
                "DDL helper is not installed",
                operation="fetch table ddl",
                object_name=table.qualified_name,
            )

        with self._error_context("fetch table ddl", SchemaQueryError, table.qualified_name):
            with self.conn.cursor() as cur:
                cur.execute(self.helper.call_query, (table.schema_name, table.table_name))
                row = cur.fetchone()

        if not row or row[0] is None:
            return ""
        return str(row[0])

    def _row_to_sequence(self, row: Dict[str, Any]) -> Optional[SequenceObject]:
        """Convert a catalog row to a SequenceObject, or None if invalid."""
        name = f"{row.get('sequence_schema')}.{row.get('sequence_name')}"
        try:
            return SequenceObject(
                schema_name=row["sequence_schema"],
                sequence_name=row["sequence_name"],
                start_value=_to_int(row.get("start_value")),
                minimum_value=_to_int(row.get("minimum_value")),
                maximum_value=_to_int(row.get("maximum_value")),
                increment=_to_int(row.get("increment")),
                cycle=str(row.get("cycle_option") or "").upper() == "YES",
            )
        except (ValueError, ValidationError) as e:
            self._log_operation(False, "read sequence", name, {"error": str(e)})
            return None


__all__ = ["CatalogRepository", "SYSTEM_SCHEMAS"]
