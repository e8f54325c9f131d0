# ============================================================================
# DDL GENERATOR
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - DDL generation for enumerated catalog objects
# PURPOSE: Render sequences and tables as marker-wrapped CREATE statements
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DdlGenerator, render_sequence_sql, render_ddl
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Generator.

Sequences are assembled purely from their numeric attributes; no round
trip to the server is needed once they are enumerated. Tables are rendered
by the server-side helper routine (see infrastructure.ddl_helper) through a
table DDL source, normally the CatalogRepository.

Both renderers wrap their output in start/end marker comments and, when
enabled, guard the CREATE with IF NOT EXISTS.

Usage:
    generator = DdlGenerator(ddl_source=catalog_repo, add_if_not_exists=True)
    text = generator.render_sequence(seq)
    text = generator.render_table(table)
"""

import logging
from typing import Optional, Protocol

from core.contracts import SchemaObjectKind
from core.models.schema_objects import SchemaObject, SequenceObject, TableObject
from core.schema.ddl_utils import (
    SEQUENCE_DUMP,
    TABLE_DUMP,
    MarkerBuilder,
    add_if_not_exists,
    render_identifier,
)

logger = logging.getLogger(__name__)


class TableDdlSource(Protocol):
    """Anything able to produce a table's CREATE TABLE text."""

    def fetch_table_ddl(self, table: TableObject) -> str:
        ...


# ============================================================================
# PURE RENDERING
# ============================================================================

def render_sequence_sql(seq: SequenceObject) -> str:
    """
    Assemble a single CREATE SEQUENCE statement.

    Clause order: INCREMENT BY, MINVALUE, MAXVALUE, START WITH, [NO] CYCLE.
    Unspecified bounds become NO MINVALUE / NO MAXVALUE; an unspecified
    increment or start omits the clause so the server default applies.
    Every clause appears exactly once only when all four numeric
    attributes are set, which is always the case for catalog rows.
    """
    parts = [f"CREATE SEQUENCE {render_identifier(seq.schema_name, seq.sequence_name)}"]

    if seq.increment is not None:
        parts.append(f"INCREMENT BY {seq.increment}")

    parts.append(
        f"MINVALUE {seq.minimum_value}" if seq.minimum_value is not None else "NO MINVALUE"
    )
    parts.append(
        f"MAXVALUE {seq.maximum_value}" if seq.maximum_value is not None else "NO MAXVALUE"
    )

    if seq.start_value is not None:
        parts.append(f"START WITH {seq.start_value}")

    parts.append("CYCLE;" if seq.cycle else "NO CYCLE;")
    return " ".join(parts)


def render_ddl(obj: SchemaObject, add_guard: bool = True) -> str:
    """
    Render any SchemaObject's DDL body (no markers).

    Tables render their already-fetched ``ddl`` text.
    """
    if obj.kind == SchemaObjectKind.SEQUENCE:
        text = render_sequence_sql(obj)
    else:
        text = obj.ddl.strip()
    return add_if_not_exists(text) if add_guard else text


# ============================================================================
# GENERATOR
# ============================================================================

class DdlGenerator:
    """
    Render enumerated objects into marker-wrapped DDL blocks.

    Args:
        ddl_source: Provider of table DDL (the installed helper routine)
        add_if_not_exists: Guard CREATE statements with IF NOT EXISTS
    """

    def __init__(
        self,
        ddl_source: Optional[TableDdlSource] = None,
        add_if_not_exists: bool = True,
    ):
        self.ddl_source = ddl_source
        self.add_if_not_exists = add_if_not_exists

    def render_sequence(self, seq: SequenceObject) -> str:
        """Marker-wrapped CREATE SEQUENCE block."""
        body = render_ddl(seq, self.add_if_not_exists)
        return MarkerBuilder.wrap(body, SEQUENCE_DUMP, seq.name)

    def render_table(self, table: TableObject) -> str:
        """
        Marker-wrapped CREATE TABLE block.

        Asks the DDL source for the table's text unless the table already
        carries it. Returns an empty string when the table no longer exists.
        """
        ddl = table.ddl
        if not ddl:
            if self.ddl_source is None:
                raise ValueError("DdlGenerator needs a ddl_source to render tables")
            ddl = self.ddl_source.fetch_table_ddl(table)

        if not ddl:
            logger.warning(f"No DDL produced for {table.qualified_name}; table skipped")
            return ""

        body = render_ddl(table.with_ddl(ddl), self.add_if_not_exists)
        return MarkerBuilder.wrap(body, TABLE_DUMP, table.name)


__all__ = [
    "DdlGenerator",
    "TableDdlSource",
    "render_sequence_sql",
    "render_ddl",
]
