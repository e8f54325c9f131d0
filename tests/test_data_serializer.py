# ============================================================================
# DATA SERIALIZER TESTS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Tests - INSERT rendering
# PURPOSE: Verify INSERT layout, literal classes and empty-table handling
# CREATED: 19 OCT 2026
# ============================================================================
"""
Data Serializer Tests

Rows come from in-memory RowBatch objects or a stub fetch strategy.

Run with:
    pytest tests/test_data_serializer.py -v
"""

import pytest
from unittest.mock import MagicMock

from core.contracts import LiteralKind
from core.errors import RenderError, RowFetchError
from core.models import ColumnInfo, RowBatch, TableObject
from core.schema.literals import LiteralFormatter
from services.data_serializer import DataSerializer


# ============================================================================
# HELPERS
# ============================================================================

COLUMNS = [
    ColumnInfo(name="id", type_name="int4", literal_kind=LiteralKind.INTEGER),
    ColumnInfo(name="name", type_name="text", literal_kind=LiteralKind.QUOTED),
    ColumnInfo(name="active", type_name="bool", literal_kind=LiteralKind.BOOLEAN),
]


def _batch(rows, columns=COLUMNS, table="users"):
    return RowBatch(schema_name="public", table_name=table, columns=columns, rows=rows)


def _serializer(batch=None, error=None, escape_style="backslash"):
    strategy = MagicMock()
    if error is not None:
        strategy.fetch.side_effect = error
    else:
        strategy.fetch.return_value = batch
    return DataSerializer(MagicMock(), strategy, LiteralFormatter(escape_style)), strategy


# ============================================================================
# LAYOUT
# ============================================================================

class TestInsertLayout:
    """Exact text of a rendered block."""

    def test_two_rows(self):
        serializer, _ = _serializer()
        text = serializer.render_batch(_batch([("1", "ann", "t"), ("2", None, "f")]))

        assert text == (
            "\n--\n-- Inserts of users\n--\n\n"
            "\n--\n-- start  table insert : users\n--\n"
            'INSERT INTO "public"."users" ("id", "name", "active") VALUES \n'
            "(1, 'ann', true),\n"
            "(2, NULL, false);"
            "\n--\n-- end  table insert : users\n--\n"
        )

    def test_single_row_terminated(self):
        serializer, _ = _serializer()
        text = serializer.render_batch(_batch([("7", "solo", "t")]))
        assert "VALUES \n(7, 'solo', true);\n--" in text

    def test_empty_table_renders_nothing(self):
        serializer, _ = _serializer()
        assert serializer.render_batch(_batch([])) == ""

    def test_generator_rows(self):
        serializer, _ = _serializer()
        rows = (r for r in [("1", "a", "t"), ("2", "b", "f"), ("3", "c", "t")])
        text = serializer.render_batch(_batch(rows))
        assert text.count("),\n(") == 2
        assert "(3, 'c', true);" in text

    def test_quote_escaping_in_values(self):
        serializer, _ = _serializer()
        text = serializer.render_batch(_batch([("1", "O'Brien", "t")]))
        assert "(1, 'O\\'Brien', true);" in text

    def test_standard_escaping(self):
        serializer, _ = _serializer(escape_style="standard")
        text = serializer.render_batch(_batch([("1", "O'Brien", "t")]))
        assert "(1, 'O''Brien', true);" in text

    def test_quoted_column_names(self):
        columns = [ColumnInfo(name="Order Id", literal_kind=LiteralKind.BIGINT)]
        serializer, _ = _serializer()
        text = serializer.render_batch(_batch([("10",)], columns=columns, table="Orders"))
        assert 'INSERT INTO "public"."Orders" ("Order Id") VALUES \n(10);' in text


# ============================================================================
# FETCH INTEGRATION
# ============================================================================

class TestRenderInserts:
    """render_inserts reads through the fetch strategy."""

    def test_fetches_table(self):
        batch = _batch([("1", "ann", "t")])
        serializer, strategy = _serializer(batch)
        table = TableObject(schema_name="public", table_name="users")

        text = serializer.render_inserts(table)

        strategy.fetch.assert_called_once_with(serializer.conn, table)
        assert "(1, 'ann', true);" in text

    def test_fetch_error_propagates(self):
        serializer, _ = _serializer(error=RowFetchError("boom"))
        with pytest.raises(RowFetchError):
            serializer.render_inserts(TableObject(schema_name="public", table_name="users"))

    def test_bad_integer_raises_render_error(self):
        serializer, _ = _serializer(_batch([("x", "ann", "t")]))
        with pytest.raises(RenderError):
            serializer.render_inserts(TableObject(schema_name="public", table_name="users"))
