# ============================================================================
# EXPORT SERVICE TESTS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Tests - Export orchestration
# PURPOSE: Verify state machine, failure policy and document assembly
# CREATED: 19 OCT 2026
# ============================================================================
"""
Export Service Tests

The connection, helper routine, catalog and fetch strategy are replaced
with in-memory fakes, so the orchestrator is exercised end to end without
a database.

Run with:
    pytest tests/test_export_service.py -v
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import pytest
from unittest.mock import MagicMock

from core.config import ExportOptions
from core.contracts import ExportState, LiteralKind, SectionKind, is_allowed_transition
from core.errors import InvalidStateTransition, RowFetchError, SchemaQueryError
from core.models import ColumnInfo, RowBatch, SequenceObject, TableObject
from services.export_service import PostgresExportService, render_banner


# ============================================================================
# FAKES
# ============================================================================

NOW = datetime(2026, 10, 19, 8, 4, 2)

PROPS = {"DB_USERNAME": "backup", "DB_PASSWORD": "secret", "DB_NAME": "shop"}

ORDER_SEQ = SequenceObject(
    schema_name="public",
    sequence_name="order_seq",
    start_value=1,
    minimum_value=1,
    maximum_value=9223372036854775807,
    increment=1,
    cycle=False,
)

TEXT_COLUMNS = [
    ColumnInfo(name="id", type_name="int4", literal_kind=LiteralKind.INTEGER),
    ColumnInfo(name="name", type_name="text", literal_kind=LiteralKind.QUOTED),
]


def _table(name, schema="public"):
    return TableObject(schema_name=schema, table_name=name)


def _ddl(table):
    return f"CREATE TABLE {table.schema_name}.{table.table_name} (\n    id integer NULL,\n    name text NULL);"


class _FakeHelper:
    """Stands in for DdlHelper; records install/drop into a shared log."""

    events = []

    def __init__(self, conn, schema="pg_temp"):
        self.installed = False

    def __enter__(self):
        self.installed = True
        _FakeHelper.events.append("install")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.installed = False
        _FakeHelper.events.append("drop")
        return False


class _FakeCatalog:
    def __init__(self, sequences=(), tables=(), ddl_errors=(), seq_error=None, table_error=None):
        self.sequences = list(sequences)
        self.tables = list(tables)
        self.ddl_errors = set(ddl_errors)
        self.seq_error = seq_error
        self.table_error = table_error

    def list_sequences(self):
        if self.seq_error:
            raise self.seq_error
        return self.sequences

    def list_tables(self):
        if self.table_error:
            raise self.table_error
        return self.tables

    def fetch_table_ddl(self, table):
        if table.qualified_name in self.ddl_errors:
            raise SchemaQueryError("helper failed", object_name=table.qualified_name)
        return _ddl(table)


def _make_connector():
    conn = MagicMock()
    connector = MagicMock()

    @contextmanager
    def get_connection():
        yield conn

    connector.get_connection.side_effect = get_connection
    return connector, conn


def _make_strategy(rows_by_table=None, errors=None):
    rows_by_table = rows_by_table or {}
    errors = errors or {}
    strategy = MagicMock()

    def fetch(conn, table):
        if table.qualified_name in errors:
            raise errors[table.qualified_name]
        return RowBatch(
            schema_name=table.schema_name,
            table_name=table.table_name,
            columns=TEXT_COLUMNS,
            rows=rows_by_table.get(table.qualified_name, []),
        )

    strategy.fetch.side_effect = fetch
    return strategy


@pytest.fixture
def fake_db(monkeypatch):
    """Patch the helper and catalog; returns a setter for the fake catalog."""
    _FakeHelper.events = []
    holder = {"catalog": _FakeCatalog()}
    monkeypatch.setattr("services.export_service.DdlHelper", _FakeHelper)
    monkeypatch.setattr(
        "services.export_service.CatalogRepository",
        lambda conn, helper: holder["catalog"],
    )

    def use(catalog):
        holder["catalog"] = catalog

    return use


def _service(props=None, strategy=None, artifacts=None):
    connector, conn = _make_connector()
    if artifacts is None:
        artifacts = MagicMock()
        artifacts.publish.return_value = Path("/nonexistent/dump.zip")
    service = PostgresExportService(
        ExportOptions.from_properties(props or PROPS),
        connector=connector,
        artifacts=artifacts,
        fetch_strategy=strategy or _make_strategy(),
        clock=lambda: NOW,
    )
    return service, connector, artifacts


# ============================================================================
# CONFIGURATION
# ============================================================================

class TestConfigValidation:
    """Missing required properties abort silently."""

    def test_missing_credentials_no_side_effects(self, fake_db, caplog):
        service, connector, artifacts = _service(props={"DB_NAME": "shop"})

        with caplog.at_level(logging.ERROR):
            result = service.export()

        assert result is None
        connector.get_connection.assert_not_called()
        artifacts.publish.assert_not_called()
        assert service.generated_sql is None
        assert service.state == ExportState.TERMINAL
        assert "DB_USERNAME" in caplog.text
        assert _FakeHelper.events == []


# ============================================================================
# DOCUMENT ASSEMBLY
# ============================================================================

class TestDocumentAssembly:
    """Order and content of the assembled script."""

    def test_sequence_and_empty_table(self, fake_db):
        fake_db(_FakeCatalog(sequences=[ORDER_SEQ], tables=[_table("t")]))
        service, _, _ = _service()

        service.export()
        sql = service.generated_sql

        assert "-- start  sequence dump : order_seq" in sql
        assert "NO CYCLE;" in sql
        assert "CREATE TABLE IF NOT EXISTS public.t (" in sql
        assert "INSERT INTO" not in sql
        assert "Inserts of t" not in sql

    def test_rows_with_null_and_quote(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("t")]))
        strategy = _make_strategy({"public.t": [("1", None), ("2", "a'b")]})
        service, _, _ = _service(strategy=strategy)

        service.export()

        assert "(1, NULL),\n(2, 'a\\'b');" in service.generated_sql

    def test_section_order(self, fake_db):
        seq_b = ORDER_SEQ.model_copy(update={"sequence_name": "b_seq"})
        fake_db(_FakeCatalog(
            sequences=[ORDER_SEQ, seq_b],
            tables=[_table("alpha"), _table("beta")],
        ))
        strategy = _make_strategy({"public.alpha": [("1", "x")], "public.beta": [("2", "y")]})
        service, _, _ = _service(strategy=strategy)

        service.export()
        sections = [(s.kind, s.name) for s in service.document.sections]

        assert sections == [
            (SectionKind.HEADER, ""),
            (SectionKind.SEQUENCE, "public.order_seq"),
            (SectionKind.SEQUENCE, "public.b_seq"),
            (SectionKind.TABLE_DDL, "public.alpha"),
            (SectionKind.TABLE_DATA, "public.alpha"),
            (SectionKind.TABLE_DDL, "public.beta"),
            (SectionKind.TABLE_DATA, "public.beta"),
        ]

    def test_repeatable_output(self, fake_db):
        fake_db(_FakeCatalog(sequences=[ORDER_SEQ], tables=[_table("a"), _table("b")]))
        strategy = _make_strategy({"public.a": [("1", "x")]})
        service, _, _ = _service(strategy=strategy)

        first = service.build_sql()
        second = service.build_sql()

        assert first == second

    def test_banner(self, fake_db):
        service, _, _ = _service()
        service.export()
        assert service.generated_sql.startswith(render_banner(NOW))
        assert "-- Date: 19-10-2026 8:4:2" in render_banner(NOW)

    def test_guard_disabled(self, fake_db):
        fake_db(_FakeCatalog(sequences=[ORDER_SEQ], tables=[_table("t")]))
        service, _, _ = _service(props={**PROPS, "ADD_IF_NOT_EXISTS": "false"})

        service.export()

        assert "IF NOT EXISTS" not in service.generated_sql


# ============================================================================
# FAILURE POLICY
# ============================================================================

class TestFailurePolicy:
    """Skip vs. abort."""

    def test_table_ddl_failure_skips_table(self, fake_db, caplog):
        fake_db(_FakeCatalog(
            sequences=[ORDER_SEQ],
            tables=[_table("a"), _table("broken"), _table("c")],
            ddl_errors={"public.broken"},
        ))
        service, _, artifacts = _service()

        with caplog.at_level(logging.ERROR):
            service.export()

        sql = service.generated_sql
        assert "public.a" in sql and "public.c" in sql
        assert "broken" not in sql
        assert "order_seq" in sql
        assert service.skipped_tables == ["public.broken"]
        assert _FakeHelper.events == ["install", "drop"]
        artifacts.publish.assert_called_once()

    def test_row_fetch_failure_skips_table(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("a"), _table("b")]))
        strategy = _make_strategy(errors={"public.a": RowFetchError("gone")})
        service, _, _ = _service(strategy=strategy)

        service.export()

        assert service.document.names(SectionKind.TABLE_DDL) == ["public.b"]
        assert service.skipped_tables == ["public.a"]

    def test_bad_value_skips_table(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("a")]))
        strategy = _make_strategy({"public.a": [("not-a-number", "x")]})
        service, _, _ = _service(strategy=strategy)

        service.export()

        assert service.skipped_tables == ["public.a"]

    def test_sequence_listing_failure_not_fatal(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("a")], seq_error=SchemaQueryError("denied")))
        service, _, _ = _service()

        service.export()

        assert service.document.names(SectionKind.SEQUENCE) == []
        assert service.document.names(SectionKind.TABLE_DDL) == ["public.a"]

    def test_table_listing_failure_is_fatal(self, fake_db):
        fake_db(_FakeCatalog(sequences=[ORDER_SEQ], table_error=SchemaQueryError("denied")))
        service, _, artifacts = _service()

        with pytest.raises(SchemaQueryError):
            service.export()

        assert _FakeHelper.events == ["install", "drop"]
        assert service.state == ExportState.TERMINAL
        assert service.generated_sql is None
        artifacts.publish.assert_not_called()

    def test_each_table_in_own_transaction(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("a"), _table("b")]))
        connector, conn = _make_connector()
        service = PostgresExportService(
            ExportOptions.from_properties(PROPS),
            connector=connector,
            artifacts=MagicMock(),
            fetch_strategy=_make_strategy(),
            clock=lambda: NOW,
        )

        service.export()

        assert conn.transaction.call_count == 2
        assert service.state == ExportState.TERMINAL


# ============================================================================
# ACCESSORS
# ============================================================================

class TestAccessors:

    def test_export_returns_archive_path(self, fake_db):
        service, _, artifacts = _service()
        assert service.export() == Path("/nonexistent/dump.zip")
        artifacts.publish.assert_called_once()
        assert artifacts.publish.call_args.kwargs["now"] == NOW

    def test_generated_archive_requires_existing_file(self, fake_db, tmp_path):
        archive = tmp_path / "dump.zip"
        artifacts = MagicMock()
        artifacts.publish.return_value = archive
        service, _, _ = _service(artifacts=artifacts)

        service.export()
        assert service.generated_archive is None

        archive.write_bytes(b"PK")
        assert service.generated_archive == archive

    def test_build_sql_does_not_publish(self, fake_db):
        service, _, artifacts = _service()

        text = service.build_sql()

        assert text.startswith("--\n-- Generated by pgsql-exporter")
        artifacts.publish.assert_not_called()
        assert service.state == ExportState.TERMINAL


# ============================================================================
# STATE MACHINE
# ============================================================================

class TestStateTransitions:
    """ALLOWED_TRANSITIONS enforcement."""

    def test_forward_path_allowed(self):
        path = [
            ExportState.IDLE,
            ExportState.CONNECTED,
            ExportState.HELPER_INSTALLED,
            ExportState.SEQUENCES_DUMPED,
            ExportState.TABLES_DUMPED,
            ExportState.HELPER_REMOVED,
            ExportState.ASSEMBLED,
            ExportState.TERMINAL,
        ]
        for current, new in zip(path, path[1:]):
            assert is_allowed_transition(current, new)

    def test_helper_cannot_be_skipped(self):
        assert not is_allowed_transition(ExportState.TABLES_DUMPED, ExportState.ASSEMBLED)
        assert not is_allowed_transition(ExportState.HELPER_INSTALLED, ExportState.TERMINAL)

    def test_terminal_is_final(self):
        assert ExportState.TERMINAL.is_terminal()
        assert not is_allowed_transition(ExportState.TERMINAL, ExportState.IDLE)

    def test_illegal_transition_raises(self):
        service, _, _ = _service()
        with pytest.raises(InvalidStateTransition):
            service._transition(ExportState.ASSEMBLED)

    def test_build_document_on_open_connection(self, fake_db):
        fake_db(_FakeCatalog(sequences=[ORDER_SEQ], tables=[_table("t")]))
        service, connector, artifacts = _service()

        document = service.build_document(MagicMock())

        assert service.state == ExportState.ASSEMBLED
        assert "CREATE SEQUENCE IF NOT EXISTS" in document.text
        assert "CREATE TABLE IF NOT EXISTS" in document.text
        assert _FakeHelper.events == ["install", "drop"]
        connector.get_connection.assert_not_called()
        artifacts.publish.assert_not_called()

    def test_build_document_after_finished_run(self, fake_db):
        fake_db(_FakeCatalog(tables=[_table("t")]))
        service, _, _ = _service()
        service.build_sql()
        assert service.state == ExportState.TERMINAL

        service.build_document(MagicMock())

        assert service.state == ExportState.ASSEMBLED
