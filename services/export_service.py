# ============================================================================
# EXPORT SERVICE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Export orchestration
# PURPOSE: Drive one export run from configuration to archive
# CREATED: 19 OCT 2026
# ============================================================================
"""
Export Service

Runs the export state machine once:

    IDLE -> CONNECTED -> HELPER_INSTALLED -> SEQUENCES_DUMPED
         -> TABLES_DUMPED -> HELPER_REMOVED -> ASSEMBLED -> TERMINAL

Failure policy:
- Missing required configuration: logged, run ends at IDLE -> TERMINAL,
  nothing is written
- Sequence listing failure: logged, no sequences
- Table listing failure: fatal, helper still removed, error propagates
- One table's DDL or data failure: logged, table skipped
- Artifact I/O failure: fatal, propagates

Usage:
    service = PostgresExportService(ExportOptions.from_file("export.env"))
    archive = service.export()
    print(service.generated_sql)
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

import psycopg

from __version__ import TOOL_NAME, __version__
from core.config.options import ExportOptions
from core.contracts import ExportState, SectionKind, is_allowed_transition
from core.errors import ConfigValidationError, ExportError, InvalidStateTransition, SchemaQueryError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models import DocumentBuilder, ExportDocument, SequenceObject, TableObject
from core.schema.literals import LiteralFormatter
from core.schema.sql_generator import DdlGenerator
from infrastructure.ddl_helper import DdlHelper
from infrastructure.postgresql import PostgreSQLConnector
from repositories.catalog_repo import CatalogRepository
from repositories.row_repo import RowFetchStrategy, build_fetch_strategy
from services.artifact_service import ArtifactLifecycle
from services.data_serializer import DataSerializer


def render_banner(now: datetime) -> str:
    """Header comment block at the top of every script."""
    stamp = f"{now.day}-{now.month}-{now.year} {now.hour}:{now.minute}:{now.second}"
    return f"--\n-- Generated by {TOOL_NAME} {__version__}\n-- Date: {stamp}\n--"


class PostgresExportService:
    """
    Export orchestrator.

    Args:
        options: Parsed export options
        connector: Connection collaborator (built from options by default)
        artifacts: Artifact lifecycle (built from options by default)
        fetch_strategy: Row fetch strategy (FETCH_STRATEGY by default)
        logger: Observer for progress and failures
        clock: Source of "now" for the banner and generated file name
    """

    def __init__(
        self,
        options: ExportOptions,
        connector: Optional[PostgreSQLConnector] = None,
        artifacts: Optional[ArtifactLifecycle] = None,
        fetch_strategy: Optional[RowFetchStrategy] = None,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.options = options
        self.logger = logger or get_logger(__name__, ComponentType.ORCHESTRATOR)
        self.connector = connector or PostgreSQLConnector(options.database)
        self.artifacts = artifacts or ArtifactLifecycle(options, logger=self.logger)
        self.fetch_strategy = fetch_strategy or build_fetch_strategy(options)
        self.formatter = LiteralFormatter(options.literal_escape_style)
        self.clock = clock

        self._state = ExportState.IDLE
        self._document: Optional[ExportDocument] = None
        self._archive_path: Optional[Path] = None
        self._started_at: Optional[datetime] = None
        self.skipped_tables: List[str] = []

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def document(self) -> Optional[ExportDocument]:
        return self._document

    @property
    def generated_sql(self) -> Optional[str]:
        """Text of the last assembled document."""
        return self._document.text if self._document is not None else None

    @property
    def sql_file_name(self) -> Optional[str]:
        return self.artifacts.sql_file_name

    @property
    def generated_archive(self) -> Optional[Path]:
        """Archive of the last run, only while it still exists on disk."""
        if self._archive_path is not None and self._archive_path.exists():
            return self._archive_path
        return None

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def export(self) -> Optional[Path]:
        """
        Run the full export: build the document, then write, pack,
        deliver and clean up.

        Returns:
            Path of the archive produced, or None when configuration was
            invalid

        Raises:
            SchemaQueryError: Tables could not be listed
            ArtifactIOError: Artifacts could not be written
            psycopg.Error: Connection could not be opened
        """
        with log_context(export_id=self._new_run(), database=self.options.database.database_name):
            document = self._build()
            if document is None:
                return None

            try:
                with log_context(phase="artifacts"):
                    self._archive_path = self.artifacts.publish(document.text, now=self._started_at)
            finally:
                self._transition(ExportState.TERMINAL)

            log_checkpoint("export_completed", {"archive": str(self._archive_path)}, logger=self.logger)
            return self._archive_path

    def build_sql(self) -> Optional[str]:
        """
        Build the document without writing any artifact.

        Returns:
            Document text, or None when configuration was invalid
        """
        with log_context(export_id=self._new_run(), database=self.options.database.database_name):
            document = self._build()
            if document is None:
                return None
            self._transition(ExportState.TERMINAL)
            return document.text

    def build_document(self, conn) -> ExportDocument:
        """
        Render the whole document over an open connection.

        Installs the DDL helper for the duration and always removes it.
        Called outside ``export``/``build_sql`` it starts a fresh run on
        ``conn``.
        """
        if self._state != ExportState.CONNECTED:
            self._new_run()
            self._transition(ExportState.CONNECTED)

        builder = DocumentBuilder()
        builder.add(SectionKind.HEADER, "", render_banner(self._started_at))

        helper_installed = False
        try:
            with DdlHelper(conn, self.options.helper_schema) as helper:
                self._transition(ExportState.HELPER_INSTALLED)
                helper_installed = True

                catalog = CatalogRepository(conn, helper)
                generator = DdlGenerator(catalog, add_if_not_exists=self.options.add_if_not_exists)
                serializer = DataSerializer(conn, self.fetch_strategy, self.formatter)

                with log_context(phase="sequences"):
                    for seq in self._list_sequences(catalog):
                        builder.add(SectionKind.SEQUENCE, seq.qualified_name, generator.render_sequence(seq))
                self._transition(ExportState.SEQUENCES_DUMPED)

                with log_context(phase="tables"):
                    tables = catalog.list_tables()
                    self.logger.info(f"Dumping {len(tables)} table(s)")
                    for table in tables:
                        self._dump_table(conn, table, generator, serializer, builder)
                self._transition(ExportState.TABLES_DUMPED)
        finally:
            if helper_installed:
                self._transition(ExportState.HELPER_REMOVED)

        document = builder.build()
        self._document = document
        self._transition(ExportState.ASSEMBLED)
        return document

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _new_run(self) -> str:
        self._state = ExportState.IDLE
        self._document = None
        self._archive_path = None
        self.skipped_tables = []
        self._started_at = self.clock()
        return uuid.uuid4().hex[:12]

    def _build(self) -> Optional[ExportDocument]:
        try:
            self._validate()
        except ConfigValidationError as e:
            self.logger.error(f"Invalid export configuration: {e}")
            self._transition(ExportState.TERMINAL)
            return None

        try:
            with self.connector.get_connection() as conn:
                self._transition(ExportState.CONNECTED)
                return self.build_document(conn)
        except Exception:
            self._transition(ExportState.TERMINAL)
            raise

    def _validate(self) -> None:
        missing = self.options.missing_required()
        if missing:
            raise ConfigValidationError(
                f"Required properties not set: {', '.join(missing)}",
                missing=missing,
            )

    def _list_sequences(self, catalog: CatalogRepository) -> List[SequenceObject]:
        try:
            return catalog.list_sequences()
        except SchemaQueryError as e:
            self.logger.warning(f"Sequences not exported: {e}")
            return []

    def _dump_table(
        self,
        conn,
        table: TableObject,
        generator: DdlGenerator,
        serializer: DataSerializer,
        builder: DocumentBuilder,
    ) -> bool:
        """DDL then data for one table, in its own transaction. False if skipped."""
        with log_context(object_name=table.qualified_name):
            try:
                with conn.transaction():
                    ddl = generator.render_table(table)
                    data = serializer.render_inserts(table) if ddl else ""
            except (ExportError, psycopg.Error) as e:
                self.logger.error(f"Skipping table {table.qualified_name}: {e}")
                self.skipped_tables.append(table.qualified_name)
                return False

            if not ddl:
                self.skipped_tables.append(table.qualified_name)
                return False

            builder.add(SectionKind.TABLE_DDL, table.qualified_name, ddl)
            builder.add(SectionKind.TABLE_DATA, table.qualified_name, data)
            return True

    def _transition(self, new_state: ExportState) -> None:
        if self._state == new_state:
            return
        if not is_allowed_transition(self._state, new_state):
            raise InvalidStateTransition(
                f"Cannot move export from {self._state.value} to {new_state.value}",
                operation="transition",
            )
        self.logger.debug(f"Export state: {self._state.value} -> {new_state.value}")
        self._state = new_state
        log_checkpoint(f"export_{new_state.value}", logger=self.logger)


__all__ = ["PostgresExportService", "render_banner"]
