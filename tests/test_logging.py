# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Tests - Logging
# PURPOSE: Verify component tags, run fields and formatter output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

from core.logging import (
    RECORD_FIELDS,
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_logger,
    log_checkpoint,
    log_context,
)
from infrastructure.base_repository import BaseRepository


# ============================================================================
# HELPERS
# ============================================================================

class _Repo(BaseRepository):
    pass


def _fields(record):
    return getattr(record, RECORD_FIELDS)


# ============================================================================
# COMPONENT TAGS
# ============================================================================

class TestComponentTags:

    def test_component_written_into_record(self, caplog):
        logger = get_logger("tests.component", ComponentType.SERVICE)

        with caplog.at_level(logging.INFO):
            logger.info("hello")

        assert _fields(caplog.records[-1])["component"] == "service"

    def test_repositories_tagged(self, caplog):
        with caplog.at_level(logging.DEBUG):
            _Repo()

        record = caplog.records[-1]
        assert record.name == "_Repo"
        assert _fields(record)["component"] == "repository"

    def test_infrastructure_tagged(self, caplog):
        from infrastructure.archive import logger as archive_logger

        with caplog.at_level(logging.INFO):
            archive_logger.info("packing")

        assert _fields(caplog.records[-1])["component"] == "infrastructure"


# ============================================================================
# RUN FIELDS
# ============================================================================

class TestLogContext:

    def test_nested_blocks_merge(self, caplog):
        logger = get_logger("tests.context")

        with caplog.at_level(logging.INFO):
            with log_context(export_id="abc123", database="shop"):
                with log_context(phase="tables", object_name="public.t"):
                    logger.info("inner")
                logger.info("outer")

        inner, outer = [_fields(r) for r in caplog.records[-2:]]
        assert inner == {"export_id": "abc123", "database": "shop", "phase": "tables", "object_name": "public.t"}
        assert outer == {"export_id": "abc123", "database": "shop"}

    def test_checkpoint_payload_flattened(self, caplog):
        logger = get_logger("tests.checkpoint", ComponentType.ORCHESTRATOR)

        with caplog.at_level(logging.INFO):
            with log_context(export_id="abc123"):
                log_checkpoint("export_assembled", {"tables": 2}, logger=logger)

        record = caplog.records[-1]
        assert record.getMessage() == "CHECKPOINT: export_assembled"
        assert _fields(record) == {
            "component": "orchestrator",
            "export_id": "abc123",
            "checkpoint": "export_assembled",
            "data": {"tables": 2},
        }


# ============================================================================
# FORMATTERS
# ============================================================================

class TestFormatters:

    def _record(self, **data):
        record = logging.LogRecord("svc", logging.WARNING, "f.py", 7, "disk %s", ("full",), None)
        setattr(record, RECORD_FIELDS, data)
        return record

    def test_json(self):
        line = StructuredFormatter().format(self._record(component="service", database="shop"))
        payload = json.loads(line)

        assert payload["level"] == "WARNING"
        assert payload["message"] == "disk full"
        assert payload["fields"] == {"component": "service", "database": "shop"}
        assert payload["source"] == "f.py:7"

    def test_human(self):
        line = HumanFormatter().format(self._record(component="service", database="shop", phase="artifacts"))

        assert line.endswith("WARNING  svc [service, db=shop, phase=artifacts]: disk full")
