# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all export components
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

JSON or human-readable records for the SQL exporter. Every record carries
the layer it came from and the fields of the export run it belongs to.

Features:
- Component-tagged loggers (orchestrator, repository, service, ...)
- Run fields (export_id, database, phase, object_name) pushed per block
- JSON output for log aggregation (LOG_FORMAT=json)
- Named checkpoints for every export state transition

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.SERVICE)

    with log_context(export_id="3f2a9c", database="shop"):
        logger.info("Dumping tables", extra={"table_count": 5})
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Union
from enum import Enum


class ComponentType(str, Enum):
    """Layer a log record originates from."""
    ORCHESTRATOR = "orchestrator"
    REPOSITORY = "repository"
    SERVICE = "service"
    INFRASTRUCTURE = "infrastructure"
    CLI = "cli"


# Record attribute holding the merged structured fields
RECORD_FIELDS = "export_fields"


@dataclass(frozen=True)
class LogContext:
    """Fields of the export run in progress, innermost block wins."""
    export_id: Optional[str] = None
    database: Optional[str] = None
    phase: Optional[str] = None
    object_name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with ``extra`` flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()


def _stack() -> list:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(extra: Optional[Dict[str, Any]] = None, **fields_) -> Iterator[LogContext]:
    """
    Push run fields for the duration of a block.

    Unnamed fields are unchanged from the enclosing block.

    Example:
        with log_context(object_name="public.orders"):
            logger.info("Rendering table")
    """
    parent = get_current_context()
    merged_extra = {**parent.extra, **(extra or {})}
    context = replace(parent, extra=merged_extra, **fields_)

    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, RECORD_FIELDS, None) or get_current_context().to_dict()


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        data = _record_fields(record)
        if data:
            payload["fields"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["source"] = f"{record.filename}:{record.lineno}"
        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line records for terminals.

    Shows the component plus where in the run the record was emitted.
    """

    SHOWN = (("component", ""), ("database", "db="), ("phase", "phase="), ("object_name", "object="))

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        data = _record_fields(record)

        tags = [f"{prefix}{data[key]}" for key, prefix in self.SHOWN if data.get(key)]
        where = f" [{', '.join(tags)}]" if tags else ""

        line = f"{timestamp} {record.levelname:<8} {record.name}{where}: {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that stamps each record with its component and the current
    run fields.

    Caller ``extra`` is merged in; a checkpoint payload nested under
    ``extra["extra"]`` is flattened.
    """

    def process(self, msg, kwargs):
        data: Dict[str, Any] = {}
        if self.extra.get("component"):
            data["component"] = self.extra["component"]
        data.update(get_current_context().to_dict())

        caller = dict(kwargs.get("extra") or {})
        data.update(caller.pop("extra", None) or {})
        data.update(caller)

        kwargs["extra"] = {RECORD_FIELDS: data}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Context-aware logger for ``name``.

    Args:
        name: Logger name (usually ``__name__``)
        component: Layer tag written into every record
    """
    value = component.value if component is not None else None
    return ContextLogger(logging.getLogger(name), {"component": value})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Install one stderr handler on the root logger.

    Only entry points call this; library modules never touch handlers.
    stderr keeps stdout free for ``--print-sql``.

    Args:
        level: Log level name or number
        json_output: JSON records (also selected by LOG_FORMAT=json)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
) -> None:
    """
    Log a named checkpoint.

    Checkpoints mark export state transitions so a run can be
    reconstructed from its log alone.

    Args:
        name: Checkpoint name (e.g., "export_helper_installed")
        data: Optional checkpoint data
        logger: Logger to emit through (a "checkpoint" logger by default)
    """
    if logger is None:
        logger = get_logger("checkpoint")

    payload: Dict[str, Any] = {"checkpoint": name}
    if data:
        payload["data"] = data

    logger.info(f"CHECKPOINT: {name}", extra={"extra": payload})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
