# ============================================================================
# EXPORT ERRORS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Foundation - Error hierarchy
# PURPOSE: Domain errors raised by repositories and services
# CREATED: 19 OCT 2026
# ============================================================================
"""
Export Errors

Every failure the export engine distinguishes has its own class so the
orchestrator can decide fatal vs. skip by type:

    ConfigValidationError  -> abort silently (logged)
    SchemaQueryError       -> sequences: skip, tables: abort
    RowFetchError          -> skip table
    RenderError            -> skip table
    ArtifactIOError        -> abort before packaging
    DeliveryError          -> logged, archive kept
    CleanupError           -> logged only
"""

from typing import List, Optional


class ExportError(Exception):
    """Base exception for export operations."""

    def __init__(self, message: str, operation: str = None, object_name: str = None):
        self.operation = operation
        self.object_name = object_name
        super().__init__(message)


class ConfigValidationError(ExportError):
    """Raised when required configuration properties are missing."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = list(missing or [])
        super().__init__(message, operation="validate_config")


class SchemaQueryError(ExportError):
    """Raised when a catalog query or the DDL helper fails."""


class RowFetchError(ExportError):
    """Raised when a table's rows cannot be read."""


class RenderError(ExportError):
    """Raised when an object cannot be rendered into SQL text."""


class ArtifactIOError(ExportError, OSError):
    """Raised when the temp directory or the SQL file cannot be created."""


class DeliveryError(ExportError):
    """Raised when the archive cannot be delivered."""


class CleanupError(ExportError):
    """Raised when a temp file or directory cannot be removed."""


class InvalidStateTransition(ExportError):
    """Raised when the orchestrator attempts an illegal state change."""


__all__ = [
    "ExportError",
    "ConfigValidationError",
    "SchemaQueryError",
    "RowFetchError",
    "RenderError",
    "ArtifactIOError",
    "DeliveryError",
    "CleanupError",
    "InvalidStateTransition",
]
