# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Map driver failures onto export errors with consistent logging
# CREATED: 19 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Abstract base class shared by the catalog and row repositories:
- Error context manager translating driver exceptions into domain errors
- Standardized operation logging

Repositories never decide whether a failure is fatal; they raise the
matching ExportError subclass and the orchestrator applies the policy.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Optional, Type

from core.errors import ExportError
from core.logging import ComponentType, get_logger


class BaseRepository(ABC):
    """
    Abstract base repository with common patterns.

    Provides:
    - Error context manager for consistent error handling
    - Standardized logging
    """

    def __init__(self):
        """Initialize base repository."""
        self.logger = get_logger(self.__class__.__name__, ComponentType.REPOSITORY)
        self.logger.debug(f"{self.__class__.__name__} initialized")

    @contextmanager
    def _error_context(
        self,
        operation: str,
        error_cls: Type[ExportError],
        object_name: Optional[str] = None,
    ):
        """
        Context manager for consistent error handling.

        Exceptions raised in the block are logged with context and
        re-raised as ``error_cls``. ExportErrors pass through untouched.

        Args:
            operation: Human-readable description of the operation
            error_cls: ExportError subclass to raise
            object_name: Optional schema object for context

        Example:
            with self._error_context("list tables", SchemaQueryError):
                cur.execute(LIST_TABLES_SQL)
        """
        try:
            yield
        except ExportError:
            raise
        except Exception as e:
            error_msg = f"{operation} failed"
            if object_name:
                error_msg += f" for {object_name}"
            error_msg += f": {e}"
            self.logger.error(error_msg)
            raise error_cls(error_msg, operation=operation, object_name=object_name) from e

    def _log_operation(
        self,
        success: bool,
        operation: str,
        object_name: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log operation result with consistent formatting.

        Format:
            Success: "operation: object_name | details"
            Failure: "operation failed: object_name | details"
        """
        if success:
            msg = f"{operation}: {object_name}"
        else:
            msg = f"{operation} failed: {object_name}"

        if details:
            msg += f" | {details}"

        if success:
            self.logger.info(msg)
        else:
            self.logger.warning(msg)


__all__ = [
    "BaseRepository",
]
