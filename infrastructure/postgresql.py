# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Open the single session an export run works through
# CREATED: 19 OCT 2026
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Provides the connection collaborator for an export run:
- Builds a libpq conninfo from DatabaseOptions (credentials plus either a
  database name or a full connection string)
- Resolves the configured driver (``module:callable``, default
  ``psycopg:connect``)
- Opens one autocommit session; callers scope per-table work with
  ``conn.transaction()`` so one failed table does not poison the session

Usage:
    connector = PostgreSQLConnector(options.database)
    with connector.get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
"""

import importlib
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo

from core.config.options import DEFAULT_DRIVER, DatabaseOptions
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)


def resolve_driver(driver: Optional[str]) -> Callable[..., Any]:
    """
    Import a connect callable from ``package.module:function``.

    A dotted path without a colon is split at its last dot.
    """
    path = driver or DEFAULT_DRIVER
    if ":" in path:
        module_name, attr = path.split(":", 1)
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid driver path: {path!r}")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"Driver {path!r} not found") from e


class PostgreSQLConnector:
    """
    Connection collaborator for one export run.

    Args:
        options: Database options (credentials, target, driver, timeouts)
        connect_func: Optional explicit connect callable (overrides driver)
    """

    def __init__(
        self,
        options: DatabaseOptions,
        connect_func: Optional[Callable[..., Any]] = None,
    ):
        self.options = options
        self._connect_func = connect_func

    @property
    def connect_func(self) -> Callable[..., Any]:
        """Connect callable (lazy driver resolution)."""
        if self._connect_func is None:
            self._connect_func = resolve_driver(self.options.driver)
        return self._connect_func

    @property
    def conninfo(self) -> str:
        """
        Build the libpq connection string.

        A configured connection string wins over host/port/database; the
        credentials are always applied on top of it.
        """
        extra: Dict[str, Any] = {
            "user": self.options.username,
            "password": self.options.password,
        }
        if self.options.connect_timeout:
            extra["connect_timeout"] = self.options.connect_timeout
        if self.options.statement_timeout_ms:
            extra["options"] = f"-c statement_timeout={self.options.statement_timeout_ms}"

        base = self.options.normalized_connection_string
        if base:
            return make_conninfo(base, **extra)

        return make_conninfo(
            host=self.options.host,
            port=self.options.port,
            dbname=self.options.database,
            **extra,
        )

    def describe(self) -> str:
        """Password-free description of the target for logs."""
        params = conninfo_to_dict(self.conninfo)
        return f"{params.get('host', 'localhost')}:{params.get('port', 5432)}/{params.get('dbname', '')}"

    @contextmanager
    def get_connection(self):
        """
        Context manager for the export session.

        Yields:
            Autocommit psycopg connection

        Usage:
            with connector.get_connection() as conn:
                ...
        """
        logger.debug(f"Connecting to PostgreSQL at {self.describe()}...")
        try:
            conn = self.connect_func(self.conninfo, autocommit=True)
        except psycopg.Error as e:
            logger.error(f"PostgreSQL connection error: {e}")
            raise
        logger.debug("PostgreSQL connection established")

        try:
            yield conn
        finally:
            conn.close()


__all__ = [
    "PostgreSQLConnector",
    "resolve_driver",
]
