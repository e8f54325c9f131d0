# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - Database, archive and delivery collaborators
# PURPOSE: External collaborators the export engine talks to
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the SQL exporter.

Provides:
- PostgreSQLConnector: one autocommit psycopg session per run
- DdlHelper: scoped install/drop of the CREATE TABLE helper function
- ZipArchiver: pack the staged SQL directory
- SmtpMailer: send the archive by mail
- BaseRepository: error mapping shared by repositories

Usage:
    from infrastructure import PostgreSQLConnector, DdlHelper

    connector = PostgreSQLConnector(options.database)
    with connector.get_connection() as conn, DdlHelper(conn) as helper:
        ...
"""

from infrastructure.base_repository import BaseRepository
from infrastructure.postgresql import PostgreSQLConnector, resolve_driver
from infrastructure.ddl_helper import DdlHelper, HELPER_FUNCTION_NAME
from infrastructure.archive import ZipArchiver
from infrastructure.mailer import MailMessage, SmtpMailer

__all__ = [
    "BaseRepository",
    "PostgreSQLConnector",
    "resolve_driver",
    "DdlHelper",
    "HELPER_FUNCTION_NAME",
    "ZipArchiver",
    "MailMessage",
    "SmtpMailer",
]
