# ============================================================================
# EXPORT OPTIONS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Export configuration
# PURPOSE: Property keys and typed, immutable export options
# CREATED: 19 OCT 2026
# ============================================================================
"""
Export Options

Configuration arrives as a flat key/value property source (a dict, the
process environment, or a dotenv-style file). It is parsed once into
immutable dataclasses that the rest of the engine reads.

Design:
- Immutable dataclasses for options
- One ``from_properties`` parser; env and file loaders feed it
- Missing required keys are reported, not raised, so the orchestrator
  decides how to react
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from dotenv import dotenv_values
import psycopg
from psycopg.conninfo import conninfo_to_dict


# ============================================================================
# PROPERTY KEYS
# ============================================================================

DB_USERNAME = "DB_USERNAME"
DB_PASSWORD = "DB_PASSWORD"
DB_NAME = "DB_NAME"
DB_HOST = "DB_HOST"
DB_PORT = "DB_PORT"
DB_CONNECTION_STRING = "DB_CONNECTION_STRING"
DB_DRIVER_NAME = "DB_DRIVER_NAME"
DB_CONNECT_TIMEOUT = "DB_CONNECT_TIMEOUT"
DB_STATEMENT_TIMEOUT_MS = "DB_STATEMENT_TIMEOUT_MS"

# Accepted for property files written for the JDBC-based exporter
JDBC_CONNECTION_STRING = "JDBC_CONNECTION_STRING"
JDBC_DRIVER_NAME = "JDBC_DRIVER_NAME"

SQL_FILE_NAME = "SQL_FILE_NAME"
TEMP_DIR = "TEMP_DIR"
ADD_IF_NOT_EXISTS = "ADD_IF_NOT_EXISTS"
PRESERVE_GENERATED_ZIP = "PRESERVE_GENERATED_ZIP"
LITERAL_ESCAPE_STYLE = "LITERAL_ESCAPE_STYLE"
FETCH_STRATEGY = "FETCH_STRATEGY"
FETCH_BATCH_SIZE = "FETCH_BATCH_SIZE"
HELPER_SCHEMA = "HELPER_SCHEMA"

EMAIL_HOST = "EMAIL_HOST"
EMAIL_PORT = "EMAIL_PORT"
EMAIL_USERNAME = "EMAIL_USERNAME"
EMAIL_PASSWORD = "EMAIL_PASSWORD"
EMAIL_FROM = "EMAIL_FROM"
EMAIL_TO = "EMAIL_TO"
EMAIL_SUBJECT = "EMAIL_SUBJECT"
EMAIL_MESSAGE = "EMAIL_MESSAGE"
EMAIL_USE_TLS = "EMAIL_USE_TLS"

REQUIRED_EMAIL_KEYS = (
    EMAIL_HOST,
    EMAIL_PORT,
    EMAIL_USERNAME,
    EMAIL_PASSWORD,
    EMAIL_FROM,
    EMAIL_TO,
)

DEFAULT_TEMP_DIR = "pgsql-exporter-temp"
DEFAULT_DRIVER = "psycopg:connect"
DEFAULT_HELPER_SCHEMA = "pg_temp"
DEFAULT_FETCH_BATCH_SIZE = 2000

ESCAPE_BACKSLASH = "backslash"
ESCAPE_STANDARD = "standard"
FETCH_SNAPSHOT = "snapshot"
FETCH_SERVER_CURSOR = "server_cursor"

_TRUE_VALUES = {"true", "1", "yes", "on"}


def parse_bool(value: Optional[str], default: bool) -> bool:
    """Parse a property flag; absent or blank means default."""
    if value is None or str(value).strip() == "":
        return default
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return int(str(value).strip())


def _clean(properties: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Drop keys whose value is None or blank."""
    return {
        key: str(value).strip()
        for key, value in properties.items()
        if value is not None and str(value).strip() != ""
    }


# ============================================================================
# DATABASE OPTIONS
# ============================================================================

@dataclass(frozen=True)
class DatabaseOptions:
    """
    Everything the connection collaborator needs.

    Either ``database`` or ``connection_string`` identifies the target.
    """
    username: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    connection_string: Optional[str] = None
    driver: str = DEFAULT_DRIVER
    host: str = "localhost"
    port: int = 5432
    connect_timeout: Optional[int] = None
    statement_timeout_ms: Optional[int] = None

    @property
    def normalized_connection_string(self) -> Optional[str]:
        """Connection string with a JDBC ``jdbc:`` prefix removed."""
        if not self.connection_string:
            return None
        if self.connection_string.lower().startswith("jdbc:"):
            return self.connection_string[len("jdbc:"):]
        return self.connection_string

    @property
    def database_name(self) -> Optional[str]:
        """
        Name of the exported database.

        Taken from the connection string when one is configured, so the
        query part of a URI never leaks into file names. A connection
        string without a dbname falls back to the connecting user name,
        which is the database libpq opens in that case.
        """
        conninfo = self.normalized_connection_string
        if not conninfo:
            return self.database
        try:
            params = conninfo_to_dict(conninfo)
        except psycopg.ProgrammingError:
            params = {}
        dbname = params.get("dbname") or self.username or params.get("user")
        return str(dbname) if dbname else None


# ============================================================================
# EMAIL OPTIONS
# ============================================================================

@dataclass(frozen=True)
class EmailOptions:
    """SMTP delivery parameters. Only built when every required key is set."""
    host: str
    port: int
    username: str
    password: str
    from_address: str
    to_address: str
    subject: Optional[str] = None
    message: Optional[str] = None
    use_tls: bool = True

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> Optional["EmailOptions"]:
        """Build delivery options, or None when any required key is absent."""
        if any(key not in properties for key in REQUIRED_EMAIL_KEYS):
            return None
        return cls(
            host=properties[EMAIL_HOST],
            port=int(properties[EMAIL_PORT]),
            username=properties[EMAIL_USERNAME],
            password=properties[EMAIL_PASSWORD],
            from_address=properties[EMAIL_FROM],
            to_address=properties[EMAIL_TO],
            subject=properties.get(EMAIL_SUBJECT),
            message=properties.get(EMAIL_MESSAGE),
            use_tls=parse_bool(properties.get(EMAIL_USE_TLS), True),
        )


# ============================================================================
# EXPORT OPTIONS
# ============================================================================

@dataclass(frozen=True)
class ExportOptions:
    """
    Complete options for one export run.

    Built from a key/value property source; see the PROPERTY KEYS above.
    """
    database: DatabaseOptions
    email: Optional[EmailOptions] = None
    sql_file_name: Optional[str] = None
    temp_dir: str = DEFAULT_TEMP_DIR
    add_if_not_exists: bool = True
    preserve_generated_zip: bool = False
    literal_escape_style: str = ESCAPE_BACKSLASH
    fetch_strategy: str = FETCH_SNAPSHOT
    fetch_batch_size: int = DEFAULT_FETCH_BATCH_SIZE
    helper_schema: str = DEFAULT_HELPER_SCHEMA

    @classmethod
    def from_properties(cls, properties: Mapping[str, Optional[str]]) -> "ExportOptions":
        """
        Parse a flat property mapping.

        Unknown keys are ignored. Numeric values that do not parse raise
        ValueError; the caller treats that as invalid configuration.
        """
        props = _clean(properties)

        database = DatabaseOptions(
            username=props.get(DB_USERNAME),
            password=props.get(DB_PASSWORD),
            database=props.get(DB_NAME),
            connection_string=props.get(DB_CONNECTION_STRING) or props.get(JDBC_CONNECTION_STRING),
            driver=props.get(DB_DRIVER_NAME) or props.get(JDBC_DRIVER_NAME) or DEFAULT_DRIVER,
            host=props.get(DB_HOST, "localhost"),
            port=_parse_int(props.get(DB_PORT)) or 5432,
            connect_timeout=_parse_int(props.get(DB_CONNECT_TIMEOUT)),
            statement_timeout_ms=_parse_int(props.get(DB_STATEMENT_TIMEOUT_MS)),
        )

        escape_style = props.get(LITERAL_ESCAPE_STYLE, ESCAPE_BACKSLASH).lower()
        if escape_style not in (ESCAPE_BACKSLASH, ESCAPE_STANDARD):
            raise ValueError(f"{LITERAL_ESCAPE_STYLE} must be '{ESCAPE_BACKSLASH}' or '{ESCAPE_STANDARD}'")

        fetch_strategy = props.get(FETCH_STRATEGY, FETCH_SNAPSHOT).lower()
        if fetch_strategy not in (FETCH_SNAPSHOT, FETCH_SERVER_CURSOR):
            raise ValueError(f"{FETCH_STRATEGY} must be '{FETCH_SNAPSHOT}' or '{FETCH_SERVER_CURSOR}'")

        return cls(
            database=database,
            email=EmailOptions.from_properties(props),
            sql_file_name=props.get(SQL_FILE_NAME),
            temp_dir=props.get(TEMP_DIR, DEFAULT_TEMP_DIR),
            add_if_not_exists=parse_bool(props.get(ADD_IF_NOT_EXISTS), True),
            preserve_generated_zip=parse_bool(props.get(PRESERVE_GENERATED_ZIP), False),
            literal_escape_style=escape_style,
            fetch_strategy=fetch_strategy,
            fetch_batch_size=_parse_int(props.get(FETCH_BATCH_SIZE)) or DEFAULT_FETCH_BATCH_SIZE,
            helper_schema=props.get(HELPER_SCHEMA, DEFAULT_HELPER_SCHEMA),
        )

    @classmethod
    def from_env(cls, prefix: str = "PGEXPORT_") -> "ExportOptions":
        """Create from environment variables (``PGEXPORT_DB_NAME`` etc.)."""
        return cls.from_properties({
            key[len(prefix):]: value
            for key, value in os.environ.items()
            if key.startswith(prefix)
        })

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExportOptions":
        """Create from a dotenv-style ``KEY=value`` file."""
        return cls.from_properties(dotenv_values(path))

    def missing_required(self) -> List[str]:
        """
        List the required keys that are absent.

        Credentials are always required; the target needs either a
        database name or a connection string.
        """
        missing = []
        if not self.database.username:
            missing.append(DB_USERNAME)
        if not self.database.password:
            missing.append(DB_PASSWORD)
        if not self.database.database and not self.database.connection_string:
            missing.append(f"{DB_NAME}|{DB_CONNECTION_STRING}")
        return missing

    def sql_filename(self, now: Optional[datetime] = None) -> str:
        """
        Output file name.

        ``<SQL_FILE_NAME>.sql`` when configured, else
        ``<day>_<month>_<year>_<hour>_<minute>_<second>_<database>_database_dump.sql``.
        """
        if self.sql_file_name:
            return f"{self.sql_file_name}.sql"
        now = now or datetime.now()
        stamp = f"{now.day}_{now.month}_{now.year}_{now.hour}_{now.minute:02d}_{now.second:02d}"
        return f"{stamp}_{self.database.database_name}_database_dump.sql"


__all__ = [
    "DatabaseOptions",
    "EmailOptions",
    "ExportOptions",
    "parse_bool",
    "REQUIRED_EMAIL_KEYS",
    "DEFAULT_TEMP_DIR",
    "DEFAULT_DRIVER",
    "DEFAULT_HELPER_SCHEMA",
    "ESCAPE_BACKSLASH",
    "ESCAPE_STANDARD",
    "FETCH_SNAPSHOT",
    "FETCH_SERVER_CURSOR",
]
