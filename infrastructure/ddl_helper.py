# ============================================================================
# DDL HELPER ROUTINE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - Server-side CREATE TABLE reconstruction
# PURPOSE: Install, call and drop the table-definition helper function
# CREATED: 19 OCT 2026
# ============================================================================
"""
DDL Helper Routine

PostgreSQL has no ``SHOW CREATE TABLE``. The export installs a PL/pgSQL
set-returning function that renders a CREATE TABLE statement from the
catalog (columns with type, default and nullability, then every
constraint), calls it once per table, and drops it at the end.

The function lives in ``pg_temp`` unless configured otherwise, so it is
private to the export session. Functions in ``pg_temp`` are never found
through the search path, so every call is schema-qualified.

Usage:
    with DdlHelper(conn, "pg_temp") as helper:
        with conn.cursor() as cur:
            cur.execute(helper.call_query, ("public", "users"))
"""


from psycopg import sql

from core.errors import CleanupError, SchemaQueryError
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)

HELPER_FUNCTION_NAME = "generate_create_table_statement"

# Braces are reserved by sql.SQL.format; the body must not contain any.
CREATE_HELPER_SQL = """
CREATE OR REPLACE FUNCTION {schema}.generate_create_table_statement(p_schema text, p_table text)
RETURNS SETOF text AS $BODY$
DECLARE
    v_table_oid    oid;
    v_table_ddl    text;
    v_first        boolean;
    column_rec     record;
    constraint_rec record;
BEGIN
    FOR v_table_oid IN
        SELECT c.oid
          FROM pg_catalog.pg_class c
          JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
         WHERE c.relkind IN ('r', 'p')
           AND n.nspname = p_schema
           AND c.relname = p_table
    LOOP
        v_table_ddl := 'CREATE TABLE ' || quote_ident(p_schema) || '.' || quote_ident(p_table) || ' (';
        v_first := TRUE;

        FOR column_rec IN
            SELECT a.attname AS column_name,
                   pg_catalog.format_type(a.atttypid, a.atttypmod) AS column_type,
                   pg_catalog.pg_get_expr(d.adbin, d.adrelid) AS column_default,
                   a.attnotnull AS not_null
              FROM pg_catalog.pg_attribute a
              LEFT JOIN pg_catalog.pg_attrdef d
                ON d.adrelid = a.attrelid AND d.adnum = a.attnum
             WHERE a.attrelid = v_table_oid
               AND a.attnum > 0
               AND NOT a.attisdropped
             ORDER BY a.attnum
        LOOP
            IF NOT v_first THEN
                v_table_ddl := v_table_ddl || ',';
            END IF;
            v_first := FALSE;

            v_table_ddl := v_table_ddl || chr(10) || '    '
                || quote_ident(column_rec.column_name) || ' ' || column_rec.column_type;
            IF column_rec.column_default IS NOT NULL THEN
                v_table_ddl := v_table_ddl || ' DEFAULT ' || column_rec.column_default;
            END IF;
            IF column_rec.not_null THEN
                v_table_ddl := v_table_ddl || ' NOT NULL';
            ELSE
                v_table_ddl := v_table_ddl || ' NULL';
            END IF;
        END LOOP;

        FOR constraint_rec IN
            SELECT con.conname, pg_catalog.pg_get_constraintdef(con.oid) AS condef
              FROM pg_catalog.pg_constraint con
             WHERE con.conrelid = v_table_oid
             ORDER BY con.conname
        LOOP
            v_table_ddl := v_table_ddl || ',' || chr(10)
                || 'CONSTRAINT ' || quote_ident(constraint_rec.conname)
                || chr(10) || '    ' || constraint_rec.condef;
        END LOOP;

        RETURN NEXT v_table_ddl || ');';
    END LOOP;
END;
$BODY$ LANGUAGE plpgsql VOLATILE
"""

DROP_HELPER_SQL = "DROP FUNCTION IF EXISTS {schema}.generate_create_table_statement(text, text)"

CALL_HELPER_SQL = "SELECT {schema}.generate_create_table_statement(%s, %s)"


def _compose(template: str, schema: str) -> sql.Composed:
    return sql.SQL(template).format(schema=sql.Identifier(schema))


class DdlHelper:
    """
    Scoped lifetime of the helper function.

    ``__enter__`` installs it (failure raises SchemaQueryError, nothing to
    undo). ``__exit__`` drops it on every path; a drop failure is logged and
    never replaces the exception that ended the block.

    Args:
        conn: Open autocommit connection
        schema: Schema the function is created in (default pg_temp)
    """

    def __init__(self, conn, schema: str = "pg_temp"):
        self.conn = conn
        self.schema = schema
        self.installed = False

    @property
    def call_query(self) -> sql.Composed:
        """Query returning the CREATE TABLE text for (schema, table)."""
        return _compose(CALL_HELPER_SQL, self.schema)

    def install(self) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(_compose(CREATE_HELPER_SQL, self.schema))
        except Exception as e:
            logger.error(f"Failed to install DDL helper in {self.schema}: {e}")
            raise SchemaQueryError(
                f"Failed to install DDL helper: {e}",
                operation="install helper",
                object_name=f"{self.schema}.{HELPER_FUNCTION_NAME}",
            ) from e
        self.installed = True
        logger.debug(f"DDL helper installed in {self.schema}")

    def remove(self) -> None:
        """Drop the function. Raises CleanupError on failure."""
        if not self.installed:
            return
        try:
            with self.conn.cursor() as cur:
                cur.execute(_compose(DROP_HELPER_SQL, self.schema))
        except Exception as e:
            raise CleanupError(
                f"Failed to drop DDL helper: {e}",
                operation="remove helper",
                object_name=f"{self.schema}.{HELPER_FUNCTION_NAME}",
            ) from e
        self.installed = False
        logger.debug(f"DDL helper removed from {self.schema}")

    def __enter__(self) -> "DdlHelper":
        self.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            self.remove()
        except CleanupError as e:
            logger.warning(str(e))
        return False


__all__ = [
    "DdlHelper",
    "HELPER_FUNCTION_NAME",
    "CREATE_HELPER_SQL",
    "DROP_HELPER_SQL",
]
