"""MySQL catalog: reads information_schema.COLUMNS and maps MySQL types.

Type mapping:
  - char/varchar/enum/*text   -> string,   sql.NullString when nullable
  - *blob/binary/varbinary    -> []byte    (never wrapped)
  - date/time/datetime/timestamp -> time.Time (never wrapped)
  - *int                      -> int64,    sql.NullInt64 when nullable
  - float/decimal/double      -> float64,  sql.NullFloat64 when nullable
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import pymysql

from .catalog import (
    ENV_DATABASE,
    ENV_HOST,
    ENV_PASSWORD,
    ENV_PORT,
    ENV_USER,
    Catalog,
    ColumnDescriptor,
    TypeMapping,
)
from .errors import DatabaseConnectionError, QueryError, UnsupportedTypeError
from .loader import Configuration

logger = logging.getLogger(__name__)

CATALOG_DATABASE = "information_schema"

# Ordering is relied on by context_builder to group columns by table.
COLUMNS_QUERY = """SELECT TABLE_NAME, COLUMN_NAME, IS_NULLABLE, DATA_TYPE,
    CHARACTER_MAXIMUM_LENGTH, NUMERIC_PRECISION, NUMERIC_SCALE, COLUMN_TYPE,
    COLUMN_KEY FROM COLUMNS WHERE TABLE_SCHEMA = %s
    ORDER BY TABLE_NAME, ORDINAL_POSITION"""

NULLABLE_IMPORT = "database/sql"
TIME_IMPORT = "time"

_STRING_TYPES = {"char", "varchar", "enum", "text", "tinytext", "mediumtext", "longtext"}
_BYTES_TYPES = {"blob", "mediumblob", "longblob", "binary", "varbinary"}
_TIME_TYPES = {"date", "time", "datetime", "timestamp"}
_INT_TYPES = {"tinyint", "smallint", "int", "mediumint", "bigint"}
_FLOAT_TYPES = {"float", "decimal", "double"}

_ENV_NAMES: dict[str, str] = {
    ENV_HOST: "MYSQL_HOST",
    ENV_PORT: "MYSQL_PORT",
    ENV_DATABASE: "MYSQL_DATABASE",
    ENV_USER: "MYSQL_USER",
    ENV_PASSWORD: "MYSQL_PASSWORD",
}


def _as_str(value: Any) -> str:
    """Decode driver values that come back as bytes on some server versions."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if value is None:
        return ""
    return str(value)


def _as_optional_int(value: Any) -> int | None:
    """Keep NULL distinct from zero."""
    if value is None:
        return None
    return int(value)


def _row_to_column(row: Sequence[Any]) -> ColumnDescriptor:
    """Build a ColumnDescriptor from one result row."""
    (table, column, is_nullable, data_type,
     char_len, precision, scale, column_type, column_key) = row
    return ColumnDescriptor(
        table_name=_as_str(table),
        column_name=_as_str(column),
        is_nullable=_as_str(is_nullable),
        data_type=_as_str(data_type).lower(),
        character_maximum_length=_as_optional_int(char_len),
        numeric_precision=_as_optional_int(precision),
        numeric_scale=_as_optional_int(scale),
        column_type=_as_str(column_type),
        column_key=_as_str(column_key),
    )


class MySQLCatalog(Catalog):
    """Catalog backed by MySQL's information_schema."""

    kind = "mysql"

    def read_schema(self, config: Configuration) -> list[ColumnDescriptor]:
        """Fetch every column of every table in config.db_name."""
        logger.debug(
            "Connecting to %s:%d/%s as %r",
            config.db_host, config.db_port, CATALOG_DATABASE, config.db_user,
        )
        try:
            conn = pymysql.connect(
                host=config.db_host,
                port=config.db_port,
                user=config.db_user,
                password=config.db_password,
                database=CATALOG_DATABASE,
            )
        except pymysql.MySQLError as exc:
            raise DatabaseConnectionError(
                f"cannot connect to {config.db_host}:{config.db_port}: {exc}"
            ) from exc

        try:
            with conn.cursor() as cur:
                cur.execute(COLUMNS_QUERY, (config.db_name,))
                rows = cur.fetchall()
            columns = [_row_to_column(row) for row in rows]
        except pymysql.MySQLError as exc:
            raise QueryError(f"catalog query failed: {exc}") from exc
        except (TypeError, ValueError, UnicodeDecodeError) as exc:
            raise QueryError(f"cannot decode catalog row: {exc}") from exc
        finally:
            conn.close()

        logger.info("Read %d columns from schema %r", len(columns), config.db_name)
        return columns

    def map_type(self, column: ColumnDescriptor) -> TypeMapping:
        """Map a column to a Go type.

        Only string, integer and float columns get a sql.Null* wrapper;
        nullable time and byte columns keep their plain type.
        """
        nullable = column.nullable
        data_type = column.data_type

        if data_type in _STRING_TYPES:
            if nullable:
                return TypeMapping("sql.NullString", NULLABLE_IMPORT)
            return TypeMapping("string")
        if data_type in _BYTES_TYPES:
            return TypeMapping("[]byte")
        if data_type in _TIME_TYPES:
            return TypeMapping("time.Time", TIME_IMPORT)
        if data_type in _INT_TYPES:
            if nullable:
                return TypeMapping("sql.NullInt64", NULLABLE_IMPORT)
            return TypeMapping("int64")
        if data_type in _FLOAT_TYPES:
            if nullable:
                return TypeMapping("sql.NullFloat64", NULLABLE_IMPORT)
            return TypeMapping("float64")

        raise UnsupportedTypeError(column.table_name, column.column_name, column.data_type)

    def env_names(self) -> dict[str, str]:
        return dict(_ENV_NAMES)
