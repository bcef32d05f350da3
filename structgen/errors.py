"""Errors raised by the generator pipeline.

Every stage fails fast: the first error aborts the run and nothing is
written.
"""

from __future__ import annotations


class StructGenError(Exception):
    """Base class for all generator errors."""


class ConfigParseError(StructGenError):
    """Malformed config file, bad field value, or non-integer port."""


class DatabaseConnectionError(StructGenError):
    """The catalog database could not be reached or refused the login."""


class QueryError(StructGenError):
    """The catalog query failed or a result row could not be decoded."""


class UnsupportedTypeError(StructGenError):
    """A column's SQL type has no Go mapping."""

    def __init__(self, table: str, column: str, data_type: str) -> None:
        self.table = table
        self.column = column
        self.data_type = data_type
        super().__init__(
            f"No compatible datatype ({data_type}) for {table}.{column} found"
        )


class FormatError(StructGenError):
    """The assembled Go source is not well-formed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{line}: {message}"
        super().__init__(message)


class WriteError(StructGenError):
    """The output file could not be created or written."""
