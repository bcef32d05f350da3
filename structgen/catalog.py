"""Catalog data model and kind dispatch.

A catalog kind (selected by ``db_type``) knows how to read column metadata,
map a column's SQL type to a Go type, and which environment variables
override the connection settings. Adding a kind means adding one Catalog
subclass and registering it in ``_catalog_kinds()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from .errors import ConfigParseError

if TYPE_CHECKING:
    from .loader import Configuration

# Keys of the env-name table returned by Catalog.env_names()
ENV_HOST = "host"
ENV_PORT = "port"
ENV_DATABASE = "database"
ENV_USER = "user"
ENV_PASSWORD = "password"

ENV_KEYS: tuple[str, ...] = (ENV_HOST, ENV_PORT, ENV_DATABASE, ENV_USER, ENV_PASSWORD)


@dataclass(frozen=True)
class ColumnDescriptor:
    """One row of column metadata from the information schema."""

    table_name: str
    column_name: str
    is_nullable: str
    data_type: str
    character_maximum_length: int | None
    numeric_precision: int | None
    numeric_scale: int | None
    column_type: str
    column_key: str

    @property
    def nullable(self) -> bool:
        return self.is_nullable == "YES"

    @property
    def is_primary(self) -> bool:
        return self.column_key == "PRI"

    @property
    def is_unique(self) -> bool:
        return self.column_key == "UNI"

    @property
    def qualified_name(self) -> str:
        return f"{self.table_name}.{self.column_name}"


class TypeMapping(NamedTuple):
    """Go type for a column plus the import path it needs ("" for none)."""

    go_type: str
    required_import: str = ""


class Catalog(ABC):
    """Capability interface implemented by each supported database kind."""

    kind: str = ""

    @abstractmethod
    def read_schema(self, config: Configuration) -> list[ColumnDescriptor]:
        """Return column metadata ordered by table name, then ordinal position."""

    @abstractmethod
    def map_type(self, column: ColumnDescriptor) -> TypeMapping:
        """Map a column to its Go type or raise UnsupportedTypeError."""

    @abstractmethod
    def env_names(self) -> dict[str, str]:
        """Return the environment variable name for each ENV_* key."""


def _catalog_kinds() -> dict[str, type[Catalog]]:
    from .mysql import MySQLCatalog

    return {MySQLCatalog.kind: MySQLCatalog}


def get_catalog(kind: str) -> Catalog:
    """Instantiate the catalog registered for a database kind."""
    kinds = _catalog_kinds()
    try:
        return kinds[kind]()
    except KeyError:
        supported = ", ".join(sorted(kinds))
        raise ConfigParseError(
            f"unsupported db_type {kind!r} (supported: {supported})"
        ) from None
