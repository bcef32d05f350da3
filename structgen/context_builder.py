"""Build Jinja2 template context from catalog columns.

Walks the ordered column list once, opening a new struct whenever the
table name changes, and assembles the context dict for structs.go.j2.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .catalog import Catalog, ColumnDescriptor
from .loader import Configuration
from .naming import format_name

logger = logging.getLogger(__name__)

TAG_SEPARATOR = ";"


def build_field_tag(column: ColumnDescriptor, tag_key: str) -> str:
    """Build a struct-field tag like sql:"column:id;primary_key;not null"."""
    parts = [f"column:{column.column_name}"]
    if column.is_primary:
        parts.append("primary_key")
    elif column.is_unique:
        parts.append("unique")
    if not column.nullable:
        parts.append("not null")
    return f'{tag_key}:"{TAG_SEPARATOR.join(parts)}"'


def build_context(
    config: Configuration,
    catalog: Catalog,
    columns: Sequence[ColumnDescriptor],
) -> dict[str, Any]:
    """Build the full template context from ordered column metadata."""
    structs: list[dict[str, Any]] = []
    imports: list[str] = []
    current_table: str | None = None
    current: dict[str, Any] | None = None

    for column in columns:
        if column.table_name != current_table:
            current = {
                "name": format_name(column.table_name),
                "table": column.table_name,
                "fields": [],
            }
            structs.append(current)
            current_table = column.table_name

        go_type, required_import = catalog.map_type(column)
        if required_import and required_import not in imports:
            imports.append(required_import)

        tag = build_field_tag(column, config.sql_tag) if config.sql_tag else ""
        current["fields"].append({
            "name": format_name(column.column_name),
            "column": column.column_name,
            "type": go_type,
            "tag": tag,
        })

    logger.debug("Built %d structs from %d columns", len(structs), len(columns))

    return {
        "pkg_name": config.pkg_name,
        "imports": imports,
        "structs": structs,
        "struct_tag": config.struct_tag,
        "struct_count": len(structs),
    }
