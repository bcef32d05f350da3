"""Render templates and write generated output.

Takes the context from context_builder, renders structs.go.j2, formats the
result and writes it to stdout or the configured output file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Sequence, TextIO

import jinja2

from .catalog import Catalog, ColumnDescriptor
from .context_builder import build_context
from .errors import WriteError
from .gofmt import format_source
from .loader import Configuration

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "structs.go.j2"


def render(context: dict[str, Any]) -> str:
    """Render the struct template into unformatted Go source."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    template = env.get_template(TEMPLATE_NAME)
    return template.render(**context)


def generate(
    config: Configuration,
    catalog: Catalog,
    columns: Sequence[ColumnDescriptor],
) -> str:
    """Build, render and format Go source for the given columns."""
    context = build_context(config, catalog, columns)
    source = format_source(render(context))
    logger.info("Generated %d structs for package %s", context["struct_count"], config.pkg_name)
    return source


def write_output(config: Configuration, source: str, stdout: TextIO | None = None) -> None:
    """Write source to config.output_file, or stdout when it is empty."""
    if not config.output_file:
        (stdout or sys.stdout).write(source)
        return

    output_path = Path(config.output_file)
    try:
        output_path.write_text(source)
    except OSError as exc:
        raise WriteError(f"cannot write {output_path}: {exc}") from exc

    logger.info("Wrote %s", output_path)
